"""Configuration management for Trackmate.

This module centralizes configuration values including paths, defaults
and environment variable overrides.  The analytics functions never read
mutable settings from here: values such as the monthly budget are passed
in explicitly by the caller.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

# Base project root - assumes this file is in trackmate/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("TRACKMATE_DATA_DIR", _PROJECT_ROOT / "data"))
SETTINGS_PATH = Path(
    os.getenv("TRACKMATE_SETTINGS_PATH", DATA_DIR / "settings.json")
).resolve()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


DEFAULT_MONTHLY_BUDGET = _env_float("TRACKMATE_MONTHLY_BUDGET", 20000.0)
CURRENCY_SYMBOL = os.getenv("TRACKMATE_CURRENCY", "₹")
LOG_LEVEL = os.getenv("TRACKMATE_LOG_LEVEL", "WARNING")

DEFAULT_CATEGORIES = [
    'Food',
    'Transport',
    'Housing',
    'Utilities',
    'Entertainment',
    'Health',
    'Shopping',
    'Other',
]
FALLBACK_CATEGORY = 'Other'

# Streak: daily budget is monthly / 30, walked back over offsets 1..29
DAILY_BUDGET_DIVISOR = 30
STREAK_WINDOW_DAYS = 30

# Heatmap peak never drops below this, so tiny months stay pale
HEATMAP_MIN_PEAK = 100.0

# EMI calculator defaults and tenure slider bounds
EMI_DEFAULT_PRINCIPAL = 500000.0
EMI_DEFAULT_RATE = 9.5
EMI_DEFAULT_YEARS = 5
EMI_MIN_YEARS = 1
EMI_MAX_YEARS = 30


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the host application."""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )