"""Persisted user settings: monthly budget and the category list."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from .config import DEFAULT_CATEGORIES, DEFAULT_MONTHLY_BUDGET, SETTINGS_PATH
from .formatting import parse_amount
from .models import CategoryCatalog

logger = logging.getLogger(__name__)


def default_settings() -> Dict[str, Any]:
    return {
        'monthly_budget': DEFAULT_MONTHLY_BUDGET,
        'categories': list(DEFAULT_CATEGORIES),
    }


def load_settings(path: Path | None = None) -> Dict[str, Any]:
    target = path or SETTINGS_PATH
    settings = default_settings()
    if not target.exists():
        return settings
    try:
        with target.open('r', encoding='utf-8') as handle:
            data = json.load(handle)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", target, exc)
        return settings
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: expected a JSON object", target)
        return settings

    budget = parse_amount(data.get('monthly_budget'))
    if budget > 0:
        settings['monthly_budget'] = budget
    categories = data.get('categories')
    if isinstance(categories, list):
        catalog = CategoryCatalog(categories)
        if len(catalog):
            settings['categories'] = catalog.to_list()
    return settings


def save_settings(settings: Dict[str, Any], path: Path | None = None) -> None:
    target = path or SETTINGS_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        'monthly_budget': parse_amount(settings.get('monthly_budget')),
        'categories': CategoryCatalog(settings.get('categories') or []).to_list(),
    }
    with target.open('w', encoding='utf-8') as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=False)
