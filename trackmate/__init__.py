"""Top-level package for Trackmate.

This file makes the directory a Python package and exposes the most
used entry points.  The primary modules are:

* ``analytics`` – totals, category/monthly breakdowns and trends
* ``budget`` – daily budget streak and the monthly budget gauge
* ``heatmap`` – the month-by-month spending calendar
* ``goals`` and ``loans`` – savings goal progress and the EMI calculator
* ``visualization`` – Plotly figures for the derived data
* ``dashboard`` – a Streamlit app that ties everything together

To run the dashboard from the command line you can execute:

```bash
streamlit run trackmate/dashboard.py
```
"""

from .analytics import FinanceAnalytics, FinanceStats, calculate_trend, compute_stats
from .budget import budget_progress, calculate_budget_streak
from .goals import calculate_goal_progress
from .heatmap import build_spending_calendar
from .loans import calculate_emi

__all__ = [
    'FinanceAnalytics',
    'FinanceStats',
    'budget_progress',
    'build_spending_calendar',
    'calculate_budget_streak',
    'calculate_emi',
    'calculate_goal_progress',
    'calculate_trend',
    'compute_stats',
]
