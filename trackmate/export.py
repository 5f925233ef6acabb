"""CSV export of the transaction list."""

from __future__ import annotations

from typing import Any, Iterable, List

import pandas as pd

from .models import Transaction

EXPORT_COLUMNS = ['Date', 'Description', 'Category', 'Type', 'Amount', 'Recurring']
EXPORT_FILENAME = 'trackmate_export.csv'


def export_rows(transactions: Iterable[Any]) -> List[List[Any]]:
    rows = []
    for record in transactions or []:
        t = Transaction.from_record(record)
        rows.append([
            t.date,
            t.description,
            t.category,
            t.type,
            f"{t.amount:.2f}",
            'Yes' if t.is_recurring else 'No',
        ])
    return rows


def transactions_to_csv(transactions: Iterable[Any]) -> str:
    """Render transactions as CSV text; an empty list gives an empty string."""
    rows = export_rows(transactions)
    if not rows:
        return ''
    frame = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    return frame.to_csv(index=False, lineterminator='\n')
