"""Turning structured-extraction output into transaction form values.

An external language-model service reads free text, voice transcripts or
receipt photos and answers with a JSON object containing some subset of
``amount``, ``type``, ``category``, ``description`` and ``date``.  This
module builds the instruction prompts for that service and merges whatever
comes back into the add-transaction form, filling defaults for anything
missing.  No network calls happen here.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Iterable, Mapping, Optional

from .config import CURRENCY_SYMBOL, FALLBACK_CATEGORY
from .formatting import DateLike, parse_amount, parse_date, today_iso
from .models import EXPENSE, Transaction, normalize_type

logger = logging.getLogger(__name__)

RECEIPT_DESCRIPTION = 'Receipt Scan'
MIN_SUGGESTION_LENGTH = 3
ADVISOR_HISTORY_LIMIT = 20

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def default_form(today: DateLike = None) -> Dict[str, Any]:
    """Blank add-transaction form."""
    return {
        'type': EXPENSE,
        'amount': '',
        'category': 'Food',
        'description': '',
        'date': today_iso(today),
        'isRecurring': False,
        'isSplit': False,
        'splitWith': '',
        'splitAmount': '',
    }


def build_text_prompt(text: str, today: DateLike = None) -> str:
    return (
        f'Extract JSON from: "{text}". '
        'Keys: amount(num), type(income/expense), category, description, date(YYYY-MM-DD). '
        f'Default date: {today_iso(today)}.'
    )


def build_receipt_prompt() -> str:
    return (
        'Analyze this receipt image. Extract JSON with keys: amount(number), '
        'date(YYYY-MM-DD), description(merchant name), category(infer one). '
        'Default date to today if missing.'
    )


def advisor_prompt(transactions: Iterable[Any], limit: int = ADVISOR_HISTORY_LIMIT) -> Optional[str]:
    """Prompt asking for short spending advice over the latest transactions."""
    recent = [Transaction.from_record(t) for t in list(transactions or [])[:limit]]
    if not recent:
        return None
    summary = '\n'.join(
        f"{t.date}: {t.type} {CURRENCY_SYMBOL}{t.amount:g} ({t.category})" for t in recent
    )
    return (
        f"Financial Advisor Persona. Analyze:\n{summary}\n"
        'Give 3 short, punchy, encouraging bullet points.'
    )


def parse_extraction(raw: Any) -> Optional[Dict[str, Any]]:
    """Decode the service reply into a dict, or ``None`` if it is unusable."""
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        return dict(raw)
    text = _FENCE_PATTERN.sub('', str(raw).strip())
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        logger.warning("Extraction output is not valid JSON: %.80r", text)
        return None
    if not isinstance(data, dict):
        logger.warning("Extraction output is not a JSON object: %.80r", text)
        return None
    return data


def _extracted_amount(fields: Mapping[str, Any]) -> Any:
    amount = parse_amount(fields.get('amount'))
    return amount if amount > 0 else ''


def _extracted_date(fields: Mapping[str, Any], today: DateLike) -> str:
    parsed = parse_date(fields.get('date'))
    return parsed.isoformat() if parsed else today_iso(today)


def populate_form(
    fields: Optional[Mapping[str, Any]],
    today: DateLike = None,
    base: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Merge text/voice extraction output into the form.

    Missing keys fall back to an empty amount, ``expense``, ``Other``, an
    empty description and today's date.  Other form fields in ``base``
    (recurring and split flags) are kept as they were.
    """
    form = dict(base) if base is not None else default_form(today)
    fields = fields or {}
    form.update(
        amount=_extracted_amount(fields),
        type=normalize_type(fields.get('type')),
        category=str(fields.get('category') or FALLBACK_CATEGORY),
        description=str(fields.get('description') or ''),
        date=_extracted_date(fields, today),
    )
    return form


def populate_receipt_form(
    fields: Optional[Mapping[str, Any]],
    today: DateLike = None,
    base: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Receipt variant of :func:`populate_form`; receipts are always expenses."""
    form = populate_form(fields, today=today, base=base)
    form['type'] = EXPENSE
    form['description'] = str((fields or {}).get('description') or RECEIPT_DESCRIPTION)
    return form


def suggest_category(description: str, transactions: Iterable[Any]) -> Optional[str]:
    """Category of the first past transaction whose description contains the text.

    Only kicks in once at least three characters have been typed.
    """
    needle = (description or '').strip().lower()
    if len(needle) < MIN_SUGGESTION_LENGTH:
        return None
    for record in transactions or []:
        transaction = Transaction.from_record(record)
        if needle in transaction.description.lower():
            return transaction.category
    return None
