"""Tests for populating the transaction form from extraction output."""

from trackmate.extraction import (
    advisor_prompt,
    build_receipt_prompt,
    build_text_prompt,
    default_form,
    parse_extraction,
    populate_form,
    populate_receipt_form,
    suggest_category,
)

TODAY = '2024-03-15'


def test_default_form():
    form = default_form(TODAY)
    assert form['type'] == 'expense'
    assert form['amount'] == ''
    assert form['category'] == 'Food'
    assert form['date'] == TODAY
    assert form['isSplit'] is False


def test_populate_form_uses_extracted_values():
    form = populate_form(
        {'amount': 250, 'type': 'income', 'category': 'Salary', 'description': 'Bonus', 'date': '2024-03-01'},
        today=TODAY,
    )
    assert form['amount'] == 250
    assert form['type'] == 'income'
    assert form['category'] == 'Salary'
    assert form['description'] == 'Bonus'
    assert form['date'] == '2024-03-01'


def test_populate_form_fills_defaults_for_missing_fields():
    form = populate_form({'description': 'Coffee'}, today=TODAY)
    assert form['amount'] == ''
    assert form['type'] == 'expense'
    assert form['category'] == 'Other'
    assert form['date'] == TODAY


def test_populate_form_rejects_bad_amount_and_date():
    form = populate_form({'amount': 'lots', 'date': 'yesterday'}, today=TODAY)
    assert form['amount'] == ''
    assert form['date'] == TODAY


def test_populate_form_keeps_other_base_fields():
    base = dict(default_form(TODAY), isRecurring=True, splitWith='Asha')
    form = populate_form({'amount': 10}, today=TODAY, base=base)
    assert form['isRecurring'] is True
    assert form['splitWith'] == 'Asha'


def test_receipt_form_is_always_expense():
    form = populate_receipt_form({'amount': '899', 'type': 'income'}, today=TODAY)
    assert form['type'] == 'expense'
    assert form['description'] == 'Receipt Scan'
    assert form['amount'] == 899


def test_parse_extraction_handles_fences_and_garbage():
    assert parse_extraction('```json\n{"amount": 250}\n```') == {'amount': 250}
    assert parse_extraction('{"type": "expense"}') == {'type': 'expense'}
    assert parse_extraction({'amount': 5}) == {'amount': 5}
    assert parse_extraction('not json') is None
    assert parse_extraction('[1, 2]') is None
    assert parse_extraction(None) is None


def test_prompts_mention_default_date():
    assert 'Default date: 2024-03-15' in build_text_prompt('spent 200 on lunch', today=TODAY)
    assert 'receipt' in build_receipt_prompt()


def test_advisor_prompt():
    assert advisor_prompt([]) is None
    prompt = advisor_prompt([
        {'type': 'expense', 'amount': 250, 'category': 'Food', 'date': '2024-03-01'},
    ])
    assert '2024-03-01: expense' in prompt
    assert '(Food)' in prompt


def test_advisor_prompt_limits_history():
    transactions = [{'type': 'expense', 'amount': i, 'date': f'2024-01-{i:02d}'} for i in range(1, 26)]
    prompt = advisor_prompt(transactions, limit=3)
    assert '2024-01-03' in prompt
    assert '2024-01-04' not in prompt


def test_suggest_category():
    history = [
        {'description': 'Uber to office', 'category': 'Transport'},
        {'description': 'Uber Eats', 'category': 'Food'},
    ]
    assert suggest_category('uber', history) == 'Transport'
    assert suggest_category('ub', history) is None
    assert suggest_category('netflix', history) is None


def test_populate_form_stringifies_text_fields():
    form = populate_form({'amount': 40, 'category': 7, 'description': 12345}, today=TODAY)
    assert form['category'] == '7'
    assert form['description'] == '12345'
    receipt = populate_receipt_form({'description': 99}, today=TODAY)
    assert receipt['description'] == '99'
