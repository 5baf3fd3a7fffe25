from __future__ import annotations

from datetime import date

import pytest

from pocketledger.errors import LedgerValidationError
from pocketledger.services.forms import (
    GoalEntryForm,
    TransactionEntryForm,
    validated_goal_fields,
    validated_transaction_fields,
)


def test_transaction_form_defaults_to_expense():
    fields = validated_transaction_fields(
        {"date": "2024-03-02", "description": " Coffee ", "amount": "4.50", "category": "Dining Out"}
    )

    assert fields == {
        "date": "2024-03-02",
        "description": "Coffee",
        "amount": -4.5,
        "category": "Dining Out",
    }


def test_transaction_form_income_keeps_positive_amount():
    fields = validated_transaction_fields(
        {"date": "2024-03-02", "description": "Pay", "amount": 1500, "kind": "Income"}
    )

    assert fields["amount"] == 1500
    assert fields["category"] == "Other"


def test_transaction_form_blank_date_defaults_to_today():
    fields = validated_transaction_fields({"description": "Cash", "amount": "10"})

    assert fields["date"] == date.today().isoformat()


@pytest.mark.parametrize("amount", ["", "0", "-5", "abc", "nan", "inf", None])
def test_transaction_form_rejects_non_positive_amounts(amount):
    form = TransactionEntryForm.from_mapping({"date": "2024-03-02", "amount": amount})

    assert form.validate() is False
    assert form.errors["amount"] == ["Enter an amount > 0."]


def test_transaction_form_reports_every_bad_field():
    form = TransactionEntryForm.from_mapping({"date": "03/02/2024", "amount": "x", "kind": "transfer"})

    assert form.validate() is False
    assert set(form.errors) == {"date", "amount", "kind"}


def test_require_valid_raises_with_messages():
    with pytest.raises(LedgerValidationError) as excinfo:
        validated_transaction_fields({"date": "2024-13-40", "amount": "3"})

    assert excinfo.value.errors == {"date": ["Enter a valid date (YYYY-MM-DD)."]}
    assert str(excinfo.value) == "Enter a valid date (YYYY-MM-DD)."


def test_goal_form_valid_input():
    fields = validated_goal_fields({"name": "Trip", "target": "2400", "current": "100", "due": "2025-06"})

    assert fields == {"name": "Trip", "target": 2400.0, "current": 100.0, "due": "2025-06"}


def test_goal_form_optional_fields():
    fields = validated_goal_fields({"name": "Trip", "target": 300})

    assert fields["current"] == 0
    assert fields["due"] is None


@pytest.mark.parametrize(
    ("data", "field"),
    [
        ({"target": "100"}, "name"),
        ({"name": "Trip"}, "name"),
        ({"name": "Trip", "target": "0"}, "target"),
        ({"name": "Trip", "target": "-4"}, "target"),
        ({"name": "Trip", "target": "100", "current": "-1"}, "current"),
        ({"name": "Trip", "target": "100", "due": "2025-13"}, "due"),
        ({"name": "Trip", "target": "100", "due": "June"}, "due"),
    ],
)
def test_goal_form_rejections(data, field):
    form = GoalEntryForm.from_mapping(data)

    assert form.validate() is False
    assert field in form.errors


def test_missing_name_and_target_message():
    with pytest.raises(LedgerValidationError, match="Enter a goal name and target."):
        validated_goal_fields({"name": "  ", "target": ""})
