"""Validation for hand-entered transactions and goals."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..constants.categories import EXPENSE, FALLBACK_CATEGORY, TRANSACTION_KINDS
from ..errors import LedgerValidationError

_YEAR_MONTH = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def _raw_strings(data: Mapping[str, Any], keys: tuple[str, ...]) -> dict[str, str]:
    raw: dict[str, str] = {}
    for key in keys:
        value = data.get(key)
        if value is None:
            raw[key] = ""
        elif isinstance(value, str):
            raw[key] = value.strip()
        else:
            raw[key] = str(value)
    return raw


def _parse_number(raw: str) -> Optional[float]:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


@dataclass(slots=True)
class _EntryForm:
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, str] = field(default_factory=dict, init=False)

    def _add_error(self, field_name: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field_name, []).append(message)

    def validate(self) -> bool:  # pragma: no cover - overridden
        raise NotImplementedError

    def require_valid(self) -> None:
        """Raise :class:`LedgerValidationError` unless the bound data validates."""

        if not self.validate():
            raise LedgerValidationError(self.errors)


@dataclass(slots=True)
class TransactionEntryForm(_EntryForm):
    """Represents transaction entry input prior to validation.

    The amount is entered as a positive number; ``kind`` decides whether it
    is stored as income or as a (negative) expense.
    """

    date: str = ""
    description: str = ""
    amount: Optional[float] = None
    kind: str = EXPENSE
    category: str = FALLBACK_CATEGORY

    KEYS = ("date", "description", "amount", "kind", "category")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TransactionEntryForm:
        """Create a form populated from raw input."""

        form = cls()
        form.raw_data = _raw_strings(data, cls.KEYS)
        return form

    def validate(self) -> bool:
        """Validate the bound data and populate typed attributes."""

        self.errors.clear()

        date_raw = self.raw_data.get("date", "")
        if not date_raw:
            self.date = date.today().isoformat()
        else:
            try:
                self.date = datetime.strptime(date_raw[:10], "%Y-%m-%d").date().isoformat()
            except ValueError:
                self._add_error("date", "Enter a valid date (YYYY-MM-DD).")

        self.amount = None
        amount_raw = self.raw_data.get("amount", "")
        parsed = _parse_number(amount_raw) if amount_raw else None
        if parsed is None or parsed <= 0:
            self._add_error("amount", "Enter an amount > 0.")
        else:
            self.amount = parsed

        kind = (self.raw_data.get("kind", "") or EXPENSE).lower()
        if kind not in TRANSACTION_KINDS:
            self._add_error("kind", "Type must be 'expense' or 'income'.")
        else:
            self.kind = kind

        self.description = self.raw_data.get("description", "")
        self.category = self.raw_data.get("category", "") or FALLBACK_CATEGORY

        return not self.errors

    def to_fields(self) -> dict[str, Any]:
        """Transaction fields with the sign applied from ``kind``."""

        amount = self.amount or 0.0
        return {
            "date": self.date,
            "description": self.description,
            "amount": -amount if self.kind == EXPENSE else amount,
            "category": self.category,
        }


@dataclass(slots=True)
class GoalEntryForm(_EntryForm):
    """Represents goal entry input prior to validation."""

    name: str = ""
    target: Optional[float] = None
    current: float = 0.0
    due: Optional[str] = None

    KEYS = ("name", "target", "current", "due")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> GoalEntryForm:
        """Create a form populated from raw input."""

        form = cls()
        form.raw_data = _raw_strings(data, cls.KEYS)
        return form

    def validate(self) -> bool:
        """Validate the bound data and populate typed attributes."""

        self.errors.clear()

        self.name = self.raw_data.get("name", "")
        target_raw = self.raw_data.get("target", "")
        if not self.name or not target_raw:
            self._add_error("name", "Enter a goal name and target.")

        self.target = None
        if target_raw:
            target = _parse_number(target_raw)
            if target is None or target <= 0:
                self._add_error("target", "Target must be a number greater than zero.")
            else:
                self.target = target

        current_raw = self.raw_data.get("current", "")
        current = _parse_number(current_raw) if current_raw else 0.0
        if current is None or current < 0:
            self._add_error("current", "Current savings must be zero or more.")
        else:
            self.current = current

        due_raw = self.raw_data.get("due", "")
        if due_raw and not _YEAR_MONTH.match(due_raw):
            self._add_error("due", "Due must be a month in YYYY-MM form.")
        self.due = due_raw or None

        return not self.errors

    def to_fields(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "target": self.target,
            "current": self.current,
            "due": self.due,
        }


def validated_transaction_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """Validate raw transaction input, raising on any problem."""

    form = TransactionEntryForm.from_mapping(data)
    form.require_valid()
    return form.to_fields()


def validated_goal_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """Validate raw goal input, raising on any problem."""

    form = GoalEntryForm.from_mapping(data)
    form.require_valid()
    return form.to_fields()


__all__ = [
    "GoalEntryForm",
    "TransactionEntryForm",
    "validated_goal_fields",
    "validated_transaction_fields",
]
