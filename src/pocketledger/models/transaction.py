"""SQLModel definitions for ledger transactions."""

from __future__ import annotations

import math
from uuid import uuid4

from pydantic import ConfigDict, field_validator
from sqlmodel import Field, SQLModel

from ..constants.categories import FALLBACK_CATEGORY, kind_for_amount


def new_id() -> str:
    """Return a fresh identifier for ledger records."""

    return str(uuid4())


class Transaction(SQLModel):
    """A single ledger transaction imported or hand-entered.

    Records are never edited in place; a correction is a removal followed by a
    new entry. The sign of ``amount`` is the income/expense discriminant.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    date: str = Field(default="", description="ISO date, YYYY-MM-DD or blank")
    description: str = ""
    amount: float = Field(default=0.0, description="Negative for expense, otherwise income")
    category: str = FALLBACK_CATEGORY

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value: object) -> object:
        if isinstance(value, str):
            try:
                return float(value)
            except ValueError:
                return 0.0
        return 0.0 if value is None else value

    @field_validator("amount")
    @classmethod
    def _finite_amount(cls, value: float) -> float:
        return value if math.isfinite(value) else 0.0

    @field_validator("date", mode="before")
    @classmethod
    def _truncate_date(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, str):
            return value[:10]
        return value

    @property
    def kind(self) -> str:
        """``"expense"`` for negative amounts, ``"income"`` otherwise."""
        return kind_for_amount(self.amount)

    @property
    def year_month(self) -> str:
        """The ``YYYY-MM`` prefix of the date, blank when the date is blank."""
        return self.date[:7]
