"""Savings goal definitions."""

from __future__ import annotations

import math
from typing import Optional

from pydantic import field_validator
from sqlmodel import Field, SQLModel

from .transaction import new_id


class Goal(SQLModel):
    """A savings target with the amount put aside so far."""

    id: str = Field(default_factory=new_id)
    name: str
    target: float = Field(default=0.0, ge=0)
    current: float = Field(default=0.0, ge=0)
    due: Optional[str] = Field(default=None, description="Optional YYYY-MM")

    @field_validator("target", "current", mode="before")
    @classmethod
    def _missing_is_zero(cls, value: object) -> object:
        if value is None or value == "":
            return 0.0
        # NaN and -inf would trip the ge=0 check; they count as nothing saved
        if isinstance(value, float) and not math.isfinite(value):
            return 0.0
        return value

    @field_validator("target", "current")
    @classmethod
    def _finite_number(cls, value: float) -> float:
        return value if math.isfinite(value) else 0.0

    @field_validator("due", mode="before")
    @classmethod
    def _blank_due_is_none(cls, value: object) -> object:
        return value or None
