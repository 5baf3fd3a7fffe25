"""SQLModel exports."""

from .goal import Goal
from .stored_value import StoredValue
from .transaction import Transaction, new_id

__all__ = [
    "Goal",
    "StoredValue",
    "Transaction",
    "new_id",
]
