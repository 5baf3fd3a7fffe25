"""Exception types raised by the ledger core."""

from __future__ import annotations

from typing import Iterable, Mapping


class LedgerError(Exception):
    """Base class for ledger errors."""


class LedgerValidationError(LedgerError, ValueError):
    """User input rejected before any mutation took place."""

    def __init__(self, errors: Mapping[str, list[str]]):
        self.errors = {field: list(messages) for field, messages in errors.items()}
        super().__init__(self.message)

    @property
    def message(self) -> str:
        """All field messages joined into one user-facing line."""

        return " ".join(msg for messages in self.errors.values() for msg in messages)


class CsvFormatError(LedgerError, ValueError):
    """Raised in strict import mode when rows needed defaulted fields."""

    def __init__(self, line_numbers: Iterable[int]):
        self.line_numbers = list(line_numbers)
        joined = ", ".join(str(n) for n in self.line_numbers)
        super().__init__(f"CSV rows with missing or invalid fields on line(s): {joined}")
