"""CSV interchange for ledger transactions.

Decoding is lenient: rows are never rejected, each field falls
back to a default on its own (blank date, blank description, zero amount,
``Other`` category). Lines are split on bare commas; quoted fields are not
understood, so a comma inside a description shifts the remaining columns.
Surrounding spaces are dropped from the date, amount and type cells only;
description and category are kept exactly as written.

Encoding always writes the five column layout
``date,description,amount,category,type`` where ``type`` is derived from the
sign of the amount.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..constants.categories import FALLBACK_CATEGORY
from ..errors import CsvFormatError
from ..models.transaction import Transaction

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("date", "description", "amount", "category")
TYPE_COLUMN = "type"
EXPORT_HEADER = ",".join((*REQUIRED_COLUMNS, TYPE_COLUMN))
# Any type value starting with this (case-insensitive) marks an expense.
EXPENSE_TYPE_PREFIX = "exp"

_LINE_BREAK = re.compile(r"\r?\n")
# Leading numeric prefix; anything after it is ignored.
_FLOAT_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_NEEDS_QUOTES = re.compile(r'[",\n]')


@dataclass(slots=True)
class ColumnLayout:
    """Position of each known column within a data line."""

    date: Optional[int] = 0
    description: Optional[int] = 1
    amount: Optional[int] = 2
    category: Optional[int] = 3
    type: Optional[int] = None

    @classmethod
    def from_header(cls, line: str) -> ColumnLayout:
        """Resolve column positions from a header line."""

        cells = [cell.strip().lower() for cell in line.split(",")]
        return cls(
            date=_column_index(cells, "date"),
            description=_column_index(cells, "description"),
            amount=_column_index(cells, "amount"),
            category=_column_index(cells, "category"),
            type=_column_index(cells, TYPE_COLUMN),
        )


@dataclass(slots=True)
class CsvParseResult:
    """Decoded rows plus bookkeeping about how they were read."""

    transactions: list[Transaction] = field(default_factory=list)
    defaulted_rows: list[int] = field(default_factory=list)
    has_header: bool = False
    has_type_column: bool = False

    @property
    def fully_parsed(self) -> bool:
        return not self.defaulted_rows


def is_header(line: str) -> bool:
    """Return True when ``line`` names all four required columns."""

    lowered = line.lower()
    return all(name in lowered for name in REQUIRED_COLUMNS)


def _column_index(cells: list[str], name: str) -> Optional[int]:
    if name in cells:
        return cells.index(name)
    for index, cell in enumerate(cells):
        if name in cell:
            return index
    return None


def _cell(parts: list[str], index: Optional[int]) -> Optional[str]:
    if index is None or index >= len(parts):
        return None
    return parts[index]


def parse_amount(raw: Optional[str]) -> tuple[float, bool]:
    """Parse the numeric prefix of ``raw``.

    Returns ``(value, exact)`` where ``exact`` is False when the text was
    missing, only partly numeric, or not a finite number. Unusable text
    yields 0.0.
    """

    text = (raw or "").strip()
    match = _FLOAT_PREFIX.match(text)
    if not match:
        return 0.0, False
    value = float(match.group(0))
    if not math.isfinite(value):
        return 0.0, False
    return value, match.end() == len(text)


def _decode_line(parts: list[str], layout: ColumnLayout) -> tuple[Transaction, bool]:
    date = (_cell(parts, layout.date) or "").strip()
    description = _cell(parts, layout.description)
    category = _cell(parts, layout.category)
    amount, exact = parse_amount(_cell(parts, layout.amount))

    if layout.type is not None:
        kind = (_cell(parts, layout.type) or "").strip().lower()
        amount = -abs(amount) if kind.startswith(EXPENSE_TYPE_PREFIX) else abs(amount)
    if amount == 0:
        amount = 0.0  # drop the sign of -0.0

    defaulted = not (date and description is not None and category and exact)
    tx = Transaction(
        date=date[:10],
        description=description or "",
        amount=amount,
        category=category or FALLBACK_CATEGORY,
    )
    return tx, defaulted


def decode(text: str) -> CsvParseResult:
    """Decode CSV text into transactions, recording which rows used defaults."""

    numbered = [
        (number, line)
        for number, line in enumerate(_LINE_BREAK.split(text or ""), start=1)
        if line.strip()
    ]
    result = CsvParseResult()
    if not numbered:
        return result

    layout = ColumnLayout()
    if is_header(numbered[0][1]):
        layout = ColumnLayout.from_header(numbered[0][1])
        numbered = numbered[1:]
        result.has_header = True
        result.has_type_column = layout.type is not None

    for number, line in numbered:
        parts = line.split(",")
        tx, defaulted = _decode_line(parts, layout)
        result.transactions.append(tx)
        if defaulted:
            result.defaulted_rows.append(number)

    logger.debug(
        "Decoded %d CSV rows (header=%s, type column=%s, defaulted=%d)",
        len(result.transactions),
        result.has_header,
        result.has_type_column,
        len(result.defaulted_rows),
    )
    return result


def parse(text: str, *, strict: bool = False) -> list[Transaction]:
    """Parse CSV text into new transactions without touching any ledger.

    With ``strict`` set, rows that needed a defaulted field raise
    :class:`CsvFormatError` instead of being accepted.
    """

    result = decode(text)
    if strict and result.defaulted_rows:
        raise CsvFormatError(result.defaulted_rows)
    return result.transactions


def escape_field(value: object) -> str:
    """Quote ``value`` when it holds a comma, a double quote or a newline.

    Only description and category go through here; dates, amounts and the
    type column are written bare, which ``csv.writer`` cannot express per
    column.
    """

    if value is None:
        return ""
    text = str(value)
    escaped = text.replace('"', '""')
    return f'"{escaped}"' if _NEEDS_QUOTES.search(text) else escaped


def format_amount(amount: float) -> str:
    """Render an amount as a plain signed decimal (``1500``, ``-4.5``)."""

    if math.isfinite(amount) and float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))


def serialize(transactions: Iterable[Transaction]) -> str:
    """Encode transactions as CSV text in their given order."""

    lines = [EXPORT_HEADER]
    for tx in transactions:
        lines.append(
            ",".join(
                (
                    tx.date,
                    escape_field(tx.description),
                    format_amount(tx.amount),
                    escape_field(tx.category),
                    tx.kind,
                )
            )
        )
    return "\n".join(lines)
