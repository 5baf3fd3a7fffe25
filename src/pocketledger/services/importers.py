"""Import transactions from CSV files into the ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import CsvFormatError
from . import csv_codec
from .ledger_store import LedgerStore

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Result of an import operation."""

    created: int
    defaulted_rows: list[int] = field(default_factory=list)


def read_csv_text(csv_path: Path) -> str:
    """Read a CSV file as text, tolerating a UTF-8 byte order mark."""

    return Path(csv_path).read_text(encoding="utf-8-sig")


def import_transactions_text(
    text: str, ledger: LedgerStore, *, strict: bool = False
) -> ImportResult:
    """Decode ``text`` and merge the rows into ``ledger`` in one step."""

    result = csv_codec.decode(text)
    if strict and result.defaulted_rows:
        raise CsvFormatError(result.defaulted_rows)
    if result.defaulted_rows:
        logger.info(
            "Rows imported with default values",
            extra={"lines": result.defaulted_rows[:20], "count": len(result.defaulted_rows)},
        )
    ledger.merge_imported(result.transactions)
    return ImportResult(created=len(result.transactions), defaulted_rows=result.defaulted_rows)


def import_transactions_file(
    csv_path: Path, ledger: LedgerStore, *, strict: bool = False
) -> ImportResult:
    """Read ``csv_path`` and merge its transactions into ``ledger``."""

    logger.info(f"Starting transaction import from: {csv_path}")
    outcome = import_transactions_text(read_csv_text(csv_path), ledger, strict=strict)
    logger.info(f"Imported {outcome.created} transactions from {Path(csv_path).name}")
    return outcome
