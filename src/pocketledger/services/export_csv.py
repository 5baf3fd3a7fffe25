"""CSV export helpers for PocketLedger."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ..models.transaction import Transaction
from .csv_codec import serialize


def export_transactions_csv(*, transactions: Iterable[Transaction], output_path: Path) -> Path:
    """Write transactions to CSV at `output_path`.

    Columns are fixed: date, description, amount, category, type.
    Returns the path written.
    """

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    # newline="" keeps the "\n" separators as written on every platform
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        fh.write(serialize(transactions))
    return output_path
