"""Domain services for the ledger."""

from .aggregation import LedgerView
from .categories import CategoryRegistry
from .ledger_store import LedgerStore

__all__ = ["CategoryRegistry", "LedgerStore", "LedgerView"]
