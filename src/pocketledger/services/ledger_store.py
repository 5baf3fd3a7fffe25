"""In-memory ledger state with write-through persistence."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence, TypeVar

from pydantic import ValidationError
from sqlmodel import SQLModel

from ..constants.categories import FALLBACK_CATEGORY
from ..domain.repositories.key_value import KeyValueStore
from ..models import Goal, Transaction, new_id
from .categories import CategoryRegistry

logger = logging.getLogger(__name__)

TRANSACTIONS_KEY = "pf_transactions"
GOALS_KEY = "pf_goals"
CATEGORIES_KEY = "pf_categories"

ModelT = TypeVar("ModelT", bound=SQLModel)

# Keys a caller may supply when creating records; ``id`` is always generated.
_TRANSACTION_FIELDS = ("date", "description", "amount", "category")
_GOAL_FIELDS = ("name", "target", "current", "due")


def _fields(data: Mapping[str, Any] | SQLModel, names: Sequence[str]) -> dict[str, Any]:
    if isinstance(data, SQLModel):
        data = data.model_dump()
    return {name: data[name] for name in names if name in data}


def _load_records(
    store: KeyValueStore, key: str, model: type[ModelT]
) -> tuple[ModelT, ...]:
    raw = store.load(key, [])
    if not isinstance(raw, list):
        logger.warning("Ignoring stored %s: expected a list, got %s", key, type(raw).__name__)
        return ()
    records: list[ModelT] = []
    for item in raw:
        if not isinstance(item, dict):
            logger.warning("Skipping unreadable %s record: %r", key, item)
            continue
        try:
            records.append(model.model_validate(item))
        except ValidationError:
            logger.warning("Skipping unreadable %s record: %r", key, item)
    return tuple(records)


class LedgerStore:
    """Owns the transaction, goal and category collections.

    Each mutator swaps the affected collection for a new tuple in one step and
    then writes it through ``store``. Persistence is best effort; the
    in-memory state stays authoritative for the session.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        transactions: Iterable[Transaction] = (),
        goals: Iterable[Goal] = (),
        categories: Iterable[str] | None = None,
    ):
        self._store = store
        self._transactions: tuple[Transaction, ...] = tuple(transactions)
        self._goals: tuple[Goal, ...] = tuple(goals)
        self._categories = CategoryRegistry(categories)

    @classmethod
    def load(cls, store: KeyValueStore) -> LedgerStore:
        """Build a ledger from persisted state, falling back to defaults."""

        transactions = _load_records(store, TRANSACTIONS_KEY, Transaction)
        goals = _load_records(store, GOALS_KEY, Goal)
        raw_categories = store.load(CATEGORIES_KEY, None)
        categories: list[str] | None = None
        if isinstance(raw_categories, list):
            categories = [c for c in raw_categories if isinstance(c, str)]
        elif raw_categories is not None:
            logger.warning("Ignoring stored categories of type %s", type(raw_categories).__name__)

        logger.info(
            "Ledger loaded",
            extra={"transactions": len(transactions), "goals": len(goals)},
        )
        return cls(store, transactions=transactions, goals=goals, categories=categories)

    # -- read access -------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._transactions

    @property
    def goals(self) -> tuple[Goal, ...]:
        return self._goals

    @property
    def categories(self) -> tuple[str, ...]:
        return self._categories.names

    # -- transactions ------------------------------------------------------

    def add_transaction(self, fields: Mapping[str, Any] | Transaction) -> Transaction:
        """Create a transaction with a fresh id and put it first.

        A category the registry does not know yet is added to it.
        """

        values = _fields(fields, _TRANSACTION_FIELDS)
        if not (values.get("category") or "").strip():
            values["category"] = FALLBACK_CATEGORY
        tx = Transaction.model_validate({**values, "id": new_id()})
        self._set_transactions((tx, *self._transactions))
        if self._categories.add(tx.category):
            self._save_categories()
        logger.debug("Added transaction %s", tx.id)
        return tx

    def remove_transaction(self, transaction_id: str) -> bool:
        """Drop the transaction with ``transaction_id``; unknown ids are ignored."""

        remaining = tuple(t for t in self._transactions if t.id != transaction_id)
        if len(remaining) == len(self._transactions):
            return False
        self._set_transactions(remaining)
        return True

    def merge_imported(self, transactions: Iterable[Transaction]) -> list[Transaction]:
        """Put an imported batch ahead of the existing transactions.

        Categories introduced by the batch are added to the registry.
        """

        batch = list(transactions)
        if not batch:
            return batch
        self._set_transactions((*batch, *self._transactions))
        if any([self._categories.add(tx.category) for tx in batch]):
            self._save_categories()
        logger.info("Merged %d imported transactions", len(batch))
        return batch

    # -- goals -------------------------------------------------------------

    def add_goal(self, fields: Mapping[str, Any] | Goal) -> Goal:
        """Create a goal with a fresh id and put it first."""

        goal = Goal.model_validate({**_fields(fields, _GOAL_FIELDS), "id": new_id()})
        self._goals = (goal, *self._goals)
        self._store.save(GOALS_KEY, self._dump(self._goals))
        return goal

    def remove_goal(self, goal_id: str) -> bool:
        """Drop the goal with ``goal_id``; unknown ids are ignored."""

        remaining = tuple(g for g in self._goals if g.id != goal_id)
        if len(remaining) == len(self._goals):
            return False
        self._goals = remaining
        self._store.save(GOALS_KEY, self._dump(self._goals))
        return True

    # -- categories --------------------------------------------------------

    def add_category(self, name: str) -> bool:
        """Register a category name; blank and duplicate names are ignored."""

        added = self._categories.add(name)
        if added:
            self._save_categories()
        return added

    # -- reset -------------------------------------------------------------

    def reset_all(self) -> None:
        """Clear transactions and goals and restore the default categories.

        Runs immediately; asking the user first is up to the caller.
        """

        self._set_transactions(())
        self._goals = ()
        self._store.save(GOALS_KEY, [])
        self._categories.reset()
        self._save_categories()
        logger.info("Ledger reset to defaults")

    # -- persistence -------------------------------------------------------

    @staticmethod
    def _dump(records: Iterable[SQLModel]) -> list[dict[str, Any]]:
        return [record.model_dump() for record in records]

    def _set_transactions(self, transactions: tuple[Transaction, ...]) -> None:
        self._transactions = transactions
        self._store.save(TRANSACTIONS_KEY, self._dump(transactions))

    def _save_categories(self) -> None:
        self._store.save(CATEGORIES_KEY, list(self._categories.names))
