"""Filtered views and derived metrics over the ledger.

Nothing here is cached: every accessor walks the current collections again,
so results always reflect the latest mutation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from ..constants.categories import ALL_CATEGORIES, UNCATEGORIZED
from ..models import Goal, Transaction

if TYPE_CHECKING:  # pragma: no cover
    from .ledger_store import LedgerStore


@dataclass(frozen=True, slots=True)
class Summary:
    """Income, expense and net totals for a set of transactions."""

    income: float
    expenses: float
    net: float


@dataclass(frozen=True, slots=True)
class CategoryTotal:
    name: str
    amount: float


@dataclass(frozen=True, slots=True)
class MonthBucket:
    """Income and expense totals for one ``YYYY-MM`` month."""

    month: str
    income: float
    expense: float

    @property
    def net(self) -> float:
        return self.income - self.expense


@dataclass(frozen=True, slots=True)
class GoalProgress:
    goal_id: str
    name: str
    current: float
    target: float
    due: Optional[str]
    percent: int


def matches_filters(tx: Transaction, *, month: str = "", category: str = ALL_CATEGORIES) -> bool:
    """Return True when ``tx`` falls in ``month`` (if set) and ``category`` (unless All)."""

    month_ok = not month or tx.year_month == month
    category_ok = category == ALL_CATEGORIES or tx.category == category
    return month_ok and category_ok


def filter_transactions(
    transactions: Iterable[Transaction],
    *,
    month: str = "",
    category: str = ALL_CATEGORIES,
) -> list[Transaction]:
    """Keep the transactions that pass the month and category filters, in order."""

    return [tx for tx in transactions if matches_filters(tx, month=month, category=category)]


def compute_summary(transactions: Iterable[Transaction]) -> Summary:
    """Compute income, expenses, and net totals from the provided transactions."""

    income = 0.0
    expenses = 0.0
    for tx in transactions:
        if tx.amount >= 0:
            income += tx.amount
        else:
            expenses += abs(tx.amount)
    return Summary(income=income, expenses=expenses, net=income - expenses)


def category_breakdown(transactions: Iterable[Transaction]) -> list[CategoryTotal]:
    """Roll up expense totals by category in first-seen order.

    Income transactions are ignored.
    """

    totals: dict[str, float] = {}
    for tx in transactions:
        if tx.amount >= 0:
            continue
        key = tx.category or UNCATEGORIZED
        totals[key] = totals.get(key, 0.0) + abs(tx.amount)
    return [CategoryTotal(name=name, amount=amount) for name, amount in totals.items()]


def monthly_trend(transactions: Iterable[Transaction]) -> list[MonthBucket]:
    """Income and expense per ``YYYY-MM`` month, oldest first.

    Transactions without a usable month are left out. Callers pass the full,
    unfiltered collection.
    """

    buckets: dict[str, list[float]] = {}
    for tx in transactions:
        month = tx.year_month
        if not month:
            continue
        sums = buckets.setdefault(month, [0.0, 0.0])
        if tx.amount >= 0:
            sums[0] += tx.amount
        else:
            sums[1] += abs(tx.amount)
    # Zero-padded YYYY-MM sorts correctly as plain text.
    return [
        MonthBucket(month=month, income=income, expense=expense)
        for month, (income, expense) in sorted(buckets.items())
    ]


def implied_monthly_target(goals: Iterable[Goal]) -> float:
    """Sum of every goal target spread over twelve months."""

    return sum((goal.target or 0) / 12 for goal in goals)


def progress_percent(current: float, target: float) -> int:
    """Whole percent of ``target`` reached, capped at 100.

    Targets below 1 count as 1 so a zero target never divides by zero.
    Halves round up.
    """

    ratio = (current or 0) / max(target or 0, 1) * 100
    return min(100, math.floor(ratio + 0.5))


def goal_progress(goals: Iterable[Goal]) -> list[GoalProgress]:
    return [
        GoalProgress(
            goal_id=goal.id,
            name=goal.name,
            current=goal.current,
            target=goal.target,
            due=goal.due,
            percent=progress_percent(goal.current, goal.target),
        )
        for goal in goals
    ]


class LedgerView:
    """Filter state plus read-only aggregate accessors over a ledger.

    The month and category filters narrow ``summary``, ``category_breakdown``
    and ``filtered_transactions``. ``monthly_trend``, ``goal_progress`` and
    ``implied_monthly_target`` always cover the whole ledger.
    """

    def __init__(
        self,
        ledger: LedgerStore,
        *,
        month: str = "",
        category: str = ALL_CATEGORIES,
    ):
        self._ledger = ledger
        self._month = ""
        self._category = ALL_CATEGORIES
        self.set_month_filter(month)
        self.set_category_filter(category)

    @property
    def month_filter(self) -> str:
        return self._month

    @property
    def category_filter(self) -> str:
        return self._category

    def set_month_filter(self, month: Optional[str]) -> None:
        """Restrict to one ``YYYY-MM`` month; blank or None clears the filter."""

        self._month = (month or "").strip()

    def set_category_filter(self, name: Optional[str]) -> None:
        """Restrict to one category; blank, None or ``"All"`` clears the filter."""

        self._category = (name or "").strip() or ALL_CATEGORIES

    @property
    def filtered_transactions(self) -> list[Transaction]:
        return filter_transactions(
            self._ledger.transactions, month=self._month, category=self._category
        )

    @property
    def summary(self) -> Summary:
        return compute_summary(self.filtered_transactions)

    @property
    def category_breakdown(self) -> list[CategoryTotal]:
        return category_breakdown(self.filtered_transactions)

    @property
    def monthly_trend(self) -> list[MonthBucket]:
        return monthly_trend(self._ledger.transactions)

    @property
    def implied_monthly_target(self) -> float:
        return implied_monthly_target(self._ledger.goals)

    @property
    def goal_progress(self) -> list[GoalProgress]:
        return goal_progress(self._ledger.goals)

    @property
    def over_target(self) -> bool:
        """True when filtered expenses exceed the implied monthly target."""

        return self.summary.expenses > self.implied_monthly_target
