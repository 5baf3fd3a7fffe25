"""Aggregation tests: filters, totals, breakdown, trend, goals."""

from __future__ import annotations

import itertools

import pytest

from pocketledger.services import aggregation
from pocketledger.services.aggregation import CategoryTotal, LedgerView, MonthBucket


@pytest.fixture
def populated(ledger):
    """Ledger with two months of mixed income and expenses."""

    rows = [
        ("2024-01-03", "Paycheck", 2000, "Income"),
        ("2024-01-05", "Groceries run", -120.5, "Groceries"),
        ("2024-01-09", "Dinner", -60, "Dining Out"),
        ("2024-01-20", "More groceries", -30.25, "Groceries"),
        ("2024-02-01", "Rent", -1200, "Rent/Mortgage"),
        ("2024-02-03", "Paycheck", 2000, "Income"),
        ("2024-02-14", "Flowers", -45, "Shopping"),
        ("", "Undated refund", 15, "Shopping"),
    ]
    for date, description, amount, category in rows:
        ledger.add_transaction(
            {"date": date, "description": description, "amount": amount, "category": category}
        )
    return ledger


def test_filter_by_month_and_category(populated):
    view = LedgerView(populated, month="2024-01", category="Groceries")

    assert sorted(t.description for t in view.filtered_transactions) == [
        "Groceries run",
        "More groceries",
    ]


def test_no_filters_pass_everything(populated):
    view = LedgerView(populated)

    assert len(view.filtered_transactions) == len(populated.transactions)


def test_filter_setters_normalize_blank_values(populated):
    view = LedgerView(populated)
    view.set_month_filter("2024-02")
    view.set_category_filter("")

    assert view.month_filter == "2024-02"
    assert view.category_filter == "All"
    assert len(view.filtered_transactions) == 3

    view.set_month_filter(None)
    assert view.month_filter == ""


def test_summary_totals(populated):
    view = LedgerView(populated, month="2024-01")

    summary = view.summary

    assert summary.income == pytest.approx(2000)
    assert summary.expenses == pytest.approx(210.75)
    assert summary.net == pytest.approx(1789.25)


@pytest.mark.parametrize(
    ("month", "category"),
    list(itertools.product(["", "2024-01", "2024-02", "1999-12"], ["All", "Groceries", "Income", "Shopping"])),
)
def test_net_is_exactly_income_minus_expenses(populated, month, category):
    summary = LedgerView(populated, month=month, category=category).summary

    assert summary.income - summary.expenses == summary.net


def test_zero_amount_counts_as_income(transaction_factory):
    summary = aggregation.compute_summary([transaction_factory(0), transaction_factory(-5)])

    assert summary.income == 0
    assert summary.expenses == 5


def test_category_breakdown_uses_first_seen_order(transaction_factory):
    txs = [
        transaction_factory(-5, category="Travel"),
        transaction_factory(-100, category="Rent/Mortgage"),
        transaction_factory(-7, category="Travel"),
        transaction_factory(300, category="Income"),
        transaction_factory(-1, category="Groceries"),
    ]

    assert aggregation.category_breakdown(txs) == [
        CategoryTotal(name="Travel", amount=12),
        CategoryTotal(name="Rent/Mortgage", amount=100),
        CategoryTotal(name="Groceries", amount=1),
    ]


def test_category_breakdown_labels_blank_category(transaction_factory):
    breakdown = aggregation.category_breakdown([transaction_factory(-5, category="")])

    assert breakdown == [CategoryTotal(name="Uncategorized", amount=5)]


def test_category_breakdown_is_empty_for_income_only(transaction_factory):
    txs = [transaction_factory(10), transaction_factory(0), transaction_factory(2500.5)]

    assert aggregation.category_breakdown(txs) == []


def test_breakdown_respects_filters(populated):
    view = LedgerView(populated, month="2024-02")

    assert [entry.name for entry in view.category_breakdown] == ["Shopping", "Rent/Mortgage"]


def test_monthly_trend_sorted_and_excludes_undated(populated):
    trend = LedgerView(populated).monthly_trend

    assert trend == [
        MonthBucket(month="2024-01", income=2000, expense=210.75),
        MonthBucket(month="2024-02", income=2000, expense=1245),
    ]
    assert trend[1].net == 755


def test_monthly_trend_ignores_filters(populated):
    view = LedgerView(populated)
    unfiltered = view.monthly_trend

    view.set_month_filter("2024-02")
    view.set_category_filter("Groceries")

    assert view.monthly_trend == unfiltered


def test_views_are_recomputed_after_mutation(populated):
    view = LedgerView(populated, month="2024-03")
    assert view.summary.expenses == 0

    populated.add_transaction({"date": "2024-03-01", "description": "Bus", "amount": -2.5, "category": "Transportation"})

    assert view.summary.expenses == 2.5
    assert view.monthly_trend[-1].month == "2024-03"


def test_implied_monthly_target(goal_factory):
    goals = [goal_factory(target=1200), goal_factory(target=600), goal_factory(target=90)]

    expected = sum(g.target for g in goals) / 12
    for ordering in itertools.permutations(goals):
        assert aggregation.implied_monthly_target(ordering) == pytest.approx(expected)


def test_implied_monthly_target_without_goals():
    assert aggregation.implied_monthly_target([]) == 0


@pytest.mark.parametrize(
    ("current", "target", "expected"),
    [
        (0, 100, 0),
        (50, 100, 50),
        (200, 100, 100),
        (0, 0, 0),
        (1, 3, 33),
        (1, 8, 13),
        (0.4, 0.5, 40),
    ],
)
def test_progress_percent(current, target, expected):
    assert aggregation.progress_percent(current, target) == expected


def test_goal_progress_from_view(ledger):
    goal = ledger.add_goal({"name": "Laptop", "target": 2000, "current": 500, "due": "2025-01"})

    (progress,) = LedgerView(ledger).goal_progress

    assert progress.goal_id == goal.id
    assert progress.percent == 25
    assert progress.due == "2025-01"


def test_over_target_flag(ledger):
    ledger.add_goal({"name": "Fund", "target": 1200})
    view = LedgerView(ledger)
    ledger.add_transaction({"date": "2024-01-01", "description": "Small", "amount": -50, "category": "Other"})
    assert view.over_target is False

    ledger.add_transaction({"date": "2024-01-02", "description": "Big", "amount": -80, "category": "Other"})
    assert view.over_target is True


def test_goal_progress_with_infinite_savings(ledger):
    ledger.add_goal({"name": "Moonshot", "target": 100, "current": float("inf")})

    (progress,) = LedgerView(ledger).goal_progress

    assert progress.current == 0
    assert progress.percent == 0
