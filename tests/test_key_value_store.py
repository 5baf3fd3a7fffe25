"""Tests for the SQLModel-backed key/value store."""

from __future__ import annotations

from contextlib import contextmanager

from sqlalchemy.exc import OperationalError
from sqlmodel import select

from pocketledger.infra.repositories import SQLModelKeyValueStore
from pocketledger.models import StoredValue
from pocketledger.services.ledger_store import CATEGORIES_KEY, LedgerStore


def test_round_trip(sql_store):
    sql_store.save("pf_goals", [{"id": "g", "name": "Car", "target": 5000}])

    assert sql_store.load("pf_goals", []) == [{"id": "g", "name": "Car", "target": 5000}]


def test_save_overwrites_existing_value(sql_store, session_factory):
    sql_store.save("pf_categories", ["A"])
    sql_store.save("pf_categories", ["A", "B"])

    with session_factory() as session:
        rows = session.exec(select(StoredValue)).all()

    assert len(rows) == 1
    assert sql_store.load("pf_categories", None) == ["A", "B"]


def test_missing_key_returns_fallback(sql_store):
    sentinel = object()

    assert sql_store.load("absent", sentinel) is sentinel


def test_corrupt_value_returns_fallback(sql_store, session_factory):
    with session_factory() as session:
        session.add(StoredValue(key="pf_transactions", value="[{broken"))

    assert sql_store.load("pf_transactions", []) == []


def test_unserializable_value_is_not_saved(sql_store):
    sql_store.save("bad", {"when": object()})

    assert sql_store.load("bad", "fallback") == "fallback"


def test_database_errors_are_logged_not_raised(caplog):
    @contextmanager
    def broken_factory():
        raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))
        yield  # pragma: no cover

    store = SQLModelKeyValueStore(broken_factory)

    with caplog.at_level("WARNING"):
        store.save("pf_goals", [])
        assert store.load("pf_goals", ["fallback"]) == ["fallback"]

    assert "Could not save pf_goals" in caplog.text
    assert "Could not read pf_goals" in caplog.text


def test_ledger_survives_reload_from_database(sql_store, session_factory):
    ledger = LedgerStore.load(sql_store)
    tx = ledger.add_transaction(
        {"date": "2024-06-01", "description": "Bonus", "amount": 250.75, "category": "Income"}
    )
    goal = ledger.add_goal({"name": "Holiday", "target": 900, "current": 150, "due": "2024-12"})
    ledger.add_category("Income")

    reloaded = LedgerStore.load(SQLModelKeyValueStore(session_factory))

    assert reloaded.transactions == (tx,)
    assert reloaded.goals == (goal,)
    assert reloaded.categories[-1] == "Income"
    assert sql_store.load(CATEGORIES_KEY, None) == list(reloaded.categories)
