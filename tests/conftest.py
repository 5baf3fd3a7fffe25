"""Pytest configuration and shared fixtures for PocketLedger tests.

Provides an in-memory key/value store, a throwaway SQLite database, and
factories for transactions and goals so domain logic can be tested without
touching a real data directory.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

from pocketledger.infra.database import create_session_factory
from pocketledger.infra.repositories import InMemoryKeyValueStore, SQLModelKeyValueStore
from pocketledger.logging_config import ROOT_LOGGER_NAME
from pocketledger.models import Goal, Transaction
from pocketledger.services.aggregation import LedgerView
from pocketledger.services.ledger_store import LedgerStore


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Point configuration at a per-test data directory and database."""

    data_dir = tmp_path / "instance"
    monkeypatch.setenv("POCKETLEDGER_DATA_DIR", str(data_dir))
    monkeypatch.setenv("POCKETLEDGER_DATABASE_URL", f"sqlite:///{tmp_path / 'ledger.db'}")
    monkeypatch.delenv("POCKETLEDGER_STRICT_CSV", raising=False)
    monkeypatch.delenv("POCKETLEDGER_DEV_MODE", raising=False)
    yield data_dir
    # setup_logging attaches handlers to the package logger; drop them between tests
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def memory_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine with all tables created
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Context-managed session factory matching the application's."""

    return create_session_factory(db_engine)


@pytest.fixture
def sql_store(session_factory) -> SQLModelKeyValueStore:
    return SQLModelKeyValueStore(session_factory)


# =============================================================================
# Ledger Fixtures
# =============================================================================


@pytest.fixture
def ledger(memory_store) -> LedgerStore:
    """Fresh ledger seeded with the default categories."""

    return LedgerStore(memory_store)


@pytest.fixture
def view(ledger) -> LedgerView:
    return LedgerView(ledger)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def transaction_factory():
    """Factory for building standalone Transaction instances.

    Returns:
        Callable: Function that creates Transaction instances
    """

    def _create_transaction(
        amount: float,
        description: str = "Test transaction",
        date: str = "2024-01-15",
        category: str = "Other",
    ) -> Transaction:
        """Create a transaction (positive for income, negative for expense)."""
        return Transaction(date=date, description=description, amount=amount, category=category)

    return _create_transaction


@pytest.fixture
def goal_factory():
    """Factory for building standalone Goal instances."""

    def _create_goal(
        name: str = "Emergency Fund",
        target: float = 1200.0,
        current: float = 0.0,
        due: str | None = None,
    ) -> Goal:
        return Goal(name=name, target=target, current=current, due=due)

    return _create_goal
