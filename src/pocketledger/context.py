"""Application context for dependency injection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from .config import BaseConfig
from .domain.repositories.key_value import KeyValueStore
from .infra.database import create_db_engine, create_session_factory, init_database
from .infra.repositories import InMemoryKeyValueStore, SQLModelKeyValueStore
from .services.aggregation import LedgerView
from .services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Centralized application context with services and state."""

    config: BaseConfig
    store: KeyValueStore
    ledger: LedgerStore
    view: LedgerView

    engine: Optional[Any] = None
    session_factory: Optional[Callable[[], Session]] = None


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    store: Optional[KeyValueStore] = None,
) -> AppContext:
    """Create the context and load the ledger.

    Without an explicit ``store`` the SQLModel database named by the config
    backs the ledger. If that database cannot be opened the session runs on
    an in-memory store and nothing is persisted.
    """

    if config is None:
        config = BaseConfig()

    engine = None
    session_factory = None
    if store is None:
        try:
            engine = create_db_engine(config)
            init_database(engine)
        except SQLAlchemyError:
            logger.warning(
                "Database unavailable; changes will not be saved",
                extra={"database_url": config.DATABASE_URL},
                exc_info=True,
            )
            if engine is not None:
                engine.dispose()
                engine = None
            store = InMemoryKeyValueStore()
        else:
            session_factory = create_session_factory(engine)
            store = SQLModelKeyValueStore(session_factory)

    ledger = LedgerStore.load(store)
    return AppContext(
        config=config,
        store=store,
        ledger=ledger,
        view=LedgerView(ledger),
        engine=engine,
        session_factory=session_factory,
    )
