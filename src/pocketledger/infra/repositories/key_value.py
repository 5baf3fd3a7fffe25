"""SQLModel implementation of the key/value store."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, ContextManager, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ...models.stored_value import StoredValue

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SQLModelKeyValueStore:
    """Stores JSON documents in the ``stored_value`` table."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def load(self, key: str, fallback: T) -> Any | T:
        """Return the decoded value for ``key``; ``fallback`` if absent or unreadable."""
        try:
            with self.session_factory() as session:
                row = session.exec(select(StoredValue).where(StoredValue.key == key)).first()
                raw = row.value if row else None
        except SQLAlchemyError:
            logger.warning("Could not read %s from the store", key, exc_info=True)
            return fallback
        if not raw:
            return fallback
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding corrupt stored value for %s", key)
            return fallback

    def save(self, key: str, value: Any) -> None:
        """Write ``value`` as JSON under ``key``; failures are logged and dropped."""
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError):
            logger.warning("Value for %s is not JSON serializable; not saved", key)
            return
        try:
            with self.session_factory() as session:
                row = session.exec(select(StoredValue).where(StoredValue.key == key)).first()
                if row:
                    row.value = payload
                    row.updated_at = datetime.now(timezone.utc)
                else:
                    row = StoredValue(key=key, value=payload)
                session.add(row)
                session.commit()
        except SQLAlchemyError:
            logger.warning("Could not save %s to the store", key, exc_info=True)


__all__ = ["SQLModelKeyValueStore"]
