"""Key/value store protocol used to persist ledger collections."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class KeyValueStore(Protocol):
    """Durable storage for JSON-compatible values keyed by name.

    Implementations never raise: ``load`` answers ``fallback`` when the key is
    absent or the stored value cannot be read, and ``save`` drops the write on
    failure.
    """

    def load(self, key: str, fallback: T) -> Any | T:
        """Return the decoded value stored under ``key`` or ``fallback``."""
        ...

    def save(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...
