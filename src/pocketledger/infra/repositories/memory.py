"""In-memory key/value store for tests and throwaway sessions."""

from __future__ import annotations

import json
from typing import Any, TypeVar

T = TypeVar("T")


class InMemoryKeyValueStore:
    """Dict-backed store that keeps values as JSON text.

    Values go through the same JSON round trip as the database store so tests
    see exactly what a reload would produce.
    """

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})
        self.save_count = 0

    def load(self, key: str, fallback: T) -> Any | T:
        raw = self.data.get(key)
        if not raw:
            return fallback
        try:
            return json.loads(raw)
        except ValueError:
            return fallback

    def save(self, key: str, value: Any) -> None:
        try:
            self.data[key] = json.dumps(value)
        except (TypeError, ValueError):
            return
        self.save_count += 1


__all__ = ["InMemoryKeyValueStore"]
