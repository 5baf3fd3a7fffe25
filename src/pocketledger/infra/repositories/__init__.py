"""Concrete key/value store implementations."""

from .key_value import SQLModelKeyValueStore
from .memory import InMemoryKeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "SQLModelKeyValueStore",
]
