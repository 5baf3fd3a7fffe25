"""Ordered, duplicate-free registry of category names."""

from __future__ import annotations

from typing import Iterable, Iterator

from ..constants.categories import DEFAULT_CATEGORIES


class CategoryRegistry:
    """Category names in insertion order.

    Names are only ever added; lookups are exact and case-sensitive.
    """

    def __init__(self, names: Iterable[str] | None = None):
        self._names: tuple[str, ...] = ()
        for name in DEFAULT_CATEGORIES if names is None else names:
            self.add(name)

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    def add(self, name: str) -> bool:
        """Append ``name`` unless it is blank or already registered.

        Returns True when the registry changed.
        """

        trimmed = (name or "").strip()
        if not trimmed or trimmed in self._names:
            return False
        self._names = (*self._names, trimmed)
        return True

    def reset(self) -> None:
        """Restore the default seed list."""

        self._names = tuple(DEFAULT_CATEGORIES)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"CategoryRegistry({list(self._names)!r})"
