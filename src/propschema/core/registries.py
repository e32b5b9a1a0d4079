from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T", bound=Callable)


class Registry(Generic[T]):
    """Container for named extensions, e.g. value generators keyed by type name."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: dict[str, T] = {}

    def register(self, item: T, *, name: str | None = None) -> T:
        self._items[name or item.__name__] = item
        return item

    def unregister(self, name: str) -> None:
        del self._items[name]

    def get_all_names(self) -> list[str]:
        return list(self._items)

    def get_one(self, name: str) -> T | None:
        return self._items.get(name)

    def copy(self) -> Registry[T]:
        registry: Registry[T] = Registry()
        registry._items.update(self._items)
        return registry

    def __contains__(self, name: object) -> bool:
        return name in self._items
