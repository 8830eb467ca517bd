"""Name-unique collections and deterministic ordering for a Package."""

from __future__ import annotations

import logging
from typing import Generic, Iterable, Protocol, TypeVar

from protoc_gen_swagger.models import Package

logger = logging.getLogger(__name__)


class _Named(Protocol):
    name: str


T = TypeVar("T", bound=_Named)


class NameRegistry(Generic[T]):
    """Insertion-ordered collection that keeps the first item per name.

    Example::

        registry = NameRegistry[Message]("message")
        registry.add(Message(name="User"))   # True
        registry.add(Message(name="User"))   # False, first one kept
    """

    def __init__(self, kind: str) -> None:
        self._kind = kind
        self._items: list[T] = []
        self._index: dict[str, T] = {}

    def add(self, item: T) -> bool:
        """Append *item* unless its name is already taken.

        Returns:
            ``True`` if *item* was added, ``False`` if an earlier item with
            the same name was kept instead.
        """
        if item.name in self._index:
            logger.debug("Skipping duplicate %s '%s'", self._kind, item.name)
            return False
        self._index[item.name] = item
        self._items.append(item)
        return True

    def extend(self, items: Iterable[T]) -> None:
        for item in items:
            self.add(item)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self._items)

    def items(self) -> list[T]:
        return list(self._items)


def sort_key(name: str) -> bytes:
    """Byte-wise ascending order, shorter name first on a common prefix."""
    return name.encode("utf-8")


def sort_package(package: Package) -> Package:
    """Sort services, messages and enums by name, in place.

    Method order inside a service is left as declared.
    """
    package.services.sort(key=lambda s: sort_key(s.name))
    package.messages.sort(key=lambda m: sort_key(m.name))
    package.enums.sort(key=lambda e: sort_key(e.name))
    return package
