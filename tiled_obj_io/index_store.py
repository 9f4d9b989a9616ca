"""
Indexed Value Stores

Registries that hand out stable, zero-based indices for vertices and
texture coordinates in first-insertion order. Two behaviors share the
same interface:

- HashIndexStore: equal values share one index (deduplicating)
- ListIndexStore: every add gets its own index (duplicating), used when
  individual vertices must stay mutable after import
"""

from typing import Dict, Generic, Hashable, List, Protocol, TypeVar

T = TypeVar('T', bound=Hashable)


class IndexedValueStore(Protocol[T]):
    """Interface shared by both store behaviors."""

    @property
    def values(self) -> List[T]:
        ...

    def add(self, value: T) -> int:
        ...

    def __len__(self) -> int:
        ...


class HashIndexStore(Generic[T]):
    """Deduplicating store keyed on exact structural equality."""

    def __init__(self):
        self._values: List[T] = []
        self._value_to_index: Dict[T, int] = {}

    @property
    def values(self) -> List[T]:
        return self._values

    def add(self, value: T) -> int:
        """
        Add a value, reusing the index of an equal value if one exists.

        Args:
            value: Hashable value to register

        Returns:
            Zero-based index of the value
        """
        index = self._value_to_index.get(value)
        if index is None:
            index = len(self._values)
            self._value_to_index[value] = index
            self._values.append(value)
        return index

    def __len__(self) -> int:
        return len(self._values)


class ListIndexStore(Generic[T]):
    """Duplicating store: every add appends a new entry."""

    def __init__(self):
        self._values: List[T] = []

    @property
    def values(self) -> List[T]:
        return self._values

    def add(self, value: T) -> int:
        self._values.append(value)
        return len(self._values) - 1

    def __len__(self) -> int:
        return len(self._values)


def create_vertex_store(writable_vertices: bool) -> IndexedValueStore:
    """Pick the vertex store behavior for an export pass."""
    if writable_vertices:
        return ListIndexStore()
    return HashIndexStore()
