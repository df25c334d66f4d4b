"""Ordered unique-key map shared by the tag and bookmark catalogs.

Both catalogs keep a list of keys (for presentation order) next to a mapping of
key to value (for lookup). Every mutation goes through this class so the two
representations can never drift apart.
"""

from __future__ import annotations

from bisect import insort
from typing import (
    Callable,
    Dict,
    Generic,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
)

from .errors import CatalogIntegrityError

V = TypeVar("V")


class OrderedKeyMap(Generic[V]):
    """Keep an ordered list of unique keys in lockstep with a key index.

    Args:
        sorted_keys: When True the key order is kept lexicographically sorted;
            otherwise keys keep their insertion order.
    """

    def __init__(self, *, sorted_keys: bool = False) -> None:
        self._sorted = sorted_keys
        self._order: List[str] = []
        self._index: Dict[str, V] = {}

    @classmethod
    def from_parts(
        cls,
        order: Iterable[str],
        index: Mapping[str, V],
        *,
        sorted_keys: bool = False,
    ) -> "OrderedKeyMap[V]":
        """Rebuild a map from persisted parts and verify they agree.

        Args:
            order: Key order as stored on disk.
            index: Key to value mapping as stored on disk.
            sorted_keys: Whether the rebuilt map keeps keys sorted.

        Returns:
            OrderedKeyMap[V]: Map holding the given entries.

        Raises:
            CatalogIntegrityError: If the parts violate the map invariants.
        """
        instance = cls(sorted_keys=sorted_keys)
        instance._order = list(order)
        instance._index = dict(index)
        instance.check()
        return instance

    def keys(self) -> List[str]:
        """Return a copy of the key order."""
        return list(self._order)

    def items(self) -> List[Tuple[str, V]]:
        return [(key, self._index[key]) for key in self._order]

    def get(self, key: str) -> Optional[V]:
        return self._index.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._order))

    def setdefault(self, key: str, factory: Callable[[], V]) -> Tuple[V, bool]:
        """Return the value for ``key``, creating it with ``factory`` if absent.

        Returns:
            tuple[V, bool]: The stored value and whether it was just created.
        """
        if key in self._index:
            return self._index[key], False
        value = factory()
        self._place(key)
        self._index[key] = value
        return value, True

    def add(self, key: str, value: V) -> None:
        """Insert a new key.

        Raises:
            KeyError: If ``key`` is already present.
        """
        if key in self._index:
            raise KeyError(key)
        self._place(key)
        self._index[key] = value

    def pop(self, key: str) -> Optional[V]:
        """Remove ``key`` from both structures; absent keys are ignored."""
        if key not in self._index:
            return None
        self._order.remove(key)
        return self._index.pop(key)

    def rename(self, old: str, new: str) -> V:
        """Move the value stored under ``old`` to ``new``.

        The new key takes the old key's position before any re-sort.

        Raises:
            KeyError: If ``old`` is absent or ``new`` is already present.
        """
        if old not in self._index:
            raise KeyError(old)
        if new in self._index:
            raise KeyError(new)
        value = self._index.pop(old)
        self._order[self._order.index(old)] = new
        self._index[new] = value
        if self._sorted:
            self._order.sort()
        return value

    def check(self) -> None:
        """Verify the order and the index describe the same key set.

        Raises:
            CatalogIntegrityError: On duplicate keys, mismatched key sets, or an
                unsorted order for sorted maps.
        """
        if len(set(self._order)) != len(self._order):
            raise CatalogIntegrityError("Key order contains duplicate entries.")
        if set(self._order) != set(self._index):
            missing = sorted(set(self._index) - set(self._order))
            extra = sorted(set(self._order) - set(self._index))
            raise CatalogIntegrityError(
                f"Key order and index disagree (unordered: {missing}, unindexed: {extra})."
            )
        if self._sorted and self._order != sorted(self._order):
            raise CatalogIntegrityError("Key order is not sorted.")

    def _place(self, key: str) -> None:
        if self._sorted:
            insort(self._order, key)
        else:
            self._order.append(key)


__all__ = ["OrderedKeyMap"]
