"""
Protected hash-map.

A string-keyed mapping with write-once items and whole-map freezing.
Construction, all() and merge() copy values deeply; get() and set()
work with references.
"""

import copy
from typing import Any, Callable, Dict, ItemsView, Iterator, KeysView, Mapping, Optional, Set, Union

from .core.exceptions import FrozenMapError, LockedItemError, MissingItemError


class Map:
    """
    Mapping with per-item locks and a one-way freeze.

    A locked item can never be modified or removed. A frozen map
    rejects every modification.
    """

    def __init__(self, items: Optional[Mapping[str, Any]] = None):
        """
        Initialize the map.

        Args:
            items: Optional mapping of initial items (copied deeply)
        """
        if items is None:
            items = {}
        if isinstance(items, Map):
            items = items.all()
        if not isinstance(items, Mapping):
            raise TypeError(f"Map requires a mapping, got {type(items).__name__} instead.")

        self._data: Dict[str, Any] = copy.deepcopy(dict(items))
        self._locked: Set[str] = set()
        self._frozen = False

    def all(self) -> Dict[str, Any]:
        """Return a deep copy of the items as a plain dict."""
        return copy.deepcopy(self._data)

    def has(self, name: str) -> bool:
        """Return True if an item with the given name exists."""
        return name in self._data

    def get(self, name: str) -> Any:
        """
        Return the item with the given name.

        Raises:
            MissingItemError: If the item does not exist
        """
        if name not in self._data:
            raise MissingItemError(f'Attempt to retrieve undefined item "{name}" from map.')
        return self._data[name]

    def remove(self, name: str):
        """
        Remove the item with the given name.

        Raises:
            FrozenMapError: If the map is frozen
            MissingItemError: If the item does not exist
            LockedItemError: If the item is locked
        """
        if self._frozen:
            raise FrozenMapError(f'Unable to remove item "{name}" because the map is frozen.')
        if name not in self._data:
            raise MissingItemError(
                f'Unable to remove item "{name}" because it does not exist in this map.'
            )
        if name in self._locked:
            raise LockedItemError(
                f'Unable to remove item "{name}" from the map, because this item is locked.'
            )
        del self._data[name]

    def set(self, name: str, value: Any, locked: bool = False):
        """
        Create or update an item.

        Only new items can be locked; locking an existing item would break
        components that rely on modifying their own items.

        Args:
            name: Item name
            value: Item value
            locked: Prohibit any further modification of this item

        Raises:
            FrozenMapError: If the map is frozen
            LockedItemError: If the item is locked, or locking an existing item
        """
        if self._frozen:
            raise FrozenMapError('Modifying a frozen map is prohibited.')
        if name in self._locked:
            raise LockedItemError(f'Unable to modify locked item "{name}" in this map.')
        if locked and name in self._data:
            raise LockedItemError(f'Unable to lock existing item "{name}" in this map.')

        self._data[name] = value
        if locked:
            self._locked.add(name)

    def is_locked(self, name: str) -> bool:
        """Return True if the given item is locked."""
        return name in self._locked

    def freeze(self):
        """Prohibit further modifications. A frozen map cannot be unfrozen."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        """Whether this map is frozen."""
        return self._frozen

    def merge(self, other: Union['Map', Mapping[str, Any]]):
        """
        Merge a copy of the given mapping into this map.

        Nested dicts are merged recursively, any other value overwrites.

        Raises:
            FrozenMapError: If the map is frozen
            LockedItemError: If a top-level key of other is locked
        """
        if isinstance(other, Map):
            source = other.all()
        elif isinstance(other, Mapping):
            source = copy.deepcopy(dict(other))
        else:
            raise TypeError(
                f"Map.merge requires a mapping, got {type(other).__name__} instead."
            )

        if self._frozen:
            raise FrozenMapError('Modifying a frozen map is prohibited.')
        for name in source:
            if name in self._locked:
                raise LockedItemError(f'Unable to modify locked item "{name}" in this map.')

        _merge(self._data, source)

    def each(self, callback: Callable[[str, Any, 'Map'], Any]):
        """
        Call callback(key, value, map) for every item.

        Args:
            callback: Function to execute per item
        """
        for key, value in list(self._data.items()):
            callback(key, value, self)

    def keys(self) -> KeysView:
        return self._data.keys()

    def items(self) -> ItemsView:
        return self._data.items()

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._data))

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Map({self._data!r})"


def _merge(target: Dict[str, Any], source: Mapping[str, Any]):
    for key, value in source.items():
        if isinstance(target.get(key), dict) and isinstance(value, Mapping):
            _merge(target[key], value)
        else:
            target[key] = value
