"""
Ordered collection.

Keeps items in insertion order and refuses duplicates.
"""

from typing import Any, Callable, Iterator, List, Optional, Sequence

from .core.exceptions import DuplicateItemError, IndexOutOfRangeError, MissingItemError


class Collection:
    """
    Ordered list of unique items.

    Supports membership tests, add/remove by value and indexed access.
    """

    def __init__(self, items: Optional[Sequence[Any]] = None):
        """
        Initialize the collection.

        Args:
            items: Optional list or tuple of initial items
        """
        if items is None:
            items = []
        if not isinstance(items, (list, tuple)):
            raise TypeError(
                f"Collection expects a list, got {type(items).__name__} instead."
            )
        self._data: List[Any] = list(items)

    def count(self) -> int:
        """Return the amount of items in this collection."""
        return len(self._data)

    def first(self) -> Any:
        """Return the first item, or None if the collection is empty."""
        return self._data[0] if self._data else None

    def last(self) -> Any:
        """Return the last item, or None if the collection is empty."""
        return self._data[-1] if self._data else None

    def add(self, item: Any):
        """
        Append an item.

        Args:
            item: Item to append

        Raises:
            DuplicateItemError: If an equal item is already present
        """
        if self.contains(item):
            raise DuplicateItemError(f"The item {item!r} already exists in this collection.")
        self._data.append(item)

    def get(self, index: int) -> Any:
        """
        Return the item at the given index.

        Raises:
            IndexOutOfRangeError: If the index is out of range
        """
        self._check_index(index)
        return self._data[index]

    def set(self, index: int, value: Any):
        """
        Replace the item at the given index.

        Raises:
            IndexOutOfRangeError: If the index is out of range
        """
        self._check_index(index)
        self._data[index] = value

    def all(self) -> List[Any]:
        """Return the items as a new list."""
        return list(self._data)

    def each(self, callback: Callable[[Any, int, 'Collection'], Any]):
        """
        Call callback(value, index, collection) for every item.

        Args:
            callback: Function to execute per item
        """
        if not callable(callback):
            raise TypeError(
                f"Collection.each requires a callable, got {type(callback).__name__} instead."
            )
        for index, value in enumerate(list(self._data)):
            callback(value, index, self)

    def remove(self, item: Any):
        """
        Remove the given item.

        Raises:
            MissingItemError: If the item is not in this collection
        """
        if not self.contains(item):
            raise MissingItemError(f"The item {item!r} does not exist in this collection.")
        self._data.remove(item)

    def contains(self, item: Any) -> bool:
        """Return True if the given item exists in this collection."""
        return item in self._data

    def _check_index(self, index: int):
        if not isinstance(index, int) or index < 0 or index >= len(self._data):
            raise IndexOutOfRangeError(index, len(self._data))

    def __contains__(self, item: Any) -> bool:
        return self.contains(item)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._data))

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Collection({self._data!r})"
