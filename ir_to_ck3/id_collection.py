"""
id_collection.py - Keyed collections of identified objects.

IdObjectCollection stores objects by their `id` attribute, keeps insertion
order (which makes every sequential pass over the collection deterministic)
and iterates over a snapshot, so objects can be removed while iterating.

Module: ir_to_ck3.id_collection
"""

from typing import Dict, Generic, Iterable, Iterator, List, Optional, TypeVar

T = TypeVar('T')


class IdObjectCollection(Generic[T]):
    """
    Insertion-ordered collection keyed by object id.

    Attributes:
        _items (Dict[str, T]): Objects indexed by id.
    """
    __slots__ = ['_items']

    def __init__(self, items: Optional[Iterable[T]] = None):
        self._items: Dict[str, T] = {}
        for item in items or []:
            self.add(item)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items.values()))

    def __getitem__(self, key: str) -> T:
        return self._items[key]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(count={len(self._items)})"

    def get(self, key: str, default: Optional[T] = None) -> Optional[T]:
        return self._items.get(key, default)

    def keys(self) -> List[str]:
        return list(self._items)

    def add(self, item: T) -> None:
        """
        Add a new object.

        Raises:
            KeyError: If an object with the same id is already present.
        """
        if item.id in self._items:
            raise KeyError(f"Object with id '{item.id}' already exists in {type(self).__name__}")
        self._items[item.id] = item

    def add_or_replace(self, item: T) -> None:
        """Add an object, replacing any object with the same id in place."""
        self._items[item.id] = item

    def remove(self, key: str) -> None:
        del self._items[key]

    def clear(self) -> None:
        self._items.clear()
