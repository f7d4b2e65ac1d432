"""
Generic ordered collection with a chainable query API.

Every transformation (filter, sort, slice, unique, ...) returns a new
collection built by the factory captured when the collection was created,
so a TorrentCollection keeps producing TorrentCollections. Elements are
shared by reference; only add/insert/remove/clear mutate in place.
"""

import json
import random
from functools import cmp_to_key
from typing import (
    Any, Callable, Dict, Generic, Iterable, Iterator, List, Optional, TypeVar,
)

from .exceptions import InvalidArgumentError, ReadOnlyCollectionError


T = TypeVar("T")
U = TypeVar("U")


class Collection(Generic[T]):
    def __init__(
        self,
        items: Optional[Iterable[T]] = None,
        factory: Optional[Callable[[Iterable[T]], "Collection[T]"]] = None,
        read_only: bool = False,
    ):
        self._items: List[T] = list(items) if items is not None else []
        self._factory = factory if factory is not None else type(self)
        self._read_only = read_only

    def _new(self, items: Iterable[T]) -> "Collection[T]":
        return self._factory(items)

    def _check_writable(self, operation: str) -> None:
        if self._read_only:
            raise ReadOnlyCollectionError(operation)

    @property
    def read_only(self) -> bool:
        return self._read_only

    def freeze(self) -> "Collection[T]":
        """Make this collection reject further mutation."""
        self._read_only = True
        return self

    # -------------------------------------------------------------------------
    # Size and access
    # -------------------------------------------------------------------------

    def count(self) -> int:
        return len(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def get(self, index: int) -> Optional[T]:
        """Return the element at ``index`` or None when out of range."""
        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def first(self) -> Optional[T]:
        return self._items[0] if self._items else None

    def last(self) -> Optional[T]:
        return self._items[-1] if self._items else None

    def contains(self, item: T) -> bool:
        return item in self._items

    def index_of(self, item: T) -> Optional[int]:
        try:
            return self._items.index(item)
        except ValueError:
            return None

    def to_array(self) -> List[Any]:
        return list(self._items)

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_array(), **kwargs)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._items!r})"

    # -------------------------------------------------------------------------
    # Transformations
    # -------------------------------------------------------------------------

    def filter(self, predicate: Callable[[T], bool]) -> "Collection[T]":
        return self._new(item for item in self._items if predicate(item))

    def map(self, fn: Callable[[T], U]) -> List[U]:
        return [fn(item) for item in self._items]

    def reduce(self, fn: Callable[[U, T], U], initial: U) -> U:
        accumulator = initial
        for item in self._items:
            accumulator = fn(accumulator, item)
        return accumulator

    def sort(self, comparator: Optional[Callable[[T, T], int]] = None, descending: bool = False) -> "Collection[T]":
        """
        Return a sorted copy.

        Args:
            comparator: Three-way comparison ``(a, b) -> int``. Natural ordering if None.
            descending: Reverse the sorted result.
        """
        if comparator is None:
            items = sorted(self._items)
        else:
            items = sorted(self._items, key=cmp_to_key(comparator))
        if descending:
            items.reverse()
        return self._new(items)

    def sort_by(self, accessor: Callable[[T], Any], descending: bool = False) -> "Collection[T]":
        """Return a copy sorted by the value ``accessor`` extracts from each element."""
        return self._new(sorted(self._items, key=accessor, reverse=descending))

    def slice(self, offset: int, length: Optional[int] = None) -> "Collection[T]":
        """
        Return up to ``length`` elements starting at ``offset``.

        A negative offset counts from the end. A negative length stops that
        many elements before the end.
        """
        if offset < 0:
            offset = max(len(self._items) + offset, 0)
        if length is None:
            end = None
        elif length < 0:
            end = length
        else:
            end = offset + length
        return self._new(self._items[offset:end])

    def take(self, n: int) -> "Collection[T]":
        return self.slice(0, max(n, 0))

    def skip(self, n: int) -> "Collection[T]":
        return self.slice(max(n, 0))

    def copy(self) -> "Collection[T]":
        """Return a writable shallow copy of the same type."""
        return self._new(self._items)

    def reverse(self) -> "Collection[T]":
        return self._new(reversed(self._items))

    def shuffle(self, rng: Optional[random.Random] = None) -> "Collection[T]":
        items = list(self._items)
        (rng or random).shuffle(items)
        return self._new(items)

    def unique(self, key_fn: Optional[Callable[[T], Any]] = None) -> "Collection[T]":
        """
        Drop duplicates, keeping the first occurrence.

        Without ``key_fn`` elements are compared by value equality.
        """
        kept: List[T] = []
        if key_fn is None:
            for item in self._items:
                if item not in kept:
                    kept.append(item)
            return self._new(kept)

        seen: List[Any] = []
        for item in self._items:
            key = key_fn(item)
            if key not in seen:
                seen.append(key)
                kept.append(item)
        return self._new(kept)

    def concat(self, other: Iterable[T]) -> "Collection[T]":
        return self._new(self._items + list(other))

    def group_by(self, key_fn: Callable[[T], Any]) -> Dict[str, "Collection[T]"]:
        """Partition elements by ``str(key_fn(item))``, preserving order within groups."""
        buckets: Dict[str, List[T]] = {}
        for item in self._items:
            buckets.setdefault(str(key_fn(item)), []).append(item)
        return {key: self._new(items) for key, items in buckets.items()}

    def chunk(self, size: int) -> List["Collection[T]"]:
        if size <= 0:
            raise InvalidArgumentError.out_of_range("size", size, minimum=1)
        return [self._new(self._items[i:i + size]) for i in range(0, len(self._items), size)]

    def every(self, predicate: Callable[[T], bool]) -> bool:
        return all(predicate(item) for item in self._items)

    def some(self, predicate: Callable[[T], bool]) -> bool:
        return any(predicate(item) for item in self._items)

    def join(self, separator: str = ", ", to_string: Optional[Callable[[T], str]] = None) -> str:
        to_string = to_string or str
        return separator.join(to_string(item) for item in self._items)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def add(self, item: T) -> "Collection[T]":
        self._check_writable("add")
        self._items.append(item)
        return self

    def add_all(self, items: Iterable[T]) -> "Collection[T]":
        self._check_writable("add_all")
        self._items.extend(items)
        return self

    def insert(self, index: int, item: T) -> "Collection[T]":
        self._check_writable("insert")
        self._items.insert(index, item)
        return self

    def remove(self, index: int) -> "Collection[T]":
        """Remove the element at ``index``; out-of-range indexes are ignored."""
        self._check_writable("remove")
        if 0 <= index < len(self._items):
            del self._items[index]
        return self

    def remove_item(self, item: T) -> "Collection[T]":
        self._check_writable("remove_item")
        if item in self._items:
            self._items.remove(item)
        return self

    def clear(self) -> "Collection[T]":
        self._check_writable("clear")
        self._items.clear()
        return self
