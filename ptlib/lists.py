"""Object lists, keyed string lists and sorted text maps."""

from __future__ import annotations

import enum
from bisect import bisect_left
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator

from ptlib.strings import lowercase

__all__ = ["ListError", "ObjList", "StrListFlags", "StrList", "TextMap"]


class ListError(Exception):
    """Raised on a bad index or an operation the list does not allow."""


def _index_error() -> ListError:
    return ListError("List index out of bounds")


def _check_index(index: int, upper: int) -> None:
    if not 0 <= index < upper:
        raise _index_error()


def _sorted_search(
    items: list, key: str, keyof: Callable[[Any], str], fold: Callable[[str], str]
) -> tuple[bool, int]:
    """Find the leftmost position of ``key`` in a list sorted by folded keys."""
    folded = fold(key)
    index = bisect_left(items, folded, key=lambda item: fold(keyof(item)))
    found = index < len(items) and fold(keyof(items[index])) == folded
    return found, index


class ObjList:
    """A list of object references with bounds-checked access."""

    def __init__(self, items: Iterable[Any] | None = None):
        self._items: list[Any] = list(items) if items is not None else []

    def add(self, obj: Any) -> int:
        """Append ``obj`` and return its index."""
        self._items.append(obj)
        return len(self._items) - 1

    def insert(self, index: int, obj: Any) -> None:
        """Insert ``obj`` before position ``index`` (which may equal the length)."""
        _check_index(index, len(self._items) + 1)
        self._items.insert(index, obj)

    def put(self, index: int, obj: Any) -> None:
        """Replace the item at ``index``."""
        _check_index(index, len(self._items))
        self._items[index] = obj

    def delete(self, index: int, count: int = 1) -> None:
        """Remove up to ``count`` items starting at ``index``."""
        _check_index(index, len(self._items))
        if count > 0:
            del self._items[index:index + count]

    def pop(self) -> Any:
        """Remove and return the last item."""
        if not self._items:
            raise _index_error()
        return self._items.pop()

    def top(self) -> Any:
        """Return the last item without removing it."""
        if not self._items:
            raise _index_error()
        return self._items[-1]

    def index_of(self, obj: Any) -> int:
        """Index of the very object ``obj`` in the list, or -1."""
        for i, item in enumerate(self._items):
            if item is obj:
                return i
        return -1

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Any:
        _check_index(index, len(self._items))
        return self._items[index]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)


class StrListFlags(enum.IntFlag):
    """Behaviour switches for StrList."""

    NONE = 0
    SORTED = 1
    DUPLICATES = 2
    CASESENS = 4
    OWNOBJECTS = 8


@dataclass
class _StrItem:
    key: str
    obj: Any


class StrList:
    """A list of (key, object) pairs, optionally kept sorted by key."""

    def __init__(self, flags: StrListFlags | int = StrListFlags.NONE):
        flags = StrListFlags(flags)
        self.sorted = bool(flags & StrListFlags.SORTED)
        self.duplicates = bool(flags & StrListFlags.DUPLICATES)
        self.casesens = bool(flags & StrListFlags.CASESENS)
        self.ownobjects = bool(flags & StrListFlags.OWNOBJECTS)
        self._items: list[_StrItem] = []

    def _fold(self, key: str) -> str:
        return key if self.casesens else lowercase(key)

    def _require_sorted(self) -> None:
        if not self.sorted:
            raise ListError("Search only allowed on sorted string lists")

    def _require_unsorted(self) -> None:
        if self.sorted:
            raise ListError("Operation not allowed on sorted string lists")

    def add(self, key: str, obj: Any = None) -> int:
        """Add a pair, at its sorted place or at the end; return its index."""
        if self.sorted:
            found, index = self.search(key)
            if found and not self.duplicates:
                raise ListError("Duplicate items not allowed in this string list")
        else:
            index = len(self._items)
        self._items.insert(index, _StrItem(key, obj))
        return index

    def insert(self, index: int, key: str, obj: Any = None) -> None:
        """Insert a pair before ``index``; not allowed on sorted lists."""
        self._require_unsorted()
        _check_index(index, len(self._items) + 1)
        self._items.insert(index, _StrItem(key, obj))

    def put(self, key: str, obj: Any) -> int:
        """Set the object for ``key`` in a sorted list; ``None`` removes it."""
        self._require_sorted()
        if self.duplicates:
            raise ListError("Duplicate items not allowed in this string list")
        found, index = self.search(key)
        if found:
            if obj is None:
                del self._items[index]
            else:
                self._items[index].obj = obj
        elif obj is not None:
            self._items.insert(index, _StrItem(key, obj))
        return index

    def put_at(self, index: int, key: str, obj: Any) -> None:
        """Replace the pair at ``index``; not allowed on sorted lists."""
        self._require_unsorted()
        _check_index(index, len(self._items))
        item = self._items[index]
        item.key = key
        item.obj = obj

    def delete(self, index: int, count: int = 1) -> None:
        """Remove up to ``count`` pairs starting at ``index``."""
        _check_index(index, len(self._items))
        if count > 0:
            del self._items[index:index + count]

    def search(self, key: str) -> tuple[bool, int]:
        """Return whether ``key`` is present and where it is or would go."""
        self._require_sorted()
        return _sorted_search(self._items, key, lambda it: it.key, self._fold)

    def index_of(self, key: str) -> int:
        """Index of the first pair with ``key``, or -1."""
        if self.sorted:
            found, index = self.search(key)
            return index if found else -1
        folded = self._fold(key)
        for i, item in enumerate(self._items):
            if self._fold(item.key) == folded:
                return i
        return -1

    def index_of_object(self, obj: Any) -> int:
        """Index of the pair holding the very object ``obj``, or -1."""
        for i, item in enumerate(self._items):
            if item.obj is obj:
                return i
        return -1

    def get(self, key: str) -> Any:
        """Object stored under ``key`` in a sorted list, or ``None``."""
        found, index = self.search(key)
        return self._items[index].obj if found else None

    def key_at(self, index: int) -> str:
        _check_index(index, len(self._items))
        return self._items[index].key

    def object_at(self, index: int) -> Any:
        _check_index(index, len(self._items))
        return self._items[index].obj

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return ((item.key, item.obj) for item in self._items)


@dataclass
class _TextItem:
    key: str
    value: str


class TextMap:
    """A sorted map of string keys to non-empty string values."""

    def __init__(self, casesens: bool = False):
        self.casesens = casesens
        self._items: list[_TextItem] = []

    def _fold(self, key: str) -> str:
        return key if self.casesens else lowercase(key)

    def _search(self, key: str) -> tuple[bool, int]:
        return _sorted_search(self._items, key, lambda it: it.key, self._fold)

    def get(self, key: str) -> str:
        """Value for ``key``, or an empty string."""
        found, index = self._search(key)
        return self._items[index].value if found else ""

    def put(self, key: str, value: str) -> int:
        """Set ``key`` to ``value``; an empty value removes the key."""
        found, index = self._search(key)
        if found:
            if not value:
                del self._items[index]
            else:
                self._items[index].value = value
        elif value:
            self._items.insert(index, _TextItem(key, value))
        return index

    def index_of(self, key: str) -> int:
        found, index = self._search(key)
        return index if found else -1

    def key_at(self, index: int) -> str:
        _check_index(index, len(self._items))
        return self._items[index].key

    def value_at(self, index: int) -> str:
        _check_index(index, len(self._items))
        return self._items[index].value

    def __getitem__(self, key: str) -> str:
        return self.get(key)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return ((item.key, item.value) for item in self._items)