"""A dynamically typed value that may also hold a keyed, sorted array."""

from __future__ import annotations

import enum
import math
from bisect import bisect_left
from dataclasses import dataclass
from typing import Any, Iterator

from ptlib.strings import LARGE_MAX, LARGE_MIN, itostring, stringtoi

__all__ = ["VariantError", "VarType", "Variant"]

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


class VariantError(ValueError):
    """Raised when a variant cannot be converted or built."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class VarType(enum.Enum):
    """The kind of value a Variant holds."""

    NULL = 0
    INT = 1
    BOOL = 2
    FLOAT = 3
    STRING = 4
    ARRAY = 5
    OBJECT = 6


@dataclass
class _VarItem:
    key: str
    var: "Variant"


class _VArray:
    """Items sorted by case-sensitive key; unkeyed items carry an empty key."""

    def __init__(self, items: list[_VarItem] | None = None):
        self.items: list[_VarItem] = items if items is not None else []

    def copy(self) -> "_VArray":
        return _VArray([_VarItem(it.key, Variant(it.var)) for it in self.items])

    def search(self, key: str) -> tuple[bool, int]:
        index = bisect_left(self.items, key, key=lambda it: it.key)
        return index < len(self.items) and self.items[index].key == key, index

    def get(self, key: str) -> "Variant | None":
        found, index = self.search(key)
        return self.items[index].var if found else None

    def put(self, key: str, var: "Variant") -> int:
        found, index = self.search(key)
        if found:
            if var.type is VarType.NULL:
                del self.items[index]
            else:
                self.items[index].var = var
        elif var.type is not VarType.NULL:
            self.items.insert(index, _VarItem(key, var))
        return index

    def addvar(self, var: "Variant") -> int:
        if self.items and not self.items[-1].key:
            index = len(self.items)
        else:
            index = 0
        self.items.insert(index, _VarItem("", var))
        return index

    def valid(self, index: int) -> bool:
        return 0 <= index < len(self.items)


def _numkey(key: int) -> str:
    return itostring(key, 16, 16, "0")


def _keystr(key: str | int) -> str:
    return key if isinstance(key, str) else _numkey(key)


def _parse_float(text: str) -> float:
    """Parse a whole string as a floating-point number; 0.0 if it is not one."""
    body = text.lstrip()
    if not body or "_" in body or body != body.rstrip():
        return 0.0
    try:
        return float(body)
    except ValueError:
        pass
    try:
        return float.fromhex(body)
    except ValueError:
        return 0.0


class Variant:
    """A value of type null, int, bool, float, string, array or object.

    Arrays are shared by reference between variants that are copied from
    one another; use :meth:`aclone` for an independent copy.
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, value: Any = None):
        self._type: VarType
        self._value: Any
        if isinstance(value, Variant):
            self._type, self._value = value._type, value._value
        elif value is None:
            self._type, self._value = VarType.NULL, None
        elif isinstance(value, bool):
            self._type, self._value = VarType.BOOL, value
        elif isinstance(value, int):
            if not LARGE_MIN <= value <= LARGE_MAX:
                raise VariantError(f"Value out of range: {value}")
            self._type, self._value = VarType.INT, value
        elif isinstance(value, float):
            self._type, self._value = VarType.FLOAT, value
        elif isinstance(value, str):
            self._type, self._value = VarType.STRING, value
        elif isinstance(value, _VArray):
            self._type, self._value = VarType.ARRAY, value
        else:
            self._type, self._value = VarType.OBJECT, value

    @property
    def type(self) -> VarType:
        return self._type

    def __repr__(self) -> str:
        if self._type is VarType.ARRAY:
            return f"Variant(<array of {len(self)}>)"
        return f"Variant({self._value!r})"

    # conversions

    def _to_large(self) -> int:
        t = self._type
        if t is VarType.INT:
            return self._value
        if t is VarType.BOOL:
            return int(self._value)
        if t is VarType.FLOAT:
            if not math.isfinite(self._value):
                raise VariantError(f"Value out of range: {self._value}")
            return int(self._value)
        if t is VarType.STRING:
            text = self._value
            neg = text.startswith("-")
            n = stringtoi(text[1:] if neg else text)
            if n < 0:
                return 0
            return -n if neg else n
        if t is VarType.ARRAY:
            return int(bool(self._value.items))
        return 0

    def to_int(self) -> int:
        """Integer value; raises VariantError outside the 32-bit signed range."""
        n = self._to_large()
        if not _INT_MIN <= n <= _INT_MAX:
            raise VariantError("Value out of range: " + itostring(n))
        return n

    def __int__(self) -> int:
        return self.to_int()

    def to_float(self) -> float:
        """Floating-point value; strings that are not whole numbers give 0.0."""
        t = self._type
        if t is VarType.INT:
            return float(self._value)
        if t is VarType.BOOL:
            return float(int(self._value))
        if t is VarType.FLOAT:
            return self._value
        if t is VarType.STRING:
            return _parse_float(self._value)
        if t is VarType.ARRAY:
            return float(bool(self._value.items))
        return 0.0

    def __float__(self) -> float:
        return self.to_float()

    def as_object(self) -> Any:
        """The held object, or None if this is not an object variant."""
        return self._value if self._type is VarType.OBJECT else None

    def __bool__(self) -> bool:
        t = self._type
        if t is VarType.NULL:
            return False
        if t is VarType.ARRAY:
            return bool(self._value.items)
        if t is VarType.OBJECT:
            return self._value is not None
        return bool(self._value)

    def __str__(self) -> str:
        t = self._type
        if t is VarType.INT:
            return itostring(self._value)
        if t is VarType.BOOL:
            return "1" if self._value else "0"
        if t is VarType.FLOAT:
            return "%g" % self._value
        if t is VarType.STRING:
            return self._value
        return ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Variant):
            other = Variant(other)
        if self._type is not other._type:
            return False
        if self._type in (VarType.ARRAY, VarType.OBJECT):
            return self._value is other._value
        return self._value == other._value

    # arrays

    def _array(self) -> _VArray | None:
        return self._value if self._type is VarType.ARRAY else None

    def __len__(self) -> int:
        arr = self._array()
        return len(arr.items) if arr is not None else 0

    def __getitem__(self, key: str | int) -> "Variant":
        return self.get(key)

    def clear(self) -> None:
        """Make this variant null."""
        self._type, self._value = VarType.NULL, None

    def aclear(self) -> None:
        """Empty the array (shared with copies), or turn this into an empty array."""
        arr = self._array()
        if arr is not None:
            arr.items.clear()
        else:
            self._type, self._value = VarType.ARRAY, _VArray()

    def aclone(self) -> "Variant":
        """An independent copy of the array, or a new empty array."""
        arr = self._array()
        return Variant(arr.copy() if arr is not None else _VArray())

    def get(self, key: str | int) -> "Variant":
        """Item stored under ``key``, or a null variant."""
        arr = self._array()
        if arr is not None:
            found = arr.get(_keystr(key))
            if found is not None:
                return Variant(found)
        return Variant()

    def put(self, key: str | int, item: Any) -> None:
        """Store ``item`` under ``key``; a null item removes the key."""
        if self._array() is None:
            self.aclear()
        self._value.put(_keystr(key), Variant(item))

    def remove(self, key: str | int) -> None:
        """Remove the item stored under ``key``, if any."""
        arr = self._array()
        if arr is not None:
            arr.put(_keystr(key), Variant())

    def items(self) -> Iterator[tuple[str, "Variant"]]:
        """Iterate over (key, item) pairs in array order."""
        arr = self._array()
        if arr is None:
            return
        index = 0
        while index < len(arr.items):
            entry = arr.items[index]
            yield entry.key, Variant(entry.var)
            index += 1

    def aadd(self, item: Any) -> int:
        """Add an unkeyed item and return its index."""
        if self._array() is None:
            self.aclear()
        return self._value.addvar(Variant(item))

    def aget(self, index: int) -> "Variant":
        """Item at ``index``, or a null variant."""
        arr = self._array()
        if arr is not None and arr.valid(index):
            return Variant(arr.items[index].var)
        return Variant()

    def adel(self, index: int) -> None:
        """Delete the item at ``index`` if it exists."""
        arr = self._array()
        if arr is not None and arr.valid(index):
            del arr.items[index]

    def aput(self, index: int, item: Any) -> None:
        """Replace the item at ``index`` if it exists."""
        arr = self._array()
        if arr is not None and arr.valid(index):
            arr.items[index].var = Variant(item)

    def ains(self, index: int, item: Any) -> None:
        """Insert an unkeyed item before an existing ``index``."""
        arr = self._array()
        if arr is not None and arr.valid(index):
            arr.items.insert(index, _VarItem("", Variant(item)))