"""String conversion and manipulation helpers."""

from __future__ import annotations

import time

__all__ = [
    "ConversionError",
    "LARGE_MAX",
    "LARGE_MIN",
    "ULARGE_MAX",
    "itostring",
    "stringtoi",
    "stringtoue",
    "stringtoie",
    "lowercase",
    "fill",
    "pad",
    "substr",
    "insert",
    "delete",
    "pos",
    "rpos",
    "contains",
    "nowstring",
]

LARGE_MAX = 2**63 - 1
LARGE_MIN = -(2**63)
ULARGE_MAX = 2**64 - 1

_INT_MAX = 2**31 - 1
_DIGITS = "./0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
_LOWER_TABLE = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)
_STRFTIME_LIMIT = 128


class ConversionError(ValueError):
    """Raised when a string cannot be converted to a number."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def _invalid(s) -> ConversionError:
    return ConversionError(f"Invalid number: '{'' if s is None else s}'")


def _overflow(s) -> ConversionError:
    return ConversionError(f"Out of range: '{s}'")


def _to_base(value: int, base: int, signed: bool) -> str:
    digits = _DIGITS if base > 36 else _DIGITS[2:]
    neg = False
    if signed and base == 10 and value < 0:
        v = -value
        neg = True
    else:
        v = value % (ULARGE_MAX + 1)
    out = []
    while True:
        v, r = divmod(v, base)
        out.append(digits[r])
        if v == 0:
            break
    if neg:
        out.append("-")
    return "".join(reversed(out))


def itostring(
    value: int,
    base: int = 10,
    width: int = 0,
    padchar: str | None = None,
    unsigned: bool = False,
) -> str:
    """Format an integer in a base from 2 to 64, padded to ``width``.

    Bases above 36 use the digit set ``./0-9A-Za-z``. Negative values are
    signed only in base 10; in other bases they are shown as 64-bit
    two's complement. An unsupported base gives an empty string.
    """
    if base < 2 or base > 64:
        return ""
    text = _to_base(value, base, not unsigned)
    if width <= len(text):
        return text
    if not padchar:
        if base == 10:
            padchar = " "
        elif base > 36:
            padchar = "."
        else:
            padchar = "0"
    filler = padchar * (width - len(text))
    if text.startswith("-"):
        return "-" + filler + text[1:]
    return filler + text


def stringtoi(s: str | None) -> int:
    """Parse a non-negative decimal number; return -1 if invalid or too large."""
    if not s:
        return -1
    result = 0
    for ch in s:
        if not "0" <= ch <= "9":
            return -1
        result = result * 10 + (ord(ch) - ord("0"))
        if result > LARGE_MAX:
            return -1
    return result


def stringtoue(s: str | None, base: int = 10) -> int:
    """Parse an unsigned number in a base from 2 to 64.

    Raises ConversionError on an invalid digit, an empty string, an
    unsupported base, or a value that does not fit in 64 bits.
    """
    if s is None or not s or base < 2 or base > 64:
        raise _invalid(s)
    result = 0
    for ch in s:
        c = ord(ch)
        if c >= ord("a"):
            # bases up to 38 ignore letter case, larger ones use both cases
            if base <= 38:
                c -= ord("a") - ord("9") - 1
            else:
                c -= (ord("a") - ord("Z") - 1) + (ord("A") - ord("9") - 1)
        elif c > ord("Z"):
            raise _invalid(s)
        elif c >= ord("A"):
            c -= ord("A") - ord("9") - 1
        elif c > ord("9"):
            raise _invalid(s)
        c -= ord(".") if base > 36 else ord("0")
        if c < 0 or c >= base:
            raise _invalid(s)
        result = result * base
        if result > ULARGE_MAX:
            raise _overflow(s)
        result += c
        if result > ULARGE_MAX:
            raise _overflow(s)
    return result


def stringtoie(s: str | None) -> int:
    """Parse a signed decimal number that fits in 64 bits."""
    if s is None:
        raise _invalid(s)
    neg = s.startswith("-")
    result = stringtoue(s[1:] if neg else s, 10)
    if result > LARGE_MAX + int(neg):
        raise _overflow(s)
    return -result if neg else result


def lowercase(s: str | None) -> str:
    """Convert ASCII capital letters to lower case, leaving others intact."""
    if s is None:
        return ""
    return s.translate(_LOWER_TABLE)


def fill(width: int, pad: str = " ") -> str:
    """Return ``width`` copies of ``pad``, or an empty string."""
    return pad * width if width > 0 else ""


def pad(s: str, width: int, char: str = " ", left: bool = True) -> str:
    """Pad ``s`` with ``char`` to ``width``; ``left`` keeps text on the left."""
    length = len(s)
    if length < width and width > 0:
        filler = char * (width - length)
        return s + filler if left else filler + s
    return s


def substr(s: str, start: int, count: int = _INT_MAX) -> str:
    """Return up to ``count`` characters of ``s`` from ``start``."""
    if s and 0 <= start < len(s):
        n = min(count, len(s) - start)
        if n > 0:
            return s[start:start + n]
    return ""


def insert(sub: str, s: str, at: int) -> str:
    """Return ``s`` with ``sub`` inserted at position ``at`` if it is in range."""
    if sub and 0 <= at <= len(s):
        return s[:at] + sub + s[at:]
    return s


def delete(s: str, start: int, count: int | None = None) -> str:
    """Remove ``count`` characters from ``start``, or everything from ``start``."""
    if count is None:
        if start < 0:
            return s
        return s[:start]
    remaining = len(s) - start
    if start >= 0 and remaining > 0 and count > 0:
        count = min(count, remaining)
        return s[:start] + s[start + count:]
    return s


def pos(sub: str, s: str) -> int:
    """Position of the first occurrence of ``sub`` in ``s``, or -1."""
    return s.find(sub)


def rpos(ch: str, s: str) -> int:
    """Position of the last occurrence of ``ch`` in ``s``, or -1."""
    return s.rfind(ch)


def contains(sub: str, s: str, at: int) -> bool:
    """True if ``s`` holds ``sub`` exactly at position ``at``."""
    return at >= 0 and at + len(sub) <= len(s) and s[at:at + len(sub)] == sub


def nowstring(fmt: str, utc: bool = True) -> str:
    """Format the current time with ``time.strftime``.

    Results that would not fit in 127 bytes come back empty.
    """
    moment = time.gmtime() if utc else time.localtime()
    text = time.strftime(fmt, moment)
    if len(text.encode("utf-8")) >= _STRFTIME_LIMIT:
        return ""
    return text