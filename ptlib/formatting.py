"""printf-style formatting with extra conversions for addresses and dates.

Besides the usual ``%d %i %o %u %x %X %c %s %p %e %E %f %g %G`` conversions
(with the ``h``, ``l``, ``ll`` and ``L`` size prefixes), three more are known:

* ``%a`` formats an IPv4 address as dotted quad;
* ``%t`` formats a datetime value as ``SHORT_TIME_FORMAT``;
* ``%T`` formats a datetime value as ``LONG_TIME_FORMAT``.

An unknown conversion ends the output at that point.
"""

from __future__ import annotations

import enum
import ipaddress
import operator
import re
import time
from typing import Any

from ptlib.datetimes import to_struct_time

__all__ = ["FormatError", "SHORT_TIME_FORMAT", "LONG_TIME_FORMAT", "format_putf"]

SHORT_TIME_FORMAT = "%d-%b-%Y %X"
LONG_TIME_FORMAT = "%a %b %d %X %Y"

_OPTION_CHARS = frozenset(" #+-0123456789.")
_MAX_OPTIONS = 122
_OPTIONS_RE = re.compile(r"([ #+\-0]*)(\d*)(?:\.(\d*))?\Z")
_INT_CONVERSIONS = frozenset("diouxX")
_UNSIGNED_CONVERSIONS = frozenset("ouxX")
_FLOAT_CONVERSIONS = frozenset("eEfgG")
_MISSING = object()


class FormatError(ValueError):
    """Raised when a format string and its arguments do not fit together."""


class _Kind(enum.Enum):
    CHAR = enum.auto()
    SHORT = enum.auto()
    INT = enum.auto()
    LONG = enum.auto()
    LARGE = enum.auto()
    STR = enum.auto()
    PTR = enum.auto()
    DOUBLE = enum.auto()
    LONG_DOUBLE = enum.auto()
    IPADDR = enum.auto()
    TIME = enum.auto()
    LONGTIME = enum.auto()


_INT_BITS = {_Kind.SHORT: 16, _Kind.INT: 32, _Kind.LONG: 64, _Kind.LARGE: 64}
_SIMPLE_KINDS = {
    "s": _Kind.STR,
    "p": _Kind.PTR,
    "a": _Kind.IPADDR,
    "t": _Kind.TIME,
    "T": _Kind.LONGTIME,
}


def _split_options(opts: str) -> tuple[str, str, str | None]:
    match = _OPTIONS_RE.match(opts)
    if match is None:
        raise FormatError(f"Invalid conversion options: '{opts}'")
    return match.group(1), match.group(2), match.group(3)


def _apply(spec: str, value: Any) -> str:
    try:
        return spec % value
    except (TypeError, ValueError, OverflowError) as exc:
        raise FormatError(f"Cannot format {value!r} with '{spec}'") from exc


def _as_int(value: Any) -> int:
    try:
        return operator.index(value)
    except TypeError as exc:
        raise FormatError(f"Integer expected, got {value!r}") from exc


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise FormatError(f"Number expected, got {value!r}") from exc


def _as_char(value: Any) -> str:
    if isinstance(value, str) and len(value) == 1:
        return value
    if isinstance(value, (bytes, bytearray)) and len(value) == 1:
        return chr(value[0])
    return chr(_as_int(value) % 256)


def _format_int(kind: _Kind, conv: str, opts: str, value: Any) -> str:
    bits = _INT_BITS[kind]
    mask = (1 << bits) - 1
    v = _as_int(value) & mask
    flags, width, prec = _split_options(opts)
    if conv in _UNSIGNED_CONVERSIONS:
        flags = flags.replace("+", "").replace(" ", "")
    elif v >= 1 << (bits - 1):
        v -= 1 << bits
    precision = None if prec is None else int(prec or 0)
    if precision is not None:
        flags = flags.replace("0", "")
    if conv in "xX" and v == 0:
        flags = flags.replace("#", "")
    if conv == "o" and "#" in flags:
        # the alternate octal form only guarantees a leading zero
        flags = flags.replace("#", "")
        digits = "%o" % v
        needed = len(digits) if digits.startswith("0") else len(digits) + 1
        precision = max(precision or 0, needed)
    spec = "%" + flags + width
    if precision is not None:
        spec += "." + str(precision)
    return _apply(spec + conv, v)


def _ip_octets(value: Any) -> tuple[int, ...]:
    if isinstance(value, ipaddress.IPv4Address):
        return tuple(value.packed)
    if isinstance(value, str):
        try:
            return tuple(ipaddress.IPv4Address(value).packed)
        except ValueError as exc:
            raise FormatError(f"Invalid IP address: '{value}'") from exc
    if isinstance(value, (bytes, bytearray, tuple, list)):
        if len(value) != 4:
            raise FormatError(f"Invalid IP address: {value!r}")
        return tuple(_as_int(octet) & 0xFF for octet in value)
    return tuple((_as_int(value) & 0xFFFFFFFF).to_bytes(4, "big"))


def _format_time(fmt: str, value: Any) -> str:
    dt = max(_as_int(value), 0)
    try:
        moment = to_struct_time(dt)
    except ValueError as exc:
        raise FormatError(f"Date out of range: {dt}") from exc
    return time.strftime(fmt, moment)


def _render(kind: _Kind, conv: str, opts: str, value: Any) -> str:
    if kind is _Kind.CHAR:
        ch = _as_char(value)
        return _apply("%" + opts + "c", ch) if opts else ch
    if kind in _INT_BITS:
        return _format_int(kind, conv, opts, value)
    if kind is _Kind.STR:
        if not opts:
            return "" if value is None else str(value)
        return _apply("%" + opts + "s", "(null)" if value is None else str(value))
    if kind is _Kind.PTR:
        address = 0 if value is None else _as_int(value)
        text = "(nil)" if address == 0 else "0x%x" % (address & 0xFFFFFFFFFFFFFFFF)
        flags, width, _ = _split_options(opts)
        return ("%" + ("-" if "-" in flags else "") + width + "s") % text
    if kind in (_Kind.DOUBLE, _Kind.LONG_DOUBLE):
        return _apply("%" + opts + conv, _as_float(value))
    if kind is _Kind.IPADDR:
        return "%d.%d.%d.%d" % _ip_octets(value)
    if kind is _Kind.TIME:
        return _format_time(SHORT_TIME_FORMAT, value)
    return _format_time(LONG_TIME_FORMAT, value)


def format_putf(fmt: str, *args: Any) -> str:
    """Format ``args`` according to ``fmt`` and return the text."""
    out: list[str] = []
    argv = iter(args)
    n = len(fmt)
    i = 0
    while i < n:
        e = fmt.find("%", i)
        if e < 0:
            out.append(fmt[i:])
            break
        out.append(fmt[i:e])
        e += 1
        if e < n and fmt[e] == "%":
            out.append("%")
            i = e + 1
            continue

        start = e
        while e < n and fmt[e] in _OPTION_CHARS and e - start < _MAX_OPTIONS:
            e += 1
        opts = fmt[start:e]

        kind: _Kind | None = None
        prefix = fmt[e] if e < n else ""
        if prefix == "h":
            kind = _Kind.SHORT
            e += 1
        elif prefix == "L":
            kind = _Kind.LONG_DOUBLE
            e += 1
        elif prefix == "l":
            e += 1
            if e < n and fmt[e] == "l":
                e += 1
                kind = _Kind.LARGE
            else:
                kind = _Kind.LONG

        conv = fmt[e] if e < n else ""
        if conv == "c":
            kind = _Kind.CHAR
        elif conv in _INT_CONVERSIONS:
            if kind not in _INT_BITS:
                kind = _Kind.INT
        elif conv in _FLOAT_CONVERSIONS:
            if kind is not _Kind.LONG_DOUBLE:
                kind = _Kind.DOUBLE
        elif conv in _SIMPLE_KINDS:
            kind = _SIMPLE_KINDS[conv]
        else:
            break
        e += 1

        value = next(argv, _MISSING)
        if value is _MISSING:
            raise FormatError("Not enough arguments for format string")
        out.append(_render(kind, conv, opts, value))
        i = e
    return "".join(out)