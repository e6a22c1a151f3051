"""Millisecond date/time values counted from 0001-01-01 00:00:00."""

from __future__ import annotations

import time

__all__ = [
    "MSECS_PER_DAY",
    "DATETIME_MAX",
    "INVALID_DATETIME",
    "UNIX_EPOCH",
    "mkdt",
    "days",
    "msecs",
    "isvalid",
    "isleapyear",
    "daysinmonth",
    "daysinyear",
    "dayofweek",
    "isdatevalid",
    "encodedate",
    "decodedate",
    "istimevalid",
    "encodetime",
    "decodetime",
    "to_struct_time",
    "dttostring",
    "now",
    "tzoffset",
    "utodatetime",
]

MSECS_PER_DAY = 86_400_000
_DAYS_MAX = 3_652_059  # 0001-01-01 .. 9999-12-31
DATETIME_MAX = _DAYS_MAX * MSECS_PER_DAY
INVALID_DATETIME = -1
_EPOCH_DAYS = 719_162
UNIX_EPOCH = _EPOCH_DAYS * MSECS_PER_DAY
_STRFTIME_LIMIT = 128

_MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
_CUMULATIVE_DAYS = (31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334, 365)


def mkdt(days: int, msecs: int) -> int:
    """Build a datetime from a day count and milliseconds since midnight."""
    return days * MSECS_PER_DAY + msecs


def days(dt: int) -> int:
    """Whole days in ``dt``, truncated toward zero."""
    q = abs(dt) // MSECS_PER_DAY
    return -q if dt < 0 else q


def msecs(dt: int) -> int:
    """Milliseconds past the day boundary, with the sign of ``dt``."""
    return dt - days(dt) * MSECS_PER_DAY


def isvalid(dt: int) -> bool:
    return 0 <= dt < DATETIME_MAX


def isleapyear(year: int) -> bool:
    return year > 0 and year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def daysinmonth(year: int, month: int) -> int:
    """Days in the month, or 0 for a month outside 1..12."""
    if not 1 <= month <= 12:
        return 0
    res = _MONTH_DAYS[month - 1]
    if month == 2 and isleapyear(year):
        res += 1
    return res


def daysinyear(year: int, month: int) -> int:
    """Days from the start of the year to the end of ``month``; 0 if out of range."""
    if not 1 <= month <= 12:
        return 0
    res = _CUMULATIVE_DAYS[month - 1]
    if month > 1 and isleapyear(year):
        res += 1
    return res


def dayofweek(dt: int) -> int:
    """Day of the week, 0 being Sunday."""
    return (days(dt) + 1) % 7


def isdatevalid(year: int, month: int, day: int) -> bool:
    return (
        1 <= year <= 9999
        and 1 <= month <= 12
        and 1 <= day <= daysinmonth(year, month)
    )


def encodedate(year: int, month: int, day: int) -> int:
    """Datetime of midnight on the date, or INVALID_DATETIME."""
    if not isdatevalid(year, month, day):
        return INVALID_DATETIME
    y = year - 1
    return mkdt(
        day + daysinyear(year, month - 1) + y * 365 + y // 4 - y // 100 + y // 400 - 1,
        0,
    )


def decodedate(dt: int) -> tuple[int, int, int]:
    """Return (year, month, day); raise ValueError outside 0001..9999."""
    d = days(dt)
    if d < 0 or d >= _DAYS_MAX:
        raise ValueError(f"Date out of range: {dt}")

    d1 = 365
    d4 = d1 * 4 + 1
    d100 = d4 * 25 - 1
    d400 = d100 * 4 + 1

    year = (d // d400) * 400 + 1
    d %= d400

    t, d = divmod(d, d100)
    if t == 4:
        t -= 1
        d += d100
    year += t * 100

    year += (d // d4) * 4
    d %= d4

    t, d = divmod(d, d1)
    if t == 4:
        t -= 1
        d += d1
    year += t

    month = d // 29
    if d < daysinyear(year, month):
        month -= 1
    day = d - daysinyear(year, month) + 1
    return year, month + 1, day


def istimevalid(hour: int, minute: int, sec: int, msec: int = 0) -> bool:
    return 0 <= hour < 24 and 0 <= minute < 60 and 0 <= sec < 60 and 0 <= msec < 1000


def encodetime(hour: int, minute: int, sec: int, msec: int = 0) -> int:
    """Milliseconds for a time span, or INVALID_DATETIME if out of range."""
    res = hour * 3_600_000 + minute * 60_000 + sec * 1000 + msec
    return res if isvalid(res) else INVALID_DATETIME


def decodetime(dt: int) -> tuple[int, int, int, int]:
    """Return (hour, minute, second, millisecond); raise ValueError if invalid."""
    if not isvalid(dt):
        raise ValueError(f"Time out of range: {dt}")
    m = msecs(dt)
    hour, m = divmod(m, 3_600_000)
    minute, m = divmod(m, 60_000)
    sec, msec = divmod(m, 1000)
    return hour, minute, sec, msec


def to_struct_time(dt: int) -> time.struct_time:
    """Convert a datetime to a ``time.struct_time`` for strftime."""
    year, month, day = decodedate(dt)
    hour, minute, sec, _ = decodetime(dt)
    yday = daysinyear(year, month - 1) + day
    wday = (dayofweek(dt) + 6) % 7  # struct_time counts from Monday
    return time.struct_time((year, month, day, hour, minute, sec, wday, yday, 0))


def dttostring(dt: int, fmt: str) -> str:
    """Format ``dt`` with strftime; overlong results come back empty."""
    text = time.strftime(fmt, to_struct_time(dt))
    if len(text.encode("utf-8")) >= _STRFTIME_LIMIT:
        return ""
    return text


def now(utc: bool = True) -> int:
    """The current time, in UTC or in local time."""
    total_ms = time.time_ns() // 1_000_000
    secs, ms = divmod(total_ms, 1000)
    edays, esecs = divmod(secs, 86400)
    res = mkdt(edays + _EPOCH_DAYS, esecs * 1000 + ms)
    if not utc:
        res += tzoffset() * 60 * 1000
    return res


def tzoffset() -> int:
    """Local time zone offset from UTC in minutes, east positive."""
    gmtoff = time.localtime().tm_gmtoff or 0
    return int(gmtoff / 60)


def utodatetime(u: int) -> int:
    """Convert Unix time in seconds to a datetime."""
    return UNIX_EPOCH + u * 1000