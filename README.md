# ptlib

A small library of portable utility types, using only the standard library.

## Modules

- **`ptlib.strings`**: integer and string conversion, with helpers for padding and editing text.
  - `itostring` formats an integer in any base from 2 to 64. Bases above 36 use the digits `./0-9A-Za-z`. You can set a width and a pad character.
  - `stringtoi` parses a non-negative decimal number. It returns `-1` for invalid input.
  - `stringtoue` parses an unsigned number in a given base and `stringtoie` parses a signed decimal number. Both raise `ConversionError` on bad input and when the value does not fit in 64 bits.
  - `pad` and `fill` pad text or build a run of one character.
  - `substr`, `insert`, `delete`, `pos`, `rpos`, `contains` and `lowercase` edit and search text. `lowercase` changes ASCII letters only.
  - `nowstring` formats the current time with `strftime`.
- **`ptlib.lists`**: list types.
  - `ObjList` is a list of objects with bounds-checked access. Its operations are `add`, `insert`, `put`, `delete`, `pop`, `top` and `index_of`.
  - `StrList` is a list of key/object pairs. It can be kept sorted, can allow duplicate keys and can compare keys with or without regard to case. These options are set with `StrListFlags`.
  - `TextMap` is a sorted map from text keys to non-empty text values. Putting an empty value removes the key.
  - Misuse raises `ListError`. That covers a bad index, a keyed lookup on an unsorted list, and a duplicate key where duplicates are not allowed.
- **`ptlib.datetimes`**: date/time values held as integer milliseconds counted from 0001-01-01 00:00:00.
  - Build and take apart values with `encodedate`, `decodedate`, `encodetime` and `decodetime`.
  - Calendar helpers are `isleapyear`, `daysinmonth`, `daysinyear` and `dayofweek`.
  - Conversions are `dttostring`, `to_struct_time`, `now`, `tzoffset` and `utodatetime`.
  - `encodedate` and `encodetime` return `INVALID_DATETIME` for out-of-range input. `decodedate` and `decodetime` raise `ValueError`.
- **`ptlib.variant`**: `Variant`, a value of kind null, integer, boolean, float, string, array or object (see `VarType`).
  - It converts between kinds with `to_int`, `to_float`, `str()` and `bool()`.
  - As an associative array it offers `put`, `get`, `remove` and `items`, plus positional `aadd`, `aget`, `adel`, `aput` and `ains`.
  - Arrays are shared between copies of a variant. `aclone` makes an independent copy.
  - Out-of-range conversions raise `VariantError`.
- **`ptlib.formatting`**: `format_putf`, printf-style formatting with three extra conversions.
  - `%a` formats an IPv4 address.
  - `%t` and `%T` format a date/time value in a short and a long form.
  - An unknown conversion ends the output. Missing or unsuitable arguments raise `FormatError`.
- **`ptlib.streams`**: output streams built on a buffered `OutStream`.
  - The methods are `open`, `close`, `put`, `putline`, `puteol`, `write`, `putf`, `flush`, `seek` and `tell`. An `OutStream` can also be used as a context manager.
  - `OutFile` writes to a file on disk. It supports append mode and a creation mode.
  - `OutMemory` collects output in memory, optionally up to a limit. Read it back with `data` or `strdata`.
  - `OutNull` discards everything.
  - `LogFile` is an unbuffered `OutFile` whose `putf` is safe to call from several threads.
  - `OutFilter` passes its output on to another stream.
  - Failures raise `StreamError`.
- **`ptlib.sync`**: thread synchronisation.
  - `RWLock` offers `rdlock`, `wrlock` and `unlock`, and the context managers `reading()` and `writing()`.
  - `Semaphore` is a counting semaphore. `TimedSemaphore` has a `wait` with a timeout in milliseconds.
  - `Trigger` is an event, with auto-reset or manual reset.
  - `Thread` is a base class: override `execute` and `cleanup`. It also has `start`, `signal`, `relax` and `waitfor`.
  - Misuse raises `SyncError`.

## Install

```
pip install .
```

## Examples

```python
from ptlib.strings import itostring, stringtoie
from ptlib.lists import StrList, StrListFlags, TextMap
from ptlib.datetimes import encodedate, encodetime, dttostring
from ptlib.streams import OutMemory

itostring(-123, 10, 7, "0")          # '-000123'
stringtoie("-9223372036854775808")   # -9223372036854775808

names = StrList(StrListFlags.SORTED | StrListFlags.CASESENS)
names.add("ten", 10)
names.add("five", 5)
names.index_of("ten")                # 1

settings = TextMap()
settings.put("name1", "value1")
settings["name1"]                    # 'value1'

dt = encodedate(2000, 3, 30) + encodetime(13, 24, 58, 995)
dttostring(dt, "%Y-%m-%d %H:%M:%S")  # '2000-03-30 13:24:58'

with OutMemory() as m:
    m.putf("%s, %c, %d, %llx", "string", "A", 1234, -1)
    m.strdata                        # 'string, A, 1234, ffffffffffffffff'
```

## What it does not include

ptlib has output streams only. It does not include:

- input streams or readers;
- sockets or other networking;
- pipes between threads;
- message or job queues;
- digest streams;
- character-set types.

There is no command-line program.

## Running the tests

```
pip install .[test]
pytest
```