"""Buffered output streams: files, memory, null sink and filters."""

from __future__ import annotations

import enum
import os
import threading
from typing import Any

from ptlib.formatting import format_putf

__all__ = [
    "DEFAULT_BUFSIZE",
    "StreamError",
    "SeekMode",
    "OutStream",
    "OutFile",
    "OutMemory",
    "OutNull",
    "LogFile",
    "OutFilter",
]

DEFAULT_BUFSIZE = 8192


class StreamError(Exception):
    """Raised when a stream operation fails."""

    def __init__(self, message: str, code: int = 0):
        super().__init__(message)
        self.message = message
        self.code = code


class SeekMode(enum.IntEnum):
    BEGIN = 0
    CURRENT = 1
    END = 2


_WHENCE = {SeekMode.BEGIN: os.SEEK_SET, SeekMode.CURRENT: os.SEEK_CUR, SeekMode.END: os.SEEK_END}


def _to_bytes(data: Any) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"Cannot write {type(data).__name__} to a stream")


class OutStream:
    """An output stream with an optional write buffer.

    Subclasses provide the destination by overriding ``_dorawwrite`` and,
    where it applies, ``_doopen``, ``_doclose`` and ``_doseek``.
    """

    def __init__(self, bufsize: int = DEFAULT_BUFSIZE, flusheol: bool = False):
        self.bufsize = bufsize
        self.flusheol = flusheol
        self._active = False
        self._eof = False
        self._failed = False
        self._abspos = 0
        self._buf: bytearray | None = None
        self._bufpos = 0
        self._bufend = 0

    # state

    @property
    def active(self) -> bool:
        return self._active

    @property
    def eof(self) -> bool:
        """True once a write could not store everything it was given."""
        return self._eof

    @property
    def name(self) -> str:
        return "stream"

    def _errname(self) -> str:
        return self.name

    def _error(self, message: str, code: int = 0) -> StreamError:
        self._failed = True
        return StreamError(f"{message}: {self._errname()}", code)

    def _require_active(self) -> None:
        if not self._active:
            raise StreamError(f"Stream inactive: {self._errname()}")

    # hooks

    def _doopen(self) -> None:
        pass

    def _doclose(self) -> None:
        pass

    def _doseek(self, pos: int, mode: SeekMode) -> int:
        return -1

    def _dorawwrite(self, data: bytes) -> int:
        return 0

    # opening and closing

    def open(self) -> None:
        """Open the stream, closing it first if it is already open."""
        self.close()
        self._failed = False
        self._eof = False
        self._abspos = 0
        self._buf = bytearray(self.bufsize) if self.bufsize > 0 else None
        self._bufpos = self._bufend = 0
        self._doopen()
        self._active = True

    def close(self) -> None:
        """Flush pending data and close the stream."""
        if not self._active:
            return
        try:
            self.flush()
        finally:
            try:
                self._doclose()
            finally:
                self._active = False
                self._buf = None
                self._bufpos = self._bufend = 0

    def __enter__(self) -> "OutStream":
        if not self._active:
            self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # writing

    def _rawwrite(self, data: bytes) -> int:
        self._require_active()
        try:
            ret = self._dorawwrite(data)
        except StreamError:
            self._eof = True
            raise
        if ret < 0:
            ret = 0
        else:
            self._abspos += ret
        if ret < len(data):
            self._eof = True
        return ret

    def _bufvalidate(self) -> None:
        self._require_active()
        if self._bufend > 0:
            self._rawwrite(bytes(self._buf[: self._bufend]))
        self._bufpos = self._bufend = 0

    def _advance(self, n: int) -> None:
        self._bufpos += n
        if self._bufpos > self._bufend:
            self._bufend = self._bufpos

    def _canwrite(self) -> bool:
        if self._buf is not None and self._bufpos >= len(self._buf):
            self._bufvalidate()
            return self._bufend < len(self._buf)
        return True

    def _putchar(self, code: int) -> None:
        self._require_active()
        if self._buf is None:
            self._rawwrite(bytes((code,)))
        elif self._canwrite():
            self._buf[self._bufpos] = code
            self._advance(1)
            if code == 10 and self.flusheol:
                self.flush()

    def flush(self) -> None:
        """Write out the buffered data."""
        if self._buf is not None and not self._failed:
            self._bufvalidate()

    def write(self, data: Any) -> int:
        """Write bytes (or text, as UTF-8) and return how many were accepted."""
        payload = _to_bytes(data)
        self._require_active()
        if self._buf is None:
            return self._rawwrite(payload)
        view = memoryview(payload)
        total = 0
        while len(view) > 0 and self._canwrite():
            n = min(len(view), len(self._buf) - self._bufpos)
            self._buf[self._bufpos:self._bufpos + n] = view[:n]
            total += n
            view = view[n:]
            self._advance(n)
        return total

    def put(self, data: Any) -> None:
        """Write a string, bytes or a single character code; None writes nothing."""
        if data is None:
            return
        if isinstance(data, int):
            self._putchar(data & 0xFF)
            return
        payload = _to_bytes(data)
        if len(payload) == 1:
            self._putchar(payload[0])
        else:
            self.write(payload)

    def puteol(self) -> None:
        self._putchar(10)

    def putline(self, data: Any) -> None:
        self.put(data)
        self.puteol()

    def putf(self, fmt: str, *args: Any) -> None:
        """Write ``args`` formatted by ``fmt`` (see ptlib.formatting)."""
        self.write(format_putf(fmt, *args))

    # positioning

    def tell(self) -> int:
        if self._buf is not None:
            return self._abspos + self._bufpos
        return self._abspos

    def seek(self, pos: int, mode: SeekMode | int = SeekMode.BEGIN) -> int:
        """Move the write position; return the new absolute position."""
        self._require_active()
        mode = SeekMode(mode)
        if self._buf is not None and mode is not SeekMode.END:
            target = pos if mode is SeekMode.BEGIN else self.tell() + pos
            rel = target - self._abspos
            if 0 <= rel <= self._bufpos:
                self._bufpos = rel
                self._eof = False
                return self.tell()
        if mode is SeekMode.CURRENT:
            pos, mode = self.tell() + pos, SeekMode.BEGIN
        if self._buf is not None:
            self._bufvalidate()
        newpos = self._doseek(pos, mode)
        if newpos < 0:
            raise StreamError(f"Couldn't seek: {self._errname()}")
        self._abspos = newpos
        self._eof = False
        return newpos


class OutFile(OutStream):
    """Output to a file on disk."""

    def __init__(
        self,
        filename: str | os.PathLike | None = None,
        append: bool = False,
        umode: int = 0o644,
        bufsize: int = DEFAULT_BUFSIZE,
    ):
        super().__init__(bufsize)
        self.filename = filename
        self.append = append
        self.umode = umode
        self._fd: int | None = None

    @property
    def name(self) -> str:
        return os.fspath(self.filename) if self.filename is not None else ""

    def _doopen(self) -> None:
        if not self.filename:
            raise self._error("Couldn't open")
        flags = os.O_WRONLY | os.O_CREAT | getattr(os, "O_BINARY", 0)
        if not self.append:
            flags |= os.O_TRUNC
        try:
            self._fd = os.open(self.filename, flags, self.umode)
        except OSError as exc:
            raise self._error(f"Couldn't open ({exc.strerror})", exc.errno or 0) from exc
        if self.append:
            try:
                self._abspos = os.lseek(self._fd, 0, os.SEEK_END)
            except OSError as exc:
                raise self._error("Couldn't seek to end of file", exc.errno or 0) from exc

    def _doclose(self) -> None:
        if self._fd is not None:
            fd, self._fd = self._fd, None
            os.close(fd)

    def _doseek(self, pos: int, mode: SeekMode) -> int:
        if self._fd is None:
            return -1
        try:
            return os.lseek(self._fd, pos, _WHENCE[mode])
        except OSError:
            return -1

    def _dorawwrite(self, data: bytes) -> int:
        if self._fd is None:
            return -1
        try:
            return os.write(self._fd, data)
        except OSError as exc:
            raise self._error(f"Couldn't write ({exc.strerror})", exc.errno or 0) from exc


class LogFile(OutFile):
    """An unbuffered output file whose putf() is safe to call from threads."""

    def __init__(self, filename: str | os.PathLike | None = None, append: bool = False):
        super().__init__(filename, append, bufsize=0)
        self._lock = threading.Lock()

    def putf(self, fmt: str, *args: Any) -> None:
        with self._lock:
            super().putf(fmt, *args)


class OutMemory(OutStream):
    """Output collected in memory, optionally limited to ``limit`` bytes."""

    def __init__(self, limit: int = -1):
        super().__init__(bufsize=0)
        self.limit = limit
        self._mem = bytearray()

    @property
    def name(self) -> str:
        return "mem"

    @property
    def data(self) -> bytes:
        """Bytes written so far; the stream must be open."""
        self._require_active()
        return bytes(self._mem)

    @property
    def strdata(self) -> str:
        """Text written so far, decoded as UTF-8; the stream must be open."""
        return self.data.decode("utf-8", errors="replace")

    def _doclose(self) -> None:
        self._mem = bytearray()

    def _doseek(self, pos: int, mode: SeekMode) -> int:
        if mode is SeekMode.BEGIN:
            newpos = pos
        elif mode is SeekMode.CURRENT:
            newpos = self._abspos + pos
        else:
            newpos = len(self._mem) + pos
        if self.limit >= 0 and newpos > self.limit:
            newpos = self.limit
        return newpos

    def _dorawwrite(self, data: bytes) -> int:
        count = len(data)
        if count <= 0:
            return 0
        start = self._abspos
        if self.limit >= 0 and start + count > self.limit:
            count = self.limit - start
            if count <= 0:
                return 0
        end = start + count
        if end > len(self._mem):
            self._mem.extend(bytes(end - len(self._mem)))
        self._mem[start:end] = data[:count]
        return count


class OutNull(OutStream):
    """A stream that discards everything written to it."""

    def __init__(self):
        super().__init__()

    @property
    def name(self) -> str:
        return "<null>"

    def _dorawwrite(self, data: bytes) -> int:
        return 0


class OutFilter(OutStream):
    """A buffered stream that passes its output on to another stream.

    Subclasses transform the data by overriding ``_dorawwrite``.
    Closing the filter leaves the target stream open.
    """

    def __init__(self, stm: OutStream | None = None, bufsize: int = DEFAULT_BUFSIZE):
        super().__init__(bufsize)
        self._stm = stm

    @property
    def stm(self) -> OutStream | None:
        return self._stm

    @stm.setter
    def stm(self, value: OutStream | None) -> None:
        self.close()
        self._stm = value

    @property
    def name(self) -> str:
        return "filter"

    def _errname(self) -> str:
        if self._stm is None:
            return self.name
        return f"{self.name}: {self._stm._errname()}"

    def _doopen(self) -> None:
        if self._stm is not None and not self._stm.active:
            self._stm.open()

    def _dorawwrite(self, data: bytes) -> int:
        if self._stm is None:
            return 0
        return self._stm.write(data)