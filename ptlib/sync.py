"""Thread synchronisation primitives and a restartable thread wrapper."""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import Iterator

__all__ = [
    "SyncError",
    "RWLock",
    "Semaphore",
    "TimedSemaphore",
    "Trigger",
    "Thread",
]


class SyncError(RuntimeError):
    """Raised when a synchronisation object is used in a way it cannot be."""


class RWLock:
    """A read/write lock: many readers or one writer at a time.

    Waiting readers are let in whenever no writer holds the lock, so a
    steady stream of readers may delay writers.
    """

    def __init__(self):
        self._mutex = threading.Lock()
        self._readcond = threading.Condition(self._mutex)
        self._writecond = threading.Condition(self._mutex)
        self._locks = 0  # > 0: number of readers, -1: a writer
        self._writers = 0
        self._readers = 0

    @property
    def holders(self) -> int:
        """Number of readers holding the lock, -1 for a writer, 0 if free."""
        with self._mutex:
            return self._locks

    def rdlock(self) -> None:
        """Acquire the lock for reading."""
        with self._mutex:
            self._readers += 1
            while self._locks < 0:
                self._readcond.wait()
            self._readers -= 1
            self._locks += 1

    def wrlock(self) -> None:
        """Acquire the lock for writing."""
        with self._mutex:
            self._writers += 1
            while self._locks != 0:
                self._writecond.wait()
            self._locks = -1
            self._writers -= 1

    def unlock(self) -> None:
        """Release a read or write hold on the lock."""
        with self._mutex:
            if self._locks > 0:
                self._locks -= 1
                if self._locks == 0:
                    self._writecond.notify()
            else:
                self._locks = 0
                if self._readers:
                    self._readcond.notify_all()
                else:
                    self._writecond.notify()

    @contextmanager
    def reading(self) -> Iterator["RWLock"]:
        """Hold the lock for reading within a ``with`` block."""
        self.rdlock()
        try:
            yield self
        finally:
            self.unlock()

    @contextmanager
    def writing(self) -> Iterator["RWLock"]:
        """Hold the lock for writing within a ``with`` block."""
        self.wrlock()
        try:
            yield self
        finally:
            self.unlock()


class Semaphore:
    """A counting semaphore."""

    def __init__(self, initvalue: int = 0):
        self._cond = threading.Condition(threading.Lock())
        self._count = initvalue

    @property
    def count(self) -> int:
        with self._cond:
            return self._count

    def wait(self) -> None:
        """Block until the count is positive, then decrement it."""
        with self._cond:
            while self._count <= 0:
                self._cond.wait()
            self._count -= 1

    def post(self) -> None:
        """Increment the count and wake one waiter."""
        with self._cond:
            self._count += 1
            self._cond.notify()


class TimedSemaphore:
    """A counting semaphore whose wait() may give up after a timeout."""

    def __init__(self, initvalue: int = 0):
        self._cond = threading.Condition(threading.Lock())
        self._count = initvalue

    @property
    def count(self) -> int:
        with self._cond:
            return self._count

    def wait(self, timeout: int = -1) -> bool:
        """Wait up to ``timeout`` milliseconds (forever if negative).

        Returns True if the semaphore was taken, False on timeout.
        """
        deadline = time.monotonic() + timeout / 1000 if timeout >= 0 else None
        with self._cond:
            while self._count <= 0:
                if deadline is None:
                    self._cond.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0 or not self._cond.wait(remaining):
                    return False
            self._count -= 1
            return True

    def post(self) -> None:
        """Increment the count and wake one waiter."""
        with self._cond:
            self._count += 1
            self._cond.notify()


class Trigger:
    """An event that waiters block on until it is posted.

    With ``autoreset`` each post releases one waiter and the trigger falls
    back to the non-signalled state; otherwise it releases all waiters and
    stays signalled until reset().
    """

    def __init__(self, autoreset: bool = False, state: bool = False):
        self.autoreset = autoreset
        self._cond = threading.Condition(threading.Lock())
        self._state = bool(state)

    @property
    def state(self) -> bool:
        with self._cond:
            return self._state

    def wait(self) -> None:
        """Block until the trigger is signalled."""
        with self._cond:
            while not self._state:
                self._cond.wait()
            if self.autoreset:
                self._state = False

    def post(self) -> None:
        """Signal the trigger."""
        with self._cond:
            self._state = True
            if self.autoreset:
                self._cond.notify()
            else:
                self._cond.notify_all()

    def reset(self) -> None:
        """Return the trigger to the non-signalled state."""
        with self._cond:
            self._state = False


class Thread:
    """A thread that runs execute() and then cleanup().

    Subclasses override execute(). A thread that is not ``autofree`` must
    be joined with waitfor(); an autofree thread cannot be.
    """

    def __init__(self, autofree: bool = False):
        self.autofree = autofree
        self._flags_lock = threading.Lock()
        self._running = False
        self._signaled = False
        self._finished = False
        self._freed = False
        self._relaxsem = TimedSemaphore(0)
        self._handle: threading.Thread | None = None

    def _exchange(self, attr: str, value: bool) -> bool:
        with self._flags_lock:
            old = getattr(self, attr)
            setattr(self, attr, value)
            return old

    @property
    def running(self) -> bool:
        return self._running

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def signaled(self) -> bool:
        return self._signaled

    def start(self) -> None:
        """Start the thread; later calls do nothing."""
        if self._exchange("_running", True):
            return
        self._handle = threading.Thread(
            target=self._threadproc,
            name=type(self).__name__,
            daemon=self.autofree,
        )
        self._handle.start()

    def _threadproc(self) -> None:
        try:
            self.execute()
        finally:
            self._epilog()

    def _epilog(self) -> None:
        try:
            self.cleanup()
        except Exception:
            pass
        self._exchange("_finished", True)

    def execute(self) -> None:
        """The work of the thread; override it. Does nothing by default."""

    def cleanup(self) -> None:
        """Called after execute() finishes, even if it raised."""

    def signal(self) -> None:
        """Ask the thread to stop; wakes a pending relax() once."""
        if not self._exchange("_signaled", True):
            self._relaxsem.post()

    def relax(self, timeout: int) -> bool:
        """Sleep up to ``timeout`` ms; return True if signal() ended the sleep."""
        return self._relaxsem.wait(timeout)

    def waitfor(self) -> None:
        """Wait for the thread to finish."""
        if self._handle is not None and threading.current_thread() is self._handle:
            raise SyncError("Can not waitfor() on myself")
        if self.autofree:
            raise SyncError("Can not waitfor() on an autofree thread")
        if self._exchange("_freed", True):
            return
        if self._handle is not None:
            self._handle.join()
            self._handle = None