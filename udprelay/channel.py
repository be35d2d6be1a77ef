#!/usr/bin/env python3
"""Thread-safe multi-producer / multi-consumer handoff queue.

A channel is a single FIFO buffer shared by any number of :class:`Sender` and
:class:`Receiver` handles.  Handles are counted: once every receiver has been
closed, sends fail with :class:`Disconnected`; once every sender has been
closed *and* the buffer is drained, receives fail with :class:`Disconnected`.

    tx, rx = unbounded()
    tx.send(b"hello")
    rx.try_recv()            # ➜ b"hello"
    rx.try_recv()            # raises Empty
"""

from __future__ import annotations
import threading                         # Condition guards buffer + handle counts
import time                              # Deadline arithmetic for recv(timeout)
from collections import deque            # O(1) FIFO buffer
from typing import Deque, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")

__all__ = [
    "ChannelError", "Empty", "Full", "Disconnected",
    "Sender", "Receiver", "bounded", "unbounded",
]


# --- Errors ----------------------------------------------------------------

class ChannelError(Exception):
    """Base class for every condition reported by a channel handle."""


class Empty(ChannelError):
    """No item is available right now (or the receive timed out)."""


class Full(ChannelError):
    """A bounded channel is at capacity; carries the rejected item."""

    def __init__(self, item: object = None) -> None:
        super().__init__("channel is full")
        self.item = item


class Disconnected(ChannelError):
    """The other side of the channel has gone away.

    On the sending side ``item`` holds the message that could not be
    delivered so the caller can recover it.
    """

    def __init__(self, item: object = None) -> None:
        super().__init__("channel is disconnected")
        self.item = item


# --- Shared state ----------------------------------------------------------

class _Channel(Generic[T]):
    """Buffer plus bookkeeping; only ever touched through the handles."""

    def __init__(self, capacity: Optional[int]) -> None:
        self.capacity = capacity
        self.items: Deque[T] = deque()
        self.senders = 0
        self.receivers = 0
        self.lock = threading.Lock()
        self.not_empty = threading.Condition(self.lock)   # Wakes receivers
        self.not_full = threading.Condition(self.lock)    # Wakes bounded senders

    def is_full(self) -> bool:
        return self.capacity is not None and len(self.items) >= self.capacity


class Sender(Generic[T]):
    """Producer handle.  Cheap to :meth:`clone`; call :meth:`close` to drop it."""

    def __init__(self, chan: _Channel[T]) -> None:
        self._chan = chan
        self._closed = False
        with chan.lock:
            chan.senders += 1

    def send(self, item: T) -> None:
        """Enqueue ``item``; only blocks while a *bounded* channel is full."""
        chan = self._chan
        with chan.lock:
            self._check_open(item)
            while chan.receivers and chan.is_full():
                chan.not_full.wait()
            if not chan.receivers:
                raise Disconnected(item)
            chan.items.append(item)
            chan.not_empty.notify()

    def try_send(self, item: T) -> None:
        """Enqueue ``item`` without ever blocking (``Full`` / ``Disconnected``)."""
        chan = self._chan
        with chan.lock:
            self._check_open(item)
            if not chan.receivers:
                raise Disconnected(item)
            if chan.is_full():
                raise Full(item)
            chan.items.append(item)
            chan.not_empty.notify()

    def clone(self) -> "Sender[T]":
        with self._chan.lock:
            self._check_open()
        return Sender(self._chan)

    def close(self) -> None:
        """Drop this handle; the last sender wakes every blocked receiver."""
        chan = self._chan
        with chan.lock:
            if self._closed:
                return
            self._closed = True
            chan.senders -= 1
            if not chan.senders:
                chan.not_empty.notify_all()

    def is_disconnected(self) -> bool:
        with self._chan.lock:
            return not self._chan.receivers

    def __len__(self) -> int:
        with self._chan.lock:
            return len(self._chan.items)

    def _check_open(self, item: object = None) -> None:
        if self._closed:
            raise Disconnected(item)


class Receiver(Generic[T]):
    """Consumer handle.  Cheap to :meth:`clone`; call :meth:`close` to drop it."""

    def __init__(self, chan: _Channel[T]) -> None:
        self._chan = chan
        self._closed = False
        with chan.lock:
            chan.receivers += 1

    def try_recv(self) -> T:
        """Return the oldest item immediately, or raise ``Empty`` / ``Disconnected``."""
        chan = self._chan
        with chan.lock:
            self._check_open()
            if chan.items:
                return self._pop()
            if not chan.senders:
                raise Disconnected()
            raise Empty()

    def recv(self, timeout: Optional[float] = None) -> T:
        """Block the calling thread until an item arrives.

        Raises ``Disconnected`` when no sender is left and the buffer is
        drained, ``Empty`` when ``timeout`` seconds pass without an item.
        """
        chan = self._chan
        deadline = None if timeout is None else time.monotonic() + timeout
        with chan.lock:
            self._check_open()
            while not chan.items:
                if not chan.senders:
                    raise Disconnected()
                if deadline is None:
                    chan.not_empty.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise Empty()
                chan.not_empty.wait(remaining)
            return self._pop()

    def clone(self) -> "Receiver[T]":
        with self._chan.lock:
            self._check_open()
        return Receiver(self._chan)

    def close(self) -> None:
        """Drop this handle; the last receiver makes further sends fail."""
        chan = self._chan
        with chan.lock:
            if self._closed:
                return
            self._closed = True
            chan.receivers -= 1
            if not chan.receivers:
                chan.items.clear()              # Nobody can ever read these
                chan.not_full.notify_all()

    def is_disconnected(self) -> bool:
        with self._chan.lock:
            return not self._chan.senders

    def __len__(self) -> int:
        with self._chan.lock:
            return len(self._chan.items)

    def __iter__(self):
        """Drain whatever is queued right now without blocking."""
        while True:
            try:
                yield self.try_recv()
            except ChannelError:
                return

    # Caller holds the lock.
    def _pop(self) -> T:
        item = self._chan.items.popleft()
        self._chan.not_full.notify()
        return item

    def _check_open(self) -> None:
        if self._closed:
            raise Disconnected()


# --- Constructors ----------------------------------------------------------

def unbounded() -> Tuple[Sender[T], Receiver[T]]:
    """Create a channel with no capacity limit; ``send`` never blocks."""
    chan: _Channel[T] = _Channel(None)
    return Sender(chan), Receiver(chan)


def bounded(capacity: int) -> Tuple[Sender[T], Receiver[T]]:
    """Create a channel holding at most ``capacity`` pending items."""
    if capacity < 1:
        raise ValueError("capacity must be at least 1")
    chan: _Channel[T] = _Channel(capacity)
    return Sender(chan), Receiver(chan)
