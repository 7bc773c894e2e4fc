"""
HRM Virtual Machine - Inbox (input queue)

The inbox is read front to back and never refilled by the program. Its
one operation, get(), returns the next Value or None once the inbox is
exhausted. Exhaustion is how programs normally finish.

Two scheduling policies share that contract:

  BatchInbox        everything is queued before the run; get() never
                    blocks and returns None as soon as the queue is dry.
  InteractiveInbox  values arrive while the program runs (typically from
                    a reader thread); get() blocks until a value is put
                    or close() is called, after which it behaves as
                    exhausted.

The emulator does not care which one it is given.
"""

from __future__ import annotations

import queue
import threading
from collections import deque
from typing import Iterable, Optional

from ..cpu.values import Value


def _check_item(value: Value) -> Value:
    if not isinstance(value, Value) or not (value.is_number or value.is_char):
        raise ValueError(f"Inbox items must be NUMBER or CHAR values, got {value!r}")
    return value


class BatchInbox:
    """Pre-filled, non-blocking inbox."""

    def __init__(self, values: Iterable[Value] = ()):
        self._queue: deque = deque()
        self._consumed = 0
        self.inject(values)

    def inject(self, values: Iterable[Value]):
        """Queue more values before (or between) runs."""
        for value in values:
            self._queue.append(_check_item(value))

    def get(self) -> Optional[Value]:
        if not self._queue:
            return None
        self._consumed += 1
        return self._queue.popleft()

    @property
    def consumed(self) -> int:
        return self._consumed

    def __len__(self) -> int:
        return len(self._queue)

    def remaining(self) -> list:
        return list(self._queue)


class InteractiveInbox:
    """Blocking inbox fed from another thread.

    Usage:
        inbox = InteractiveInbox()
        threading.Thread(target=feed, args=(inbox,)).start()
        emu.run()           # INBOX waits on feed()
        ...
        inbox.put(Value.number(3))
        inbox.close()       # next INBOX with nothing queued ends the run
    """

    _CLOSED = object()

    def __init__(self):
        self._queue: queue.Queue = queue.Queue()
        self._closed = threading.Event()
        self._drained = False
        self._consumed = 0

    def put(self, value: Value):
        if self._closed.is_set():
            raise RuntimeError("Inbox is closed")
        self._queue.put(_check_item(value))

    def close(self):
        """Signal end of input. Values already queued are still delivered."""
        if not self._closed.is_set():
            self._closed.set()
            self._queue.put(self._CLOSED)

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def get(self) -> Optional[Value]:
        if self._drained:
            return None
        item = self._queue.get()
        if item is self._CLOSED:
            self._drained = True
            return None
        self._consumed += 1
        return item

    @property
    def consumed(self) -> int:
        return self._consumed
