"""
HRM Virtual Machine - Outbox (output queue)

Values are appended in emission order and stay put after the run so the
caller can inspect them. An optional listener is called with each value
as it is produced, which is how the interactive host echoes output
while the program is still running.
"""

from __future__ import annotations

from typing import Callable, Iterator, List, Optional

from ..cpu.values import Value


class Outbox:

    def __init__(self, listener: Optional[Callable[[Value], None]] = None):
        self._values: List[Value] = []
        self.listener = listener

    def append(self, value: Value):
        self._values.append(value)
        if self.listener is not None:
            self.listener(value)

    @property
    def values(self) -> List[Value]:
        return list(self._values)

    def payloads(self) -> list:
        """Plain Python payloads (ints and one-letter strs)."""
        return [v.payload for v in self._values]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Value]:
        return iter(self._values)

    def reset(self):
        self._values.clear()
