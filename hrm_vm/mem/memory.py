"""
HRM Virtual Machine - Room Floor Memory

The floor is a fixed row of tiles, indexed from zero. Its size and any
pre-filled tiles come from the room; every other tile starts EMPTY. The
floor never grows or shrinks during a run.

Two address checks are shared by every tile-touching instruction:

  direct    operand must be a NUMBER (or MEM_ADDR) with 0 <= n < size
  indirect  the operand names a pointer tile, checked the same way; the
            value sitting on that tile is then checked as an address.
            One hop only.

Both stages of an indirect access report the INDIRECT fault kinds, and
the second stage is never reached when the first one fails.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Tuple

from ..cpu.values import EMPTY, Value
from ..errors import FaultKind, HRMFault


def _check_tile(index: int, value: Value) -> Value:
    if not isinstance(value, Value):
        raise ValueError(f"Tile {index} must hold a Value, got {value!r}")
    if not (value.is_empty or value.is_number or value.is_char):
        raise ValueError(f"Tile {index} cannot hold {value.kind.name}")
    return value


class Memory:
    """Room floor: `size` tiles of Value."""

    def __init__(self, size: int, initial: Optional[Mapping[int, Value]] = None):
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise ValueError(f"Floor size must be a non-negative int, got {size!r}")
        self._size = size
        self._initial: Dict[int, Value] = {}
        for index, value in (initial or {}).items():
            if not 0 <= index < size:
                raise ValueError(f"Initial tile {index} outside floor of {size} tiles")
            self._initial[index] = _check_tile(index, value)
        self._tiles: List[Value] = []
        self.reset()

    # --- Core read/write ---

    def __len__(self) -> int:
        return self._size

    @property
    def size(self) -> int:
        return self._size

    def read(self, addr: int) -> Value:
        return self._tiles[addr]

    def write(self, addr: int, value: Value):
        self._tiles[addr] = value

    def __getitem__(self, addr: int) -> Value:
        return self._tiles[addr]

    # --- Address validation ---

    def _in_range(self, n: int) -> bool:
        return 0 <= n < self._size

    def resolve_direct(self, operand: Optional[Value]) -> int:
        """Validate a direct address operand, return the tile index."""
        if operand is None or not operand.is_address:
            kind = operand.kind.name if operand is not None else "no operand"
            raise HRMFault(FaultKind.INVALID_TYPE_FOR_DIRECT_ADDR, kind)
        if not self._in_range(operand.payload):
            raise HRMFault(FaultKind.DIRECT_ADDR_OUT_OF_RANGE,
                           f"address {operand.payload}, floor has {self._size} tiles")
        return operand.payload

    def resolve_indirect(self, operand: Optional[Value]) -> int:
        """Follow a pointer tile, return the index it points at."""
        if operand is None or not operand.is_address:
            kind = operand.kind.name if operand is not None else "no operand"
            raise HRMFault(FaultKind.INVALID_TYPE_FOR_INDIRECT_ADDR, f"pointer operand is {kind}")
        if not self._in_range(operand.payload):
            raise HRMFault(FaultKind.INDIRECT_ADDR_OUT_OF_RANGE,
                           f"pointer tile {operand.payload}, floor has {self._size} tiles")

        pointer = self._tiles[operand.payload]
        if not pointer.is_address:
            raise HRMFault(FaultKind.INVALID_TYPE_FOR_INDIRECT_ADDR,
                           f"tile {operand.payload} holds {pointer.kind.name}")
        if not self._in_range(pointer.payload):
            raise HRMFault(FaultKind.INDIRECT_ADDR_OUT_OF_RANGE,
                           f"tile {operand.payload} points at {pointer.payload}, "
                           f"floor has {self._size} tiles")
        return pointer.payload

    def resolve(self, operand: Optional[Value], indirect: bool) -> int:
        if indirect:
            return self.resolve_indirect(operand)
        return self.resolve_direct(operand)

    # --- Room setup ---

    def reset(self):
        """Restore the room's initial floor."""
        self._tiles = [self._initial.get(i, EMPTY) for i in range(self._size)]

    def load(self, values: Mapping[int, Value]):
        """Place values on tiles, bypassing instruction checks.

        Every entry is checked before any tile changes.
        """
        checked = {}
        for index, value in values.items():
            if not self._in_range(index):
                raise ValueError(f"Tile {index} outside floor of {self._size} tiles")
            checked[index] = _check_tile(index, value)
        for index, value in checked.items():
            self._tiles[index] = value

    # --- Snapshots ---

    def snapshot(self) -> Tuple[Value, ...]:
        return tuple(self._tiles)

    def diff_snapshots(self, snap_a: Tuple[Value, ...],
                       snap_b: Tuple[Value, ...]) -> Dict[int, Tuple[Value, Value]]:
        """Compare two floor snapshots, return {index: (old, new)}."""
        return {
            i: (a, b) for i, (a, b) in enumerate(zip(snap_a, snap_b)) if a != b
        }

    # --- Dump ---

    def dump(self, per_row: int = 8) -> str:
        """Render the floor as rows of `index:value` cells."""
        if not self._size:
            return "(no floor)"
        lines = []
        for start in range(0, self._size, per_row):
            cells = '  '.join(
                f"{i:>2d}:{str(self._tiles[i]):>4s}"
                for i in range(start, min(start + per_row, self._size))
            )
            lines.append(cells)
        return '\n'.join(lines)
