"""
HRM Virtual Machine - Value Model

Every datum that moves through hands, the room floor and the two queues
is a tagged Value:

  EMPTY      no payload (empty hands, empty floor tile)
  NUMBER     signed integer, -999..999 inclusive
  CHAR       uppercase letter 'A'..'Z'
  MEM_ADDR   a number used as an instruction operand naming a floor tile
  PROG_ADDR  one-based line number, only ever a jump target

Values are immutable. Every construction path, the dataclass constructor
included, refuses a mismatched tag/payload pair such as a NUMBER outside
its range or a CHAR outside A-Z, so such a Value is not representable.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union


NUM_MIN = -999
NUM_MAX = 999


class ValueKind(enum.Enum):
    EMPTY = "EMPTY"
    NUMBER = "NUMBER"
    CHAR = "CHAR"
    MEM_ADDR = "MEM_ADDR"
    PROG_ADDR = "PROG_ADDR"


@dataclass(frozen=True)
class Value:
    kind: ValueKind
    payload: Optional[Union[int, str]] = None

    def __post_init__(self):
        kind, payload = self.kind, self.payload
        if not isinstance(kind, ValueKind):
            raise ValueError(f"Value kind must be a ValueKind, got {kind!r}")
        if kind is ValueKind.EMPTY:
            if payload is not None:
                raise ValueError(f"EMPTY carries no payload, got {payload!r}")
        elif kind is ValueKind.CHAR:
            if not isinstance(payload, str) or len(payload) != 1 or not ("A" <= payload <= "Z"):
                raise ValueError(f"Character payload must be one of A-Z, got {payload!r}")
        elif isinstance(payload, bool) or not isinstance(payload, int):
            raise ValueError(f"{kind.name} payload must be int, got {payload!r}")
        elif kind is ValueKind.NUMBER and not in_range(payload):
            raise ValueError(f"Number {payload} outside {NUM_MIN}..{NUM_MAX}")
        elif kind is ValueKind.PROG_ADDR and payload < 1:
            raise ValueError(f"Program address must be a positive int, got {payload!r}")

    # ── Constructors ──

    @classmethod
    def empty(cls) -> "Value":
        return EMPTY

    @classmethod
    def number(cls, n: int) -> "Value":
        return cls(ValueKind.NUMBER, n)

    @classmethod
    def char(cls, c: str) -> "Value":
        return cls(ValueKind.CHAR, c)

    @classmethod
    def mem_addr(cls, n: int) -> "Value":
        return cls(ValueKind.MEM_ADDR, n)

    @classmethod
    def prog_addr(cls, line: int) -> "Value":
        return cls(ValueKind.PROG_ADDR, line)

    # ── Classification ──

    @property
    def is_empty(self) -> bool:
        return self.kind is ValueKind.EMPTY

    @property
    def is_number(self) -> bool:
        return self.kind is ValueKind.NUMBER

    @property
    def is_char(self) -> bool:
        return self.kind is ValueKind.CHAR

    @property
    def is_address(self) -> bool:
        """True for values usable as a direct floor address."""
        return self.kind in (ValueKind.NUMBER, ValueKind.MEM_ADDR)

    def same_kind(self, other: "Value") -> bool:
        """Type compatibility check used before mixed-operand arithmetic."""
        return self.kind is other.kind

    @property
    def letter_index(self) -> int:
        """Alphabet position of a CHAR, A=1 .. Z=26."""
        if not self.is_char:
            raise ValueError(f"{self} is not a character")
        return ord(self.payload) - ord("A") + 1

    # ── Display ──

    def __str__(self) -> str:
        if self.is_empty:
            return "_"
        if self.kind is ValueKind.MEM_ADDR:
            return f"[{self.payload}]"
        if self.kind is ValueKind.PROG_ADDR:
            return f"@{self.payload}"
        return str(self.payload)


EMPTY = Value(ValueKind.EMPTY)


def in_range(n: int) -> bool:
    return NUM_MIN <= n <= NUM_MAX


def parse_value(text: str) -> Value:
    """Parse an inbox token: a signed decimal integer or a single letter.

    Lowercase letters are accepted and folded to uppercase.
    """
    s = text.strip()
    if len(s) == 1 and s.isalpha():
        return Value.char(s.upper())
    try:
        n = int(s, 10)
    except ValueError:
        raise ValueError(f"Not a number or letter: {text!r}") from None
    return Value.number(n)
