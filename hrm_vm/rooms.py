"""
HRM Virtual Machine - Preset Rooms

A room bundles everything a run needs apart from the engine itself:
the program listing, the floor size, any tiles that start pre-filled,
a sample inbox and the character policy the puzzle expects.

Add a room by adding an entry to ROOMS. Program rows are written as
(opcode name,) or (opcode name, operand); address operands are tile
numbers, jump operands are one-based line numbers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from .cpu.alu import CharPolicy
from .cpu.isa import ADDR, NONE, Instruction, Opcode, Program, operand_kind
from .cpu.values import Value
from .emu import EmulatorConfig, HRMEmulator
from .mem.memory import Memory
from .periph.inbox import BatchInbox, InteractiveInbox
from .periph.outbox import Outbox


def assemble(rows: Iterable[tuple]) -> Program:
    """Build a Program from (NAME,) / (NAME, operand) rows."""
    code = []
    for row in rows:
        op = Opcode[row[0]]
        kind = operand_kind(op)
        if kind == NONE:
            code.append(Instruction(op))
        elif kind == ADDR:
            code.append(Instruction(op, Value.number(row[1])))
        else:
            code.append(Instruction(op, Value.prog_addr(row[1])))
    return Program(code)


def _values(items: Iterable) -> Tuple[Value, ...]:
    return tuple(Value.char(i) if isinstance(i, str) else Value.number(i) for i in items)


@dataclass(frozen=True)
class Room:
    slug: str
    title: str
    program: Program
    floor_size: int = 0
    floor: Mapping[int, Value] = field(default_factory=dict)
    inbox: Tuple[Value, ...] = ()
    char_policy: CharPolicy = CharPolicy.STRICT

    def memory(self) -> Memory:
        return Memory(self.floor_size, self.floor)

    def build(self, inbox=None, outbox: Optional[Outbox] = None,
              config: Optional[EmulatorConfig] = None) -> HRMEmulator:
        """Fresh emulator for this room.

        `inbox` defaults to the room's sample inbox; pass a sequence of
        Values or an InteractiveInbox to override it.
        """
        if inbox is None:
            inbox = BatchInbox(self.inbox)
        elif not isinstance(inbox, (BatchInbox, InteractiveInbox)):
            inbox = BatchInbox(inbox)
        if config is None:
            config = EmulatorConfig(char_policy=self.char_policy)
        return HRMEmulator(self.program, self.memory(), inbox, outbox, config)


ROOMS: Dict[str, Room] = {}


def _register(room: Room) -> Room:
    ROOMS[room.slug] = room
    return room


_register(Room(
    slug="mail-room",
    title="Mail Room",
    program=assemble([
        ("INBOX",), ("OUTBOX",),
        ("INBOX",), ("OUTBOX",),
        ("INBOX",), ("OUTBOX",),
    ]),
    inbox=_values([3, 9, 1]),
))

_register(Room(
    slug="busy-mail-room",
    title="Busy Mail Room",
    program=assemble([
        ("INBOX",),
        ("OUTBOX",),
        ("JUMP", 1),
    ]),
    inbox=_values("BUSYMAIL"),
))

_register(Room(
    slug="equalization-room",
    title="Equalization Room",
    floor_size=3,
    program=assemble([
        ("INBOX",),
        ("COPYTO", 0),
        ("INBOX",),
        ("SUB", 0),
        ("JUMP_IF_ZERO", 7),
        ("JUMP", 1),
        ("COPYFROM", 0),
        ("OUTBOX",),
        ("JUMP", 1),
    ]),
    inbox=_values([5, 5, 2, -3, -1, -1, 8, 0]),
))

# The program carried by the first firmware build; its sample inbox
# includes a letter, which the game lets JUMP_IF_ZERO look at.
_register(Room(
    slug="zero-preservation-initiative",
    title="Zero Preservation Initiative",
    floor_size=9,
    program=assemble([
        ("INBOX",),
        ("JUMP_IF_ZERO", 4),
        ("JUMP", 1),
        ("OUTBOX",),
        ("JUMP", 1),
    ]),
    inbox=_values([7, 0, 5, "D", 0, 0, 0, 0]),
    char_policy=CharPolicy.GAME,
))

_register(Room(
    slug="countdown",
    title="Countdown",
    floor_size=10,
    program=assemble([
        ("INBOX",),
        ("COPYTO", 0),
        ("COPYFROM", 0),
        ("OUTBOX",),
        ("JUMP_IF_ZERO", 1),
        ("JUMP_IF_NEGATIVE", 9),
        ("BUMP_MINUS", 0),
        ("JUMP", 4),
        ("BUMP_PLUS", 0),
        ("JUMP", 4),
    ]),
    inbox=_values([3, -2, 0]),
))

# Tiles 0-4 hold the vowels, tile 5 a zero that ends the vowel list.
_register(Room(
    slug="vowel-incinerator",
    title="Vowel Incinerator",
    floor_size=10,
    floor={**dict(enumerate(_values("AEIOU"))), 5: Value.number(0)},
    program=assemble([
        ("COPYFROM", 5),
        ("COPYTO", 7),
        ("INBOX",),
        ("COPYTO", 6),
        ("COPYFROM_IND", 7),
        ("JUMP_IF_ZERO", 11),
        ("SUB", 6),
        ("JUMP_IF_ZERO", 1),
        ("BUMP_PLUS", 7),
        ("JUMP", 5),
        ("COPYFROM", 6),
        ("OUTBOX",),
        ("JUMP", 1),
    ]),
    inbox=_values("BOXAYE"),
    char_policy=CharPolicy.GAME,
))


def get_room(slug: str) -> Room:
    try:
        return ROOMS[slug]
    except KeyError:
        raise KeyError(f"Unknown room {slug!r} (known: {', '.join(sorted(ROOMS))})") from None


def room_names() -> Sequence[str]:
    return sorted(ROOMS)
