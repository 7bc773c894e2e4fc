"""
HRM Virtual Machine - Instruction Set + Program

Seventeen opcodes. Each table entry records the operand the opcode takes
and whether the operand is followed through one level of indirection:

  NONE     no operand (INBOX, OUTBOX)
  ADDR     floor address, NUMBER or MEM_ADDR value
  TARGET   PROG_ADDR jump target, one-based line number

Programs are immutable and addressed one-based from the outside (the way
the game numbers its lines); the emulator converts to a zero-based
index internally. A Program checks its instructions when built, so a
jump to a line that does not exist or a missing operand is reported
before the first step runs.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence, Tuple

from .values import Value, ValueKind
from ..errors import ProgramError


# Operand kinds
NONE = 'NONE'
ADDR = 'ADDR'
TARGET = 'TARGET'


class Opcode(enum.Enum):
    INBOX = "INBOX"
    OUTBOX = "OUTBOX"
    COPYFROM = "COPYFROM"
    COPYFROM_IND = "COPYFROM_IND"
    COPYTO = "COPYTO"
    COPYTO_IND = "COPYTO_IND"
    ADD = "ADD"
    ADD_IND = "ADD_IND"
    SUB = "SUB"
    SUB_IND = "SUB_IND"
    BUMP_PLUS = "BUMP_PLUS"
    BUMP_PLUS_IND = "BUMP_PLUS_IND"
    BUMP_MINUS = "BUMP_MINUS"
    BUMP_MINUS_IND = "BUMP_MINUS_IND"
    JUMP = "JUMP"
    JUMP_IF_ZERO = "JUMP_IF_ZERO"
    JUMP_IF_NEGATIVE = "JUMP_IF_NEGATIVE"


# opcode -> (operand kind, indirect)
OPCODES = {
    Opcode.INBOX:            (NONE,   False),
    Opcode.OUTBOX:           (NONE,   False),
    Opcode.COPYFROM:         (ADDR,   False),
    Opcode.COPYFROM_IND:     (ADDR,   True),
    Opcode.COPYTO:           (ADDR,   False),
    Opcode.COPYTO_IND:       (ADDR,   True),
    Opcode.ADD:              (ADDR,   False),
    Opcode.ADD_IND:          (ADDR,   True),
    Opcode.SUB:              (ADDR,   False),
    Opcode.SUB_IND:          (ADDR,   True),
    Opcode.BUMP_PLUS:        (ADDR,   False),
    Opcode.BUMP_PLUS_IND:    (ADDR,   True),
    Opcode.BUMP_MINUS:       (ADDR,   False),
    Opcode.BUMP_MINUS_IND:   (ADDR,   True),
    Opcode.JUMP:             (TARGET, False),
    Opcode.JUMP_IF_ZERO:     (TARGET, False),
    Opcode.JUMP_IF_NEGATIVE: (TARGET, False),
}


def operand_kind(op: Opcode) -> str:
    return OPCODES[op][0]


def is_indirect(op: Opcode) -> bool:
    return OPCODES[op][1]


@dataclass(frozen=True)
class Instruction:
    op: Opcode
    param: Optional[Value] = None

    def __str__(self) -> str:
        if self.param is None:
            return self.op.name
        if is_indirect(self.op):
            return f"{self.op.name:<16s} [{self.param.payload}]"
        return f"{self.op.name:<16s} {self.param.payload}"


# ── Shorthand builders ──

def inbox() -> Instruction:
    return Instruction(Opcode.INBOX)


def outbox() -> Instruction:
    return Instruction(Opcode.OUTBOX)


def addr_op(op: Opcode, address: int) -> Instruction:
    """Build a floor-addressing instruction with a NUMBER operand."""
    return Instruction(op, Value.number(address))


def jump_op(op: Opcode, line: int) -> Instruction:
    """Build a jump with a one-based PROG_ADDR target."""
    return Instruction(op, Value.prog_addr(line))


class Program:
    """Ordered, immutable instruction sequence."""

    def __init__(self, instructions: Iterable[Instruction]):
        self._code: Tuple[Instruction, ...] = tuple(instructions)
        self._validate()

    def _validate(self):
        count = len(self._code)
        for line, inst in enumerate(self._code, start=1):
            if not isinstance(inst, Instruction):
                raise ProgramError(f"not an Instruction: {inst!r}", line)
            if not isinstance(inst.op, Opcode):
                raise ProgramError(f"unknown opcode {inst.op!r}", line)
            if inst.param is not None and not isinstance(inst.param, Value):
                raise ProgramError(
                    f"{inst.op.name}: operand must be a Value, got {inst.param!r}", line)
            kind = operand_kind(inst.op)
            param = inst.param

            if kind == NONE:
                if param is not None:
                    raise ProgramError(f"{inst.op.name} takes no operand", line)
                continue

            if param is None:
                raise ProgramError(f"{inst.op.name}: missing operand", line)

            if kind == TARGET:
                if param.kind is not ValueKind.PROG_ADDR:
                    raise ProgramError(
                        f"{inst.op.name}: jump target must be PROG_ADDR, got {param.kind.name}", line)
                if not 1 <= param.payload <= count:
                    raise ProgramError(
                        f"{inst.op.name}: jump target {param.payload} outside 1..{count}", line)
            # ADDR operands are checked at run time against the room; a bad
            # tag there is a fault the program is allowed to provoke.

    # ── Access ──

    def __len__(self) -> int:
        return len(self._code)

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self._code)

    def __getitem__(self, index: int) -> Instruction:
        """Zero-based access, used by the emulator."""
        return self._code[index]

    def at(self, line: int) -> Instruction:
        """One-based access, as lines are numbered in listings."""
        if not 1 <= line <= len(self._code):
            raise IndexError(f"line {line} outside 1..{len(self._code)}")
        return self._code[line - 1]

    @property
    def instructions(self) -> Sequence[Instruction]:
        return self._code

    def __eq__(self, other) -> bool:
        if not isinstance(other, Program):
            return NotImplemented
        return self._code == other._code

    def __hash__(self) -> int:
        return hash(self._code)

    def __repr__(self) -> str:
        return f"Program({len(self._code)} instructions)"

    def listing(self) -> str:
        """Numbered listing, one instruction per line."""
        width = len(str(len(self._code))) if self._code else 1
        return '\n'.join(
            f"{line:>{width}d}: {inst}" for line, inst in enumerate(self._code, start=1)
        )
