"""
HRM Virtual Machine - Fault Taxonomy

A fault is any violated instruction precondition. Faults are fatal: the
first one ends the run and is reported to the caller. Each kind carries a
stable integer code which the command-line host uses as its exit status
(0 is reserved for a clean run).

Load-time problems with a program or room (bad operand tag, jump target
off the end, floor index outside the room) are not faults; they raise
ProgramError / ValueError before anything executes.
"""

from __future__ import annotations

import enum
from typing import Optional


class FaultKind(enum.Enum):
    BAD_PARAM_TYPE = 1
    EMPTY_HANDS = 2
    INVALID_TYPE_FOR_DIRECT_ADDR = 3
    DIRECT_ADDR_OUT_OF_RANGE = 4
    INVALID_TYPE_FOR_INDIRECT_ADDR = 5
    INDIRECT_ADDR_OUT_OF_RANGE = 6
    COPYFROM_READING_EMPTY_ADDR = 7
    COPYFROM_IND_READING_EMPTY_ADDR = 8
    BAD_ADDEND_TYPE_IN_HANDS = 9
    BAD_SUBTRAHEND_TYPE_IN_HANDS = 10
    BAD_ADDEND_TYPE_IN_MEMORY = 11
    BAD_SUBTRAHEND_TYPE_IN_MEMORY = 12
    BAD_TYPE_FOR_BUMP_IN_MEMORY = 13
    OVERFLOW = 14
    UNDERFLOW = 15

    @property
    def code(self) -> int:
        return self.value

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    FaultKind.BAD_PARAM_TYPE: "wrong kind of value for this instruction",
    FaultKind.EMPTY_HANDS: "hands are empty",
    FaultKind.INVALID_TYPE_FOR_DIRECT_ADDR: "direct address is not a number",
    FaultKind.DIRECT_ADDR_OUT_OF_RANGE: "direct address is outside the room",
    FaultKind.INVALID_TYPE_FOR_INDIRECT_ADDR: "indirect address is not a number",
    FaultKind.INDIRECT_ADDR_OUT_OF_RANGE: "indirect address is outside the room",
    FaultKind.COPYFROM_READING_EMPTY_ADDR: "COPYFROM read an empty tile",
    FaultKind.COPYFROM_IND_READING_EMPTY_ADDR: "COPYFROM (indirect) read an empty tile",
    FaultKind.BAD_ADDEND_TYPE_IN_HANDS: "ADD needs a number in hands",
    FaultKind.BAD_SUBTRAHEND_TYPE_IN_HANDS: "SUB needs a number in hands",
    FaultKind.BAD_ADDEND_TYPE_IN_MEMORY: "ADD needs a number on the tile",
    FaultKind.BAD_SUBTRAHEND_TYPE_IN_MEMORY: "SUB needs a number on the tile",
    FaultKind.BAD_TYPE_FOR_BUMP_IN_MEMORY: "BUMP needs a number on the tile",
    FaultKind.OVERFLOW: "result above 999",
    FaultKind.UNDERFLOW: "result below -999",
}


class HRMFault(Exception):
    """Run-time fault raised by an instruction handler.

    `line` (one-based) and `opcode` are filled in by the emulator once
    the handler has raised; handlers only know the kind.
    """

    def __init__(self, kind: FaultKind, detail: str = "",
                 line: Optional[int] = None, opcode=None):
        self.kind = kind
        self.detail = detail
        self.line = line
        self.opcode = opcode
        super().__init__(self._format())

    def _format(self) -> str:
        msg = f"{self.kind.name}: {self.kind.description}"
        if self.detail:
            msg += f" ({self.detail})"
        if self.line is not None:
            where = f"line {self.line}"
            if self.opcode is not None:
                where += f" {self.opcode.name}"
            msg = f"{where}: {msg}"
        return msg

    def locate(self, line: int, opcode) -> "HRMFault":
        self.line = line
        self.opcode = opcode
        self.args = (self._format(),)
        return self


class ProgramError(ValueError):
    """Malformed program, detected when the Program is built."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
