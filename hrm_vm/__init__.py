"""
HRM Virtual Machine
===================
An interpreter for the "assembly" language of Human Resource Machine:
one accumulator ("hands"), a small floor of tiles, an inbox and an outbox.

Architecture:
    ┌──────────┐    ┌───────────┐    ┌────────────┐    ┌──────────┐
    │  Inbox   │───>│ Emulator  │───>│   Outbox   │    │  Rooms   │
    │ (periph) │    │  (emu)    │    │  (periph)  │    │ (presets)│
    └──────────┘    └─────┬─────┘    └────────────┘    └──────────┘
                          │
              ┌───────────┼────────────┐
              │           │            │
         cpu/isa.py   cpu/alu.py   mem/memory.py
         (program)    (arith)      (floor + address checks)

    - cpu/values.py: tagged Value (EMPTY, NUMBER, CHAR, MEM_ADDR, PROG_ADDR)
    - cpu/isa.py:    17-opcode catalog, Instruction, Program
    - cpu/alu.py:    range-checked arithmetic and the character policy
    - mem/memory.py: fixed floor, direct/indirect address validation
    - periph/:       batch and interactive inbox, outbox
    - errors.py:     FaultKind taxonomy, HRMFault, ProgramError
    - emu.py:        fetch/dispatch loop, StopReason, RunResult
"""

__version__ = "0.1.0"

from .cpu.values import EMPTY, NUM_MAX, NUM_MIN, Value, ValueKind, parse_value
from .cpu.alu import CharPolicy
from .cpu.isa import Instruction, Opcode, Program, addr_op, inbox, jump_op, outbox
from .errors import FaultKind, HRMFault, ProgramError
from .mem.memory import Memory
from .periph.inbox import BatchInbox, InteractiveInbox
from .periph.outbox import Outbox
from .emu import DEFAULT_MAX_STEPS, EmulatorConfig, HRMEmulator, RunResult, StopReason


def run_program(program, *, floor_size: int = 0, floor=None, inbox=(),
                max_steps: int = DEFAULT_MAX_STEPS,
                char_policy: CharPolicy = CharPolicy.STRICT) -> RunResult:
    """Run a program to completion in a fresh room.

    Args:
        program: Program or iterable of Instructions.
        floor_size: Number of floor tiles.
        floor: Optional {tile index: Value} of pre-filled tiles.
        inbox: Iterable of NUMBER/CHAR Values.
        max_steps: Step ceiling.
        char_policy: How characters behave in arithmetic and jumps.

    Returns:
        RunResult (reason, steps, outbox, fault).
    """
    emu = HRMEmulator(
        program,
        Memory(floor_size, floor),
        BatchInbox(inbox),
        config=EmulatorConfig(max_steps=max_steps, char_policy=char_policy),
    )
    return emu.run()


from .rooms import ROOMS, Room, get_room  # noqa: E402
