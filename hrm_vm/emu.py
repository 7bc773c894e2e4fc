"""
HRM Virtual Machine - Main Emulator Class

Integrates:
  - Register file (cpu/regs.py): hands, program counter, step count
  - Room floor (mem/memory.py) with direct/indirect address checks
  - Inbox / outbox queues (periph/)
  - Arithmetic rules (cpu/alu.py)

Execution model:
  1. Stop if the program counter has run off the end of the program
  2. Stop if the step ceiling has been reached
  3. Stop (resumably) on a breakpoint line
  4. Dispatch the instruction at the program counter
  5. On success move to the next line, or to the jump target
  6. On a fault record it and stop for good

Termination reasons:
  - HALT:     INBOX found the inbox exhausted (the normal way out)
  - END:      program counter ran past the last line
  - TIMEOUT:  step ceiling reached
  - BREAK:    breakpoint line reached; run() again to continue
  - FAULT:    an instruction precondition failed

An instruction that faults leaves hands, the floor and the outbox
exactly as they were before it started.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, List, Optional, Set, Union

from .cpu import alu
from .cpu.alu import CharPolicy
from .cpu.isa import Instruction, Opcode, Program, is_indirect
from .cpu.regs import Registers
from .cpu.values import EMPTY, Value, ValueKind
from .errors import FaultKind, HRMFault
from .mem.memory import Memory
from .periph.inbox import BatchInbox, InteractiveInbox
from .periph.outbox import Outbox

log = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 1000


class StopReason(Enum):
    HALT = 'HALT'
    END = 'END'
    TIMEOUT = 'TIMEOUT'
    BREAK = 'BREAK'
    FAULT = 'FAULT'


@dataclass(frozen=True)
class EmulatorConfig:
    max_steps: int = DEFAULT_MAX_STEPS
    char_policy: CharPolicy = CharPolicy.STRICT

    def __post_init__(self):
        if isinstance(self.max_steps, bool) or not isinstance(self.max_steps, int) \
                or self.max_steps < 0:
            raise ValueError(f"max_steps must be a non-negative int, got {self.max_steps!r}")
        if not isinstance(self.char_policy, CharPolicy):
            raise ValueError(f"char_policy must be a CharPolicy, got {self.char_policy!r}")


@dataclass
class RunResult:
    reason: StopReason
    steps: int
    outbox: List[Value] = field(default_factory=list)
    fault: Optional[HRMFault] = None

    @property
    def ok(self) -> bool:
        """True for every way of stopping except a fault."""
        return self.reason is not StopReason.FAULT

    @property
    def fault_kind(self) -> Optional[FaultKind]:
        return self.fault.kind if self.fault is not None else None

    @property
    def exit_code(self) -> int:
        return self.fault.kind.code if self.fault is not None else 0


class _InboxExhausted(Exception):
    pass


class HRMEmulator:
    """Human Resource Machine style emulator.

    Usage:
        emu = HRMEmulator(program, Memory(9), inbox=[Value.number(7)])
        result = emu.run()
        print(result.reason, [str(v) for v in result.outbox])

    One emulator is one run: it owns hands and the program counter. The
    floor, inbox and outbox are handed in by the caller and mutated in
    place so they can be inspected afterwards.
    """

    DEFAULT_MAX_STEPS = DEFAULT_MAX_STEPS

    def __init__(self, program: Union[Program, Iterable[Instruction]],
                 memory: Optional[Memory] = None,
                 inbox: Union[BatchInbox, InteractiveInbox, Iterable[Value], None] = None,
                 outbox: Optional[Outbox] = None,
                 config: Optional[EmulatorConfig] = None):
        self.program = program if isinstance(program, Program) else Program(program)
        self.mem = memory if memory is not None else Memory(0)
        if inbox is None:
            inbox = BatchInbox()
        elif not isinstance(inbox, (BatchInbox, InteractiveInbox)):
            inbox = BatchInbox(inbox)
        self.inbox = inbox
        self.outbox = outbox if outbox is not None else Outbox()
        self.config = config or EmulatorConfig()

        self.regs = Registers()
        self.reason: Optional[StopReason] = None
        self.fault: Optional[HRMFault] = None

        # Breakpoints: one-based lines that stop execution before running
        self._breakpoints: Set[int] = set()
        self._break_taken: Optional[int] = None

        self._trace = False
        self._trace_output: List[str] = []

        self._dispatch = self._build_dispatch()

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    @property
    def hands(self) -> Value:
        return self.regs.hands

    @property
    def running(self) -> bool:
        return self.reason is None

    def step(self) -> Optional[StopReason]:
        """Execute one instruction. Returns StopReason if stopped, else None.

        HALT, END, TIMEOUT and FAULT are terminal and are returned again by
        every later call. BREAK is not: the next step() runs the line.
        """
        if self.reason is not None:
            return self.reason

        pc = self.regs.pc
        if pc >= len(self.program):
            return self._stop(StopReason.END)
        if self.regs.steps >= self.config.max_steps:
            return self._stop(StopReason.TIMEOUT)

        line = pc + 1
        if line in self._breakpoints and self._break_taken != line:
            self._break_taken = line
            log.debug("Breakpoint at line %d", line)
            return StopReason.BREAK
        self._break_taken = None

        inst = self.program[pc]
        try:
            target = self._dispatch[inst.op](inst)
        except _InboxExhausted:
            return self._stop(StopReason.HALT)
        except HRMFault as fault:
            self.fault = fault.locate(line, inst.op)
            log.warning("Fault after %d steps: %s", self.regs.steps, self.fault)
            return self._stop(StopReason.FAULT)

        self.regs.pc = target if target is not None else pc + 1
        self.regs.steps += 1

        if self._trace:
            entry = f"{line:>3d}: {str(inst):<22s} {self.regs.display()}"
            self._trace_output.append(entry)
            log.debug(entry)

        return None

    def run(self, max_steps: Optional[int] = None) -> RunResult:
        """Run until termination (or a breakpoint).

        Args:
            max_steps: overrides the configured step ceiling for this
                emulator from now on

        Returns:
            RunResult with the stop reason, fault, step count and outbox
        """
        if max_steps is not None:
            self.config = replace(self.config, max_steps=max_steps)

        while True:
            reason = self.step()
            if reason is not None:
                return RunResult(reason=reason, steps=self.regs.steps,
                                 outbox=self.outbox.values, fault=self.fault)

    def _stop(self, reason: StopReason) -> StopReason:
        self.reason = reason
        if reason is not StopReason.FAULT:
            log.info("Stopped: %s after %d steps, %d value(s) in outbox",
                     reason.value, self.regs.steps, len(self.outbox))
        return reason

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Handler signature: handler(inst) -> Optional[int]
    # Return a zero-based jump target, or None to fall through to the
    # next line. Raise HRMFault before changing any state.

    def _build_dispatch(self) -> dict:
        return {
            Opcode.INBOX:            self._op_inbox,
            Opcode.OUTBOX:           self._op_outbox,
            Opcode.COPYFROM:         self._op_copyfrom,
            Opcode.COPYFROM_IND:     self._op_copyfrom,
            Opcode.COPYTO:           self._op_copyto,
            Opcode.COPYTO_IND:       self._op_copyto,
            Opcode.ADD:              self._op_add,
            Opcode.ADD_IND:          self._op_add,
            Opcode.SUB:              self._op_sub,
            Opcode.SUB_IND:          self._op_sub,
            Opcode.BUMP_PLUS:        self._op_bump_plus,
            Opcode.BUMP_PLUS_IND:    self._op_bump_plus,
            Opcode.BUMP_MINUS:       self._op_bump_minus,
            Opcode.BUMP_MINUS_IND:   self._op_bump_minus,
            Opcode.JUMP:             self._op_jump,
            Opcode.JUMP_IF_ZERO:     self._op_jump_if_zero,
            Opcode.JUMP_IF_NEGATIVE: self._op_jump_if_negative,
        }

    def _tile_index(self, inst: Instruction) -> int:
        return self.mem.resolve(inst.param, is_indirect(inst.op))

    # ── Queues ──

    def _op_inbox(self, inst):
        value = self.inbox.get()
        if value is None:
            raise _InboxExhausted()
        self.regs.hands = value

    def _op_outbox(self, inst):
        if self.regs.hands.is_empty:
            raise HRMFault(FaultKind.EMPTY_HANDS)
        self.outbox.append(self.regs.hands)

    # ── Copy ──

    def _op_copyfrom(self, inst):
        addr = self._tile_index(inst)
        value = self.mem.read(addr)
        if value.is_empty:
            kind = (FaultKind.COPYFROM_IND_READING_EMPTY_ADDR if is_indirect(inst.op)
                    else FaultKind.COPYFROM_READING_EMPTY_ADDR)
            raise HRMFault(kind, f"tile {addr}")
        self.regs.hands = value

    def _op_copyto(self, inst):
        addr = self._tile_index(inst)
        if self.regs.hands.is_empty:
            raise HRMFault(FaultKind.EMPTY_HANDS)
        self.mem.write(addr, self.regs.hands)
        self.regs.hands = EMPTY

    # ── Arithmetic ──

    def _op_add(self, inst):
        alu.check_add_hands(self.regs.hands)
        addr = self._tile_index(inst)
        self.regs.hands = alu.add(self.regs.hands, self.mem.read(addr))

    def _op_sub(self, inst):
        alu.check_sub_hands(self.regs.hands, self.config.char_policy)
        addr = self._tile_index(inst)
        self.regs.hands = alu.sub(self.regs.hands, self.mem.read(addr))

    def _bump(self, inst, delta: int):
        addr = self._tile_index(inst)
        value = alu.bump(self.mem.read(addr), delta)
        self.mem.write(addr, value)
        self.regs.hands = value

    def _op_bump_plus(self, inst):
        self._bump(inst, 1)

    def _op_bump_minus(self, inst):
        self._bump(inst, -1)

    # ── Control ──

    @staticmethod
    def _target(inst: Instruction) -> int:
        param = inst.param
        if param is None or param.kind is not ValueKind.PROG_ADDR:
            raise HRMFault(FaultKind.BAD_PARAM_TYPE, "jump target must be a program address")
        return param.payload - 1  # one-based line -> zero-based index

    def _op_jump(self, inst):
        return self._target(inst)

    def _op_jump_if_zero(self, inst):
        target = self._target(inst)
        if alu.is_zero(self.regs.hands, self.config.char_policy):
            return target
        return None

    def _op_jump_if_negative(self, inst):
        target = self._target(inst)
        if alu.is_negative(self.regs.hands, self.config.char_policy):
            return target
        return None

    # ══════════════════════════════════════════════
    # Breakpoint API
    # ══════════════════════════════════════════════

    def add_breakpoint(self, line: int):
        """Stop before executing the given one-based line."""
        self._breakpoints.add(line)

    def remove_breakpoint(self, line: int):
        self._breakpoints.discard(line)

    def clear_breakpoints(self):
        self._breakpoints.clear()

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Record one line per executed instruction (also logged at DEBUG)."""
        self._trace = enable

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()

    def reset(self):
        """Rewind registers, floor and outbox. The inbox is not refilled."""
        self.regs.reset()
        self.mem.reset()
        self.outbox.reset()
        self.reason = None
        self.fault = None
        self._break_taken = None
        self._trace_output.clear()
