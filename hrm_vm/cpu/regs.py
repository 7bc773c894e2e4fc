"""
HRM Virtual Machine - Register File

  hands   the single-slot accumulator; EMPTY at the start of a run
  pc      zero-based index of the next instruction
  steps   instructions completed so far, checked against the step ceiling

One Registers object belongs to one emulator; nothing here is global.
"""

from .values import EMPTY, Value


class Registers:

    __slots__ = ('hands', 'pc', 'steps')

    def __init__(self):
        self.hands: Value = EMPTY
        self.pc: int = 0
        self.steps: int = 0

    @property
    def line(self) -> int:
        """Program counter as a one-based line number."""
        return self.pc + 1

    def display(self) -> str:
        return f"LINE={self.line:<3d} HANDS={str(self.hands):>4s} STEPS={self.steps}"

    def reset(self):
        self.hands = EMPTY
        self.pc = 0
        self.steps = 0
