"""
HRM Virtual Machine - Arithmetic Rules

ADD, SUB and BUMP work on NUMBER values only. Every result is checked
against -999..999 before it is handed back; landing exactly on a bound
is fine, stepping past it raises OVERFLOW / UNDERFLOW. Nothing wraps and
nothing clamps.

Characters are governed by a CharPolicy:
  STRICT  every arithmetic and conditional-jump use of a CHAR is a fault
  GAME    CHAR - CHAR gives the NUMBER distance between the letters, and
          a CHAR is never zero or negative for the conditional jumps.
          ADD and BUMP on a CHAR are still faults.

These functions raise HRMFault but never touch machine state; the
caller commits the returned value only when no fault was raised.
"""

from __future__ import annotations

import enum

from .values import NUM_MAX, NUM_MIN, Value
from ..errors import FaultKind, HRMFault


class CharPolicy(enum.Enum):
    STRICT = "strict"
    GAME = "game"


def check_range(result: int) -> Value:
    """Wrap an arithmetic result as a NUMBER or raise OVERFLOW/UNDERFLOW."""
    if result > NUM_MAX:
        raise HRMFault(FaultKind.OVERFLOW, f"result {result}")
    if result < NUM_MIN:
        raise HRMFault(FaultKind.UNDERFLOW, f"result {result}")
    return Value.number(result)


def _require_hands(hands: Value, bad_kind: FaultKind, allow_char: bool) -> None:
    if hands.is_empty:
        raise HRMFault(FaultKind.EMPTY_HANDS)
    if hands.is_number or (allow_char and hands.is_char):
        return
    raise HRMFault(bad_kind, f"hands hold {hands.kind.name}")


def check_add_hands(hands: Value) -> None:
    """ADD never takes letters, whatever the CharPolicy."""
    _require_hands(hands, FaultKind.BAD_ADDEND_TYPE_IN_HANDS, allow_char=False)


def check_sub_hands(hands: Value, policy: CharPolicy = CharPolicy.STRICT) -> None:
    _require_hands(hands, FaultKind.BAD_SUBTRAHEND_TYPE_IN_HANDS,
                   allow_char=policy is CharPolicy.GAME)


def add(hands: Value, operand: Value) -> Value:
    """hands + operand. Hands must already have passed check_add_hands."""
    if not operand.is_number:
        raise HRMFault(FaultKind.BAD_ADDEND_TYPE_IN_MEMORY, f"tile holds {operand.kind.name}")
    return check_range(hands.payload + operand.payload)


def sub(hands: Value, operand: Value) -> Value:
    """hands - operand. Hands must already have passed check_sub_hands."""
    if hands.is_char:
        # Only reachable under CharPolicy.GAME
        if not operand.is_char:
            raise HRMFault(FaultKind.BAD_SUBTRAHEND_TYPE_IN_MEMORY,
                           f"cannot subtract {operand.kind.name} from CHAR")
        return Value.number(hands.letter_index - operand.letter_index)
    if not operand.is_number:
        raise HRMFault(FaultKind.BAD_SUBTRAHEND_TYPE_IN_MEMORY, f"tile holds {operand.kind.name}")
    return check_range(hands.payload - operand.payload)


def bump(tile: Value, delta: int) -> Value:
    """tile + delta for BUMP+ (delta=1) and BUMP- (delta=-1)."""
    if not tile.is_number:
        raise HRMFault(FaultKind.BAD_TYPE_FOR_BUMP_IN_MEMORY, f"tile holds {tile.kind.name}")
    return check_range(tile.payload + delta)


def _require_jump_hands(hands: Value, policy: CharPolicy) -> bool:
    """Return True when hands hold a number the jump can test."""
    if hands.is_empty:
        raise HRMFault(FaultKind.EMPTY_HANDS)
    if hands.is_number:
        return True
    if hands.is_char and policy is CharPolicy.GAME:
        return False
    raise HRMFault(FaultKind.BAD_PARAM_TYPE, f"hands hold {hands.kind.name}")


def is_zero(hands: Value, policy: CharPolicy = CharPolicy.STRICT) -> bool:
    return _require_jump_hands(hands, policy) and hands.payload == 0


def is_negative(hands: Value, policy: CharPolicy = CharPolicy.STRICT) -> bool:
    return _require_jump_hands(hands, policy) and hands.payload < 0
