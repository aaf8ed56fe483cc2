"""
Intcode VM — Signed 64-bit Integer Operations

Cells are signed 64-bit.  Python ints are unbounded, so every result that
lands in memory goes through to_int64() to wrap it the way a fixed-width
two's complement machine would.

  add:  a + b      (wraps)
  mul:  a * b      (wraps)
  lt:   1 if a < b else 0
  eq:   1 if a == b else 0
"""

from ..config import CELL_BITS

_MASK = (1 << CELL_BITS) - 1
_SIGN = 1 << (CELL_BITS - 1)


def to_int64(value: int) -> int:
    """Wrap an arbitrary int to signed 64-bit two's complement."""
    value &= _MASK
    return value - (1 << CELL_BITS) if value & _SIGN else value


def fits_int64(value: int) -> bool:
    return -_SIGN <= value < _SIGN


def add(a: int, b: int) -> int:
    return to_int64(a + b)


def mul(a: int, b: int) -> int:
    return to_int64(a * b)


def lt(a: int, b: int) -> int:
    return 1 if a < b else 0


def eq(a: int, b: int) -> int:
    return 1 if a == b else 0
