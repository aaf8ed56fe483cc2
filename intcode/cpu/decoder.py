"""
Intcode VM — Instruction Decoder

An instruction cell packs the opcode in its two low decimal digits and one
addressing-mode digit per parameter above them, lowest digit = first
parameter:

    1002  ->  opcode 02 (MUL), modes: p1=0 (POS), p2=1 (IMM), p3=0 (POS)

This module maps opcodes to (mnemonic, reads, writes) where `reads` is the
number of value operands and `writes` is 1 when a trailing write-target
operand follows them.

Addressing modes:
  POS   Positional  operand is an address, value = mem[operand]
  IMM   Immediate   operand is the value itself (never valid as write target)
  REL   Relative    operand is an offset, value = mem[relative_base + operand]

Unknown opcodes decode as NOP with no operands.  That is the instruction
set's defined behavior, not an error.
"""

from typing import NamedTuple, Tuple

from ..errors import InvalidAddressingMode

# ──────────────────────────────────────────────
# Addressing mode constants
# ──────────────────────────────────────────────

POS = 0
IMM = 1
REL = 2

MODE_NAMES = {POS: 'POS', IMM: 'IMM', REL: 'REL'}


# ──────────────────────────────────────────────
# Opcode numbers
# ──────────────────────────────────────────────

NOP = 0
ADD = 1
MUL = 2
INP = 3
OUT = 4
JNZ = 5   # jump-if-true
JPZ = 6   # jump-if-false
CLT = 7   # less-than
CEQ = 8   # equals
ARB = 9   # adjust relative base
HLT = 99


# ──────────────────────────────────────────────
# Opcode table
# ──────────────────────────────────────────────
# Format: opcode -> (mnemonic, reads, writes)

OPCODES = {
    NOP: ('NOP', 0, 0),
    ADD: ('ADD', 2, 1),
    MUL: ('MUL', 2, 1),
    INP: ('INP', 0, 1),
    OUT: ('OUT', 1, 0),
    JNZ: ('JNZ', 2, 0),
    JPZ: ('JPZ', 2, 0),
    CLT: ('CLT', 2, 1),
    CEQ: ('CEQ', 2, 1),
    ARB: ('ARB', 1, 0),
    HLT: ('HLT', 0, 0),
}


class Instruction(NamedTuple):
    opcode: int
    mnemonic: str
    reads: int
    writes: int
    modes: Tuple[int, ...]   # one per operand, reads first then write target

    @property
    def width(self) -> int:
        """Cells occupied: the instruction cell plus its operands."""
        return 1 + self.reads + self.writes


def arity(opcode: int) -> Tuple[int, int]:
    """(reads, writes) for an opcode; unknown opcodes have none."""
    _, reads, writes = OPCODES.get(opcode, OPCODES[NOP])
    return reads, writes


def decode(value: int) -> Instruction:
    """Decode a raw instruction cell.

    Negative cells never name a defined opcode and decode as NOP.
    Raises InvalidAddressingMode for a mode digit outside {0, 1, 2} or an
    immediate-mode write target.
    """
    if value < 0:
        opcode = value
        entry = OPCODES[NOP]
    else:
        opcode = value % 100
        entry = OPCODES.get(opcode, OPCODES[NOP])
    mnem, reads, writes = entry

    digits = value // 100 if value >= 0 else 0
    modes = []
    for slot in range(reads + writes):
        mode = digits % 10
        digits //= 10
        if mode not in MODE_NAMES:
            raise InvalidAddressingMode(
                f"Unknown addressing mode {mode} for parameter {slot + 1} "
                f"of {mnem} (cell {value})")
        modes.append(mode)

    if writes and modes[-1] == IMM:
        raise InvalidAddressingMode(
            f"Immediate mode used for write target of {mnem} (cell {value})")

    return Instruction(opcode, mnem, reads, writes, tuple(modes))


def disassemble(value: int, operands=()) -> str:
    """One-line text form of an instruction, used by the trace log."""
    try:
        ins = decode(value)
    except InvalidAddressingMode:
        return f"??? {value}"
    parts = []
    for mode, raw in zip(ins.modes, operands):
        if mode == IMM:
            parts.append(f"#{raw}")
        elif mode == REL:
            parts.append(f"rb{raw:+d}")
        else:
            parts.append(f"[{raw}]")
    return f"{ins.mnemonic:4s} {', '.join(parts)}".rstrip()
