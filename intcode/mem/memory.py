"""
Intcode VM — Growable Memory Store

One machine's address space: a flat buffer of signed 64-bit cells.

  - Addresses start at 0.  A negative address is never valid.
  - Reading or writing at/after the current end grows the buffer first,
    zero-filling the new cells.  Unallocated memory reads as 0.
  - Growth is monotonic.  reset() restores the program image but keeps the
    buffer length, zeroing everything past the image.
  - Growth past `limit` cells is an allocation failure (MemoryExhausted).
"""

import logging
from array import array
from typing import Iterable, List, Optional, Sequence

from ..config import MAX_MEMORY_CELLS
from ..errors import MemoryExhausted, NegativeReadAddress, NegativeWriteAddress

log = logging.getLogger(__name__)

CELL_TYPECODE = "q"  # signed 64-bit


class Memory:
    """Flat, zero-filled, grow-on-demand Intcode memory."""

    def __init__(self, program: Optional[Sequence[int]] = None,
                 limit: int = MAX_MEMORY_CELLS):
        self.limit = limit
        self._mem = array(CELL_TYPECODE)
        if program is not None:
            self.load(program)

    # --- Core read/write ---

    def read(self, addr: int) -> int:
        """Read the cell at addr, growing memory if addr is past the end."""
        if addr < 0:
            raise NegativeReadAddress(addr)
        if addr >= len(self._mem):
            self._grow(addr + 1)
            return 0
        return self._mem[addr]

    def write(self, addr: int, value: int):
        """Write value at addr, growing memory if addr is past the end."""
        if addr < 0:
            raise NegativeWriteAddress(addr)
        if addr >= len(self._mem):
            self._grow(addr + 1)
        self._mem[addr] = value

    def _grow(self, size: int):
        if size > self.limit:
            raise MemoryExhausted(size - 1, self.limit)
        log.debug("memory grow %d -> %d cells", len(self._mem), size)
        self._mem.extend([0] * (size - len(self._mem)))

    # --- Bulk load ---

    def load(self, program: Iterable[int]):
        """Replace the whole buffer with a copy of program."""
        image = array(CELL_TYPECODE, program)
        if len(image) > self.limit:
            raise MemoryExhausted(len(image) - 1, self.limit)
        self._mem = image

    def reset(self, program: Sequence[int]):
        """Restore the program image without shrinking.

        Cells beyond the image (left from earlier growth) are zeroed.
        """
        size = len(self._mem)
        if size <= len(program):
            self.load(program)
            return
        self._mem[:len(program)] = array(CELL_TYPECODE, program)
        self._mem[len(program):] = array(CELL_TYPECODE, [0] * (size - len(program)))

    # --- Inspection ---

    @property
    def size(self) -> int:
        return len(self._mem)

    def __len__(self) -> int:
        return len(self._mem)

    def __getitem__(self, addr):
        return self._mem[addr]

    def snapshot(self, start: int = 0, end: Optional[int] = None) -> List[int]:
        """Copy of cells [start, end).  Does not grow memory."""
        return self._mem[start:end].tolist()

    def dump(self, start: int = 0, length: Optional[int] = None) -> str:
        """Comma-separated image of memory, same text format as a program file."""
        end = None if length is None else start + length
        return ",".join(str(v) for v in self._mem[start:end])
