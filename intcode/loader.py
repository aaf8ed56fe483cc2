"""
Intcode VM — Program Loader

Program files are one line (or stream) of signed decimal integers separated
by commas.  The image size comes from counting commas (n commas = n + 1
integers); the parsed integer count must match it exactly.

  missing / unreadable file          ProgramNotFound       (exit 2)
  empty, no commas, non-integer,
  value outside signed 64-bit        ProgramFormatError    (exit 4)
  integer count != commas + 1        ProgramCountMismatch  (exit 5)
  image larger than memory ceiling   ProgramTooLarge       (exit 3)
"""

import logging
import re
from pathlib import Path
from typing import List, Union

from .config import MAX_MEMORY_CELLS
from .cpu.alu import fits_int64
from .errors import (
    ProgramCountMismatch, ProgramFormatError, ProgramNotFound, ProgramTooLarge,
)

log = logging.getLogger(__name__)

_INTEGER = re.compile(r'[+-]?\d+')


def parse_program(text: str, limit: int = MAX_MEMORY_CELLS) -> List[int]:
    """Parse comma-separated program text into a memory image."""
    text = text.strip()
    if not text:
        raise ProgramFormatError("Invalid file: empty program")
    expected = text.count(',') + 1
    if expected == 1:
        raise ProgramFormatError("Invalid file: no comma-separated instructions")
    if expected > limit:
        raise ProgramTooLarge(f"Out of memory: {expected} cells exceeds limit of {limit}")

    image = []
    for index, token in enumerate(text.split(',')):
        token = token.strip()
        if not token:
            # empty slot between commas: the count check below reports it
            continue
        if not _INTEGER.fullmatch(token):
            raise ProgramFormatError(
                f"Invalid file: item {index} is not an integer: {token[:20]!r}")
        value = int(token)
        if not fits_int64(value):
            raise ProgramFormatError(
                f"Invalid file: item {index} does not fit in 64 bits: {token}")
        image.append(value)

    if len(image) != expected:
        raise ProgramCountMismatch(expected, len(image))
    return image


def load_program(path: Union[str, Path], limit: int = MAX_MEMORY_CELLS) -> List[int]:
    """Read and parse a program file."""
    try:
        text = Path(path).read_text(encoding='utf-8')
    except (FileNotFoundError, IsADirectoryError, PermissionError) as e:
        raise ProgramNotFound(f"File not found: {path}") from e
    except UnicodeDecodeError as e:
        raise ProgramFormatError(f"Invalid file: {path} is not text") from e
    image = parse_program(text, limit=limit)
    log.info("loaded %s: %d cells", path, len(image))
    return image
