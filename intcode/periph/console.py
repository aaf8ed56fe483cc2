"""
Intcode VM — Process Boundary I/O

What a machine talks to when it is not wired to another machine:

  read_int()   one line from stdin, C atoi() semantics, `? ` prompt only
               when stdin is a terminal
  write_int()  one decimal integer per line on stdout
"""

import re
import sys
from typing import Optional, TextIO

from ..config import PROMPT
from ..cpu.alu import to_int64

_LEADING_INT = re.compile(r'\s*([+-]?\d+)')


def parse_int(text: str) -> int:
    """atoi(): leading whitespace, optional sign, leading digits.

    Anything that does not start like a number yields 0.
    """
    m = _LEADING_INT.match(text)
    if m is None:
        return 0
    return to_int64(int(m.group(1)))


def _is_tty(stream) -> bool:
    isatty = getattr(stream, 'isatty', None)
    return bool(isatty and isatty())


def read_int(stream: Optional[TextIO] = None, prompt: Optional[str] = PROMPT,
             out: Optional[TextIO] = None) -> int:
    """Read one integer from the input boundary.  EOF reads as 0."""
    stream = stream if stream is not None else sys.stdin
    out = out if out is not None else sys.stdout
    if prompt and _is_tty(stream):
        out.write(prompt)
        out.flush()
    line = stream.readline()
    if not line:
        return 0
    return parse_int(line)


def write_int(value: int, stream: Optional[TextIO] = None):
    stream = stream if stream is not None else sys.stdout
    print(value, file=stream)


class ConsoleSource:
    """Callable input source bound to a stream, for Channel(source=...)."""

    def __init__(self, stream: Optional[TextIO] = None,
                 prompt: Optional[str] = PROMPT, out: Optional[TextIO] = None):
        self.stream = stream
        self.prompt = prompt
        self.out = out

    def __call__(self) -> int:
        return read_int(self.stream, self.prompt, self.out)
