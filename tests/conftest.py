"""Shared Intcode programs and fixtures for the test suite."""

import pytest

# Equality check against 8 (position mode)
EQ8_POS = [3, 9, 8, 9, 10, 9, 4, 9, 99, -1, 8]

# Chain-mode example programs with their best phases / signals
CHAIN_43210 = [3, 15, 3, 16, 1002, 16, 10, 16, 1, 16, 15, 15, 4, 15, 99, 0, 0]
CHAIN_54321 = [3, 23, 3, 24, 1002, 24, 10, 24, 1002, 23, -1, 23,
               101, 5, 23, 23, 1, 24, 23, 23, 4, 23, 99, 0, 0]
CHAIN_65210 = [3, 31, 3, 32, 1002, 32, 10, 32, 1001, 31, -2, 31, 1007, 31, 0, 33,
               1002, 33, 7, 33, 1, 33, 31, 31, 1, 32, 31, 31, 4, 31, 99, 0, 0, 0]

# Feedback-mode example programs
FEEDBACK_139629729 = [3, 26, 1001, 26, -4, 26, 3, 27, 1002, 27, 2, 27, 1, 27, 26,
                      27, 4, 27, 1001, 28, -1, 28, 1005, 28, 6, 99, 0, 0, 5]
FEEDBACK_18216 = [3, 52, 1001, 52, -5, 52, 3, 53, 1, 52, 56, 54, 1007, 54, 5, 55,
                  1005, 55, 26, 1001, 54, -5, 54, 1105, 1, 12, 1, 53, 54, 53, 1008,
                  54, 0, 55, 1001, 55, 1, 55, 2, 53, 55, 53, 4, 53, 1001, 56, -1,
                  56, 1005, 56, 6, 99, 0, 0, 0, 0, 10]

# Reads phase and signal, outputs phase + signal, halts
PHASE_SUM = [3, 11, 3, 12, 1, 11, 12, 13, 4, 13, 99, 0, 0, 0]

# Reads phase p and x, outputs x three times, then reads a and b and
# outputs a + b + p.  Emits faster than a neighbour running it consumes.
BURST = [3, 25, 3, 26, 4, 26, 4, 26, 4, 26, 3, 27, 3, 28, 1, 27, 28, 29,
         1, 29, 25, 29, 4, 29, 99, 0, 0, 0, 0, 0]


@pytest.fixture
def program_file(tmp_path):
    """Factory: write program text to a file and return its path."""
    def _write(text, name="program.txt"):
        if not isinstance(text, str):
            text = ",".join(str(v) for v in text)
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
