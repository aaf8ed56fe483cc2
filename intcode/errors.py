"""
Intcode VM — Error Taxonomy and Process Exit Codes

Two families, both fatal at the process boundary:

  Load-time   ProgramLoadError   file missing, malformed text, count mismatch,
                                 image too large
  Run-time    MachineFault       instruction pointer out of bounds, negative
                                 read/write address, bad addressing mode,
                                 memory growth ceiling hit

Every error carries the exit code the CLI terminates with.  Nothing inside
the VM retries or recovers from these.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    OK = 0
    USAGE = 1
    FILE_NOT_FOUND = 2
    OUT_OF_MEMORY = 3
    BAD_FORMAT = 4
    COUNT_MISMATCH = 5
    IP_OUT_OF_BOUNDS = 6
    NEGATIVE_READ = 7
    NEGATIVE_WRITE = 8
    INVALID_MODE = 9
    DEADLOCK = 10
    INTERNAL = 11
    TIMEOUT = 12


class IntcodeError(Exception):
    """Base class for every error the toolkit reports."""
    exit_code = ExitCode.INTERNAL


# ──────────────────────────────────────────────
# Load-time errors
# ──────────────────────────────────────────────

class ProgramLoadError(IntcodeError):
    exit_code = ExitCode.BAD_FORMAT


class ProgramNotFound(ProgramLoadError):
    exit_code = ExitCode.FILE_NOT_FOUND


class ProgramFormatError(ProgramLoadError):
    exit_code = ExitCode.BAD_FORMAT


class ProgramCountMismatch(ProgramLoadError):
    exit_code = ExitCode.COUNT_MISMATCH

    def __init__(self, expected: int, parsed: int):
        super().__init__(
            f"Invalid file: expected {expected} integers "
            f"(commas + 1), parsed {parsed}")
        self.expected = expected
        self.parsed = parsed


class ProgramTooLarge(ProgramLoadError):
    exit_code = ExitCode.OUT_OF_MEMORY


# ──────────────────────────────────────────────
# Execution faults
# ──────────────────────────────────────────────

class MachineFault(IntcodeError):
    """Unrecoverable program well-formedness violation."""


class IPOutOfBounds(MachineFault):
    exit_code = ExitCode.IP_OUT_OF_BOUNDS

    def __init__(self, ip: int, size: int, detail: str = ""):
        msg = f"Instruction pointer {ip} outside memory [0, {size})"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)
        self.ip = ip
        self.size = size


class NegativeAddress(MachineFault):
    access = "access"

    def __init__(self, addr: int):
        super().__init__(f"Negative address {addr} in {self.access}")
        self.addr = addr


class NegativeReadAddress(NegativeAddress):
    exit_code = ExitCode.NEGATIVE_READ
    access = "read"


class NegativeWriteAddress(NegativeAddress):
    exit_code = ExitCode.NEGATIVE_WRITE
    access = "write"


class InvalidAddressingMode(MachineFault):
    exit_code = ExitCode.INVALID_MODE


class MemoryExhausted(MachineFault):
    exit_code = ExitCode.OUT_OF_MEMORY

    def __init__(self, requested: int, limit: int):
        super().__init__(
            f"Out of memory: address {requested} exceeds limit of {limit} cells")
        self.requested = requested
        self.limit = limit


# ──────────────────────────────────────────────
# Orchestration
# ──────────────────────────────────────────────

class PipelineDeadlock(IntcodeError):
    """No stage can make progress but the terminal stage has not halted."""
    exit_code = ExitCode.DEADLOCK


class InputUnavailable(IntcodeError):
    """A machine asked for input that no channel or boundary can supply."""
    exit_code = ExitCode.DEADLOCK


class StepLimitExceeded(IntcodeError):
    exit_code = ExitCode.TIMEOUT


def exit_code_for(exc: BaseException) -> int:
    """Map any exception to the process exit code the CLI should use."""
    if isinstance(exc, IntcodeError):
        return int(exc.exit_code)
    if isinstance(exc, MemoryError):
        return int(ExitCode.OUT_OF_MEMORY)
    return int(ExitCode.INTERNAL)
