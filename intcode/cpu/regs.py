"""
Intcode VM — Machine Register Set

  ip             instruction pointer (cell index of next instruction)
  relative_base  offset added to relative-mode addresses
  state          RUNNING / SUSPENDED / HALTED / FAULTED
  steps          executed-instruction counter
"""

from enum import Enum


class MachineState(Enum):
    RUNNING = 'RUNNING'
    SUSPENDED = 'SUSPENDED'   # yielded an output or waiting for input
    HALTED = 'HALTED'
    FAULTED = 'FAULTED'


class Registers:
    """Per-instance register file."""

    __slots__ = ('ip', 'relative_base', 'state', 'steps')

    def __init__(self):
        self.ip: int = 0
        self.relative_base: int = 0
        self.state: MachineState = MachineState.RUNNING
        self.steps: int = 0

    @property
    def halted(self) -> bool:
        return self.state is MachineState.HALTED

    @property
    def faulted(self) -> bool:
        return self.state is MachineState.FAULTED

    def reset(self):
        self.ip = 0
        self.relative_base = 0
        self.state = MachineState.RUNNING
        self.steps = 0
