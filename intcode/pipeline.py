"""
Intcode VM — Pipeline Orchestrator

N machines built from one program image, wired stage i -> stage i+1 through
Channels.  Every stage's input channel is seeded with its phase value; the
first stage additionally gets the starting signal.

  chain      each stage runs once, until its first output, in index order;
             the last stage's output is the result
  feedback   the last stage's output is also routed back to stage 0, and
             stages are run round-robin until the last stage halts; the
             last value it produced is the result

Scheduling is single-threaded and deterministic.  Channels are only ever
touched between machine runs, so they need no locking.

Backpressure (BLOCK policy): a stage always runs while it is not halted.  If
its output cannot be pushed because the downstream channel is full, the
value is held in that stage's pending slot and the stage stays blocked until
the push succeeds; pending pushes are retried at the start of every pass.
A pass in which nothing moves raises PipelineDeadlock.
"""

import logging
from typing import List, Optional, Sequence

from .config import DEFAULT_CHANNEL_CAPACITY, DEFAULT_SIGNAL, DEFAULT_STAGES, MAX_MEMORY_CELLS
from .emu import IntcodeMachine, StopReason
from .errors import PipelineDeadlock, StepLimitExceeded
from .periph.channel import Channel, OverflowPolicy

log = logging.getLogger(__name__)

# one phase value plus the first signal
MIN_PIPELINE_CAPACITY = 2


class Pipeline:
    """A chain or feedback loop of Intcode machines."""

    def __init__(self, program: Sequence[int], stages: int = DEFAULT_STAGES,
                 feedback: bool = False,
                 capacity: Optional[int] = DEFAULT_CHANNEL_CAPACITY,
                 policy: OverflowPolicy = OverflowPolicy.BLOCK,
                 max_steps: Optional[int] = None,
                 memory_limit: int = MAX_MEMORY_CELLS):
        if stages < 1:
            raise ValueError(f"Pipeline needs at least one stage, got {stages}")
        if capacity is not None and capacity < MIN_PIPELINE_CAPACITY:
            raise ValueError(
                f"Pipeline channels need capacity >= {MIN_PIPELINE_CAPACITY}, got {capacity}")
        self.program = tuple(program)
        self.feedback = feedback
        self.max_steps = max_steps
        self.channels: List[Channel] = [
            Channel(capacity, policy, name=f"amp{i}.in") for i in range(stages)
        ]
        self.machines: List[IntcodeMachine] = [
            IntcodeMachine(self.program, inputs=self.channels[i], name=f"amp{i}",
                           memory_limit=memory_limit)
            for i in range(stages)
        ]
        self.pending: List[Optional[int]] = [None] * stages
        self.rounds = 0

    def __len__(self) -> int:
        return len(self.machines)

    def reset(self):
        """Fresh copy of the program image in every stage, empty channels."""
        for vm in self.machines:
            vm.reset(self.program)
        self.pending = [None] * len(self.machines)
        self.rounds = 0

    def run(self, phases: Sequence[int], signal: int = DEFAULT_SIGNAL) -> Optional[int]:
        """Evaluate one phase configuration.

        Returns the final output, or None if the last stage halted without
        producing one.  Machine faults propagate as their MachineFault.
        """
        if len(phases) != len(self.machines):
            raise ValueError(
                f"Expected {len(self.machines)} phase values, got {len(phases)}")
        self.reset()
        for channel, phase in zip(self.channels, phases):
            channel.push(phase)
        self.channels[0].push(signal)

        result = self._run_feedback() if self.feedback else self._run_chain()
        log.debug("phases %s -> %s (%d rounds)", tuple(phases), result, self.rounds)
        return result

    # ══════════════════════════════════════════════
    # Scheduling
    # ══════════════════════════════════════════════

    def _run_stage(self, index: int) -> StopReason:
        vm = self.machines[index]
        reason = vm.run(self.max_steps)
        if reason is StopReason.FAULT:
            raise vm.fault
        if reason is StopReason.TIMEOUT:
            raise StepLimitExceeded(
                f"{vm.name} exceeded {self.max_steps} steps without output or halt")
        return reason

    def _run_chain(self) -> Optional[int]:
        result = None
        last = len(self.machines) - 1
        for i, vm in enumerate(self.machines):
            reason = self._run_stage(i)
            if reason is StopReason.NEED_INPUT:
                raise PipelineDeadlock(f"{vm.name} starved for input in a single pass")
            if reason is StopReason.OUTPUT:
                if i == last:
                    result = vm.output
                else:
                    self.channels[i + 1].push(vm.output)
        self.rounds = 1
        return result

    def _deliver(self, index: int, value: int) -> bool:
        """Push a stage's output downstream, or hold it if the channel is full."""
        downstream = self.channels[(index + 1) % len(self.machines)]
        if downstream.full and downstream.policy is OverflowPolicy.BLOCK:
            self.pending[index] = value
            return False
        downstream.push(value)
        self.pending[index] = None
        return True

    def _run_feedback(self) -> Optional[int]:
        terminal = self.machines[-1]
        result = None
        while not terminal.halted:
            self.rounds += 1
            progress = False
            for i, vm in enumerate(self.machines):
                if self.pending[i] is not None:
                    if not self._deliver(i, self.pending[i]):
                        continue
                    progress = True
                if vm.halted:
                    continue

                before = vm.regs.steps
                reason = self._run_stage(i)
                if vm.regs.steps != before:
                    progress = True
                if reason is StopReason.OUTPUT:
                    if vm is terminal:
                        result = vm.output
                    self._deliver(i, vm.output)
            if not progress:
                blocked = [vm.name for vm, held in zip(self.machines, self.pending)
                           if held is not None]
                raise PipelineDeadlock(
                    f"no stage could run in round {self.rounds}: "
                    + ", ".join(f"{vm.name}={vm.state.value}" for vm in self.machines)
                    + (f"; blocked on full channel: {', '.join(blocked)}" if blocked else ""))
        return result
