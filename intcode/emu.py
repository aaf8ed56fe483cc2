"""
Intcode VM — Machine Instance / Execution Engine

Integrates:
  - Registers (cpu/regs.py)     ip, relative base, state, step count
  - Memory (mem/memory.py)      growable signed 64-bit cells
  - Decoder (cpu/decoder.py)    opcode + addressing modes
  - ALU (cpu/alu.py)            wrapped 64-bit arithmetic
  - Input Channel (periph/)     where INP instructions read from

Execution model (one step):
  1. Fetch the cell at IP.  IP outside [0, size) is a fault, and so is an
     instruction whose operand cells run past the end of memory.
  2. Decode opcode and addressing modes.
  3. Resolve read operands to values and the write operand to an address.
  4. Advance IP past the instruction, then apply the effect.

Suspension points (control returns to the caller):
  OUTPUT      OUT produced a value (in `machine.output`); the next run()
              resumes at the following instruction
  NEED_INPUT  INP found the input channel empty with no boundary source;
              IP stays on the INP so it re-executes once input arrives
  HALT        HLT executed; the machine never runs again until reset
  FAULT       a MachineFault was raised (kept in `machine.fault`)
  TIMEOUT     run(max_steps) budget used up

Faults are never retried.  Callers that drive machines (Pipeline, CLI)
re-raise `machine.fault` so the process terminates with its exit code.
"""

import logging
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence

from .config import MAX_MEMORY_CELLS
from .cpu import alu
from .cpu.decoder import (
    decode, disassemble,
    IMM, REL,
    NOP, ADD, MUL, INP, OUT, JNZ, JPZ, CLT, CEQ, ARB, HLT,
)
from .cpu.regs import MachineState, Registers
from .errors import (
    InputUnavailable, IPOutOfBounds, MachineFault, StepLimitExceeded,
)
from .mem.memory import Memory
from .periph.channel import Channel

log = logging.getLogger(__name__)


class StopReason(Enum):
    OUTPUT = 'OUTPUT'
    HALT = 'HALT'
    NEED_INPUT = 'NEED_INPUT'
    TIMEOUT = 'TIMEOUT'
    FAULT = 'FAULT'


class IntcodeMachine:
    """One Intcode machine instance.

    Usage:
        vm = IntcodeMachine([3, 9, 8, 9, 10, 9, 4, 9, 99, -1, 8])
        vm.feed(8)
        vm.run()        # StopReason.OUTPUT
        vm.output       # 1
        vm.run()        # StopReason.HALT
    """

    def __init__(self, program: Optional[Sequence[int]] = None,
                 inputs: Optional[Channel] = None, name: str = 'vm',
                 memory_limit: int = MAX_MEMORY_CELLS):
        self.name = name
        self.regs = Registers()
        self.mem = Memory(limit=memory_limit)
        self.inputs = inputs if inputs is not None else Channel(name=f"{name}.in")

        self.output: Optional[int] = None
        self.fault: Optional[MachineFault] = None
        self._image: tuple = ()

        self._trace = False
        self._trace_output: List[str] = []

        self._dispatch = self._build_dispatch()

        if program is not None:
            self.load(program)

    # ══════════════════════════════════════════════
    # Loading / reset
    # ══════════════════════════════════════════════

    def load(self, program: Iterable[int]):
        """Load a new program image, replacing memory entirely."""
        self._image = tuple(program)
        self.mem.load(self._image)
        self._clear_state()

    def reset(self, program: Optional[Sequence[int]] = None):
        """Restore memory to the program image and clear all registers.

        Memory keeps its grown length; cells past the image read as 0.
        The input channel is emptied.
        """
        if program is not None:
            self._image = tuple(program)
        self.mem.reset(self._image)
        self.inputs.clear()
        self._clear_state()

    def _clear_state(self):
        self.regs.reset()
        self.output = None
        self.fault = None
        self._trace_output.clear()

    def feed(self, *values: int):
        """Queue values on this machine's input channel."""
        self.inputs.extend(values)

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    @property
    def state(self) -> MachineState:
        return self.regs.state

    @property
    def halted(self) -> bool:
        return self.regs.halted

    def step(self) -> Optional[StopReason]:
        """Execute one instruction.  Returns a StopReason if control should
        go back to the caller, else None."""
        if self.regs.halted:
            return StopReason.HALT
        if self.regs.faulted:
            return StopReason.FAULT
        try:
            return self._step()
        except MachineFault as e:
            self.regs.state = MachineState.FAULTED
            self.fault = e
            log.debug("%s faulted at ip=%d: %s", self.name, self.regs.ip, e)
            return StopReason.FAULT

    def run(self, max_steps: Optional[int] = None) -> StopReason:
        """Run until output, halt, input starvation, fault or step budget."""
        executed = 0
        while True:
            if max_steps is not None and executed >= max_steps:
                return StopReason.TIMEOUT
            reason = self.step()
            if reason is not None:
                return reason
            executed += 1

    def run_to_halt(self, on_output: Optional[Callable[[int], None]] = None,
                    max_steps: Optional[int] = None) -> List[int]:
        """Run to completion, collecting every output value.

        Raises the recorded fault on FAULT, InputUnavailable if the machine
        starves, StepLimitExceeded if max_steps instructions are not enough.
        """
        outputs = []
        start = self.regs.steps
        while True:
            budget = None if max_steps is None else max_steps - (self.regs.steps - start)
            reason = self.run(budget)
            if reason is StopReason.OUTPUT:
                outputs.append(self.output)
                if on_output is not None:
                    on_output(self.output)
            elif reason is StopReason.HALT:
                return outputs
            elif reason is StopReason.FAULT:
                raise self.fault
            elif reason is StopReason.NEED_INPUT:
                raise InputUnavailable(
                    f"{self.name} needs input at ip={self.regs.ip} "
                    f"but its channel is empty")
            else:
                raise StepLimitExceeded(
                    f"{self.name} did not halt within {max_steps} steps")

    def _step(self) -> Optional[StopReason]:
        ip = self.regs.ip
        size = self.mem.size
        if not 0 <= ip < size:
            raise IPOutOfBounds(ip, size)

        cell = self.mem[ip]
        ins = decode(cell)
        if ip + ins.width > size:
            raise IPOutOfBounds(ip + ins.width - 1, size,
                                f"{ins.mnemonic} at {ip} runs past end of memory")
        raw = [self.mem[ip + 1 + i] for i in range(ins.reads + ins.writes)]

        if ins.opcode == INP and not self.inputs.ready:
            self.regs.state = MachineState.SUSPENDED
            return StopReason.NEED_INPUT

        values = [self._operand_value(mode, r)
                  for mode, r in zip(ins.modes[:ins.reads], raw[:ins.reads])]
        target = self._operand_address(ins.modes[-1], raw[-1]) if ins.writes else None

        if self._trace:
            self._trace_output.append(
                f"{ip:6d}: {disassemble(cell, raw):28s} RB={self.regs.relative_base}")

        self.regs.ip = ip + ins.width
        self.regs.state = MachineState.RUNNING
        self.regs.steps += 1

        handler = self._dispatch.get(ins.opcode, self._op_nop)
        return handler(values, target)

    # ══════════════════════════════════════════════
    # Operand resolution
    # ══════════════════════════════════════════════

    def _operand_value(self, mode: int, raw: int) -> int:
        if mode == IMM:
            return raw
        if mode == REL:
            return self.mem.read(self.regs.relative_base + raw)
        return self.mem.read(raw)

    def _operand_address(self, mode: int, raw: int) -> int:
        """Write-target address.  IMM is rejected by the decoder."""
        if mode == REL:
            return self.regs.relative_base + raw
        return raw

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Handler signature: handler(values, target) -> Optional[StopReason]

    def _build_dispatch(self) -> dict:
        return {
            NOP: self._op_nop,
            ADD: self._op_add,
            MUL: self._op_mul,
            INP: self._op_inp,
            OUT: self._op_out,
            JNZ: self._op_jnz,
            JPZ: self._op_jpz,
            CLT: self._op_clt,
            CEQ: self._op_ceq,
            ARB: self._op_arb,
            HLT: self._op_hlt,
        }

    def _op_nop(self, values, target):
        return None

    def _op_add(self, values, target):
        self.mem.write(target, alu.add(values[0], values[1]))

    def _op_mul(self, values, target):
        self.mem.write(target, alu.mul(values[0], values[1]))

    def _op_inp(self, values, target):
        self.mem.write(target, alu.to_int64(self.inputs.pop()))

    def _op_out(self, values, target):
        self.output = values[0]
        self.regs.state = MachineState.SUSPENDED
        return StopReason.OUTPUT

    def _op_jnz(self, values, target):
        if values[0]:
            self.regs.ip = values[1]

    def _op_jpz(self, values, target):
        if not values[0]:
            self.regs.ip = values[1]

    def _op_clt(self, values, target):
        self.mem.write(target, alu.lt(values[0], values[1]))

    def _op_ceq(self, values, target):
        self.mem.write(target, alu.eq(values[0], values[1]))

    def _op_arb(self, values, target):
        self.regs.relative_base = alu.add(self.regs.relative_base, values[0])

    def _op_hlt(self, values, target):
        self.regs.state = MachineState.HALTED
        log.debug("%s halted after %d steps", self.name, self.regs.steps)
        return StopReason.HALT

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Record one line per executed instruction."""
        self._trace = enable

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)


def execute(program: Sequence[int], inputs: Iterable[int] = (),
            max_steps: Optional[int] = None) -> List[int]:
    """Run a program to completion on the given inputs, return its outputs."""
    vm = IntcodeMachine(program)
    vm.feed(*inputs)
    return vm.run_to_halt(max_steps=max_steps)
