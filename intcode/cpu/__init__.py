from .decoder import Instruction, decode, arity
from .regs import Registers, MachineState

__all__ = ["Instruction", "decode", "arity", "Registers", "MachineState"]
