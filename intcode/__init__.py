"""
Intcode Virtual Machine and Phase-Search Toolkit
================================================
A stored-program VM that runs a flat list of signed 64-bit integers as both
code and data, plus an orchestrator that wires several machines into a
chain or feedback loop and searches phase settings for the best output.

Architecture:
    ┌──────────┐    ┌──────────┐    ┌───────────┐    ┌──────────┐    ┌──────────┐
    │ Program  │───>│  Memory  │───>│  Machine  │───>│ Pipeline │───>│  Search  │
    │ (.txt)   │    │ (cells)  │    │ (step/run)│    │ (N VMs)  │    │ (N! runs)│
    └──────────┘    └──────────┘    └───────────┘    └──────────┘    └──────────┘

    - loader.py:          comma-separated text -> program image
    - mem/memory.py:      grow-on-demand signed 64-bit cells
    - cpu/decoder.py:     opcode + addressing-mode decoding
    - cpu/alu.py:         wrapped 64-bit arithmetic
    - cpu/regs.py:        ip, relative base, machine state
    - periph/channel.py:  FIFO between machines, console fallback
    - emu.py:             fetch-decode-execute, suspends on output
    - pipeline.py:        chain / feedback-loop scheduler
    - search.py:          lexicographic permutation search
"""

__version__ = "0.1.0"

from .emu import IntcodeMachine, StopReason, execute
from .errors import ExitCode, IntcodeError, MachineFault, ProgramLoadError
from .loader import load_program, parse_program
from .periph.channel import Channel, OverflowPolicy
from .pipeline import Pipeline
from .search import SearchResult, next_permutation, permutations, search

__all__ = [
    "IntcodeMachine", "StopReason", "execute",
    "ExitCode", "IntcodeError", "MachineFault", "ProgramLoadError",
    "load_program", "parse_program",
    "Channel", "OverflowPolicy",
    "Pipeline",
    "SearchResult", "next_permutation", "permutations", "search",
]
