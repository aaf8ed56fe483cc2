#!/usr/bin/env python3
"""
intcodekit — Intcode VM Toolkit
===============================

One CLI for everything:
    intcodekit run    — Run a program standalone (stdin in, stdout out)
    intcodekit pipe   — Run one phase configuration through a pipeline
    intcodekit amp    — Search all phase permutations for the best output
    intcodekit perms  — List permutations of 1..N in lexicographic order

Usage:
    python intcodekit.py <command> [options]
    python intcodekit.py <command> --help

Examples:
    python intcodekit.py run diag.txt -i 1
    python intcodekit.py run diag.txt --repeat 2
    python intcodekit.py run gravity.txt --set 1=12 --set 2=2 --peek 0
    python intcodekit.py pipe amp.txt --phases 9,8,7,6,5 --feedback
    python intcodekit.py amp amp.txt --mode feedback -v
    python intcodekit.py perms 4

Exit codes are listed in intcode.errors.ExitCode: 0 on success, a distinct
non-zero code for each load error and each machine fault.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from intcode import __version__
from intcode.config import (
    DEFAULT_MAX_STEPS, DEFAULT_SIGNAL, DEFAULT_STAGES, PIPELINE_PROFILES,
)
from intcode.cpu.alu import to_int64
from intcode.emu import IntcodeMachine
from intcode.errors import ExitCode, IntcodeError, exit_code_for
from intcode.loader import load_program
from intcode.log_setup import level_from_verbosity, setup_logging
from intcode.periph.channel import Channel, OverflowPolicy
from intcode.periph.console import ConsoleSource, write_int
from intcode.pipeline import Pipeline
from intcode.search import permutations, search_profile

log = logging.getLogger("intcode.cli")


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that exits with ExitCode.USAGE instead of 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(int(ExitCode.USAGE), f"{self.prog}: error: {message}\n")


def _int_list(text: str) -> tuple:
    """Parse '4,3,2,1,0' into a tuple of ints."""
    try:
        return tuple(int(p) for p in text.replace(' ', '').split(',') if p)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated integers, got {text!r}")


def _assignment(text: str) -> tuple:
    """Parse 'ADDR=VALUE' into (addr, value)."""
    addr, sep, value = text.partition('=')
    try:
        if not sep:
            raise ValueError
        return int(addr, 0), int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected ADDR=VALUE, got {text!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="intcodekit",
        description="Intcode VM toolkit: run programs, drive pipelines, search phases",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="modes: " + ", ".join(
            f"{k} ({v['description']})" for k, v in PIPELINE_PROFILES.items()),
    )
    parser.add_argument("--version", action="version", version=f"intcodekit {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="More log output (-v info, -vv debug)")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Only log errors")
    parser.add_argument("--log-file", default=None,
                        help="Also write a full DEBUG log to this file")
    sub = parser.add_subparsers(dest="command", metavar="command")

    # ── run ──────────────────────────────────────────────────────────────
    p_run = sub.add_parser("run", help="Run a program standalone")
    p_run.add_argument("program", help="Program file (comma-separated integers)")
    p_run.add_argument("-i", "--input", type=int, action="append", default=[],
                       help="Queue an input value before falling back to stdin (repeatable)")
    p_run.add_argument("--repeat", type=int, default=1,
                       help="Run N times, resetting memory between runs (default: 1)")
    p_run.add_argument("--set", type=_assignment, action="append", default=[],
                       metavar="ADDR=VALUE", help="Patch memory before each run (repeatable)")
    p_run.add_argument("--peek", type=lambda x: int(x, 0), action="append", default=[],
                       metavar="ADDR", help="Print mem[ADDR] after each run (repeatable)")
    p_run.add_argument("--dump", action="store_true",
                       help="Print the final memory image (program file format) after each run")
    p_run.add_argument("--trace", action="store_true",
                       help="Print an instruction trace to stderr after each run")
    p_run.add_argument("--max-steps", type=int, default=DEFAULT_MAX_STEPS,
                       help="Abort a run after this many instructions")

    # ── pipe ─────────────────────────────────────────────────────────────
    p_pipe = sub.add_parser("pipe", help="Evaluate one phase configuration")
    p_pipe.add_argument("program", help="Program file")
    p_pipe.add_argument("--phases", type=_int_list, required=True,
                        help="Phase per stage, e.g. 4,3,2,1,0 (also sets stage count)")
    p_pipe.add_argument("--feedback", action="store_true",
                        help="Route the last stage back into the first until it halts")
    _add_pipeline_options(p_pipe)

    # ── amp ──────────────────────────────────────────────────────────────
    p_amp = sub.add_parser("amp", help="Search phase permutations for the best output")
    p_amp.add_argument("program", help="Program file")
    p_amp.add_argument("--mode", default="chain", choices=list(PIPELINE_PROFILES.keys()),
                       help="Pipeline profile (default: chain)")
    p_amp.add_argument("--phases", type=_int_list, default=None,
                       help="Override the profile's phase values")
    p_amp.add_argument("--show-phases", action="store_true",
                       help="Also print the winning phase sequence")
    _add_pipeline_options(p_amp)

    # ── perms ────────────────────────────────────────────────────────────
    p_perm = sub.add_parser("perms", help="List permutations of 1..N")
    p_perm.add_argument("n", type=int, nargs="?", default=DEFAULT_STAGES,
                        help=f"Number of elements (default: {DEFAULT_STAGES})")

    return parser


def _add_pipeline_options(p):
    p.add_argument("--signal", type=int, default=DEFAULT_SIGNAL,
                   help=f"Initial signal into stage 0 (default: {DEFAULT_SIGNAL})")
    p.add_argument("--capacity", type=int, default=None,
                   help="Bound each inter-stage channel (default: unbounded)")
    p.add_argument("--drain", action="store_true",
                   help="On a full channel print the value instead of holding the producer")
    p.add_argument("--max-steps", type=int, default=DEFAULT_MAX_STEPS,
                   help="Abort a stage after this many instructions without output")


# ═════════════════════════════════════════════════════════════════════════════
# COMMAND IMPLEMENTATIONS
# ═════════════════════════════════════════════════════════════════════════════

# ── run ──────────────────────────────────────────────────────────────────
def cmd_run(args) -> int:
    program = load_program(args.program)
    vm = IntcodeMachine(program, inputs=Channel(source=ConsoleSource(), name="stdin"),
                        name="main")
    vm.enable_trace(args.trace)

    for n in range(args.repeat):
        vm.reset()
        for addr, value in args.set:
            vm.mem.write(addr, to_int64(value))
        vm.feed(*args.input)
        log.debug("run %d/%d", n + 1, args.repeat)
        try:
            vm.run_to_halt(on_output=write_int, max_steps=args.max_steps)
        finally:
            if args.trace:
                print(vm.get_trace(), file=sys.stderr)
        for addr in args.peek:
            print(f"mem[{addr}] = {vm.mem.read(addr)}")
        if args.dump:
            print(vm.mem.dump())
        log.info("run %d: halted after %d steps, %d cells",
                 n + 1, vm.regs.steps, vm.mem.size)
    return ExitCode.OK


def _policy(args) -> OverflowPolicy:
    return OverflowPolicy.DRAIN if args.drain else OverflowPolicy.BLOCK


# ── pipe ─────────────────────────────────────────────────────────────────
def cmd_pipe(args) -> int:
    program = load_program(args.program)
    pipeline = Pipeline(program, stages=len(args.phases), feedback=args.feedback,
                        capacity=args.capacity, policy=_policy(args),
                        max_steps=args.max_steps)
    result = pipeline.run(args.phases, args.signal)
    log.info("%d rounds", pipeline.rounds)
    if result is None:
        print("(no output)")
    else:
        print(result)
    return ExitCode.OK


# ── amp ──────────────────────────────────────────────────────────────────
def cmd_amp(args) -> int:
    program = load_program(args.program)
    kwargs = dict(signal=args.signal, capacity=args.capacity,
                  policy=_policy(args), max_steps=args.max_steps)
    if args.phases is not None:
        kwargs['phases'] = args.phases
    result = search_profile(program, args.mode, **kwargs)
    if not result.found:
        print("(no output)")
        return ExitCode.OK
    print(result.signal)
    if args.show_phases:
        print(",".join(str(p) for p in result.phases))
    return ExitCode.OK


# ── perms ────────────────────────────────────────────────────────────────
def cmd_perms(args) -> int:
    for perm in permutations(range(1, args.n + 1)):
        print(" ".join(str(x) for x in perm))
    return ExitCode.OK


COMMANDS = {
    "run": cmd_run,
    "pipe": cmd_pipe,
    "amp": cmd_amp,
    "perms": cmd_perms,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return ExitCode.USAGE

    setup_logging(console_level=level_from_verbosity(args.verbose, args.quiet),
                  log_file=args.log_file, rich_tracebacks=args.verbose >= 2)

    try:
        return int(COMMANDS[args.command](args))
    except IntcodeError as e:
        log.debug("%s failed", args.command, exc_info=True)
        log.error("%s", e)
        return exit_code_for(e)
    except MemoryError as e:
        log.error("Out of memory")
        return exit_code_for(e)
    except KeyboardInterrupt:
        log.warning("Interrupted")
        return ExitCode.INTERNAL
    except Exception as e:
        log.exception("Internal error in %s: %s", args.command, e)
        return exit_code_for(e)


if __name__ == "__main__":
    sys.exit(main())
