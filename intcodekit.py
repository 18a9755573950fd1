#!/usr/bin/env python3
"""
intcodekit — Intcode Machine Toolkit
=====================================

One CLI for everything:
    intcodekit run      — Run a program, print outputs and memory cells
    intcodekit disasm   — Disassemble a program
    intcodekit amplify  — Search phase settings for an amplifier pipeline

Usage:
    python intcodekit.py <command> [options]
    python intcodekit.py <command> --help

Examples:
    python intcodekit.py run day5.txt -i 1
    python intcodekit.py run day2.txt --poke 1=12 --poke 2=2 --peek 0
    python intcodekit.py disasm day2.txt
    python intcodekit.py amplify day7.txt --profile serial
    python intcodekit.py amplify day7.txt --phases 5,6,7,8,9

Program files may contain newlines or stray whitespace; only digits,
',' and '-' are kept before parsing.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

# Allow running from project root without installing
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from intcode import __version__, config
from intcode.disasm import listing
from intcode.errors import MachineError
from intcode.log import setup_logging
from intcode.machine import Machine, State
from intcode.pipeline import PipelineError, find_max_signal

log = logging.getLogger("intcode.cli")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERNAL = 2
EXIT_WAITING = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intcodekit",
        description="Intcode machine toolkit — run, disassemble, amplify",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""commands:
  run        Run a program and print its outputs
  disasm     Disassemble a program
  amplify    Find the best phase settings for an amplifier pipeline
""",
    )
    parser.add_argument("--version", action="version", version=f"intcodekit {__version__}")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Increase verbosity (-v info, -vv debug)")
    parser.add_argument("--log", action="store_true",
                        help=f"Also write a timestamped DEBUG log file to {config.LOG_DIR}")
    parser.add_argument("--log-dir", default=None,
                        help="Write the DEBUG log file here instead (implies --log)")
    sub = parser.add_subparsers(dest="command", metavar="command")

    # ── run ──────────────────────────────────────────────────────────────
    p_run = sub.add_parser("run", help="Run a program and print its outputs")
    p_run.add_argument("program", help="Program text file")
    p_run.add_argument("-i", "--input", dest="inputs", type=int, action="append",
                       default=[], help="Initial input value (repeatable)")
    p_run.add_argument("--poke", action="append", default=[], metavar="ADDR=VALUE",
                       help="Patch a memory cell before running (repeatable)")
    p_run.add_argument("--peek", type=int, action="append", default=[], metavar="ADDR",
                       help="Print a memory cell after running (repeatable)")
    p_run.add_argument("--trace", action="store_true",
                       help="Print every executed instruction to stderr")

    # ── disasm ───────────────────────────────────────────────────────────
    p_dis = sub.add_parser("disasm", help="Disassemble a program")
    p_dis.add_argument("program", help="Program text file")
    p_dis.add_argument("-o", "--output", help="Output file (default: stdout)")

    # ── amplify ──────────────────────────────────────────────────────────
    p_amp = sub.add_parser("amplify", help="Search amplifier phase settings")
    p_amp.add_argument("program", help="Program text file")
    p_amp.add_argument("--profile", default=config.DEFAULT_PROFILE,
                       choices=list(config.PIPELINE_PROFILES.keys()),
                       help=f"Pipeline profile (default: {config.DEFAULT_PROFILE})")
    p_amp.add_argument("--phases", default=None,
                       help="Comma-separated phase settings (overrides the profile)")
    p_amp.add_argument("--signal", type=int, default=config.INITIAL_SIGNAL,
                       help="Initial input signal (default: 0)")

    return parser


# ═════════════════════════════════════════════════════════════════════════════
# HELPERS
# ═════════════════════════════════════════════════════════════════════════════

def read_program_text(path) -> str:
    """Read a program file, keeping only digits, ',' and '-'."""
    raw = Path(path).read_text(encoding="utf-8")
    return "".join(c for c in raw if c in config.PROGRAM_CHARS)


def _parse_poke(s: str):
    """Parse 'ADDR=VALUE' into (addr, value)."""
    addr, sep, value = s.partition("=")
    if not sep:
        raise ValueError(f"--poke expects ADDR=VALUE, got {s!r}")
    return int(addr), int(value)


def _parse_phases(s: str):
    return tuple(int(p) for p in s.split(",") if p.strip())


def _console_level(verbose: int) -> int:
    if verbose == 0:
        return logging.WARNING
    if verbose == 1:
        return logging.INFO
    return logging.DEBUG


# ═════════════════════════════════════════════════════════════════════════════
# COMMAND IMPLEMENTATIONS
# ═════════════════════════════════════════════════════════════════════════════

# ── run ──────────────────────────────────────────────────────────────────
def cmd_run(args) -> int:
    text = read_program_text(args.program)
    pokes = [_parse_poke(p) for p in args.poke]

    machine = Machine(text, args.inputs, trace=args.trace)
    for addr, value in pokes:
        machine.poke(addr, value)

    try:
        state = machine.run()
    finally:
        for line in machine.trace:
            print(line, file=sys.stderr)
        for value in machine.outputs:
            print(value)

    for addr in args.peek:
        print(f"[{addr}] = {machine.peek_memory(addr)}")

    log.info("%s: %s, %d outputs", args.program, state.name, len(machine.outputs))
    if state is State.WAITING_FOR_INPUT:
        print(f"Program is waiting for input at pc={machine.pc}", file=sys.stderr)
        return EXIT_WAITING
    return EXIT_OK


# ── disasm ───────────────────────────────────────────────────────────────
def cmd_disasm(args) -> int:
    text = read_program_text(args.program)
    output = listing(text)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output + "\n")
        print(f"Disassembled {args.program} -> {args.output}")
    else:
        print(output)
    return EXIT_OK


# ── amplify ──────────────────────────────────────────────────────────────
def cmd_amplify(args) -> int:
    text = read_program_text(args.program)
    profile = config.PIPELINE_PROFILES[args.profile]
    phases = _parse_phases(args.phases) if args.phases else profile["phases"]

    log.info("Profile: %s — %s", args.profile, profile["description"])
    signal, ordering = find_max_signal(text, phases, feedback=profile["feedback"],
                                       signal=args.signal)
    print(signal)
    print("phases " + ",".join(str(p) for p in ordering))
    return EXIT_OK


COMMANDS = {
    "run": cmd_run,
    "disasm": cmd_disasm,
    "amplify": cmd_amplify,
}


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return EXIT_OK

    log_dir = None
    if args.log_dir:
        log_dir = Path(args.log_dir)
    elif args.log:
        log_dir = config.LOG_DIR
    setup_logging(console_level=_console_level(args.verbose), log_dir=log_dir)

    handler = COMMANDS[args.command]
    try:
        return handler(args)
    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}", file=sys.stderr)
        return EXIT_ERROR
    except (MachineError, PipelineError) as e:
        log.debug("%s failed: %s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except KeyboardInterrupt:
        print("Interrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Internal error: {e}", file=sys.stderr)
        if args.verbose > 1:
            import traceback
            traceback.print_exc()
        return EXIT_INTERNAL


if __name__ == "__main__":
    sys.exit(main())
