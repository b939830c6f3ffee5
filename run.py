"""Command-line entry point for the CHIP-8 interpreter."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pychip8.bus import PROGRAM_START
from pychip8.cpu import disassemble
from pychip8.loader import PROGRAM_CAPACITY, ImageTooLargeError, load_program_from_path
from pychip8.system import MachineConfig, create_machine
from pychip8.ui import FRONTENDS, AppConfig, Chip8App
from pychip8.video import PALETTES


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="CHIP-8 interpreter",
    )
    parser.add_argument(
        "program",
        type=Path,
        help="Path to a raw CHIP-8 program image",
    )
    parser.add_argument(
        "--frontend",
        choices=FRONTENDS,
        default="pygame",
        help="Display/input backend (default: pygame)",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=10,
        help="Integer window scale factor (default: 10)",
    )
    parser.add_argument(
        "--fullscreen",
        action="store_true",
        help="Launch the pygame window in fullscreen mode",
    )
    parser.add_argument(
        "--palette",
        choices=sorted(PALETTES),
        default="phosphor",
        help="Window colours for the pygame frontend (default: phosphor)",
    )
    parser.add_argument(
        "--clock",
        type=int,
        default=600,
        help="Instructions executed per second (default: 600)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the random-number instruction",
    )
    parser.add_argument(
        "--disassemble",
        action="store_true",
        help="Print a listing of the program and exit",
    )
    return parser


def print_listing(program_path: Path) -> None:
    program = load_program_from_path(program_path)
    machine = create_machine(MachineConfig(program=program))
    words = (len(program) + 1) // 2
    for address, word, text in disassemble(machine.memory, PROGRAM_START, words):
        print(f"{address:03X}: {word:04X}  {text}")


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.program.exists():
        parser.error(f"Program file not found: {args.program}")
    if args.scale <= 0:
        parser.error("--scale must be positive")
    if args.clock <= 0:
        parser.error("--clock must be positive")

    if args.disassemble:
        try:
            print_listing(args.program)
        except ImageTooLargeError as exc:
            parser.exit(1, f"run.py: {exc} (limit {PROGRAM_CAPACITY})\n")
        return 0

    config = AppConfig(
        program_path=args.program,
        frontend=args.frontend,
        scale=args.scale,
        fullscreen=args.fullscreen,
        palette=args.palette,
        clock_hz=args.clock,
        seed=args.seed,
    )
    app = Chip8App(config)
    try:
        app.run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
