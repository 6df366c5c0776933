"""Command-line entry point: ``gbtools <command> [args]``."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from gbtools.header import describe, load_rom

PROG = "gbtools"


@dataclass(frozen=True)
class Command:
    """A subcommand with its handler and help texts."""

    name: str
    func: Callable[[Sequence[str]], int]
    help_short: str
    help_long: str


def _find_command(name: str) -> Optional[Command]:
    return next((cmd for cmd in COMMANDS if cmd.name == name), None)


def print_usage() -> None:
    print(f"usage: {PROG} <command> <[args]>")
    print()
    print("The available commands are:")
    for cmd in COMMANDS:
        print(f"\t{cmd.name}\t{cmd.help_short}")
    print()
    print(f"See '{PROG} help <command>' to read about a specific command.")


def cmd_help(args: Sequence[str]) -> int:
    if not args:
        print(f"usage: {PROG} help <command>", file=sys.stderr)
        return 1
    cmd = _find_command(args[0])
    if cmd is None:
        print(f"No command {args[0]}")
        return 1
    print(cmd.help_long)
    return 0


def cmd_info(args: Sequence[str]) -> int:
    if not args:
        print("need an argument", file=sys.stderr)
        return 1
    path = args[0]
    try:
        rom = load_rom(path)
    except OSError:
        print(f"Couldn't stat file: {path}", file=sys.stderr)
        return 1
    except ValueError:
        print("Reading cart rom failed.", file=sys.stderr)
        return 1
    try:
        report = describe(rom)
    except ValueError as exc:
        print(f"Reading cart rom failed: {exc}", file=sys.stderr)
        return 1
    print(report)
    return 0


COMMANDS: tuple[Command, ...] = (
    Command(
        name="help",
        func=cmd_help,
        help_short="Get help for a command.",
        help_long="help <command>\n\tget help for a command",
    ),
    Command(
        name="info",
        func=cmd_info,
        help_short="Print ROM header info.",
        help_long="info <romfile>\n\tprint meaning of header fields in romfile",
    ),
)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print_usage()
        return 1
    cmd = _find_command(args[0])
    if cmd is None:
        print(f"{PROG}: '{args[0]}' is not a command.")
        return 1
    return cmd.func(args[1:])


if __name__ == "__main__":
    sys.exit(main())