#!/usr/bin/env python3
"""
vinput CLI - Unified command-line interface for vinput scripts

This CLI compiles vinput scripts and plays them back on the desktop, and
provides disassembly and script reference helpers.
"""

import argparse
import sys
from typing import Any, List, Optional

from .desktop import (
    DesktopError,
    connect_current_desktop,
    disconnect_desktop,
    probe_desktops,
)
from .desktop.desktops import DESKTOP_FACTORIES
from .vinputscript.vinputscript_compiler import Compiler, ScriptSyntaxError
from .vinputscript.vinputscript_disassembler import disassemble
from .vinputscript.vinputscript_player import Player
from .vinputscript.vinputscript_program import Program


# Helper functions
def read_source(input_path: str) -> str:
    """Read script text from a file, or from stdin for '-'"""
    if input_path == "-":
        return sys.stdin.read()
    with open(input_path, "r", encoding="utf-8") as f:
        return f.read()


def load_program(inputs: List[str], ignore_space: bool) -> Optional[Program]:
    """Compile every input into one program; None after reporting an error"""
    compiler = Compiler(ignore_space=ignore_space)
    program = Program()

    for input_path in inputs or ["-"]:
        name = "<stdin>" if input_path == "-" else input_path
        try:
            compiler.compile(read_source(input_path), program)
        except ScriptSyntaxError as e:
            print(
                f"Syntax error in {name} at line {e.line}, column {e.column}: "
                f"{e.message}"
            )
            return None
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error reading {name}: {e}")
            return None

    return program


def add_source_args(parser: argparse.ArgumentParser) -> None:
    """Add script input arguments"""
    parser.add_argument(
        "inputs",
        nargs="*",
        metavar="FILE",
        help="Script files to compile in order ('-' or none reads stdin)",
    )
    parser.add_argument(
        "--ignore-space",
        action="store_true",
        help="Skip whitespace instead of typing it",
    )


def play_command(args: Any) -> int:
    """Handle the play command"""
    program = load_program(args.inputs, args.ignore_space)
    if program is None:
        return 1

    try:
        desktop = connect_current_desktop(args.desktop)
    except DesktopError as e:
        print(f"Error: {e}")
        return 1

    player = Player(
        random_sleep=not args.no_rand_sleep,
        seed=args.seed,
        trace=print if args.verbose else None,
    )

    try:
        completed = player.play(program, desktop)
    except DesktopError as e:
        print(f"Error: {e}")
        return 1
    finally:
        disconnect_desktop(desktop)

    if not completed:
        print("Playback cancelled")
    return 0


def disassemble_command(args: Any) -> int:
    """Handle the disassemble command"""
    program = load_program(args.inputs, args.ignore_space)
    if program is None:
        return 1

    for line in disassemble(program):
        print(line)
    if program.positions:
        print(f"\n{len(program.positions)} positions")
    return 0


def help_script_command(args: Any) -> int:
    """Handle the help-script command"""
    Compiler.print_doc(sys.stdout)
    return 0


def list_desktops_command(args: Any) -> int:
    """Handle the list-desktops command"""
    print("Desktop backends:")
    for name, available, reason in probe_desktops():
        status = "available" if available else reason
        print(f"  {name:<10} {status}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        prog="vinput",
        description="vinput - play keyboard and mouse scripts on the desktop",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s play script.vin                     # Play a script
  %(prog)s play --no-rand-sleep script.vin     # Play with exact timing
  %(prog)s play --desktop dry-run script.vin   # Print events instead of sending them
  echo 'hello\\n' | %(prog)s play              # Play a script from stdin
  %(prog)s disassemble script.vin              # List the compiled instructions
  %(prog)s help-script                         # Show the script grammar
  %(prog)s list-desktops                       # Show desktop backends
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Compile and play scripts")
    add_source_args(play_parser)
    play_parser.add_argument(
        "--no-rand-sleep",
        action="store_true",
        help="Sleep exactly as written instead of randomizing durations",
    )
    play_parser.add_argument(
        "--seed",
        type=int,
        help="Seed for randomized sleeps (default: system entropy)",
    )
    play_parser.add_argument(
        "--desktop",
        choices=sorted(DESKTOP_FACTORIES),
        help="Desktop backend to use (default: first available)",
    )
    play_parser.add_argument(
        "--verbose", "-v", action="store_true", help="Print each instruction"
    )

    # Disassemble command
    disassemble_parser = subparsers.add_parser(
        "disassemble", help="Compile scripts and list the instructions"
    )
    add_source_args(disassemble_parser)

    # Script help command
    subparsers.add_parser("help-script", help="Show the script grammar")

    # List desktops command
    subparsers.add_parser("list-desktops", help="List desktop backends")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Route to appropriate command handler
    if args.command == "play":
        return play_command(args)
    elif args.command == "disassemble":
        return disassemble_command(args)
    elif args.command == "help-script":
        return help_script_command(args)
    elif args.command == "list-desktops":
        return list_desktops_command(args)
    else:
        print(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
