"""
Command-line interface for algen.

Provides the main entry point for the algen generator with subcommands
for translating block programs to AL.
"""

import argparse
import logging
import sys
from pathlib import Path

from .core.compiler import Compiler
from .utils.settings import Settings


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI.

    Returns:
        argparse.ArgumentParser: The configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="algen",
        description="algen: block program to AL code generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m algen generate program.json -o program.al
  python -m algen generate program.json --indent 4
  python -m algen generate program.json --statement-prefix "highlight(%1);"
        """
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Generate command
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate AL code from a JSON block program"
    )
    generate_parser.add_argument(
        "input",
        type=str,
        help="Input JSON block program"
    )
    generate_parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output AL path (default: input path with .al suffix)"
    )
    generate_parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="Spaces per indentation level (default: 2)"
    )
    generate_parser.add_argument(
        "--statement-prefix",
        default=None,
        help="Text injected before every statement; %%1 is the block id"
    )
    generate_parser.add_argument(
        "--statement-suffix",
        default=None,
        help="Text injected after every statement; %%1 is the block id"
    )
    generate_parser.add_argument(
        "--loop-trap",
        default=None,
        help="Text injected at the top of every loop and procedure body"
    )
    generate_parser.add_argument(
        "--reserved",
        action="append",
        default=[],
        help="Extra reserved word (may be repeated)"
    )
    generate_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    # Version command
    subparsers.add_parser(
        "version",
        help="Show version information"
    )

    return parser


def handle_generate(args: argparse.Namespace) -> int:
    """Handle the generate command.

    Args:
        args: Parsed command-line arguments

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    )

    input_path = Path(args.input)
    output_path = Path(args.output) if args.output else None

    settings = Settings(
        reserved_words=args.reserved,
        indent=" " * args.indent,
        statement_prefix=args.statement_prefix,
        statement_suffix=args.statement_suffix,
        infinite_loop_trap=args.loop_trap,
    )
    compiler = Compiler(settings)

    if args.verbose:
        print(f"[algen] Generating: {input_path}")
        print(f"[algen] Output: {output_path or input_path.with_suffix('.al')}")

    result = compiler.build(input_json=input_path, out_al=output_path)

    if result.success:
        print(f"[algen] Generated AL code: {result.al_source_path}")
        return 0
    print(f"[algen] Error: {result.error_message}", file=sys.stderr)
    return 1


def handle_version(args: argparse.Namespace) -> int:
    """Handle the version command.

    Args:
        args: Parsed command-line arguments

    Returns:
        int: Exit code (always 0 for version)
    """
    from . import __version__, __author__
    print(f"algen version {__version__}")
    print(f"Author: {__author__}")
    return 0


def main(argv: list = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        int: Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command == "generate":
        return handle_generate(args)
    elif args.command == "version":
        return handle_version(args)
    else:
        parser.print_help()
        return 2


if __name__ == "__main__":
    sys.exit(main())
