"""Command-line interface for the Moo compiler front end."""

import argparse
import logging
import sys
from pathlib import Path

from mooc import __version__


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="mooc",
        description="Moo compiler front end: parses a .moo file, runs name analysis "
                    "and unparses the annotated program",
    )
    parser.add_argument("input", nargs="?", help="Input .moo file")
    parser.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Write the unparsed program here (default: stdout)",
    )
    parser.add_argument(
        "--no-annotate", action="store_true",
        help="Do not annotate identifiers with their resolved types",
    )
    parser.add_argument(
        "--dump-ast", action="store_true", help="Print the AST as JSON"
    )
    parser.add_argument(
        "--dump-symbols", action="store_true",
        help="Print the global symbol table after name analysis",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log compiler phases to stderr"
    )
    parser.add_argument(
        "--version", action="version", version=f"mooc {__version__}"
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.input is None:
        parser.print_help()
        sys.exit(0)

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: file not found: {input_path}", file=sys.stderr)
        sys.exit(1)

    from mooc.compiler import compile_file
    from mooc.parser.tree_builder import MooSyntaxError

    try:
        result = compile_file(
            input_path,
            output_path=args.output,
            annotate=not args.no_annotate,
            dump_ast=args.dump_ast,
            dump_symbols=args.dump_symbols,
        )
    except MooSyntaxError as e:
        print(f"{e.line}:{e.column} ***ERROR*** {e.message}", file=sys.stderr)
        sys.exit(1)

    if not result.ok:
        print(f"{len(result.errors)} error(s) found in {input_path}", file=sys.stderr)
        sys.exit(1)
