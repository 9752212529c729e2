"""
Command line entry point for the Qbit front end.

Examples:
    qbit script.qb                 # Print the parsed statements and warnings
    qbit script.qb --json          # Editor-style JSON result
    echo "1 + 2 * 3" | qbit - --expr
    qbit script.qb --no-trailing-commas --max-depth 200

Author: xwest
"""

import argparse
import logging
import sys
from typing import List, Optional

from .lexer.errors import ParseError
from .parser.config import ParserConfig
from .parser.parser import parse_expression, parse_program
from .editor import EditorRecord, EditorResult, check_source

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qbit",
        description="Parse Qbit source and report syntax errors and style warnings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit status:
    0   the source parsed
    1   the source has a lexical or syntax error
    2   bad arguments or unreadable input
        """
    )

    parser.add_argument('source', metavar='FILE',
                        help="Source file to parse, '-' reads standard input")
    parser.add_argument('--expr', action='store_true',
                        help='Parse the input as a single expression')
    parser.add_argument('--json', action='store_true',
                        help='Print the editor result as JSON')
    parser.add_argument('--no-trailing-commas', action='store_true',
                        help='Reject trailing commas in lists')
    parser.add_argument('--max-depth', type=int, default=ParserConfig.max_recursion_depth,
                        metavar='N', help='Maximum nesting depth (default: %(default)s)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log debug output to stderr')
    return parser


def _read_source(path: str) -> str:
    if path == '-':
        return sys.stdin.read()
    with open(path, encoding='utf-8') as f:
        return f.read()


def _check_expression(source: str, config: ParserConfig) -> EditorResult:
    try:
        parse_expression(source, config)
    except ParseError as error:
        return EditorResult(False, (EditorRecord.from_diagnostic(error.to_diagnostic()),))
    return EditorResult(True)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit status."""
    arg_parser = build_arg_parser()
    args = arg_parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')

    try:
        config = ParserConfig(
            allow_trailing_commas=not args.no_trailing_commas,
            max_recursion_depth=args.max_depth,
        )
    except ValueError as e:
        arg_parser.error(str(e))

    try:
        source = _read_source(args.source)
    except OSError as e:
        arg_parser.error(f"cannot read {args.source}: {e}")

    logger.debug("read %d characters from %s", len(source), args.source)

    if args.json:
        result = _check_expression(source, config) if args.expr else check_source(source, config)
        print(result.to_json(indent=2))
        return 0 if result.success else 1

    try:
        if args.expr:
            expr = parse_expression(source, config)
            print(expr)
            print(repr(expr))
            return 0

        result = parse_program(source, config)
    except ParseError as error:
        print(error.to_diagnostic(), file=sys.stderr)
        return 1

    for statement in result.statements:
        print(repr(statement))
    for diagnostic in result.diagnostics:
        print(diagnostic)
    return 0


if __name__ == "__main__":
    sys.exit(main())
