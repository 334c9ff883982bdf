"""
Entry point for tomltree.

Usage:
    python -m tomltree config.toml              # print tagged JSON tree
    python -m tomltree config.toml --get a.b.0  # print one value
    cat config.toml | python -m tomltree -
    python -m tomltree --suite ./tests          # run toml-test fixtures
    python -m tomltree --help
"""

import argparse
import json
import sys

from . import __version__
from .loader import DocumentLoader, LoadError
from .logging import LogConfig, get_logger, setup_logging
from .lookup import lookup
from .testsuite import run_suite, to_json


logger = get_logger("main")


def run_suite_command(directory: str, allow_mixed_arrays: bool) -> int:
    """Run a fixture directory and print per-case results."""
    result = run_suite(directory, allow_mixed_arrays)

    for case in result.cases:
        label = f"TEST/{case.category.value.upper()}:"
        print(f"{label:16}{case.name}")
        print("   [PASS]" if case.passed else f"   [FAIL] {case.message}")
        if not case.passed and case.expected is not None:
            print("   expected:", json.dumps(case.expected, sort_keys=True))
            print("   actual:  ", json.dumps(case.actual, sort_keys=True))

    print(f"\nTests/PASS/FAIL: {result.total}/{result.passed}/{result.failed}")
    return 0 if result.ok else 1


def run_document_command(source: str, get_path: str | None, allow_mixed_arrays: bool) -> int:
    """Parse a document (path or '-' for stdin) and print it or one of its values."""
    loader = DocumentLoader(allow_mixed_arrays=allow_mixed_arrays)

    try:
        if source == "-":
            document = loader.load_string(sys.stdin.read(), "<stdin>")
        else:
            document = loader.load_file(source)
    except LoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if get_path is None:
        print(json.dumps(to_json(document), indent=2))
        return 0

    try:
        value = lookup(document, get_path)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if value is None:
        logger.warning("Path not found: %s", get_path)
        return 1

    print(json.dumps(to_json(value), indent=2))
    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="tomltree",
        description="Parse TOML-style configuration documents and query them by dotted path",
    )

    parser.add_argument(
        "document",
        nargs="?",
        help="Path to the document to parse ('-' reads stdin)",
    )

    parser.add_argument(
        "--get",
        metavar="PATH",
        help="Print only the value at a dotted path such as servers.0.host",
    )

    parser.add_argument(
        "--suite",
        metavar="DIR",
        help="Run toml-test style fixtures from DIR/valid and DIR/invalid",
    )

    parser.add_argument(
        "--allow-mixed-arrays",
        action="store_true",
        help="Accept arrays whose elements are of different types",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging (INFO level)",
    )

    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Enable debug logging (DEBUG level)",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (only errors)",
    )

    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Write logs to file",
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    args = parser.parse_args()

    log_config = LogConfig()

    if args.debug:
        log_config.console_level = "debug"
    elif args.verbose:
        log_config.console_level = "info"
    elif args.quiet:
        log_config.console_level = "error"
    else:
        log_config.console_level = "warning"

    if args.no_color:
        log_config.console_colors = False

    if args.log_file:
        log_config.file_enabled = True
        log_config.file_path = args.log_file

    setup_logging(log_config)

    if args.suite:
        return run_suite_command(args.suite, args.allow_mixed_arrays)

    if not args.document:
        parser.error("a document path (or '-') is required unless --suite is given")

    return run_document_command(args.document, args.get, args.allow_mixed_arrays)


if __name__ == "__main__":
    sys.exit(main())
