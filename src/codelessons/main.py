"""CLI entrypoint for lesson content generation."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .generator import DEFAULT_DOCS_DIR, DEFAULT_OUTPUT_FILE, generate_content
from .overrides import annotate_content

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(message)s"
HANDLER_NAME = "codelessons"


def setup_logging(verbosity: int) -> None:
    """Send log records to stdout, replacing the handler from an earlier call."""
    level = logging.DEBUG if verbosity > 0 else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(prog="codelessons", description="Generate lesson content from HTML docs")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Show debug output")
    subparsers = parser.add_subparsers(dest="command")

    generate = subparsers.add_parser("generate", help="Parse HTML docs into the lessons JSON file")
    generate.add_argument("--docs-dir", type=Path, default=DEFAULT_DOCS_DIR)
    generate.add_argument("--output", type=Path, default=DEFAULT_OUTPUT_FILE)

    annotate = subparsers.add_parser("annotate", help="Apply lesson overrides to a generated JSON file")
    annotate.add_argument("overrides", type=Path)
    annotate.add_argument("--content", type=Path, default=DEFAULT_OUTPUT_FILE)
    return parser


def run(argv: list[str] | None = None) -> int:
    """Run the CLI application."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    if args.command == "annotate":
        try:
            annotate_content(args.content, args.overrides)
        except (OSError, ValueError) as exc:
            logger.error("Error applying overrides: %s", exc)
            return 1
        return 0

    docs_dir = getattr(args, "docs_dir", DEFAULT_DOCS_DIR)
    output = getattr(args, "output", DEFAULT_OUTPUT_FILE)
    try:
        generate_content(docs_dir, output)
    except (OSError, ValueError) as exc:
        logger.error("Error generating content: %s", exc)
        return 1
    return 0


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
