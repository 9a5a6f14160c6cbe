"""Command-line entry point.

Usage:
    litdoc lib/foo.js                 - writes foo.html
    litdoc lib/foo.js --json -o -     - prints the parsed library as JSON
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .config import load_config
from .core import Litdoc
from .errors import LitdocError
from .generators import generate_json
from .validators import compute_coverage, validate_docs

log = logging.getLogger(__name__)

LOG_LEVEL_ENV_VAR = "LITDOC_LOG_LEVEL"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="litdoc",
        description="Generate HTML docs with runnable examples from JavaScript doc comments.",
    )
    parser.add_argument("source", type=Path, help="JavaScript source file")
    parser.add_argument("-o", "--output", help="Output file ('-' for stdout)")
    parser.add_argument("--json", action="store_true", help="Write the parsed library as JSON")
    parser.add_argument("--config", type=Path, help="Project config (default: ./litdoc.json)")
    parser.add_argument("--template", type=Path, help="Jinja2 template to render")
    parser.add_argument(
        "--namespace", dest="namespaces", action="append", default=[], help="Namespace to include"
    )
    parser.add_argument("--tag", dest="tags", action="append", default=[], help="Tag to include")
    parser.add_argument("--grep", help="Only document members whose name matches this pattern")
    parser.add_argument(
        "--strict", action="store_true", help="Fail on functions documented only by examples"
    )
    parser.add_argument("--no-highlight", action="store_true", help="Skip syntax highlighting")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _read_text(path: Path) -> str:
    try:
        return path.read_text()
    except OSError as e:
        raise LitdocError(f"Cannot read {path}: {e}") from e


def _default_output(source: Path, as_json: bool) -> Path:
    return source.with_suffix(".json" if as_json else ".html")


def run(args: argparse.Namespace) -> int:
    config = load_config(args.config)

    overrides = {}
    if args.namespaces:
        overrides["namespaces"] = args.namespaces
    if args.tags:
        overrides["tags"] = args.tags
    if args.grep:
        overrides["grep"] = args.grep
    if args.template:
        overrides["template"] = _read_text(args.template)
    if args.no_highlight:
        overrides["highlight"] = False

    litdoc = Litdoc.from_config(config, **overrides)

    code = _read_text(args.source)

    print(f"Parsing {args.source}...", file=sys.stderr)
    library = litdoc.parse(code)
    print(
        f"  ✓ {library.name}: {len(library.docs)}/{len(library.all_functions)} functions",
        file=sys.stderr,
    )

    validation = validate_docs(library, strict=args.strict)
    for warning in validation.warnings:
        print(f"  ! {warning}", file=sys.stderr)
    if validation.errors:
        print("\nValidation errors:", file=sys.stderr)
        for err in validation.errors:
            print(f"  ✗ {err}", file=sys.stderr)
        return 1

    print(f"\nCoverage: {compute_coverage(library):.0%}", file=sys.stderr)

    output = generate_json(library) if args.json else litdoc.generate(library)

    if args.output == "-":
        sys.stdout.write(output)
        return 0

    out_path = Path(args.output) if args.output else _default_output(args.source, args.json)
    out_path.write_text(output)
    print(f"\nGenerated:\n  {out_path}", file=sys.stderr)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        return run(args)
    except LitdocError as e:
        log.debug("Aborted", exc_info=True)
        print(f"✗ {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
