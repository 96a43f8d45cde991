"""Command line interface for OpenAPI to IR conversion."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .errors import OpenAPIParseError
from .parser import parse_file
from .resolver import DEFAULT_MAX_DEPTH
from .validate import format_errors, validate_service


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser."""
    parser = argparse.ArgumentParser(
        prog="openapi-to-ir",
        description="Convert an OpenAPI 3.x document (YAML or JSON) into a service IR",
    )
    parser.add_argument("--input", required=True, help="Path to an OpenAPI YAML or JSON file")
    parser.add_argument("--output", help="Write the IR JSON here instead of stdout")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Validate the document against the OpenAPI object model before parsing",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Run structural validation on the produced IR",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help="Maximum nesting of reference and composition chains",
    )
    parser.add_argument("--verbose", action="store_true", help="Log pipeline progress to stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run CLI and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        result = parse_file(Path(args.input), strict=bool(args.strict), max_depth=args.max_depth)
    except OpenAPIParseError as exc:
        parser.error(str(exc))
        return 2

    for violation in result.violations:
        where = f" at {violation.range}" if violation.range else ""
        print(f"Warning: {violation.message}{where}", file=sys.stderr)

    payload = result.service.model_dump(mode="json", by_alias=True)
    rendered = json.dumps(payload, indent=2)
    if args.output:
        output_path = Path(args.output)
        try:
            output_path.write_text(rendered + "\n", encoding="utf-8")
        except OSError as exc:
            parser.error(f"Failed to write {output_path}: {exc}")
            return 2
    else:
        print(rendered)

    if args.validate:
        errors = validate_service(result.service)
        if errors:
            print(format_errors(errors), file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
