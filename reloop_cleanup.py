#!/usr/bin/env python3
"""Command-line interface for the relooper tail cleanup pass."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from reloopclean import TailCleanup, TreeFormatError, load_region, render_statements, serialize_region


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("region", type=Path, help="JSON file holding the relooped region")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the cleaned region to the provided path instead of stdout",
    )
    parser.add_argument(
        "--format",
        choices=("json", "text"),
        default="json",
        help="Output format of the cleaned region",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every removed terminal and collapsed else branch",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.region.exists():
        raise SystemExit(f"missing input file: {args.region}")
    try:
        payload = json.loads(args.region.read_text("utf-8"))
        context, statements = load_region(payload)
    except (UnicodeDecodeError, json.JSONDecodeError, TreeFormatError) as exc:
        raise SystemExit(f"invalid region {args.region}: {exc}") from exc

    cleanup = TailCleanup(context)
    cleanup.remove_tail_expr(statements)

    if args.format == "text":
        output = render_statements(statements)
    else:
        output = json.dumps(serialize_region(context, statements), indent=2) + "\n"

    summary = f"removed {cleanup.removed} redundant terminal(s)"
    if args.output is not None:
        args.output.write_text(output, "utf-8")
        print(f"cleaned region written to {args.output}")
        print(summary)
    else:
        print(output, end="")
        print(summary, file=sys.stderr)


if __name__ == "__main__":
    main()
