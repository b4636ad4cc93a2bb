"""Command-line entry for ics_lite.

Parses one or more ICS sources and prints the resulting calendars as JSON.
"""

from __future__ import annotations

import argparse
import contextlib
import json
import logging
import sys
from typing import NoReturn

from . import _init_logging
from .config_loader import load_config
from .lite_exceptions import LiteICSError
from .lite_fetcher import parse_calendar
from .lite_logging import configure_lite_logging

logger = logging.getLogger("ics_lite")


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the ics_lite CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="ics_lite",
        description="ics-lite - parse ICS calendars into JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m ics_lite calendar.ics                      # Parse a local file
  python -m ics_lite https://example.com/cal.ics --utc # Fetch and normalize to UTC
  python -m ics_lite --config ics_lite.yaml            # Parse the configured sources
        """,
    )

    parser.add_argument(
        "sources",
        nargs="*",
        metavar="SOURCE",
        help="ICS file path or http(s) URL (default: sources from the config file)",
    )
    parser.add_argument(
        "--max-repeats",
        type=int,
        metavar="N",
        help="Repeat cap per recurring event; 0 disables expansion (default: 1000)",
    )
    parser.add_argument(
        "--utc",
        action="store_true",
        help="Normalize every instant to UTC",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="YAML config file (default: ./ics_lite.yaml)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--raw-output",
        metavar="FILE",
        help="Also write the raw ICS text to FILE",
    )

    return parser


def main(argv: list[str] | None = None) -> NoReturn:
    """Run the ics_lite CLI.

    Exits with status 0 on success and 1 when a source cannot be loaded or
    parsed.
    """
    parser = _create_parser()
    args = parser.parse_args(argv)

    try:
        cfg = load_config(args.config)
    except (OSError, ValueError) as exc:
        print(f"ics_lite: invalid config: {exc}", file=sys.stderr)
        sys.exit(1)

    _init_logging("DEBUG" if args.debug else cfg.log_level)
    configure_lite_logging(debug_mode=args.debug or cfg.log_level == "DEBUG")

    sources = args.sources or cfg.sources
    if not sources:
        parser.error("no SOURCE given and no sources configured")

    max_repeats = cfg.max_repeats if args.max_repeats is None else max(args.max_repeats, 0)
    convert_dates_to_utc = args.utc or cfg.convert_dates_to_utc

    calendars = []
    with contextlib.ExitStack() as stack:
        writer = None
        if args.raw_output:
            writer = stack.enter_context(open(args.raw_output, "w", encoding="utf-8"))

        for source in sources:
            try:
                calendar = parse_calendar(
                    source,
                    max_repeats,
                    writer=writer,
                    convert_dates_to_utc=convert_dates_to_utc,
                    timeout=cfg.request_timeout,
                )
            except LiteICSError as exc:
                logger.error("Failed to parse %s: %s", source, exc)
                print(f"ics_lite: {source}: {exc}", file=sys.stderr)
                sys.exit(1)
            logger.info("Parsed %d events from %s", len(calendar.events), source)
            calendars.append(calendar.model_dump(mode="json"))

    output = calendars[0] if len(calendars) == 1 else calendars
    print(json.dumps(output, indent=2))
    sys.exit(0)


if __name__ == "__main__":
    main()
