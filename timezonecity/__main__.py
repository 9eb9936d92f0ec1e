"""Command-line entry for timezonecity.

A thin front end over TimeZoneRepository that prints JSON to stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, NoReturn, Optional

from .accent_folder import fold
from .core.config_manager import ConfigManager
from .exceptions import TimeZoneCityError
from .logging_config import configure_logging, init_logging
from .repository import TimeZoneRepository

logger = logging.getLogger(__name__)


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the timezonecity CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="timezonecity",
        description="Query time zone/city records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  timezonecity list --country us,ca --sort-by std_offset,place_name
  timezonecity nearest --country fr 48.85 2.35
  timezonecity abbr Atlantic/Azores --at 2025-07-01T12:00:00Z
  timezonecity fold "Ångström café"
        """,
    )
    parser.add_argument(
        "--db",
        type=Path,
        metavar="PATH",
        help="SQLite database file (default: TIMEZONECITY_DB_PATH or ./timezonecity.db)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List zones")
    list_cmd.add_argument("--sort-by", default=None, help="Comma separated sort fields")
    list_cmd.add_argument("--sort-dir", default=None, help="Comma separated asc/desc")
    list_cmd.add_argument("--country", default=None, help="Comma separated country codes")
    list_cmd.add_argument("--fold-accents", action="store_true", help="Strip accents from names")

    info_cmd = sub.add_parser("info", help="Show one zone record")
    info_cmd.add_argument("time_zone")

    valid_cmd = sub.add_parser("valid", help="Check whether a zone exists in the table")
    valid_cmd.add_argument("time_zone")

    nearest_cmd = sub.add_parser("nearest", help="Find the zone nearest to a coordinate")
    nearest_cmd.add_argument("--country", default=None, help="Preferred 2-letter country code")
    nearest_cmd.add_argument("latitude")
    nearest_cmd.add_argument("longitude")

    abbr_cmd = sub.add_parser("abbr", help="Show the DST-aware abbreviation of a zone")
    abbr_cmd.add_argument("time_zone")
    abbr_cmd.add_argument("--at", default=None, help="Instant (ISO 8601 or epoch seconds)")

    offset_cmd = sub.add_parser("offset", help="Show a zone's UTC offset and DST flag")
    offset_cmd.add_argument("time_zone")
    offset_cmd.add_argument("--at", default=None, help="Instant (ISO 8601 or epoch seconds)")

    fold_cmd = sub.add_parser("fold", help="Replace accented characters with ASCII")
    fold_cmd.add_argument("text")

    return parser


def _dispatch(args: argparse.Namespace) -> Any:
    if args.command == "fold":
        return fold(args.text)

    config = ConfigManager().load_config(database_path=args.db)
    repo = TimeZoneRepository.from_config(config)

    if args.command == "list":
        zones = repo.list_zones(args.sort_by, args.sort_dir, args.country, args.fold_accents)
        return [zone.model_dump() for zone in zones]
    if args.command == "info":
        record = repo.get_zone_record(args.time_zone)
        return record.model_dump() if record is not None else None
    if args.command == "valid":
        return repo.is_valid_zone(args.time_zone)
    if args.command == "nearest":
        return repo.find_nearest_zone(args.country, args.latitude, args.longitude).model_dump()
    if args.command == "abbr":
        return repo.get_zone_abbreviation(args.time_zone, args.at)
    if args.command == "offset":
        offset = repo.get_zone_offset(args.time_zone, args.at)
        return {
            "time_zone": args.time_zone,
            "offset_seconds": offset.offset_seconds,
            "offset_formatted": offset.formatted,
            "is_dst": offset.is_dst,
        }
    raise AssertionError(f"unhandled command {args.command!r}")


def run(argv: Optional[list[str]] = None) -> int:
    """Parse arguments, run one command and print its JSON result.

    Returns:
        Process exit status: 0 on success, 1 on a timezonecity error
    """
    parser = _create_parser()
    args = parser.parse_args(argv)

    init_logging("DEBUG" if args.debug else None)
    configure_logging(debug_mode=args.debug)

    try:
        result = _dispatch(args)
    except TimeZoneCityError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


def main() -> NoReturn:
    """Run the timezonecity CLI."""
    sys.exit(run())


if __name__ == "__main__":
    main()
