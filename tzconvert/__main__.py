import argparse
import logging
import sys
from datetime import datetime

from .config import EngineConfig
from .database import ZoneInfoDatabase
from .engine import TimezoneEngine
from .errors import InvalidZoneError
from .models import Instant


def format_offset(minutes: int) -> str:
    sign = "-" if minutes < 0 else "+"
    hours, mins = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{mins:02d}"


def _parse_instant(value: str) -> Instant:
    try:
        return Instant.from_datetime(datetime.fromisoformat(value))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an ISO 8601 timestamp: {value!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tzconvert",
        description="Inspect and convert timestamps across timezones.",
    )
    parser.add_argument("zone", nargs="?", help="zone identifier or alias, e.g. EST")
    parser.add_argument(
        "--at",
        type=_parse_instant,
        help="ISO 8601 instant; naive values are read as UTC (default: now)",
    )
    parser.add_argument("--to", help="convert the instant to this zone")
    parser.add_argument("--year", type=int, help="year to list transitions for")
    parser.add_argument("--search", help="search the common zone catalogue")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.zone is None and args.search is None:
        parser.error("a zone or --search is required")

    config = EngineConfig.from_env()
    logging.basicConfig(level=config.logging_level)
    engine = TimezoneEngine(ZoneInfoDatabase(config))

    if args.search is not None:
        for zone in engine.registry.search(args.search):
            print(
                f"{zone.identifier:<24} {format_offset(zone.offset)} "
                f"{zone.display_name} [{zone.region}]"
            )
        return 0

    instant = args.at or Instant.now()
    try:
        details = engine.details(args.zone, instant)
        if args.year is not None:
            transitions = engine.transitions_for_year(details.identifier, args.year)
        else:
            transitions = list(details.transitions)
        converted = engine.convert(instant, args.zone, args.to) if args.to else None
    except InvalidZoneError as exc:
        print(exc, file=sys.stderr)
        return 2

    print(f"{details.identifier} ({details.display_name})")
    print(f"  at:      {instant}")
    print(
        f"  offset:  {format_offset(details.current_offset)} "
        f"({details.current_offset} min)"
    )
    print(f"  dst:     {'yes' if details.is_dst else 'no'}")
    if details.aliases:
        print(f"  aliases: {', '.join(details.aliases)}")
    for transition in transitions:
        print(
            f"  {transition.date.isoformat()} {transition.type.value:<5} "
            f"{transition.offset_before} -> {transition.offset_after}"
        )
    if converted is not None:
        print(f"  {args.to}: {converted}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
