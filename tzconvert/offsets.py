import logging
from datetime import date, datetime

from .database import UTC, ZoneDatabase
from .errors import InvalidZoneError
from .models import Instant

logger = logging.getLogger(__name__)


def offset_minutes(identifier: str, instant: Instant, database: ZoneDatabase) -> int:
    """
    Minutes the wall clock of `identifier` leads UTC at `instant`.

    The offset is the difference between the instant rendered in the zone and
    rendered in UTC, rounded to the nearest minute. Instants outside the
    datetime range report 0.
    """
    if identifier == UTC:
        return 0
    if not database.is_known(identifier):
        raise InvalidZoneError(identifier)

    try:
        local = database.wall_clock(identifier, instant)
        utc = instant.to_datetime().replace(tzinfo=None)
    except OverflowError as exc:
        logger.debug("Offset lookup failed for %s at %r: %s", identifier, instant, exc)
        return 0
    return round((local - utc).total_seconds() / 60)


def offset_difference(
    source: str, target: str, instant: Instant, database: ZoneDatabase
) -> int:
    return offset_minutes(target, instant, database) - offset_minutes(
        source, instant, database
    )


def local_midnight(identifier: str, day: date, database: ZoneDatabase) -> Instant:
    """Instant at which the zone's wall clock reads 00:00 on `day`."""
    guess = Instant.from_datetime(datetime(day.year, day.month, day.day))
    return guess.shifted(minutes=-offset_minutes(identifier, guess, database))


def baseline_offsets(
    identifier: str, year: int, database: ZoneDatabase
) -> tuple[int, int]:
    """
    Return (standard, dst) offsets sampled at local January 1 and July 1.
    Both are equal for zones that do not observe DST in `year`.
    """
    january = offset_minutes(
        identifier, local_midnight(identifier, date(year, 1, 1), database), database
    )
    july = offset_minutes(
        identifier, local_midnight(identifier, date(year, 7, 1), database), database
    )
    return min(january, july), max(january, july)


def is_dst(identifier: str, instant: Instant, database: ZoneDatabase) -> bool:
    """
    True when the offset at `instant` equals the zone's DST baseline exactly.

    An offset that differs from standard time without matching the July/January
    maximum is reported as standard time.
    """
    if identifier == UTC:
        return False
    if not isinstance(instant, Instant):
        return False

    try:
        current = offset_minutes(identifier, instant, database)
        year = database.wall_clock(identifier, instant).year
        standard, dst = baseline_offsets(identifier, year, database)
    except (ValueError, OverflowError) as exc:
        logger.debug("DST lookup failed for %s at %r: %s", identifier, instant, exc)
        return False

    if standard == dst:
        return False
    return current == dst
