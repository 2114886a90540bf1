import logging
from datetime import date, timedelta

from .database import ZoneDatabase
from .models import Instant, Transition, TransitionType
from .offsets import baseline_offsets, local_midnight, offset_minutes

logger = logging.getLogger(__name__)

# (month, day) bounds, inclusive
SPRING_WINDOW = ((3, 1), (5, 31))
FALL_WINDOW = ((9, 1), (12, 31))

_MINUTE_MS = 60_000


def transitions_for_year(
    identifier: str, year: int, database: ZoneDatabase
) -> list[Transition]:
    """
    Find at most one offset change in each of the spring and fall windows of
    `year`. Zones whose January and July offsets agree have no transitions.
    Lookup failures yield an empty list.
    """
    try:
        standard, dst = baseline_offsets(identifier, year, database)
        if standard == dst:
            return []

        transitions: list[Transition] = []
        for (start_month, start_day), (end_month, end_day) in (
            SPRING_WINDOW,
            FALL_WINDOW,
        ):
            transition = _scan_window(
                identifier,
                date(year, start_month, start_day),
                date(year, end_month, end_day),
                dst,
                database,
            )
            if transition is not None:
                transitions.append(transition)
    except (ValueError, OverflowError) as exc:
        logger.debug("Transition scan failed for %s in %s: %s", identifier, year, exc)
        return []

    return transitions


def is_transition_day(identifier: str, instant: Instant, database: ZoneDatabase) -> bool:
    """True when `instant` falls on the local date of one of the year's transitions."""
    try:
        local_date = database.wall_clock(identifier, instant).date()
    except (ValueError, OverflowError):
        return False
    return any(
        transition.date == local_date
        for transition in transitions_for_year(identifier, local_date.year, database)
    )


def _scan_window(
    identifier: str,
    first: date,
    last: date,
    dst_offset: int,
    database: ZoneDatabase,
) -> Transition | None:
    previous: tuple[Instant, int] | None = None
    day = first
    while day <= last:
        instant = local_midnight(identifier, day, database)
        offset = offset_minutes(identifier, instant, database)
        if previous is not None and offset != previous[1]:
            previous_instant, previous_offset = previous
            changed_at = _bisect_change(
                identifier, previous_instant, instant, previous_offset, database
            )
            logger.debug(
                "%s changes from %s to %s at %s",
                identifier,
                previous_offset,
                offset,
                changed_at,
            )
            return Transition(
                database.wall_clock(identifier, changed_at).date(),
                previous_offset,
                offset,
                TransitionType.START if offset == dst_offset else TransitionType.END,
                changed_at,
            )
        previous = (instant, offset)
        day += timedelta(days=1)
    return None


def _bisect_change(
    identifier: str,
    low: Instant,
    high: Instant,
    offset_before: int,
    database: ZoneDatabase,
) -> Instant:
    """
    Narrow [low, high] to the first whole minute whose offset differs from
    `offset_before`. `low` must observe `offset_before` and `high` must not.
    """
    lo = low.epoch_ms // _MINUTE_MS
    hi = -(-high.epoch_ms // _MINUTE_MS)
    while lo + 1 < hi:
        mid = (lo + hi) // 2
        if offset_minutes(identifier, Instant(mid * _MINUTE_MS), database) == offset_before:
            lo = mid
        else:
            hi = mid
    return Instant(hi * _MINUTE_MS)
