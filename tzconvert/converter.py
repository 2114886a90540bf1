import logging

from .aliases import is_valid, resolve
from .database import ZoneDatabase
from .errors import InvalidInstantError, InvalidZoneError
from .models import Instant
from .offsets import offset_difference
from .transitions import is_transition_day

logger = logging.getLogger(__name__)


def convert(
    instant: Instant, source: str, target: str, database: ZoneDatabase
) -> Instant:
    """
    Shift `instant` by the difference between the target and source offsets.

    This keeps the absolute instant and reinterprets it: the result, read as
    UTC wall time, shows what the source wall clock showed in the target zone.
    Identical zones return `instant` itself.
    """
    _check_instant(instant)
    resolved_source = resolve(source)
    resolved_target = resolve(target)

    for identifier in (resolved_source, resolved_target):
        if not is_valid(identifier, database):
            raise InvalidZoneError(identifier)

    if resolved_source == resolved_target:
        return instant

    return instant.shifted(
        minutes=offset_difference(resolved_source, resolved_target, instant, database)
    )


def convert_validated(
    instant: Instant, source: str, target: str, database: ZoneDatabase
) -> Instant:
    """
    Like `convert`, but reports which side is invalid and warns when the
    instant falls on a transition day of the source zone.
    """
    _check_instant(instant)

    resolved_source = resolve(source)
    resolved_target = resolve(target)
    if not is_valid(resolved_source, database):
        raise InvalidZoneError(source, role="source")
    if not is_valid(resolved_target, database):
        raise InvalidZoneError(target, role="target")

    if is_transition_day(resolved_source, instant, database):
        logger.warning(
            "Converting %s during a DST transition day for %s", instant, resolved_source
        )

    return convert(instant, resolved_source, resolved_target, database)


def timezone_difference(
    source: str, target: str, database: ZoneDatabase, now: Instant | None = None
) -> int:
    """Minutes `target` is ahead of `source` right now (or at `now`)."""
    return offset_difference(
        resolve(source), resolve(target), now or Instant.now(), database
    )


def _check_instant(instant: Instant) -> None:
    if not isinstance(instant, Instant):
        raise InvalidInstantError(f"Not an instant: {instant!r}")
    try:
        instant.to_datetime()
    except (OverflowError, ValueError) as exc:
        raise InvalidInstantError(f"Instant out of range: {instant.epoch_ms} ms") from exc
