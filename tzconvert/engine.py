import logging
from datetime import datetime

from . import aliases, converter, offsets, transitions
from .database import UTC, ZoneDatabase, ZoneInfoDatabase
from .errors import InvalidZoneError
from .models import (
    ConversionResult,
    Instant,
    LocalTime,
    TimeZoneDetails,
    Transition,
)
from .registry import CommonZoneRegistry

logger = logging.getLogger(__name__)

DISPLAY_NAMES: dict[str, str] = {
    "UTC": "Coordinated Universal Time",
    "America/New_York": "Eastern Time (US & Canada)",
    "America/Chicago": "Central Time (US & Canada)",
    "America/Denver": "Mountain Time (US & Canada)",
    "America/Los_Angeles": "Pacific Time (US & Canada)",
    "Europe/London": "London",
    "Europe/Paris": "Paris",
    "Europe/Berlin": "Berlin",
    "Asia/Tokyo": "Tokyo",
    "Asia/Shanghai": "Shanghai",
    "Asia/Kolkata": "Kolkata",
    "Australia/Sydney": "Sydney",
}


class TimezoneEngine:
    """
    Entry point for request handlers.

    Every method accepts a zone token: aliases such as "EST" are resolved to
    their canonical zone before any lookup. Methods that compute a value for a
    zone raise InvalidZoneError when the token does not name a known zone;
    `is_dst` is the exception and reports False instead.
    """

    def __init__(
        self,
        database: ZoneDatabase | None = None,
        registry: CommonZoneRegistry | None = None,
    ) -> None:
        self.database = database or ZoneInfoDatabase()
        self._registry = registry

    @property
    def registry(self) -> CommonZoneRegistry:
        if self._registry is None:
            self._registry = CommonZoneRegistry(self.database)
        return self._registry

    def resolve(self, token: str) -> str:
        return aliases.resolve(token)

    def is_valid(self, token: str) -> bool:
        return aliases.is_valid(token, self.database)

    def canonical(self, token: str, role: str | None = None) -> str:
        identifier = aliases.resolve(token)
        if not aliases.is_valid(identifier, self.database):
            raise InvalidZoneError(token, role=role)
        return identifier

    def display_name(self, identifier: str) -> str:
        return DISPLAY_NAMES.get(identifier, identifier.replace("_", " "))

    def offset_minutes(self, token: str, instant: Instant | None = None) -> int:
        return offsets.offset_minutes(
            self.canonical(token), instant or Instant.now(), self.database
        )

    def is_dst(self, token: str, instant: Instant | None = None) -> bool:
        identifier = aliases.resolve(token)
        if not aliases.is_valid(identifier, self.database):
            return False
        return offsets.is_dst(identifier, instant or Instant.now(), self.database)

    def transitions_for_year(
        self, token: str, year: int | None = None
    ) -> list[Transition]:
        identifier = self.canonical(token)
        if year is None:
            year = Instant.now().to_datetime().year
        return transitions.transitions_for_year(identifier, year, self.database)

    def details(self, token: str, instant: Instant | None = None) -> TimeZoneDetails:
        identifier = self.canonical(token)
        instant = instant or Instant.now()
        year = self._local_wall_clock(identifier, instant).year
        return TimeZoneDetails(
            identifier=identifier,
            display_name=self.display_name(identifier),
            current_offset=offsets.offset_minutes(identifier, instant, self.database),
            is_dst=offsets.is_dst(identifier, instant, self.database),
            transitions=tuple(
                transitions.transitions_for_year(identifier, year, self.database)
            ),
            aliases=tuple(aliases.aliases_for(identifier)),
        )

    def offset_at(self, token: str, instant: Instant) -> tuple[int, bool, str]:
        """Return (offset, is_dst, display_name) for `token` at `instant`."""
        identifier = self.canonical(token)
        return (
            offsets.offset_minutes(identifier, instant, self.database),
            offsets.is_dst(identifier, instant, self.database),
            self.display_name(identifier),
        )

    def convert(self, instant: Instant, source: str, target: str) -> Instant:
        return converter.convert(instant, source, target, self.database)

    def convert_validated(self, instant: Instant, source: str, target: str) -> Instant:
        return converter.convert_validated(instant, source, target, self.database)

    def convert_timestamp(
        self, timestamp: float, source: str, target: str
    ) -> ConversionResult:
        """
        Convert a Unix timestamp (seconds) and describe both zones as they
        were at that timestamp.
        """
        source_id = self.canonical(source, role="source")
        target_id = self.canonical(target, role="target")
        instant = Instant.from_timestamp(timestamp)
        converted = converter.convert(instant, source_id, target_id, self.database)
        source_details = self.details(source_id, instant)
        target_details = self.details(target_id, instant)
        return ConversionResult(
            original_timestamp=instant.timestamp,
            converted_timestamp=converted.timestamp,
            source=source_details,
            target=target_details,
            offset_difference=target_details.current_offset
            - source_details.current_offset,
        )

    def timezone_difference(
        self, source: str, target: str, now: Instant | None = None
    ) -> int:
        source_id = self.canonical(source, role="source")
        target_id = self.canonical(target, role="target")
        return converter.timezone_difference(source_id, target_id, self.database, now)

    def current_time(self, token: str, now: Instant | None = None) -> LocalTime:
        identifier = self.canonical(token)
        now = now or Instant.now()
        return LocalTime(
            identifier=identifier,
            local_time=self._local_wall_clock(identifier, now),
            utc_time=now.to_datetime(),
            timestamp=now.timestamp,
        )

    def available_timezones(self) -> list[str]:
        try:
            available = self.database.available()
        except OSError as exc:
            logger.warning("Zone listing unavailable, using common zones: %s", exc)
            available = set()
        if not available:
            return [zone.identifier for zone in self.registry.list()]
        return sorted(available)

    def _local_wall_clock(self, identifier: str, instant: Instant) -> datetime:
        if identifier == UTC:
            return instant.to_datetime().replace(tzinfo=None)
        return self.database.wall_clock(identifier, instant)
