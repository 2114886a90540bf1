import builtins
import logging
import re
from collections.abc import Iterable

from .database import ZoneDatabase
from .errors import InvalidZoneError
from .models import CommonZone, CommonZoneEntry, Instant
from .offsets import is_dst, offset_minutes

logger = logging.getLogger(__name__)

COMMON_ZONES: tuple[CommonZoneEntry, ...] = (
    CommonZoneEntry("UTC", "Coordinated Universal Time", "Global", 1),
    CommonZoneEntry("America/New_York", "Eastern Time (US & Canada)", "North America", 2),
    CommonZoneEntry("America/Chicago", "Central Time (US & Canada)", "North America", 3),
    CommonZoneEntry("America/Denver", "Mountain Time (US & Canada)", "North America", 4),
    CommonZoneEntry("America/Los_Angeles", "Pacific Time (US & Canada)", "North America", 5),
    CommonZoneEntry("America/Toronto", "Eastern Time (Canada)", "North America", 6),
    CommonZoneEntry("America/Vancouver", "Pacific Time (Canada)", "North America", 7),
    CommonZoneEntry("Europe/London", "London", "Europe", 8),
    CommonZoneEntry("Europe/Paris", "Paris", "Europe", 9),
    CommonZoneEntry("Europe/Berlin", "Berlin", "Europe", 10),
    CommonZoneEntry("Europe/Rome", "Rome", "Europe", 11),
    CommonZoneEntry("Europe/Madrid", "Madrid", "Europe", 12),
    CommonZoneEntry("Europe/Moscow", "Moscow", "Europe", 13),
    CommonZoneEntry("Asia/Tokyo", "Tokyo", "Asia", 14),
    CommonZoneEntry("Asia/Shanghai", "Shanghai", "Asia", 15),
    CommonZoneEntry("Asia/Singapore", "Singapore", "Asia", 16),
    CommonZoneEntry("Asia/Kolkata", "Kolkata", "Asia", 17),
    CommonZoneEntry("Asia/Dubai", "Dubai", "Asia", 18),
    CommonZoneEntry("Australia/Sydney", "Sydney", "Australia", 19),
    CommonZoneEntry("Australia/Melbourne", "Melbourne", "Australia", 20),
    CommonZoneEntry("Pacific/Auckland", "Auckland", "Pacific", 21),
    CommonZoneEntry("Brazil/East", "Brasília", "South America", 22),
    CommonZoneEntry("America/Sao_Paulo", "São Paulo", "South America", 23),
    CommonZoneEntry("Africa/Johannesburg", "Johannesburg", "Africa", 24),
    CommonZoneEntry("Africa/Cairo", "Cairo", "Africa", 25),
)

_IDENTIFIER_SEPARATORS = re.compile(r"[/_]")


class CommonZoneRegistry:
    """
    Catalogue of widely used zones.

    Offsets and DST flags are computed once, at construction, and are not
    refreshed; use the offset functions directly for live values.
    """

    def __init__(
        self,
        database: ZoneDatabase,
        entries: Iterable[CommonZoneEntry] = COMMON_ZONES,
        now: Instant | None = None,
    ) -> None:
        now = now or Instant.now()
        zones: list[CommonZone] = []
        for entry in entries:
            try:
                offset = offset_minutes(entry.identifier, now, database)
            except InvalidZoneError:
                logger.warning("Skipping %s: not in the zone database", entry.identifier)
                continue
            zones.append(
                CommonZone(
                    entry.identifier,
                    entry.display_name,
                    entry.region,
                    entry.popularity_rank,
                    offset,
                    is_dst(entry.identifier, now, database),
                )
            )
        self._zones = tuple(zones)
        self._by_identifier = {zone.identifier: zone for zone in self._zones}

    def get(self, identifier: str) -> CommonZone | None:
        return self._by_identifier.get(identifier)

    def regions(self) -> builtins.list[str]:
        return sorted({zone.region for zone in self._zones})

    def by_region(self, region: str | None) -> builtins.list[CommonZone]:
        if not region:
            return list(self._zones)
        region = region.lower()
        return [zone for zone in self._zones if zone.region.lower() == region]

    def search(self, query: str) -> builtins.list[CommonZone]:
        """
        Case-insensitive substring match on identifier, display name and
        region. Falls back to matching every query word against an identifier
        segment, so "new york" finds America/New_York.
        """
        query = query.lower()
        words = query.split()
        results = []
        for zone in self._zones:
            identifier = zone.identifier.lower()
            if (
                query in identifier
                or query in zone.display_name.lower()
                or query in zone.region.lower()
            ):
                results.append(zone)
                continue

            parts = _IDENTIFIER_SEPARATORS.split(identifier)
            if words and all(any(word in part for part in parts) for word in words):
                results.append(zone)
        return results

    def suggestions(self, prefix: str, limit: int = 5) -> builtins.list[CommonZone]:
        prefix = prefix.lower()
        return [
            zone
            for zone in self._zones
            if zone.identifier.lower().startswith(prefix)
            or zone.display_name.lower().startswith(prefix)
        ][:limit]

    def list(self) -> builtins.list[CommonZone]:
        return list(self._zones)

    def __len__(self) -> int:
        return len(self._zones)

    def __iter__(self):
        return iter(self._zones)
