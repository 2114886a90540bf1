from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from tzconvert import Instant, InvalidZoneError, TimezoneEngine, ZoneInfoDatabase


def _northern(utc: datetime) -> int:
    start = datetime(utc.year, 3, 13, 7, tzinfo=timezone.utc)
    end = datetime(utc.year, 11, 6, 6, tzinfo=timezone.utc)
    return -240 if start <= utc < end else -300


def _southern(utc: datetime) -> int:
    end = datetime(utc.year, 4, 2, 16, tzinfo=timezone.utc)
    start = datetime(utc.year, 10, 1, 16, tzinfo=timezone.utc)
    return 600 if end <= utc < start else 660


def _partial(utc: datetime) -> int:
    # Full hour in summer, half hour in autumn, none in winter.
    if datetime(utc.year, 6, 1, tzinfo=timezone.utc) <= utc < datetime(
        utc.year, 9, 1, tzinfo=timezone.utc
    ):
        return 60
    if datetime(utc.year, 9, 1, tzinfo=timezone.utc) <= utc < datetime(
        utc.year, 11, 1, tzinfo=timezone.utc
    ):
        return 30
    return 0


class FakeZoneDatabase:
    """
    ZoneDatabase double with rule functions mapping a UTC datetime to an
    offset in minutes.
    """

    def __init__(self, zones: dict[str, Callable[[datetime], int]]) -> None:
        self.zones = zones
        self.calls: list[str] = []

    def is_known(self, identifier: str) -> bool:
        self.calls.append(identifier)
        return identifier in self.zones

    def wall_clock(self, identifier: str, instant: Instant) -> datetime:
        self.calls.append(identifier)
        if identifier not in self.zones:
            raise InvalidZoneError(identifier)
        utc = instant.to_datetime()
        offset = self.zones[identifier](utc)
        return (utc + timedelta(minutes=offset)).replace(tzinfo=None)

    def available(self) -> set[str]:
        return set(self.zones)


@pytest.fixture
def fake_database() -> FakeZoneDatabase:
    return FakeZoneDatabase(
        {
            "Test/Fixed": lambda utc: 330,
            "Test/Northern": _northern,
            "Test/Southern": _southern,
            "Test/Partial": _partial,
            "America/New_York": _northern,
        }
    )


@pytest.fixture(scope="session")
def database() -> ZoneInfoDatabase:
    return ZoneInfoDatabase()


@pytest.fixture(scope="session")
def engine(database) -> TimezoneEngine:
    return TimezoneEngine(database)
