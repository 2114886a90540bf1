import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum

from .errors import InvalidInstantError

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)


@dataclass(frozen=True)
class Instant:
    """
    An absolute point in time, stored as whole milliseconds since the Unix epoch.
    """

    epoch_ms: int

    @classmethod
    def from_timestamp(cls, seconds: float) -> "Instant":
        if not math.isfinite(seconds):
            raise InvalidInstantError(f"Not a finite timestamp: {seconds!r}")
        return cls(int(round(seconds * 1000)))

    @classmethod
    def from_datetime(cls, dt: datetime) -> "Instant":
        """
        Naive datetimes are interpreted as UTC; aware ones are converted.
        """
        if dt.tzinfo is None:
            dt_utc = dt.replace(tzinfo=timezone.utc)
        else:
            dt_utc = dt.astimezone(timezone.utc)
        return cls((dt_utc - _EPOCH) // _MILLISECOND)

    @classmethod
    def now(cls) -> "Instant":
        return cls.from_datetime(datetime.now(timezone.utc))

    @property
    def timestamp(self) -> int:
        return self.epoch_ms // 1000

    def to_datetime(self) -> datetime:
        """Aware UTC datetime; raises OverflowError outside datetime's range."""
        return _EPOCH + timedelta(milliseconds=self.epoch_ms)

    def shifted(self, minutes: int = 0) -> "Instant":
        return Instant(self.epoch_ms + minutes * 60_000)

    def __str__(self) -> str:
        return self.to_datetime().isoformat()


class TransitionType(Enum):
    """
    START moves a zone from standard time to DST, END moves it back.
    """

    START = "start"
    END = "end"


@dataclass(frozen=True)
class Transition:
    date: date  # local calendar date of the change
    offset_before: int
    offset_after: int
    type: TransitionType
    instant: Instant  # first instant observing offset_after

    @property
    def shift_minutes(self) -> int:
        return self.offset_after - self.offset_before


@dataclass(frozen=True)
class TimeZoneDetails:
    """
    Snapshot of a zone at a specific instant.
    """

    identifier: str
    display_name: str
    current_offset: int
    is_dst: bool
    transitions: tuple[Transition, ...]
    aliases: tuple[str, ...]


@dataclass(frozen=True)
class CommonZoneEntry:
    identifier: str
    display_name: str
    region: str
    popularity_rank: int


@dataclass(frozen=True)
class CommonZone:
    """
    A catalogue entry together with the offset and DST flag observed when the
    registry was built.
    """

    identifier: str
    display_name: str
    region: str
    popularity_rank: int
    offset: int
    is_dst: bool


@dataclass(frozen=True)
class ConversionResult:
    original_timestamp: int
    converted_timestamp: int
    source: TimeZoneDetails
    target: TimeZoneDetails
    offset_difference: int


@dataclass(frozen=True)
class LocalTime:
    identifier: str
    local_time: datetime  # naive local wall time
    utc_time: datetime  # tz-aware UTC
    timestamp: int
