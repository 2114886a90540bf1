import logging

from .aliases import TIMEZONE_ALIASES, aliases_for, is_valid, resolve
from .config import EngineConfig
from .converter import convert, convert_validated, timezone_difference
from .database import ZoneDatabase, ZoneInfoDatabase
from .engine import TimezoneEngine
from .errors import InvalidInstantError, InvalidZoneError, TimezoneError
from .models import (
    CommonZone,
    CommonZoneEntry,
    ConversionResult,
    Instant,
    LocalTime,
    TimeZoneDetails,
    Transition,
    TransitionType,
)
from .offsets import baseline_offsets, is_dst, offset_minutes
from .registry import COMMON_ZONES, CommonZoneRegistry
from .transitions import transitions_for_year

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "COMMON_ZONES",
    "TIMEZONE_ALIASES",
    "CommonZone",
    "CommonZoneEntry",
    "CommonZoneRegistry",
    "ConversionResult",
    "EngineConfig",
    "Instant",
    "InvalidInstantError",
    "InvalidZoneError",
    "LocalTime",
    "TimeZoneDetails",
    "TimezoneEngine",
    "TimezoneError",
    "Transition",
    "TransitionType",
    "ZoneDatabase",
    "ZoneInfoDatabase",
    "aliases_for",
    "baseline_offsets",
    "convert",
    "convert_validated",
    "is_dst",
    "is_valid",
    "offset_minutes",
    "resolve",
    "timezone_difference",
    "transitions_for_year",
]
