import logging
import os
from datetime import datetime, timezone, tzinfo
from functools import lru_cache
from importlib import resources
from typing import IO, Protocol, runtime_checkable
from zoneinfo import ZoneInfo, available_timezones

from .config import EngineConfig
from .errors import InvalidZoneError
from .models import Instant

logger = logging.getLogger(__name__)

UTC = "UTC"


@runtime_checkable
class ZoneDatabase(Protocol):
    """
    The host date/time facility: the only source of offset data.
    """

    def is_known(self, identifier: str) -> bool: ...

    def wall_clock(self, identifier: str, instant: Instant) -> datetime:
        """Naive local wall time of `instant` in `identifier`."""
        ...

    def available(self) -> set[str]: ...


class ZoneInfoDatabase:
    """
    ZoneDatabase backed by TZif files, found the way CPython's zoneinfo finds
    them, with an optional TZDIR override searched first.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig.from_env()

    def zone(self, identifier: str) -> tzinfo:
        if identifier == UTC:
            return timezone.utc
        try:
            key = self._validate_timezone_key(identifier)
        except ValueError as exc:
            raise InvalidZoneError(identifier) from exc
        return _load_zone(self.config.search_paths, key)

    def is_known(self, identifier: str) -> bool:
        try:
            self.zone(identifier)
        except InvalidZoneError:
            return False
        return True

    def wall_clock(self, identifier: str, instant: Instant) -> datetime:
        return instant.to_datetime().astimezone(self.zone(identifier)).replace(
            tzinfo=None
        )

    def available(self) -> set[str]:
        """
        Keys from zoneinfo's search path and tzdata, plus any TZif files under
        the configured TZDIR.
        """
        keys = available_timezones() | {UTC}
        if self.config.tzdir:
            keys |= _tzif_keys(self.config.tzdir)
        return keys

    def __repr__(self) -> str:
        return f"ZoneInfoDatabase(config={self.config!r})"

    @staticmethod
    def _validate_timezone_key(key: str) -> str:
        if not key:
            raise ValueError("Empty timezone name")
        if os.path.isabs(key):
            raise ValueError("Absolute paths are not allowed as timezone keys")

        # Normalize and ensure the normalized form does not change length (prevents ../)
        normalized = os.path.normpath(key)
        if len(normalized) != len(key) or normalized in (os.curdir, os.pardir):
            raise ValueError(f"Invalid timezone name: {key!r}")

        # Ensure the path stays within a sentinel base
        _base = os.path.normpath(os.path.join("_", "_"))[:-1]
        resolved = os.path.normpath(os.path.join(_base, normalized))
        if not resolved.startswith(_base):
            raise ValueError(f"Invalid timezone name: {key!r}")

        return normalized


@lru_cache(maxsize=512)
def _load_zone(search_paths: tuple[str, ...], key: str) -> ZoneInfo:
    for tz_root in search_paths:
        candidate = os.path.join(tz_root, key)
        if os.path.isfile(candidate):
            real = os.path.realpath(candidate)
            logger.debug("Loading %s from %s", key, real)
            try:
                file = open(real, "rb")
            except OSError as exc:
                raise InvalidZoneError(key) from exc
            with file:
                return _read_zone(file, key)

    # Fallback to tzdata package if present
    try:
        file = _load_tzdata_from_package(key)
    except FileNotFoundError as exc:
        raise InvalidZoneError(key) from exc
    with file as f:
        logger.debug("Loading %s from tzdata", key)
        return _read_zone(f, key)


def _tzif_keys(root: str) -> set[str]:
    keys = set()
    for dirpath, dirnames, filenames in os.walk(root):
        # leap-second and POSIX variants duplicate the main tree
        if dirpath == root:
            dirnames[:] = [d for d in dirnames if d not in ("right", "posix")]
        for filename in filenames:
            if filename == "posixrules":
                continue
            path = os.path.join(dirpath, filename)
            try:
                with open(path, "rb") as file:
                    if file.read(4) != b"TZif":
                        continue
            except OSError:
                continue
            keys.add(os.path.relpath(path, root).replace(os.sep, "/"))
    return keys


def _read_zone(file: IO[bytes], key: str) -> ZoneInfo:
    try:
        return ZoneInfo.from_file(file, key=key)
    except (ValueError, OSError) as exc:
        raise InvalidZoneError(key) from exc


def _load_tzdata_from_package(key: str) -> IO[bytes]:
    components = key.split("/")
    package_name = ".".join(["tzdata.zoneinfo"] + components[:-1])
    resource_name = components[-1]
    # OSError: missing files, directories, overlong names. ValueError: NUL bytes.
    try:
        return resources.files(package_name).joinpath(resource_name).open("rb")
    except (ImportError, OSError, ValueError) as exc:
        raise FileNotFoundError(f"No time zone found with key {key!r}") from exc
