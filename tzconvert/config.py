import logging
import os
import sysconfig
from dataclasses import dataclass, field

# Fallback paths align with CPython's defaults
DEFAULT_TZPATH = (
    "/usr/share/zoneinfo",
    "/usr/share/lib/zoneinfo",
    "/etc/zoneinfo",
)


def compute_default_tzpath() -> tuple[str, ...]:
    env_var = os.environ.get("PYTHONTZPATH") or sysconfig.get_config_var("TZPATH")
    if env_var:
        return tuple(path for path in env_var.split(os.pathsep) if path)
    return DEFAULT_TZPATH


@dataclass(frozen=True)
class EngineConfig:
    """
    Settings read from the environment.

    `tzdir` is searched before `tzpath`; the `tzdata` package is the last
    resort for zone lookups.
    """

    tzdir: str | None = None
    tzpath: tuple[str, ...] = field(default_factory=compute_default_tzpath)
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "EngineConfig":
        tzdir_override = os.environ.get("TZDIR")
        return cls(
            tzdir=os.path.realpath(tzdir_override) if tzdir_override else None,
            tzpath=compute_default_tzpath(),
            log_level=os.environ.get("TZCONVERT_LOG_LEVEL", "WARNING").upper(),
        )

    @property
    def search_paths(self) -> tuple[str, ...]:
        if self.tzdir:
            return (self.tzdir, *self.tzpath)
        return self.tzpath

    @property
    def logging_level(self) -> int:
        level = logging.getLevelName(self.log_level)
        return level if isinstance(level, int) else logging.WARNING
