import os
from datetime import datetime, timezone
from importlib import resources

import pytest

from tzconvert import EngineConfig, Instant, InvalidZoneError, ZoneDatabase, ZoneInfoDatabase
from tzconvert.config import DEFAULT_TZPATH, compute_default_tzpath
from tzconvert.database import _load_tzdata_from_package


def _tzdata_bytes(key: str) -> bytes:
    *package, name = key.split("/")
    return (
        resources.files(".".join(["tzdata.zoneinfo", *package]))
        .joinpath(name)
        .read_bytes()
    )


def _database_with_tzdir(tzdir) -> ZoneInfoDatabase:
    return ZoneInfoDatabase(EngineConfig(tzdir=str(tzdir), tzpath=()))


def test_zone_info_database_satisfies_protocol(database):
    assert isinstance(database, ZoneDatabase)


def test_wall_clock(database):
    instant = Instant.from_datetime(datetime(2022, 1, 1, tzinfo=timezone.utc))
    assert database.wall_clock("Asia/Tokyo", instant) == datetime(2022, 1, 1, 9)
    assert database.wall_clock("UTC", instant) == datetime(2022, 1, 1)


def test_wall_clock_rejects_unknown_zone(database):
    with pytest.raises(InvalidZoneError):
        database.wall_clock("Invalid/Timezone", Instant(0))


def test_available_includes_utc_and_common_zones(database):
    available = database.available()
    assert "UTC" in available
    assert "America/New_York" in available
    assert "Australia/Sydney" in available


def test_validate_timezone_key_rejects_normalized_shortening():
    with pytest.raises(ValueError):
        ZoneInfoDatabase._validate_timezone_key("America/New_York/..")


@pytest.mark.parametrize("key", ["../etc/passwd", "/absolute/path", "", ".", ".."])
def test_rejects_path_like_keys(database, key):
    assert database.is_known(key) is False
    with pytest.raises(InvalidZoneError):
        database.zone(key)


def test_tzdir_is_searched_first(tmp_path):
    zone_dir = tmp_path / "Custom"
    zone_dir.mkdir()
    (zone_dir / "Zone").write_bytes(_tzdata_bytes("Asia/Tokyo"))

    database = _database_with_tzdir(tmp_path)
    instant = Instant.from_datetime(datetime(2022, 1, 1, tzinfo=timezone.utc))

    assert database.is_known("Custom/Zone")
    assert database.wall_clock("Custom/Zone", instant) == datetime(2022, 1, 1, 9)


def test_falls_back_to_tzdata_package(tmp_path):
    database = _database_with_tzdir(tmp_path)

    assert database.is_known("Europe/Paris")
    assert database.zone("Europe/Paris").key == "Europe/Paris"


def test_non_tzif_file_is_not_a_zone(tmp_path):
    zone_dir = tmp_path / "Bad"
    zone_dir.mkdir()
    (zone_dir / "Zone").write_bytes(b"not a tzif file")

    assert _database_with_tzdir(tmp_path).is_known("Bad/Zone") is False


def test_load_tzdata_from_package_raises_file_not_found(monkeypatch):
    def fake_files(package_name):
        raise FileNotFoundError("missing")

    monkeypatch.setattr("tzconvert.database.resources.files", fake_files)

    with pytest.raises(FileNotFoundError):
        _load_tzdata_from_package("Missing/Zone")


def test_compute_default_tzpath_prefers_env(monkeypatch):
    monkeypatch.setenv("PYTHONTZPATH", "/tmp/alpha" + os.pathsep + "/tmp/beta" + os.pathsep)
    monkeypatch.setattr(
        "tzconvert.config.sysconfig.get_config_var", lambda name: "/should/not/use"
    )

    assert compute_default_tzpath() == ("/tmp/alpha", "/tmp/beta")


def test_compute_default_tzpath_falls_back_to_sysconfig(monkeypatch):
    monkeypatch.delenv("PYTHONTZPATH", raising=False)
    monkeypatch.setattr(
        "tzconvert.config.sysconfig.get_config_var",
        lambda name: "/usr/lib/zoneinfo" + os.pathsep + "/opt/tz",
    )

    assert compute_default_tzpath() == ("/usr/lib/zoneinfo", "/opt/tz")


def test_compute_default_tzpath_uses_cpython_defaults(monkeypatch):
    monkeypatch.delenv("PYTHONTZPATH", raising=False)
    monkeypatch.setattr("tzconvert.config.sysconfig.get_config_var", lambda name: None)

    assert compute_default_tzpath() == DEFAULT_TZPATH


def test_config_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("TZDIR", str(tmp_path))
    monkeypatch.setenv("PYTHONTZPATH", "/tmp/alpha")
    monkeypatch.setenv("TZCONVERT_LOG_LEVEL", "debug")

    config = EngineConfig.from_env()

    assert config.tzdir == os.path.realpath(tmp_path)
    assert config.search_paths == (os.path.realpath(tmp_path), "/tmp/alpha")
    assert config.log_level == "DEBUG"
    assert config.logging_level == 10


def test_config_defaults(monkeypatch):
    monkeypatch.delenv("TZDIR", raising=False)
    monkeypatch.delenv("TZCONVERT_LOG_LEVEL", raising=False)
    monkeypatch.setenv("PYTHONTZPATH", "/tmp/alpha")

    config = EngineConfig.from_env()

    assert config.tzdir is None
    assert config.search_paths == ("/tmp/alpha",)
    assert config.log_level == "WARNING"


def test_config_unknown_log_level_falls_back_to_warning():
    assert EngineConfig(log_level="CHATTY", tzpath=()).logging_level == 30


@pytest.mark.parametrize("key", ["A" * 300, "America/New\x00York", "Nul\x00/Zone"])
def test_unloadable_keys_are_not_zones(database, key):
    assert database.is_known(key) is False
    with pytest.raises(InvalidZoneError):
        database.zone(key)


def test_tzdata_lookup_translates_bad_names():
    with pytest.raises(FileNotFoundError):
        _load_tzdata_from_package("A" * 300)
    with pytest.raises(FileNotFoundError):
        _load_tzdata_from_package("America/New\x00York")


def test_available_lists_tzdir_zones(tmp_path):
    custom = tmp_path / "Custom"
    custom.mkdir()
    (custom / "Zone").write_bytes(_tzdata_bytes("Asia/Tokyo"))
    (custom / "README").write_bytes(b"not a tzif file")
    right = tmp_path / "right" / "Custom"
    right.mkdir(parents=True)
    (right / "Zone").write_bytes(_tzdata_bytes("Asia/Tokyo"))

    available = _database_with_tzdir(tmp_path).available()

    assert "Custom/Zone" in available
    assert "Custom/README" not in available
    assert "right/Custom/Zone" not in available
    assert "Europe/Paris" in available
