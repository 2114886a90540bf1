"""Alias resolution and zone validation."""

from .database import UTC, ZoneDatabase

# One canonical zone per abbreviation; ambiguous abbreviations keep a single
# fixed meaning.
TIMEZONE_ALIASES: dict[str, str] = {
    "EST": "America/New_York",
    "EDT": "America/New_York",
    "CST": "America/Chicago",
    "CDT": "America/Chicago",
    "MST": "America/Denver",
    "MDT": "America/Denver",
    "PST": "America/Los_Angeles",
    "PDT": "America/Los_Angeles",
    "GMT": "Europe/London",
    "BST": "Europe/London",
    "CET": "Europe/Paris",
    "CEST": "Europe/Paris",
    "JST": "Asia/Tokyo",
    "KST": "Asia/Seoul",
    "IST": "Asia/Kolkata",
    "AEST": "Australia/Sydney",
    "ACST": "Australia/Adelaide",
    "AWST": "Australia/Perth",
}


def resolve(token: str) -> str:
    """
    Map an alias to its canonical identifier; anything else is returned as is.
    """
    return TIMEZONE_ALIASES.get(token.upper(), token)


def is_alias(token: str) -> bool:
    return token.upper() in TIMEZONE_ALIASES


def aliases_for(identifier: str) -> list[str]:
    return [alias for alias, target in TIMEZONE_ALIASES.items() if target == identifier]


def is_valid(identifier: str, database: ZoneDatabase) -> bool:
    if identifier == UTC:
        return True
    if identifier and database.is_known(identifier):
        return True
    return is_alias(identifier)
