class TimezoneError(ValueError):
    """
    Base class for errors raised by the conversion engine.
    """


class InvalidZoneError(TimezoneError):
    """
    Raised when a zone identifier is not recognized by the zone database.
    """

    def __init__(self, identifier: str, role: str | None = None) -> None:
        self.identifier = identifier
        self.role = role
        if role:
            message = f"Invalid {role} timezone: {identifier!r}"
        else:
            message = f"Invalid timezone: {identifier!r}"
        super().__init__(message)


class InvalidInstantError(TimezoneError):
    """
    Raised when an instant is not a usable point in time.
    """
