"""Exception hierarchy for timezonecity.

Every error raised by the repository, the store adapter and the offset
calculator derives from TimeZoneCityError so callers can handle the whole
family with a single except clause while still telling the kinds apart.
"""

from __future__ import annotations


class TimeZoneCityError(Exception):
    """Base exception for all timezonecity errors."""


class InvalidArgumentError(TimeZoneCityError, ValueError):
    """Caller-supplied argument failed validation.

    Raised when:
    - A sort field is not one of the recognised column names
    - A sort direction token is not asc/desc
    - A country code is not exactly two letters
    - Latitude or longitude is empty or not numeric

    Raised before any query reaches the store.
    """


class QueryExecutionError(TimeZoneCityError):
    """The backing store reported a failure executing a query.

    The original driver exception is chained as ``__cause__``. No retry is
    attempted.
    """


class NotFoundError(TimeZoneCityError):
    """The store worked but holds no matching record."""


class ZoneNotFoundError(NotFoundError):
    """A requested time zone or nearest-zone search yielded no record."""

    def __init__(self, message: str, time_zone: str | None = None) -> None:
        """Initialize ZoneNotFoundError.

        Args:
            message: Error message
            time_zone: Identifier that was looked up, when there was one
        """
        super().__init__(message)
        self.time_zone = time_zone


class UnknownZoneError(TimeZoneCityError):
    """The timezone database does not recognise an identifier.

    Raised when zoneinfo cannot load the key, either because it does not
    exist or because it is malformed (e.g. absolute paths, empty strings).
    """

    def __init__(self, time_zone: str) -> None:
        super().__init__(f"Unknown time zone identifier: {time_zone!r}")
        self.time_zone = time_zone
