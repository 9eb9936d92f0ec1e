"""UTC offset and DST computation backed by the IANA timezone database."""

from __future__ import annotations

import datetime
import logging
import os
import zoneinfo
from functools import lru_cache
from typing import Union

from dateutil import parser as date_parser

from ..exceptions import InvalidArgumentError, UnknownZoneError
from ..models import ZoneOffset

logger = logging.getLogger(__name__)

TEST_TIME_ENV = "TIMEZONECITY_TEST_TIME"

# An instant may be an aware datetime, a naive datetime (read as UTC),
# epoch seconds, or the literal "now".
Instant = Union[datetime.datetime, int, float, str, None]


class TimeProvider:
    """Provides current time with test time override support."""

    def now_utc(self) -> datetime.datetime:
        """Return current UTC time with tzinfo.

        Can be overridden for testing via the TIMEZONECITY_TEST_TIME environment
        variable (ISO 8601, e.g. "2025-07-01T12:00:00Z"). A naive override is
        read as UTC. An unparseable override is logged and ignored.

        Returns:
            Current time in UTC with timezone info
        """
        test_time = os.environ.get(TEST_TIME_ENV)
        if test_time:
            try:
                dt = date_parser.isoparse(test_time)
                if dt.tzinfo is not None:
                    return dt.astimezone(datetime.timezone.utc)
                return dt.replace(tzinfo=datetime.timezone.utc)
            except (ValueError, OverflowError) as e:
                logger.warning("Failed to parse %s=%r: %s", TEST_TIME_ENV, test_time, e)

        return datetime.datetime.now(datetime.timezone.utc)


@lru_cache(maxsize=512)
def load_zone(time_zone: str) -> zoneinfo.ZoneInfo:
    """Load a ZoneInfo, translating lookup failures into UnknownZoneError.

    Raises:
        UnknownZoneError: If the identifier is missing from the timezone
            database or is not a valid key.
    """
    if not isinstance(time_zone, str) or not time_zone.strip():
        raise UnknownZoneError(str(time_zone))
    try:
        return zoneinfo.ZoneInfo(time_zone)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError, OSError) as e:
        logger.debug("zoneinfo rejected %r: %s", time_zone, e)
        raise UnknownZoneError(time_zone) from e


def is_known_zone(time_zone: str) -> bool:
    """Return True if the timezone database recognises the identifier."""
    try:
        load_zone(time_zone)
    except UnknownZoneError:
        return False
    return True


def format_offset(offset_seconds: int, separator: str = ":") -> str:
    """Render a signed offset in seconds as +HH:MM.

    Examples:
        >>> format_offset(3600)
        '+01:00'
        >>> format_offset(-12600)
        '-03:30'
        >>> format_offset(20700, separator="")
        '+0545'
    """
    sign = "-" if offset_seconds < 0 else "+"
    minutes = abs(int(offset_seconds)) // 60
    hours, minutes = divmod(minutes, 60)
    return f"{sign}{hours:02d}{separator}{minutes:02d}"


class TimeZoneOffsetCalculator:
    """Resolves UTC offsets and DST flags for IANA zones at given instants."""

    def __init__(self, time_provider: TimeProvider | None = None) -> None:
        """Initialize offset calculator.

        Args:
            time_provider: Source of "now"; defaults to a TimeProvider honouring
                the test time override.
        """
        self.time_provider = time_provider if time_provider is not None else TimeProvider()

    def to_utc(self, instant: Instant = None) -> datetime.datetime:
        """Normalise any supported instant form to an aware UTC datetime.

        Raises:
            InvalidArgumentError: If the instant is of an unsupported type or
                is an unrecognised string.
        """
        if instant is None or (isinstance(instant, str) and instant.strip().lower() == "now"):
            return self.time_provider.now_utc()
        if isinstance(instant, datetime.datetime):
            if instant.tzinfo is None:
                return instant.replace(tzinfo=datetime.timezone.utc)
            return instant.astimezone(datetime.timezone.utc)
        if isinstance(instant, bool):
            raise InvalidArgumentError(f"Illegal instant: {instant!r}")
        if isinstance(instant, (int, float)):
            try:
                return datetime.datetime.fromtimestamp(instant, tz=datetime.timezone.utc)
            except (ValueError, OverflowError, OSError):
                raise InvalidArgumentError(f"Illegal instant: {instant!r}") from None
        if isinstance(instant, str):
            try:
                return datetime.datetime.fromtimestamp(float(instant), tz=datetime.timezone.utc)
            except (ValueError, OverflowError, OSError):
                pass
            try:
                return self.to_utc(date_parser.isoparse(instant))
            except (ValueError, OverflowError):
                raise InvalidArgumentError(f"Illegal instant: {instant!r}") from None
        raise InvalidArgumentError(f"Illegal instant: {instant!r}")

    def offset_at(self, time_zone: str, instant: Instant = None) -> ZoneOffset:
        """Return the UTC offset and DST flag of a zone at an instant.

        The instant is converted from UTC into the zone, so the rule in force is
        the one whose transition time is the greatest one not after the
        instant. An instant exactly on a transition gets the new rule.

        Args:
            time_zone: IANA identifier, e.g. "Asia/Kathmandu"
            instant: Point in time; defaults to now

        Returns:
            ZoneOffset with signed offset seconds and DST flag

        Raises:
            UnknownZoneError: If the identifier is not in the timezone database.
            InvalidArgumentError: If the instant is malformed or out of range.
        """
        tz = load_zone(time_zone)
        try:
            local = self.to_utc(instant).astimezone(tz)
        except OverflowError:
            raise InvalidArgumentError(f"Instant out of range for {time_zone}: {instant!r}") from None
        utc_offset = local.utcoffset() or datetime.timedelta(0)
        dst = local.dst() or datetime.timedelta(0)
        return ZoneOffset(
            offset_seconds=int(utc_offset.total_seconds()),
            is_dst=dst != datetime.timedelta(0),
        )

    def is_dst(self, time_zone: str, instant: Instant = None) -> bool:
        """Tell whether DST is in effect for a zone at an instant."""
        return self.offset_at(time_zone, instant).is_dst

    def is_dst_now(self, time_zone: str) -> bool:
        """Tell whether DST is in effect for a zone right now."""
        return self.is_dst(time_zone, None)

    def format_offset_at(self, time_zone: str, instant: Instant = None) -> str:
        """Return the zone's offset at an instant rendered as +HH:MM."""
        return format_offset(self.offset_at(time_zone, instant).offset_seconds)
