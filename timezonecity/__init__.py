"""timezonecity - lookups over a table of time zone/city records.

Lists zones with validated sorting and country filters, checks and fetches
zone records, finds the zone nearest to a coordinate, and resolves current
UTC offsets and DST-aware abbreviations from the IANA timezone database.

Example usage:
    >>> from timezonecity import TimeZoneRepository, ZoneStore
    >>> repo = TimeZoneRepository(ZoneStore("timezonecity.db"))
    >>> repo.get_zone_abbreviation("Atlantic/Azores")
    'AZOT'
"""

__version__ = "0.1.0"

from .abbreviation_cache import ZoneAbbreviationCache
from .accent_folder import fold
from .core.config_manager import ConfigManager, TimeZoneCityConfig
from .core.timezone_utils import TimeProvider, TimeZoneOffsetCalculator, format_offset
from .core.zone_store import ZoneStore
from .exceptions import (
    InvalidArgumentError,
    NotFoundError,
    QueryExecutionError,
    TimeZoneCityError,
    UnknownZoneError,
    ZoneNotFoundError,
)
from .models import (
    CountryFilter,
    ListedZone,
    SortDirection,
    SortField,
    SortSpec,
    ZoneOffset,
    ZoneRecord,
)
from .repository import TimeZoneRepository

__all__ = [
    "ConfigManager",
    "CountryFilter",
    "InvalidArgumentError",
    "ListedZone",
    "NotFoundError",
    "QueryExecutionError",
    "SortDirection",
    "SortField",
    "SortSpec",
    "TimeProvider",
    "TimeZoneCityConfig",
    "TimeZoneCityError",
    "TimeZoneOffsetCalculator",
    "TimeZoneRepository",
    "UnknownZoneError",
    "ZoneAbbreviationCache",
    "ZoneNotFoundError",
    "ZoneOffset",
    "ZoneRecord",
    "ZoneStore",
    "__version__",
    "fold",
]
