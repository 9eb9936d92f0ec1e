"""Query layer over the timezonecity table.

TimeZoneRepository validates caller input, builds parameterized SQL, runs it
through a ZoneStore and shapes the rows into ZoneRecord models. Column names
only ever come from the SortField whitelist; every caller-supplied value is a
bound parameter.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

from .abbreviation_cache import ZoneAbbreviationCache
from .accent_folder import fold
from .core.config_manager import DEFAULT_NEAREST_LONGITUDE_WINDOW, TimeZoneCityConfig
from .core.timezone_utils import Instant, TimeZoneOffsetCalculator, format_offset
from .core.zone_store import TABLE_NAME, ZONE_COLUMNS, ZoneStore
from .exceptions import InvalidArgumentError, ZoneNotFoundError
from .models import (
    CountryFilter,
    ListedZone,
    SortSpec,
    TokenInput,
    ZoneOffset,
    ZoneRecord,
    is_country_code,
)

logger = logging.getLogger(__name__)

_SELECT_COLUMNS = ", ".join(ZONE_COLUMNS)


def _coerce_coordinate(name: str, value: Any) -> float:
    """Convert a latitude/longitude argument to float.

    Empty values (None, blank strings, zero) are rejected the same way as
    non-numeric ones.

    Raises:
        InvalidArgumentError: If the value is empty or not a finite number.
    """
    if value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
        raise InvalidArgumentError(f"Argument {name} cannot be empty")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Argument {name} must be numeric, got {value!r}") from None
    if not math.isfinite(number):
        raise InvalidArgumentError(f"Argument {name} must be finite, got {value!r}")
    if number == 0:
        raise InvalidArgumentError(f"Argument {name} cannot be empty")
    return number


class TimeZoneRepository:
    """Read access to time zone/city records with offset and abbreviation helpers."""

    def __init__(
        self,
        store: ZoneStore,
        calculator: Optional[TimeZoneOffsetCalculator] = None,
        abbreviation_cache: Optional[ZoneAbbreviationCache] = None,
        nearest_longitude_window: float = DEFAULT_NEAREST_LONGITUDE_WINDOW,
    ) -> None:
        """Initialize the repository.

        Args:
            store: Store adapter executing the queries
            calculator: Offset/DST calculator; a default one is created if omitted
            abbreviation_cache: Cache shared by abbreviation lookups; a private
                one is created if omitted
            nearest_longitude_window: Max longitude distance (degrees) for the
                in-country phase of find_nearest_zone
        """
        self.store = store
        self.calculator = calculator if calculator is not None else TimeZoneOffsetCalculator()
        self.abbreviation_cache = (
            abbreviation_cache if abbreviation_cache is not None else ZoneAbbreviationCache()
        )
        self.nearest_longitude_window = nearest_longitude_window

    @classmethod
    def from_config(cls, config: TimeZoneCityConfig) -> TimeZoneRepository:
        """Build a repository backed by the SQLite file named in the config."""
        store = ZoneStore(config.database_path, timeout=config.database_timeout)
        return cls(store, nearest_longitude_window=config.nearest_longitude_window)

    def list_zones(
        self,
        sort_by: TokenInput = None,
        sort_dir: TokenInput = None,
        only_country: TokenInput = None,
        fold_accents: bool = False,
    ) -> list[ListedZone]:
        """Return zones matching a country filter in the requested order.

        Args:
            sort_by: Sort fields, e.g. "std_offset,place_name" (the default)
            sort_dir: Directions per field, e.g. "desc,asc"; missing ones are ascending
            only_country: Country codes, e.g. "us,ca,mx"; empty means all countries
            fold_accents: Replace accented characters in place and country names

        Returns:
            Zone records, each with its current UTC offset formatted as +HH:MM

        Raises:
            InvalidArgumentError: If a sort field, direction or country code is invalid.
            QueryExecutionError: If the store fails.
            UnknownZoneError: If a stored identifier is unknown to the timezone database.
        """
        try:
            sort_spec = SortSpec.parse(sort_by, sort_dir)
            country_filter = CountryFilter.parse(only_country)
        except InvalidArgumentError as e:
            logger.warning("Rejected zone listing request: %s", e)
            raise

        query = f"SELECT {_SELECT_COLUMNS} FROM {TABLE_NAME}"
        params: list[Any] = []
        if country_filter:
            placeholders = ", ".join("?" for _ in country_filter.codes)
            query += f" WHERE country_code IN ({placeholders})"
            params.extend(country_filter.codes)
        query += f" ORDER BY {sort_spec.to_order_by()}"

        rows = self.store.fetch_all(query, params)

        now = self.calculator.to_utc(None)
        zones: list[ListedZone] = []
        for row in rows:
            if fold_accents:
                for key in ("place_name", "country_name"):
                    if row.get(key):
                        row[key] = fold(row[key])
            offset = self.calculator.offset_at(row["time_zone"], now)
            zones.append(ListedZone.model_validate({**row, "offset_formatted": offset.formatted}))

        logger.debug(
            "Listed %d zones (order=%s, countries=%s)",
            len(zones),
            sort_spec.to_order_by(),
            ",".join(country_filter.codes) or "all",
        )
        return zones

    def is_valid_zone(self, time_zone: str) -> bool:
        """Tell whether the table holds a record for the identifier.

        Raises:
            QueryExecutionError: If the store fails.
        """
        row = self.store.fetch_one(
            f"SELECT 1 FROM {TABLE_NAME} WHERE time_zone = ? LIMIT 1", (time_zone,)
        )
        return row is not None

    def get_zone_record(self, time_zone: str) -> Optional[ZoneRecord]:
        """Return the full record for an identifier, or None when absent.

        Raises:
            QueryExecutionError: If the store fails.
        """
        row = self.store.fetch_one(
            f"SELECT {_SELECT_COLUMNS} FROM {TABLE_NAME} WHERE time_zone = ? LIMIT 1",
            (time_zone,),
        )
        if row is None:
            return None
        return ZoneRecord.from_row(row)

    def find_nearest_zone(
        self, country_code: Optional[str], latitude: Any, longitude: Any
    ) -> ZoneRecord:
        """Return the zone record nearest to a coordinate.

        With a valid country code, the closest record of that country whose
        longitude lies within the configured window wins, even when a foreign
        record is closer. Otherwise, or when that search finds nothing, the
        closest record overall is taken, ordered by longitude distance then
        latitude distance. Longitude dominates because it tracks time zone
        boundaries; this is a heuristic, not a geodesic distance.

        Args:
            country_code: 2-letter country code, or None/"" for no preference
            latitude: Latitude in degrees
            longitude: Longitude in degrees

        Raises:
            InvalidArgumentError: If latitude or longitude is empty or not numeric.
            ZoneNotFoundError: If the table holds no records at all.
            QueryExecutionError: If the store fails.
        """
        try:
            lat = _coerce_coordinate("latitude", latitude)
            lon = _coerce_coordinate("longitude", longitude)
        except InvalidArgumentError as e:
            logger.warning("Rejected nearest-zone request: %s", e)
            raise

        if isinstance(country_code, str) and is_country_code(country_code):
            code = country_code.strip().upper()
            row = self.store.fetch_one(
                f"SELECT {_SELECT_COLUMNS} FROM {TABLE_NAME}"
                " WHERE country_code = ? AND ABS(longitude - ?) < ?"
                " ORDER BY ABS(longitude - ?), time_zone LIMIT 1",
                (code, lon, self.nearest_longitude_window, lon),
            )
            if row is not None:
                return ZoneRecord.from_row(row)
            logger.debug(
                "No %s zone within %.1f degrees of longitude %s; searching globally",
                code,
                self.nearest_longitude_window,
                lon,
            )
        elif country_code:
            logger.debug("Ignoring invalid country code %r; searching globally", country_code)

        row = self.store.fetch_one(
            f"SELECT {_SELECT_COLUMNS} FROM {TABLE_NAME}"
            " ORDER BY ABS(longitude - ?), ABS(latitude - ?), time_zone LIMIT 1",
            (lon, lat),
        )
        if row is None:
            logger.error("Failed to locate nearest timezone data for (%s, %s)", lat, lon)
            raise ZoneNotFoundError("Failed to locate nearest timezone data")
        return ZoneRecord.from_row(row)

    def get_zone_abbreviation(self, time_zone: str, at: Instant = None) -> str:
        """Return the zone's abbreviation for the DST state at an instant.

        Abbreviations are cached per (zone, DST flag), so after the first
        lookup for a pair no further store query is made for it.

        Args:
            time_zone: IANA identifier, e.g. "Atlantic/Azores"
            at: Instant to evaluate DST at; defaults to now

        Returns:
            Abbreviation such as "AZOT" or "AZOST"

        Raises:
            UnknownZoneError: If the identifier is unknown to the timezone database.
            ZoneNotFoundError: If the table has no record for the identifier.
            QueryExecutionError: If the store fails.
        """
        dst = self.calculator.is_dst(time_zone, at)

        cached = self.abbreviation_cache.get(time_zone, dst)
        if cached is not None:
            return cached

        row = self.store.fetch_one(
            f"SELECT std_abbr, dst_abbr FROM {TABLE_NAME} WHERE time_zone = ? LIMIT 1",
            (time_zone,),
        )
        if row is None:
            raise ZoneNotFoundError(f"No record for time zone {time_zone!r}", time_zone=time_zone)

        abbreviation = (row["dst_abbr"] if dst else row["std_abbr"]) or ""
        self.abbreviation_cache.set(time_zone, dst, abbreviation)
        return abbreviation

    def get_zone_offset(self, time_zone: str, at: Instant = None) -> ZoneOffset:
        """Return the zone's UTC offset and DST flag at an instant (default now)."""
        return self.calculator.offset_at(time_zone, at)

    def format_zone_offset(self, time_zone: str, at: Instant = None, separator: str = ":") -> str:
        """Return the zone's UTC offset at an instant rendered as +HH:MM."""
        return format_offset(self.get_zone_offset(time_zone, at).offset_seconds, separator)

    def is_dst(self, time_zone: str, at: Instant = None) -> bool:
        """Tell whether DST is in effect for the zone at an instant (default now)."""
        return self.calculator.is_dst(time_zone, at)
