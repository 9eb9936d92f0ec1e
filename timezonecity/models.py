"""Data models for timezonecity records and query parameters."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import InvalidArgumentError

# Matched before upper-casing so "ß" cannot turn into "SS"
_COUNTRY_CODE_RE = re.compile(r"^[A-Za-z]{2}$")

# Accepted input for list-like parameters: a comma separated string or an iterable of tokens
TokenInput = Union[str, Iterable[Any], None]


class SortField(str, Enum):
    """Columns a zone listing may be ordered by."""

    TIME_ZONE = "time_zone"
    STD_OFFSET = "std_offset"
    DST_OFFSET = "dst_offset"
    PLACE_NAME = "place_name"
    COUNTRY_CODE = "country_code"
    COUNTRY_NAME = "country_name"
    LATITUDE = "latitude"
    LONGITUDE = "longitude"


class SortDirection(str, Enum):
    """Ordering direction for a sort field."""

    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def parse(cls, token: Any) -> SortDirection:
        """Parse a direction token (asc, desc, ascending, descending; any case).

        Raises:
            InvalidArgumentError: If the token is not a recognised direction.
        """
        if isinstance(token, SortDirection):
            return token
        normalized = str(token).strip().upper()
        if normalized in ("ASC", "ASCENDING"):
            return cls.ASC
        if normalized in ("DESC", "DESCENDING"):
            return cls.DESC
        raise InvalidArgumentError(f"Illegal sort direction: {token!r}")


def split_tokens(value: TokenInput) -> list[str]:
    """Split a comma separated string (or iterable) into stripped tokens.

    Empty input yields an empty list. Empty tokens inside a non-empty list are
    kept so they fail validation instead of being silently dropped.
    """
    if value is None:
        return []
    if isinstance(value, str):
        if not value.strip():
            return []
        return [part.strip() for part in value.split(",")]
    return [str(getattr(item, "value", item)).strip() for item in value]


@dataclass(frozen=True)
class SortSpec:
    """Ordered (field, direction) pairs for a multi-key sort."""

    keys: tuple[tuple[SortField, SortDirection], ...]

    DEFAULT_FIELDS = "std_offset,place_name"
    DEFAULT_DIRECTIONS = "asc,asc"

    @classmethod
    def parse(cls, sort_by: TokenInput = None, sort_dir: TokenInput = None) -> SortSpec:
        """Build a SortSpec from field and direction tokens.

        Missing directions default to ascending. Extra directions beyond the
        number of fields are validated but otherwise ignored. An explicitly blank
        direction string is rejected; pass None for the defaults.

        Args:
            sort_by: Field names, e.g. "std_offset,place_name" or ["latitude"]
            sort_dir: Directions, e.g. "desc,asc" or [SortDirection.DESC]

        Returns:
            Parsed SortSpec

        Raises:
            InvalidArgumentError: If any field or direction is unrecognised.
        """
        field_tokens = split_tokens(cls.DEFAULT_FIELDS if sort_by is None else sort_by)
        dir_tokens = split_tokens(cls.DEFAULT_DIRECTIONS if sort_dir is None else sort_dir)

        if not field_tokens:
            raise InvalidArgumentError("At least one sort field is required")
        if isinstance(sort_dir, str) and not sort_dir.strip():
            raise InvalidArgumentError(f"Illegal sort direction: {sort_dir!r}")

        directions = [SortDirection.parse(token) for token in dir_tokens]

        fields: list[SortField] = []
        for token in field_tokens:
            try:
                fields.append(SortField(token.lower()))
            except ValueError:
                raise InvalidArgumentError(f"Illegal sort field: {token!r}") from None

        keys = tuple(
            (field, directions[i] if i < len(directions) else SortDirection.ASC)
            for i, field in enumerate(fields)
        )
        return cls(keys=keys)

    def to_order_by(self) -> str:
        """Render an ORDER BY clause body from whitelisted column names."""
        return ", ".join(f"{field.value} {direction.value}" for field, direction in self.keys)


@dataclass(frozen=True)
class CountryFilter:
    """Set of country codes restricting a listing; empty means no restriction."""

    codes: tuple[str, ...] = ()

    @classmethod
    def parse(cls, only_country: TokenInput = None) -> CountryFilter:
        """Normalise and validate country codes.

        Raises:
            InvalidArgumentError: If any code is not exactly two letters.
        """
        codes: list[str] = []
        for token in split_tokens(only_country):
            if not _COUNTRY_CODE_RE.match(token):
                raise InvalidArgumentError(f"Illegal country code: {token!r}")
            code = token.upper()
            if code not in codes:
                codes.append(code)
        return cls(codes=tuple(codes))

    def __bool__(self) -> bool:
        return bool(self.codes)


def is_country_code(value: Any) -> bool:
    """Return True if value looks like a 2-letter country code (any case)."""
    return isinstance(value, str) and bool(_COUNTRY_CODE_RE.match(value.strip()))


@dataclass(frozen=True)
class ZoneOffset:
    """UTC offset and DST status of a zone at one instant."""

    offset_seconds: int
    is_dst: bool

    @property
    def formatted(self) -> str:
        """Offset rendered as +HH:MM."""
        from .core.timezone_utils import format_offset

        return format_offset(self.offset_seconds)


class ZoneRecord(BaseModel):
    """One row of the timezonecity table."""

    time_zone: str = Field(..., description="IANA identifier, e.g. Atlantic/Azores")
    std_offset: int = Field(default=0, description="Standard UTC offset in seconds")
    dst_offset: int = Field(default=0, description="Daylight saving UTC offset in seconds")
    std_abbr: str = Field(default="", description="Standard time abbreviation")
    dst_abbr: str = Field(default="", description="Daylight saving abbreviation")
    place_name: str = Field(default="", description="Representative place name")
    country_code: Optional[str] = Field(default=None, description="ISO 3166 alpha-2 code")
    country_name: str = Field(default="", description="Country name")
    latitude: float = Field(default=0.0, description="Latitude in degrees")
    longitude: float = Field(default=0.0, description="Longitude in degrees")

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("std_abbr", "dst_abbr", "place_name", "country_name", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("country_code", mode="before")
    @classmethod
    def _normalize_country_code(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return str(value).strip().upper()

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> ZoneRecord:
        """Build a record from a mapping-like database row."""
        return cls.model_validate(dict(row))


class ListedZone(ZoneRecord):
    """Zone record enriched with its current formatted UTC offset."""

    offset_formatted: str = Field(..., description="Current UTC offset, e.g. +01:00")
