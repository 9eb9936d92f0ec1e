"""Shared fixtures: temporary SQLite databases holding the timezonecity table."""

from __future__ import annotations

import sqlite3
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import pytest

from timezonecity.core.zone_store import ZoneStore
from timezonecity.repository import TimeZoneRepository

SCHEMA = """
    CREATE TABLE timezonecity (
        time_zone TEXT PRIMARY KEY,
        std_offset INTEGER NOT NULL,
        dst_offset INTEGER NOT NULL,
        std_abbr TEXT NOT NULL,
        dst_abbr TEXT NOT NULL,
        place_name TEXT NOT NULL,
        country_code TEXT,
        country_name TEXT NOT NULL,
        latitude REAL NOT NULL,
        longitude REAL NOT NULL
    )
"""

COLUMNS = (
    "time_zone",
    "std_offset",
    "dst_offset",
    "std_abbr",
    "dst_abbr",
    "place_name",
    "country_code",
    "country_name",
    "latitude",
    "longitude",
)

SAMPLE_ROWS: list[tuple[Any, ...]] = [
    ("Atlantic/Azores", -3600, 0, "AZOT", "AZOST", "Ponta Delgada", "PT", "Portugal", 37.7333, -25.6667),
    ("Europe/Lisbon", 0, 3600, "WET", "WEST", "Lisbon", "PT", "Portugal", 38.7167, -9.1333),
    ("Atlantic/Reykjavik", 0, 0, "GMT", "GMT", "Reykjavík", "IS", "Iceland", 64.1355, -21.8954),
    ("Europe/Paris", 3600, 7200, "CET", "CEST", "Paris", "FR", "France", 48.8667, 2.3333),
    ("Europe/Zurich", 3600, 7200, "CET", "CEST", "Zürich", "CH", "Switzerland", 47.3833, 8.5333),
    ("Europe/Berlin", 3600, 7200, "CET", "CEST", "Berlin", "DE", "Germany", 52.5, 13.3667),
    ("America/New_York", -18000, -14400, "EST", "EDT", "New York", "US", "United States", 40.7142, -74.0064),
    ("America/Phoenix", -25200, -25200, "MST", "MST", "Phoenix", "US", "United States", 33.4484, -112.074),
    ("America/Los_Angeles", -28800, -25200, "PST", "PDT", "Los Angeles", "US", "United States", 34.0522, -118.2437),
    ("America/Sao_Paulo", -10800, -10800, "BRT", "BRST", "São Paulo", "BR", "Brazil", -23.5475, -46.6361),
    ("Asia/Kolkata", 19800, 19800, "IST", "IST", "Kolkata", "IN", "India", 22.5697, 88.3697),
    ("Asia/Kathmandu", 20700, 20700, "NPT", "NPT", "Kathmandu", "NP", "Nepal", 27.7167, 85.3167),
    ("Australia/Sydney", 36000, 39600, "AEST", "AEDT", "Sydney", "AU", "Australia", -33.8678, 151.2073),
]


def build_database(path: Path, rows: Iterable[tuple[Any, ...]]) -> Path:
    """Create a SQLite file with the timezonecity table and the given rows."""
    conn = sqlite3.connect(path)
    try:
        conn.execute(SCHEMA)
        conn.executemany(
            f"INSERT INTO timezonecity ({', '.join(COLUMNS)}) VALUES ({', '.join('?' for _ in COLUMNS)})",
            list(rows),
        )
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def make_database(tmp_path: Path) -> Callable[..., Path]:
    """Factory building a database file from custom rows."""
    counter = {"n": 0}

    def _make(rows: Iterable[tuple[Any, ...]] = SAMPLE_ROWS) -> Path:
        counter["n"] += 1
        return build_database(tmp_path / f"zones_{counter['n']}.db", rows)

    return _make


@pytest.fixture
def sample_rows() -> list[dict[str, Any]]:
    """SAMPLE_ROWS as column-name dicts, in insertion order."""
    return [dict(zip(COLUMNS, row)) for row in SAMPLE_ROWS]


@pytest.fixture
def sample_db(make_database: Callable[..., Path]) -> Path:
    """Database file holding SAMPLE_ROWS."""
    return make_database()


@pytest.fixture
def zone_store(sample_db: Path) -> ZoneStore:
    """Read-only store over the sample database."""
    return ZoneStore(sample_db)


@pytest.fixture
def repository(zone_store: ZoneStore) -> TimeZoneRepository:
    """Repository over the sample database with a fresh abbreviation cache."""
    return TimeZoneRepository(zone_store)


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear timezonecity environment variables so host settings cannot leak in."""
    for key in (
        "TIMEZONECITY_TEST_TIME",
        "TIMEZONECITY_DB_PATH",
        "TIMEZONECITY_DB_TIMEOUT",
        "TIMEZONECITY_NEAREST_WINDOW",
        "TIMEZONECITY_LOG_LEVEL",
        "TIMEZONECITY_DEBUG",
    ):
        monkeypatch.delenv(key, raising=False)
