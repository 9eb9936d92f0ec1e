"""Read-only access to the timezonecity table through sqlite3."""

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, Optional, Union

from ..exceptions import QueryExecutionError

logger = logging.getLogger(__name__)

TABLE_NAME = "timezonecity"

ZONE_COLUMNS = (
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

# Any DB-API 2.0 connection using the qmark ("?") paramstyle
ConnectionFactory = Callable[[], Any]


class ZoneStore:
    """Executes parameterized read queries against the timezonecity table.

    A fresh connection is opened for every query and closed afterwards, so a
    single store can be shared between threads without sharing a connection.
    Rows are returned as plain dicts keyed by column name.
    """

    def __init__(
        self,
        database_path: Optional[Union[str, Path]] = None,
        timeout: float = 30.0,
        read_only: bool = True,
        connection_factory: Optional[ConnectionFactory] = None,
        driver_errors: tuple[type[BaseException], ...] = (sqlite3.Error,),
    ) -> None:
        """Initialize the zone store.

        Args:
            database_path: Path to the SQLite database file holding the table.
            timeout: Seconds to wait on a locked database before failing.
            read_only: Open the file in read-only mode; a missing file then
                fails instead of being created empty.
            connection_factory: Optional callable returning a new DB-API
                connection; overrides database_path when given.
            driver_errors: Exception types the driver raises for failed
                queries; these are reported as QueryExecutionError.
        """
        if database_path is None and connection_factory is None:
            raise ValueError("ZoneStore needs a database_path or a connection_factory")

        self.database_path = Path(database_path) if database_path is not None else None
        self.timeout = timeout
        self.read_only = read_only
        self._connection_factory = connection_factory
        self._driver_errors = driver_errors

        logger.debug(
            "Zone store initialized: %s (read_only=%s)",
            self.database_path if self.database_path else "custom connection factory",
            read_only,
        )

    def _get_connection(self) -> Any:
        """Open a database connection with proper configuration."""
        if self._connection_factory is not None:
            return self._connection_factory()

        database_path = self.database_path
        if database_path is None:
            raise ValueError("ZoneStore has neither a database_path nor a connection_factory")
        if self.read_only:
            uri = database_path.resolve().as_uri() + "?mode=ro"
            return sqlite3.connect(uri, uri=True, timeout=self.timeout, check_same_thread=False)
        return sqlite3.connect(database_path, timeout=self.timeout, check_same_thread=False)

    def fetch_all(self, query: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Run a query and return every row.

        Args:
            query: SQL with "?" placeholders for every caller-supplied value.
            params: Values bound to the placeholders.

        Returns:
            List of rows as column-name dicts.

        Raises:
            QueryExecutionError: If the connection or the query fails.
        """
        try:
            with contextlib.closing(self._get_connection()) as conn:
                cursor = conn.cursor()
                try:
                    cursor.execute(query, tuple(params))
                    columns = [desc[0] for desc in cursor.description or ()]
                    rows = cursor.fetchall()
                finally:
                    cursor.close()
        except self._driver_errors as e:
            logger.error("Error executing SQL query: %s", e)
            raise QueryExecutionError(f"Error executing SQL query: {e}") from e

        logger.debug("Query returned %d rows", len(rows))
        return [dict(zip(columns, row)) for row in rows]

    def fetch_one(self, query: str, params: Sequence[Any] = ()) -> Optional[dict[str, Any]]:
        """Run a query and return its first row, or None when it has none.

        Raises:
            QueryExecutionError: If the connection or the query fails.
        """
        rows = self.fetch_all(query, params)
        return rows[0] if rows else None
