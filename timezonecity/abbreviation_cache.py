"""Thread-safe memo of time zone abbreviations keyed by (zone, DST flag)."""

from __future__ import annotations

import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)


class ZoneAbbreviationCache:
    """Maps (time_zone, is_dst) to an abbreviation string.

    Entries live as long as the cache instance and are never invalidated: the
    abbreviation for a given zone and DST state does not change while the
    process runs. All access is serialised by a lock so concurrent readers and
    writers never see a half-updated mapping. Two threads missing on the same
    key may both fetch and store; the second write is identical and harmless.

    Example:
        cache = ZoneAbbreviationCache()
        abbr = cache.get("Atlantic/Azores", False)
        if abbr is None:
            abbr = fetch_from_store()
            cache.set("Atlantic/Azores", False, abbr)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[tuple[str, bool], str] = {}
        self.stats = {
            "hits": 0,
            "misses": 0,
        }

    def get(self, time_zone: str, is_dst: bool) -> Optional[str]:
        """Return the cached abbreviation or None on a miss."""
        key = (time_zone, bool(is_dst))
        with self._lock:
            abbr = self._entries.get(key)
            if abbr is None:
                self.stats["misses"] += 1
            else:
                self.stats["hits"] += 1
        if abbr is None:
            logger.debug("Abbreviation cache miss: %s dst=%s", time_zone, key[1])
        return abbr

    def set(self, time_zone: str, is_dst: bool, abbreviation: str) -> None:
        """Store an abbreviation for a (zone, DST flag) pair."""
        with self._lock:
            self._entries[(time_zone, bool(is_dst))] = abbreviation
        logger.debug("Cached abbreviation %r for %s dst=%s", abbreviation, time_zone, bool(is_dst))

    def clear(self) -> None:
        """Drop all entries and reset statistics."""
        with self._lock:
            self._entries.clear()
            self.stats = {"hits": 0, "misses": 0}

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        with self._lock:
            return (key[0], bool(key[1])) in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
