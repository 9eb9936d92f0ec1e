"""Unit tests for timezonecity.abbreviation_cache."""

import threading

import pytest

from timezonecity.abbreviation_cache import ZoneAbbreviationCache

pytestmark = pytest.mark.unit


@pytest.fixture
def cache():
    return ZoneAbbreviationCache()


class TestZoneAbbreviationCache:
    """Tests for ZoneAbbreviationCache."""

    def test_get_returns_none_on_miss(self, cache):
        assert cache.get("Atlantic/Azores", False) is None
        assert cache.stats == {"hits": 0, "misses": 1}

    def test_set_then_get(self, cache):
        cache.set("Atlantic/Azores", False, "AZOT")
        cache.set("Atlantic/Azores", True, "AZOST")

        assert cache.get("Atlantic/Azores", False) == "AZOT"
        assert cache.get("Atlantic/Azores", True) == "AZOST"
        assert cache.stats == {"hits": 2, "misses": 0}

    def test_dst_flag_is_normalised_to_bool(self, cache):
        cache.set("Europe/Paris", 1, "CEST")
        assert cache.get("Europe/Paris", True) == "CEST"
        assert ("Europe/Paris", 1) in cache
        assert len(cache) == 1

    def test_empty_abbreviation_is_a_hit(self, cache):
        cache.set("Etc/Unknown", False, "")
        assert cache.get("Etc/Unknown", False) == ""
        assert cache.stats["hits"] == 1

    def test_contains_rejects_malformed_keys(self, cache):
        cache.set("Europe/Paris", False, "CET")
        assert "Europe/Paris" not in cache
        assert ("Europe/Paris",) not in cache
        assert ("Europe/Paris", False) in cache

    def test_clear_drops_entries_and_stats(self, cache):
        cache.set("Europe/Paris", False, "CET")
        cache.get("Europe/Paris", False)
        cache.get("Europe/Paris", True)

        cache.clear()

        assert len(cache) == 0
        assert cache.stats == {"hits": 0, "misses": 0}
        assert cache.get("Europe/Paris", False) is None

    def test_concurrent_access_keeps_consistent_counts(self, cache):
        zones = [f"Zone/{i}" for i in range(20)]
        errors = []

        def worker():
            try:
                for _ in range(50):
                    for zone in zones:
                        if cache.get(zone, False) is None:
                            cache.set(zone, False, zone.upper())
            except Exception as exc:  # pragma: no cover - surfaced below
                errors.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(cache) == len(zones)
        assert cache.stats["hits"] + cache.stats["misses"] == 8 * 50 * len(zones)
        assert all(cache.get(zone, False) == zone.upper() for zone in zones)
