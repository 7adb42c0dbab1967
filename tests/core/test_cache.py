"""
Tests for the resolution cache.
"""

import threading
import time

import pytest

from tieredsettings.core.cache import ResolutionCache


class TestResolutionCache:
    """Test get-or-compute, override and clear semantics."""

    def test_computes_once(self):
        cache = ResolutionCache()
        calls = []

        def factory():
            calls.append(1)
            return object()

        first = cache.get_or_compute(int, factory)
        assert cache.get_or_compute(int, factory) is first
        assert len(calls) == 1

    def test_key_spaces_are_independent(self):
        cache = ResolutionCache()
        cache.set("Settings", "by-type")
        assert cache.get_or_compute_by_name("Settings", lambda: "by-name") == "by-name"
        assert cache.get_or_compute("Settings", lambda: "other") == "by-type"

    def test_set_overrides_cached_value(self):
        cache = ResolutionCache()
        cache.get_or_compute(int, lambda: 1)
        cache.set(int, 2)
        assert cache.get_or_compute(int, lambda: 3) == 2

    def test_failed_computation_not_cached(self):
        cache = ResolutionCache()

        def failing():
            raise LookupError("missing")

        with pytest.raises(LookupError):
            cache.get_or_compute(int, failing)
        assert cache.get_or_compute(int, lambda: 5) == 5

    def test_clear_drops_everything(self):
        cache = ResolutionCache()
        cache.set(int, 1)
        cache.set_by_name("n", 2)
        cache.clear()
        assert int not in cache.by_type
        assert len(cache.by_name) == 0

    def test_set_during_computation_wins(self):
        cache = ResolutionCache()
        started = threading.Event()
        release = threading.Event()
        results = []

        def slow():
            started.set()
            release.wait(5)
            return "computed"

        worker = threading.Thread(target=lambda: results.append(cache.get_or_compute(int, slow)))
        worker.start()
        started.wait(5)
        cache.set(int, "override")
        release.set()
        worker.join(5)

        assert results == ["override"]
        assert cache.get_or_compute(int, lambda: "again") == "override"

    def test_computation_spanning_clear_is_not_stored(self):
        cache = ResolutionCache()
        started = threading.Event()
        release = threading.Event()
        results = []

        def slow():
            started.set()
            release.wait(5)
            return "stale"

        worker = threading.Thread(target=lambda: results.append(cache.get_or_compute(int, slow)))
        worker.start()
        started.wait(5)
        cache.clear()
        release.set()
        worker.join(5)

        assert results == ["stale"]
        assert cache.get_or_compute(int, lambda: "fresh") == "fresh"

    def test_concurrent_callers_see_one_value(self):
        cache = ResolutionCache()
        results = []

        def factory():
            time.sleep(0.01)
            return object()

        threads = [
            threading.Thread(target=lambda: results.append(cache.get_or_compute(str, factory)))
            for _ in range(8)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join(5)

        assert len(results) == 8
        assert all(r is results[0] for r in results)
