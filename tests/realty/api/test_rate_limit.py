"""
Tests for the in-process rate limiter
"""
import pytest
from fastapi import HTTPException

from config.settings import settings
from src.realty.api.rate_limit import RateLimiter


@pytest.fixture
def memory_limiter(monkeypatch):
    monkeypatch.setattr(settings, "rate_limit_enabled", True)
    monkeypatch.setattr(settings, "redis_url", None)
    return RateLimiter(prefix="test")


class TestMemoryCounters:
    """Tests for the fallback counters."""

    def test_counts_within_window(self, memory_limiter):
        assert memory_limiter._hit_memory("a", reset_at=60, now=0) == 1
        assert memory_limiter._hit_memory("a", reset_at=60, now=10) == 2

    def test_window_rollover_restarts_count(self, memory_limiter):
        memory_limiter._hit_memory("a", reset_at=60, now=0)
        memory_limiter._hit_memory("a", reset_at=60, now=1)

        assert memory_limiter._hit_memory("a", reset_at=120, now=61) == 1

    def test_expired_keys_are_evicted(self, memory_limiter):
        """Clients that never come back do not keep their counters."""
        for i in range(50):
            memory_limiter._hit_memory(f"client-{i}", reset_at=60, now=0)

        memory_limiter._hit_memory("late", reset_at=120, now=61)

        assert list(memory_limiter._counters) == ["late"]

    def test_live_keys_survive_sweep(self, memory_limiter):
        memory_limiter._hit_memory("old", reset_at=60, now=0)
        memory_limiter._hit_memory("long", reset_at=900, now=0)

        memory_limiter._hit_memory("new", reset_at=120, now=61)

        assert set(memory_limiter._counters) == {"long", "new"}
        assert memory_limiter._hit_memory("long", reset_at=900, now=62) == 2

    def test_reset(self, memory_limiter):
        memory_limiter._hit_memory("a", reset_at=60, now=0)

        memory_limiter.reset()

        assert memory_limiter._counters == {}


class TestHit:
    """Tests for RateLimiter.hit."""

    def test_limit_exceeded(self, memory_limiter):
        memory_limiter.hit("k", limit=1, window_seconds=3600, detail="Slow down")

        with pytest.raises(HTTPException) as exc_info:
            memory_limiter.hit("k", limit=1, window_seconds=3600, detail="Slow down")

        assert exc_info.value.status_code == 429
        assert exc_info.value.detail == "Slow down"
        assert "Retry-After" in exc_info.value.headers

    def test_disabled(self, memory_limiter, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_enabled", False)

        for _ in range(5):
            assert memory_limiter.hit("k", limit=1, window_seconds=60, detail="Slow down") == 0
