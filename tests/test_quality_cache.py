"""Tests for the quality score cache."""
import logging
from unittest.mock import AsyncMock

import pytest

from src.content.quality_cache import MemoryScoreCacheBackend, QualityAnalysisCache, fingerprint


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestFingerprint:
    def test_stable_and_prefixed(self):
        key = fingerprint("Body text", "postgres")
        assert key == fingerprint("Body text", "postgres")
        assert key.startswith("quality:")
        assert len(key) == len("quality:") + 8

    def test_single_character_changes_the_key(self):
        base = fingerprint("Body text", "postgres")
        assert fingerprint("Body text.", "postgres") != base
        assert fingerprint("Body text", "postgreS") != base


class TestQualityAnalysisCache:
    @pytest.mark.asyncio
    async def test_hit_and_miss(self):
        cache = QualityAnalysisCache(MemoryScoreCacheBackend(), ttl_seconds=60)
        assert await cache.get("quality:00000001") is None
        await cache.put("quality:00000001", {"overall_score": 80})
        assert await cache.get("quality:00000001") == {"overall_score": 80}

    @pytest.mark.asyncio
    async def test_entries_expire(self):
        clock = FakeClock()
        cache = QualityAnalysisCache(MemoryScoreCacheBackend(clock=clock), ttl_seconds=86400)
        await cache.put("k", {"overall_score": 80})

        clock.now = 86399
        assert await cache.get("k") is not None
        clock.now = 86400
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_explicit_ttl_overrides_default(self):
        clock = FakeClock()
        cache = QualityAnalysisCache(MemoryScoreCacheBackend(clock=clock), ttl_seconds=86400)
        await cache.put("k", {"overall_score": 80}, ttl_seconds=10)
        clock.now = 11
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_read_failure_is_a_miss(self, caplog):
        backend = AsyncMock()
        backend.get.side_effect = ConnectionError("cache down")
        cache = QualityAnalysisCache(backend)
        with caplog.at_level(logging.WARNING, logger="src.content.quality_cache"):
            assert await cache.get("k") is None
        assert "Quality cache read failed" in caplog.text

    @pytest.mark.asyncio
    async def test_write_failure_is_swallowed(self, caplog):
        backend = AsyncMock()
        backend.set.side_effect = ConnectionError("cache down")
        cache = QualityAnalysisCache(backend)
        with caplog.at_level(logging.WARNING, logger="src.content.quality_cache"):
            await cache.put("k", {"overall_score": 80})
        assert "Quality cache write failed" in caplog.text
