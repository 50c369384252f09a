"""Fingerprint-keyed cache of quality scores.

The key is a CRC-32 of body + keyword. It is not collision resistant: a
collision only reuses a prior, approximately valid score. Every backend
failure is logged and treated as a miss, so scoring never fails on the
cache's account.
"""
import logging
import time
import zlib
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert

from src.config import settings
from src.content.models import QualityScoreCacheEntry
from src.database import AsyncSessionLocal

logger = logging.getLogger(__name__)

KEY_PREFIX = "quality:"


def fingerprint(content_body: str, target_keyword: str) -> str:
    digest = zlib.crc32((content_body + target_keyword).encode("utf-8"))
    return f"{KEY_PREFIX}{digest:08x}"


class ScoreCacheBackend(Protocol):
    async def get(self, key: str) -> Optional[Dict[str, Any]]: ...

    async def set(self, key: str, value: Dict[str, Any], ttl_seconds: int) -> None: ...


class MemoryScoreCacheBackend:
    """Process-local backend. Entries are not shared across workers."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Dict[str, Any]]] = {}

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return dict(value)

    async def set(self, key: str, value: Dict[str, Any], ttl_seconds: int) -> None:
        self._entries[key] = (self._clock() + ttl_seconds, dict(value))

    def clear(self) -> None:
        self._entries.clear()


class DatabaseScoreCacheBackend:
    """Shared backend on the ``quality_score_cache`` table.

    Uses its own sessions so a cache failure never poisons the caller's
    transaction.
    """

    def __init__(self, session_factory=AsyncSessionLocal):
        self._session_factory = session_factory

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(QualityScoreCacheEntry.scores).where(
                    QualityScoreCacheEntry.key == key,
                    QualityScoreCacheEntry.expires_at > datetime.utcnow(),
                )
            )
            return result.scalar_one_or_none()

    async def set(self, key: str, value: Dict[str, Any], ttl_seconds: int) -> None:
        expires_at = datetime.utcnow() + timedelta(seconds=ttl_seconds)
        stmt = insert(QualityScoreCacheEntry).values(key=key, scores=value, expires_at=expires_at)
        stmt = stmt.on_conflict_do_update(
            index_elements=[QualityScoreCacheEntry.key],
            set_={"scores": stmt.excluded.scores, "expires_at": stmt.excluded.expires_at},
        )
        async with self._session_factory() as session:
            await session.execute(stmt)
            await session.commit()


class QualityAnalysisCache:
    def __init__(self, backend: ScoreCacheBackend, ttl_seconds: int = settings.QUALITY_CACHE_TTL_SECONDS):
        self.backend = backend
        self.ttl_seconds = ttl_seconds

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            value = await self.backend.get(key)
        except Exception as e:
            logger.warning(f"Quality cache read failed for {key}, scoring without cache: {e}")
            return None
        logger.debug(f"Quality cache {'hit' if value is not None else 'miss'} for {key}")
        return value

    async def put(self, key: str, scores: Dict[str, Any], ttl_seconds: Optional[int] = None) -> None:
        try:
            await self.backend.set(key, scores, ttl_seconds or self.ttl_seconds)
        except Exception as e:
            logger.warning(f"Quality cache write failed for {key}, ignoring: {e}")


_quality_cache: Optional[QualityAnalysisCache] = None


def get_quality_cache() -> QualityAnalysisCache:
    global _quality_cache
    if _quality_cache is None:
        if settings.QUALITY_CACHE_BACKEND == "memory":
            backend: ScoreCacheBackend = MemoryScoreCacheBackend()
        elif settings.QUALITY_CACHE_BACKEND == "database":
            backend = DatabaseScoreCacheBackend()
        else:
            raise ValueError(
                f"Unknown QUALITY_CACHE_BACKEND {settings.QUALITY_CACHE_BACKEND!r}. Valid: database, memory"
            )
        _quality_cache = QualityAnalysisCache(backend)
    return _quality_cache
