"""Per-provider admission control.

A sliding-window log keyed by provider name. Limits are global per
provider, so one busy tenant can throttle every other tenant on the same
provider. Setting ``RATE_LIMIT_TENANT_REQUESTS`` adds a per-tenant ceiling
inside each provider window; the provider-wide ceiling still applies.
"""
import logging
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, Optional

from src.config import settings
from src.llm.schemas import Admission

logger = logging.getLogger(__name__)


def _default_limits() -> Dict[str, int]:
    return {
        "claude": settings.RATE_LIMIT_CLAUDE_REQUESTS,
        "openai": settings.RATE_LIMIT_OPENAI_REQUESTS,
    }


class RateLimiter:
    def __init__(
        self,
        limits: Optional[Dict[str, int]] = None,
        window_seconds: float = settings.RATE_LIMIT_WINDOW_SECONDS,
        default_requests: int = settings.RATE_LIMIT_DEFAULT_REQUESTS,
        tenant_requests: Optional[int] = settings.RATE_LIMIT_TENANT_REQUESTS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limits = limits if limits is not None else _default_limits()
        self.window_seconds = window_seconds
        self.default_requests = default_requests
        self.tenant_requests = tenant_requests
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)

    def limit_for(self, provider_key: str) -> int:
        return self.limits.get(provider_key, self.default_requests)

    def _window(self, key: str, now: float) -> Deque[float]:
        hits = self._hits[key]
        cutoff = now - self.window_seconds
        while hits and hits[0] <= cutoff:
            hits.popleft()
        return hits

    def _retry_after(self, hits: Deque[float], now: float) -> float:
        # A zero limit has no oldest hit to wait for
        if not hits:
            return float(self.window_seconds)
        return hits[0] + self.window_seconds - now

    async def admit(self, provider_key: str, tenant_key: Optional[str] = None) -> Admission:
        # No await between check and record: admission is atomic on the event loop.
        now = self._clock()
        retry_after = 0.0
        allowed = True

        provider_hits = self._window(provider_key, now)
        if len(provider_hits) >= self.limit_for(provider_key):
            allowed = False
            retry_after = self._retry_after(provider_hits, now)

        tenant_hits = None
        if self.tenant_requests is not None and tenant_key is not None:
            tenant_hits = self._window(f"{provider_key}:{tenant_key}", now)
            if len(tenant_hits) >= self.tenant_requests:
                allowed = False
                retry_after = max(retry_after, self._retry_after(tenant_hits, now))

        if not allowed:
            logger.warning(
                f"Rate limit hit for provider={provider_key} tenant={tenant_key}; "
                f"retry in {retry_after:.1f}s"
            )
            return Admission(allowed=False, retry_after_seconds=retry_after)

        provider_hits.append(now)
        if tenant_hits is not None:
            tenant_hits.append(now)
        return Admission(allowed=True)

    def reset(self) -> None:
        self._hits.clear()


_rate_limiter: Optional[RateLimiter] = None


def get_rate_limiter() -> RateLimiter:
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = RateLimiter()
    return _rate_limiter
