"""Error taxonomy for the content generation pipeline.

Every use case makes exactly one upstream attempt and lets these errors
propagate unchanged. They are translated to HTTP responses only at the
edge, by the handlers registered in ``register_exception_handlers``.
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ContentEngineError(Exception):
    """Base error for the content pipeline."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ContentEngineError):
    status_code = 404

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class PreconditionError(ContentEngineError):
    """Illegal transition, wrong brief status, or a lost conditional update."""

    status_code = 409


class RateLimitError(ContentEngineError):
    status_code = 429

    def __init__(self, provider: str, retry_after_seconds: float):
        super().__init__(f"Rate limit exceeded for {provider}")
        self.provider = provider
        self.retry_after_seconds = retry_after_seconds


class ParseError(ContentEngineError):
    """Upstream output is not valid JSON or misses required fields."""

    status_code = 502

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw


class UpstreamError(ContentEngineError):
    status_code = 502

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


async def _content_engine_error_handler(request: Request, exc: ContentEngineError):
    body = {"error": type(exc).__name__, "detail": exc.message}
    headers = None
    if isinstance(exc, RateLimitError):
        # The one error callers are expected to act on: surface when to retry.
        retry_after = max(1, int(round(exc.retry_after_seconds)))
        body["provider"] = exc.provider
        body["retry_after"] = exc.retry_after_seconds
        headers = {"Retry-After": str(retry_after)}
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ContentEngineError, _content_engine_error_handler)
