from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from src.content.quality_cache import MemoryScoreCacheBackend, QualityAnalysisCache
from src.content.service import ContentEngineService
from src.database import get_db
from src.main import app
from tests.fakes import BRIEF_OUTPUT, CONTENT_OUTPUT, FakeProvider, InMemoryContentRepository


@pytest.fixture
def repository() -> InMemoryContentRepository:
    return InMemoryContentRepository()


@pytest.fixture
def client_record(repository):
    return repository.add_client(
        name="Acme Data",
        domain="acmedata.io",
        industry="Developer tools",
        target_keywords=["postgres", "migrations"],
        brand_voice={"tone": "direct"},
    )


@pytest.fixture
def score_cache() -> QualityAnalysisCache:
    return QualityAnalysisCache(MemoryScoreCacheBackend(), ttl_seconds=86400)


@pytest.fixture
def make_service(repository, score_cache):
    def _make(claude=None, openai=None, cache=None):
        providers = {
            "claude": claude or FakeProvider("claude", [BRIEF_OUTPUT], model_name="claude-sonnet-4-20250514"),
            "openai": openai or FakeProvider("openai", [CONTENT_OUTPUT], model_name="gpt-4o"),
        }
        return ContentEngineService(
            None,
            repository=repository,
            providers=providers,
            cache=cache or score_cache,
        )
    return _make


@pytest_asyncio.fixture(scope="function")
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Client for testing API endpoints without a database."""
    async def override_get_db():
        yield AsyncMock()

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
