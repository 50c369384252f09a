"""Tests for usage recording and summaries."""
import asyncio
import logging
import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.briefs.models import BriefStatus
from src.content.repository import ContentRepository
from src.llm.models import UsageRecord
from src.llm.schemas import UsageRecordCreate
from src.llm.service import UsageService
from src.llm.usage import UsageTracker, summarize_usage, summarize_usage_totals
from src.shared.errors import NotFoundError


def _usage(**overrides):
    fields = dict(
        provider="claude",
        model="claude-sonnet-4-20250514",
        operation="brief_generation",
        input_tokens=1000,
        output_tokens=500,
        estimated_cost_usd=0.0105,
    )
    fields.update(overrides)
    return UsageRecordCreate(**fields)


class FakeSession:
    def __init__(self, store, fail=False, gate=None):
        self.store = store
        self.fail = fail
        self.gate = gate

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def add(self, obj):
        self.store.append(obj)

    async def commit(self):
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise ConnectionError("database unavailable")


class TestUsageTracker:
    @pytest.mark.asyncio
    async def test_writes_one_row_per_record(self):
        rows = []
        tracker = UsageTracker(session_factory=lambda: FakeSession(rows))
        tracker.record(_usage())
        tracker.record(_usage(operation="quality_scoring"))
        await tracker.drain()

        assert len(rows) == 2
        assert all(isinstance(row, UsageRecord) for row in rows)
        assert rows[0].estimated_cost_usd == 0.0105
        assert tracker.pending == 0

    @pytest.mark.asyncio
    async def test_record_does_not_wait_for_the_write(self):
        rows, gate = [], asyncio.Event()
        tracker = UsageTracker(session_factory=lambda: FakeSession(rows, gate=gate))

        tracker.record(_usage())
        await asyncio.sleep(0)
        assert tracker.pending == 1

        gate.set()
        await tracker.drain()
        assert tracker.pending == 0

    @pytest.mark.asyncio
    async def test_write_failure_is_logged_not_raised(self, caplog):
        tracker = UsageTracker(session_factory=lambda: FakeSession([], fail=True))
        with caplog.at_level(logging.ERROR, logger="src.llm.usage"):
            tracker.record(_usage())
            await tracker.drain()
        assert "Failed to write usage record" in caplog.text

    def test_record_without_event_loop_is_dropped(self, caplog):
        tracker = UsageTracker(session_factory=lambda: FakeSession([]))
        with caplog.at_level(logging.WARNING, logger="src.llm.usage"):
            tracker.record(_usage())
        assert tracker.pending == 0
        assert "dropping usage record" in caplog.text


class TestSummarizeUsage:
    def test_totals_and_breakdowns(self):
        records = [
            SimpleNamespace(provider="claude", operation="brief_generation", input_tokens=1000, output_tokens=500, estimated_cost_usd=0.0105),
            SimpleNamespace(provider="claude", operation="quality_scoring", input_tokens=2000, output_tokens=100, estimated_cost_usd=0.0075),
            SimpleNamespace(provider="openai", operation="content_generation", input_tokens=3000, output_tokens=4000, estimated_cost_usd=0.15),
        ]
        summary = summarize_usage(records)

        assert summary.total_calls == 3
        assert summary.total_input_tokens == 6000
        assert summary.total_output_tokens == 4600
        assert summary.total_cost == pytest.approx(0.168)
        assert summary.by_provider["claude"].calls == 2
        assert summary.by_provider["claude"].cost == pytest.approx(0.018)
        assert summary.by_operation["content_generation"].output_tokens == 4000

    def test_empty(self):
        summary = summarize_usage([])
        assert summary.total_calls == 0
        assert summary.by_provider == {}


class TestSummarizeUsageTotals:
    def test_grouped_rows(self):
        groups = [
            SimpleNamespace(provider="claude", operation="brief_generation", calls=4, input_tokens=4000, output_tokens=2000, cost=0.042),
            SimpleNamespace(provider="claude", operation="quality_scoring", calls=2, input_tokens=4000, output_tokens=200, cost=0.015),
            SimpleNamespace(provider="openai", operation="brief_generation", calls=1, input_tokens=1000, output_tokens=500, cost=0.0075),
        ]
        summary = summarize_usage_totals(groups)

        assert summary.total_calls == 7
        assert summary.total_input_tokens == 9000
        assert summary.total_cost == pytest.approx(0.0645)
        assert summary.by_provider["claude"].calls == 6
        assert summary.by_operation["brief_generation"].calls == 5
        assert summary.by_operation["brief_generation"].cost == pytest.approx(0.0495)

    def test_numeric_strings_from_the_database(self):
        groups = [SimpleNamespace(provider="claude", operation="brief_generation", calls=1, input_tokens=10, output_tokens=5, cost="0.000105")]
        assert summarize_usage_totals(groups).total_cost == pytest.approx(0.000105)


class TestUsageService:
    def _record(self, client_id, **overrides):
        fields = dict(
            client_id=client_id,
            provider="claude",
            operation="brief_generation",
            input_tokens=1000,
            output_tokens=500,
            estimated_cost_usd=0.0105,
        )
        fields.update(overrides)
        return SimpleNamespace(**fields)

    @pytest.mark.asyncio
    async def test_summary_for_one_client(self, repository, client_record):
        repository.usage_records = [
            self._record(client_record.id),
            self._record(client_record.id, provider="openai", operation="content_generation", estimated_cost_usd=0.15),
            self._record(uuid.uuid4()),
        ]
        summary = await UsageService(None, repository=repository).get_summary(client_id=client_record.id)

        assert summary.total_calls == 2
        assert summary.total_cost == pytest.approx(0.1605)
        assert set(summary.by_provider) == {"claude", "openai"}

    @pytest.mark.asyncio
    async def test_performance_combines_usage_and_pipeline(self, repository, client_record):
        repository.usage_records = [self._record(client_record.id)]
        repository.add_brief(client_id=client_record.id)
        repository.add_brief(client_id=client_record.id)
        repository.add_brief(client_id=client_record.id, status=BriefStatus.APPROVED)
        repository.add_brief(client_id=uuid.uuid4(), status=BriefStatus.PUBLISHED)

        performance = await UsageService(None, repository=repository).get_performance(client_record.id)

        assert performance.usage_summary.total_calls == 1
        assert performance.pipeline_stats == {"draft": 2, "approved": 1}

    @pytest.mark.asyncio
    async def test_performance_unknown_client(self, repository):
        with pytest.raises(NotFoundError):
            await UsageService(None, repository=repository).get_performance(uuid.uuid4())


class TestRepositoryAggregates:
    def _db(self, rows):
        db = AsyncMock()
        result = MagicMock()
        result.all.return_value = rows
        db.execute.return_value = result
        return db

    @pytest.mark.asyncio
    async def test_usage_totals_are_grouped_in_sql(self):
        db = self._db([])
        await ContentRepository(db).get_usage_totals(client_id=uuid.uuid4())

        sql = str(db.execute.await_args.args[0])
        assert "count(*)" in sql
        assert "sum(ai_usage_tracking.estimated_cost_usd)" in sql
        assert "GROUP BY ai_usage_tracking.provider, ai_usage_tracking.operation" in sql
        assert "ai_usage_tracking.client_id" in sql

    @pytest.mark.asyncio
    async def test_pipeline_stats_are_keyed_by_status_name(self):
        db = self._db([(BriefStatus.DRAFT, 3), (BriefStatus.PUBLISHED, 1)])
        stats = await ContentRepository(db).get_pipeline_stats()

        assert stats == {"draft": 3, "published": 1}
        sql = str(db.execute.await_args.args[0])
        assert "GROUP BY content_briefs.status" in sql
