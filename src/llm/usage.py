"""Best-effort recording of provider token usage and cost.

Writes happen on detached tasks with their own database session. The
caller never waits for them and a failed write is only logged.
"""
import asyncio
import logging
from typing import Iterable, Optional, Set

from src.database import AsyncSessionLocal
from src.llm.models import UsageRecord
from src.llm.schemas import UsageBucket, UsageRecordCreate, UsageSummary

logger = logging.getLogger(__name__)


class UsageTracker:
    def __init__(self, session_factory=AsyncSessionLocal):
        self._session_factory = session_factory
        # Strong references so pending writes are not garbage collected.
        self._pending: Set[asyncio.Task] = set()

    def record(self, usage: UsageRecordCreate) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"No running event loop, dropping usage record for {usage.operation}")
            return
        task = loop.create_task(self._write(usage))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, usage: UsageRecordCreate) -> None:
        try:
            async with self._session_factory() as session:
                session.add(UsageRecord(**usage.model_dump()))
                await session.commit()
        except Exception:
            logger.exception(
                f"Failed to write usage record ({usage.provider}/{usage.operation}), ignoring"
            )

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for outstanding writes. Used at shutdown."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


def _add(bucket: UsageBucket, calls: int, input_tokens: int, output_tokens: int, cost: float) -> None:
    bucket.calls += calls
    bucket.input_tokens += input_tokens
    bucket.output_tokens += output_tokens
    bucket.cost = round(bucket.cost + cost, 6)


def _fold(summary: UsageSummary, provider: str, operation: str, calls: int,
          input_tokens: int, output_tokens: int, cost: float) -> None:
    summary.total_calls += calls
    summary.total_input_tokens += input_tokens
    summary.total_output_tokens += output_tokens
    summary.total_cost = round(summary.total_cost + cost, 6)

    _add(summary.by_provider.setdefault(provider, UsageBucket()), calls, input_tokens, output_tokens, cost)
    _add(summary.by_operation.setdefault(operation, UsageBucket()), calls, input_tokens, output_tokens, cost)


def summarize_usage(records: Iterable) -> UsageSummary:
    """Aggregate usage rows (ORM objects or schemas) by provider and operation."""
    summary = UsageSummary()
    for record in records:
        _fold(
            summary,
            record.provider,
            record.operation,
            1,
            record.input_tokens or 0,
            record.output_tokens or 0,
            float(record.estimated_cost_usd or 0),
        )
    return summary


def summarize_usage_totals(groups: Iterable) -> UsageSummary:
    """Same summary built from rows already grouped by provider and operation in SQL."""
    summary = UsageSummary()
    for group in groups:
        _fold(
            summary,
            group.provider,
            group.operation,
            int(group.calls),
            int(group.input_tokens or 0),
            int(group.output_tokens or 0),
            float(group.cost or 0),
        )
    return summary


_usage_tracker: Optional[UsageTracker] = None


def get_usage_tracker() -> UsageTracker:
    global _usage_tracker
    if _usage_tracker is None:
        _usage_tracker = UsageTracker()
    return _usage_tracker
