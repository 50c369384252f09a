from datetime import datetime
from typing import Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.content.repository import ContentRepository
from src.llm.schemas import ContentPerformance, UsageSummary
from src.llm.usage import summarize_usage_totals
from src.shared.errors import NotFoundError


class UsageService:
    def __init__(self, db: AsyncSession, repository: Optional[ContentRepository] = None):
        self.db = db
        self.repository = repository or ContentRepository(db)

    async def get_summary(
        self,
        client_id: Optional[UUID] = None,
        since: Optional[datetime] = None,
    ) -> UsageSummary:
        groups = await self.repository.get_usage_totals(client_id=client_id, since=since)
        return summarize_usage_totals(groups)

    async def get_pipeline_stats(self, client_id: Optional[UUID] = None) -> Dict[str, int]:
        return await self.repository.get_pipeline_stats(client_id=client_id)

    async def get_performance(self, client_id: UUID) -> ContentPerformance:
        """Spend and brief pipeline counts for one client."""
        client = await self.repository.get_client(client_id)
        if not client:
            raise NotFoundError("Client", client_id)

        return ContentPerformance(
            usage_summary=await self.get_summary(client_id=client_id),
            pipeline_stats=await self.get_pipeline_stats(client_id=client_id),
        )
