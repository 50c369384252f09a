from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.briefs.models import BriefStatus, ContentBrief
from src.clients.models import AICitation, Client, CompetitiveAnalysis
from src.content.models import ContentQualityAnalysis, GeneratedContent
from src.content.prompts import MAX_CITATION_DOCUMENTS, MAX_COMPETITIVE_DOCUMENTS
from src.llm.models import UsageRecord


class ContentRepository:
    """Every query the content pipeline runs, behind one narrow interface."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # --- Client context ----------------------------------------------------

    async def get_client(self, client_id: UUID) -> Optional[Client]:
        result = await self.db.execute(select(Client).where(Client.id == client_id))
        return result.scalar_one_or_none()

    async def get_recent_competitive_analyses(self, client_id: UUID) -> List[Any]:
        """Unexpired competitive snapshots, newest first. Documents are returned as stored."""
        result = await self.db.execute(
            select(CompetitiveAnalysis.data)
            .where(
                CompetitiveAnalysis.client_id == client_id,
                CompetitiveAnalysis.expires_at > datetime.utcnow(),
            )
            .order_by(desc(CompetitiveAnalysis.created_at))
            .limit(MAX_COMPETITIVE_DOCUMENTS)
        )
        return list(result.scalars().all())

    async def get_recent_citations(self, client_id: UUID) -> List[Any]:
        result = await self.db.execute(
            select(AICitation.data)
            .where(AICitation.client_id == client_id)
            .order_by(desc(AICitation.tracked_at))
            .limit(MAX_CITATION_DOCUMENTS)
        )
        return list(result.scalars().all())

    # --- Briefs ------------------------------------------------------------

    async def get_brief(self, brief_id: UUID) -> Optional[ContentBrief]:
        result = await self.db.execute(select(ContentBrief).where(ContentBrief.id == brief_id))
        return result.scalar_one_or_none()

    async def insert_brief(self, brief: ContentBrief) -> ContentBrief:
        self.db.add(brief)
        await self.db.commit()
        await self.db.refresh(brief)
        return brief

    async def update_brief_if_status(
        self,
        brief_id: UUID,
        expected_status: BriefStatus,
        values: Dict[str, Any],
    ) -> int:
        """Apply ``values`` only while the brief is still in ``expected_status``.

        Returns the number of rows changed: 0 means another caller moved the
        brief first.
        """
        result = await self.db.execute(
            update(ContentBrief)
            .where(ContentBrief.id == brief_id, ContentBrief.status == expected_status)
            .values(**values, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount

    # --- Content -----------------------------------------------------------

    async def get_content(self, content_id: UUID) -> Optional[GeneratedContent]:
        result = await self.db.execute(select(GeneratedContent).where(GeneratedContent.id == content_id))
        return result.scalar_one_or_none()

    async def insert_content(self, content: GeneratedContent) -> GeneratedContent:
        self.db.add(content)
        await self.db.commit()
        await self.db.refresh(content)
        return content

    async def update_content(self, content: GeneratedContent, values: Dict[str, Any]) -> GeneratedContent:
        for field, value in values.items():
            setattr(content, field, value)
        await self.db.commit()
        await self.db.refresh(content)
        return content

    async def list_content_queue(
        self,
        client_id: Optional[UUID] = None,
        status: Optional[str] = None,
        limit: int = 50,
    ) -> List[GeneratedContent]:
        query = select(GeneratedContent)
        if client_id:
            query = query.where(GeneratedContent.client_id == client_id)
        if status:
            query = query.where(GeneratedContent.status == status)
        result = await self.db.execute(query.order_by(desc(GeneratedContent.created_at)).limit(limit))
        return list(result.scalars().all())

    # --- Quality -----------------------------------------------------------

    async def insert_analysis(self, analysis: ContentQualityAnalysis) -> ContentQualityAnalysis:
        self.db.add(analysis)
        await self.db.commit()
        await self.db.refresh(analysis)
        return analysis

    # --- Usage -------------------------------------------------------------

    async def get_usage_totals(
        self,
        client_id: Optional[UUID] = None,
        since: Optional[datetime] = None,
    ) -> List[Any]:
        """Usage rows aggregated per (provider, operation)."""
        query = select(
            UsageRecord.provider,
            UsageRecord.operation,
            func.count().label("calls"),
            func.coalesce(func.sum(UsageRecord.input_tokens), 0).label("input_tokens"),
            func.coalesce(func.sum(UsageRecord.output_tokens), 0).label("output_tokens"),
            func.coalesce(func.sum(UsageRecord.estimated_cost_usd), 0).label("cost"),
        )
        if client_id:
            query = query.where(UsageRecord.client_id == client_id)
        if since:
            query = query.where(UsageRecord.created_at >= since)
        result = await self.db.execute(query.group_by(UsageRecord.provider, UsageRecord.operation))
        return list(result.all())

    # --- Pipeline ----------------------------------------------------------

    async def get_pipeline_stats(self, client_id: Optional[UUID] = None) -> Dict[str, int]:
        """Brief counts keyed by status."""
        query = select(ContentBrief.status, func.count()).group_by(ContentBrief.status)
        if client_id:
            query = query.where(ContentBrief.client_id == client_id)
        result = await self.db.execute(query)
        return {getattr(status, "value", status): int(count) for status, count in result.all()}
