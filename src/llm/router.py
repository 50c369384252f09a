from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db
from src.llm.schemas import ContentPerformance, UsageSummary
from src.llm.service import UsageService

router = APIRouter(prefix="/usage", tags=["usage"])


@router.get("/summary", response_model=UsageSummary)
async def usage_summary(
    client_id: Optional[UUID] = None,
    since: Optional[datetime] = None,
    db: AsyncSession = Depends(get_db),
):
    service = UsageService(db)
    return await service.get_summary(client_id=client_id, since=since)


@router.get("/performance/{client_id}", response_model=ContentPerformance)
async def content_performance(client_id: UUID, db: AsyncSession = Depends(get_db)):
    service = UsageService(db)
    return await service.get_performance(client_id)
