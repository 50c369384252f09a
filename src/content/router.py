from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.content.schemas import (
    GenerateContentRequest,
    GeneratedContentResponse,
    QualityAnalysisResponse,
    ReviewSubmission,
    ScoreContentRequest,
)
from src.content.service import ContentEngineService
from src.database import get_db

router = APIRouter(prefix="/content", tags=["content"])


@router.post("/generate", response_model=GeneratedContentResponse)
async def generate_content(
    request: GenerateContentRequest,
    db: AsyncSession = Depends(get_db),
):
    service = ContentEngineService(db)
    return await service.generate_content(request.brief_id, request.model)


@router.post("/score", response_model=QualityAnalysisResponse)
async def score_content(
    request: ScoreContentRequest,
    db: AsyncSession = Depends(get_db),
):
    service = ContentEngineService(db)
    return await service.score_content(request.content_id)


@router.put("/{content_id}/review", response_model=GeneratedContentResponse)
async def review_content(
    content_id: UUID,
    review: ReviewSubmission,
    db: AsyncSession = Depends(get_db),
):
    service = ContentEngineService(db)
    return await service.submit_review(
        content_id,
        review.action,
        reviewer_notes=review.reviewer_notes,
        revision_requests=review.revision_requests,
        review_time_minutes=review.review_time_minutes,
        published_url=review.published_url,
    )


@router.get("/queue", response_model=List[GeneratedContentResponse])
async def content_queue(
    client_id: Optional[UUID] = None,
    status: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    service = ContentEngineService(db)
    return await service.list_content_queue(client_id=client_id, status=status)
