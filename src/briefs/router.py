from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.briefs.schemas import ApproveBriefRequest, ContentBriefResponse, GenerateBriefRequest
from src.content.service import ContentEngineService
from src.database import get_db

router = APIRouter(prefix="/briefs", tags=["briefs"])


@router.post("/generate", response_model=ContentBriefResponse)
async def generate_brief(
    request: GenerateBriefRequest,
    db: AsyncSession = Depends(get_db),
):
    service = ContentEngineService(db)
    return await service.generate_brief(request.client_id, request.target_keyword, request.content_type)


@router.get("/{brief_id}", response_model=ContentBriefResponse)
async def get_brief(
    brief_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    service = ContentEngineService(db)
    return await service.get_brief(brief_id)


@router.put("/{brief_id}/approve", response_model=ContentBriefResponse)
async def approve_brief(
    brief_id: UUID,
    request: Optional[ApproveBriefRequest] = None,
    db: AsyncSession = Depends(get_db),
):
    service = ContentEngineService(db)
    return await service.approve_brief(brief_id, request.user_id if request else None)


@router.put("/{brief_id}/review/start", response_model=ContentBriefResponse)
async def start_review(
    brief_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    service = ContentEngineService(db)
    return await service.start_review(brief_id)


@router.put("/{brief_id}/revise", response_model=ContentBriefResponse)
async def revise_brief(
    brief_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    service = ContentEngineService(db)
    return await service.revise_brief(brief_id)
