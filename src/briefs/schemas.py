from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.briefs.models import BriefStatus


class GenerateBriefRequest(BaseModel):
    client_id: UUID
    target_keyword: str = Field(..., min_length=1)
    content_type: str = "blog_post"


class ApproveBriefRequest(BaseModel):
    user_id: Optional[UUID] = None


class ContentBriefResponse(BaseModel):
    id: UUID
    client_id: UUID
    title: str
    target_keyword: str
    content_type: str
    status: BriefStatus
    unique_angle: Optional[str] = None
    competitive_gap: Optional[str] = None
    target_audience: Optional[str] = None
    serp_content_analysis: Optional[str] = None
    authority_signals: Optional[str] = None
    controversial_positions: Optional[str] = None
    ai_citation_opportunity: Optional[str] = None
    target_word_count: int
    required_sections: Optional[List[str]] = None
    semantic_keywords: Optional[List[str]] = None
    internal_links: Optional[List[str]] = None
    priority_level: str
    approved_at: Optional[datetime] = None
    approved_by: Optional[UUID] = None
    generation_started_at: Optional[datetime] = None
    generated_at: Optional[datetime] = None
    content_id: Optional[UUID] = None
    published_at: Optional[datetime] = None
    published_url: Optional[str] = None
    revision_requested_at: Optional[datetime] = None
    revision_notes: Optional[str] = None
    revised_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
