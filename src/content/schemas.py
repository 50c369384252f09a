from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field



# --- Provider output contracts -------------------------------------------------

class BriefGenerationOutput(BaseModel):
    title: str
    unique_angle: str
    competitive_gap: str
    target_audience: str
    serp_content_analysis: str
    authority_signals: str
    controversial_positions: str
    target_word_count: int = Field(..., gt=0)
    required_sections: List[str]
    semantic_keywords: List[str]
    ai_citation_opportunity: str
    priority_level: str
    competitive_gap_analysis: Optional[Dict[str, Any]] = None
    ai_citation_opportunity_data: Optional[Dict[str, Any]] = None


class ContentGenerationOutput(BaseModel):
    title: str
    meta_description: str
    excerpt: str
    content: str
    internal_links_added: List[str]
    external_references: List[str]
    aeo_optimizations: Dict[str, Any]


class QualityFeedback(BaseModel):
    strengths: List[str]
    improvements: List[str]
    seo_feedback: str
    readability_feedback: str
    authority_feedback: str
    engagement_feedback: str
    aeo_feedback: str


class QualityScores(BaseModel):
    overall_score: float = Field(..., ge=0, le=100)
    seo_score: float = Field(..., ge=0, le=100)
    readability_score: float = Field(..., ge=0, le=100)
    authority_score: float = Field(..., ge=0, le=100)
    engagement_score: float = Field(..., ge=0, le=100)
    aeo_score: float = Field(..., ge=0, le=100)
    detailed_feedback: QualityFeedback


# --- API -----------------------------------------------------------------------

class GenerateContentRequest(BaseModel):
    brief_id: UUID
    model: Optional[Literal["claude", "openai"]] = None


class ScoreContentRequest(BaseModel):
    content_id: UUID


class ReviewSubmission(BaseModel):
    action: Literal["approve", "revision"]
    reviewer_notes: Optional[str] = None
    revision_requests: Optional[List[str]] = None
    review_time_minutes: Optional[float] = None
    published_url: Optional[str] = None


class GeneratedContentResponse(BaseModel):
    id: UUID
    brief_id: UUID
    client_id: UUID
    title: Optional[str] = None
    meta_description: Optional[str] = None
    excerpt: Optional[str] = None
    content: str
    word_count: int
    status: str
    ai_model_used: str
    generation_time_seconds: Optional[float] = None
    internal_links_added: Optional[List[str]] = None
    external_references: Optional[List[str]] = None
    aeo_optimizations: Optional[Dict[str, Any]] = None
    quality_score: Optional[float] = None
    readability_score: Optional[float] = None
    authority_score: Optional[float] = None
    optimization_score: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


class QualityAnalysisResponse(BaseModel):
    id: UUID
    content_id: UUID
    overall_score: float
    seo_score: float
    readability_score: float
    authority_score: float
    engagement_score: float
    aeo_score: float
    detailed_feedback: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
