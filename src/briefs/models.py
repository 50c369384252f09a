from enum import Enum
from sqlalchemy import Column, String, ForeignKey, Integer, DateTime, Text, ARRAY, Enum as SAEnum
from sqlalchemy.dialects.postgresql import JSONB, UUID
from src.database import Base
from src.shared.models import AuditMixin


class BriefStatus(str, Enum):
    DRAFT = "draft"
    APPROVED = "approved"
    GENERATING = "generating"
    GENERATED = "generated"
    REVIEWING = "reviewing"
    REVISION_REQUESTED = "revision_requested"
    PUBLISHED = "published"


class PriorityLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ContentBrief(Base, AuditMixin):
    __tablename__ = "content_briefs"

    client_id = Column(ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    target_keyword = Column(String, nullable=False)
    content_type = Column(String, default="blog_post", nullable=False)
    status = Column(
        SAEnum(BriefStatus, name="brief_status", values_callable=lambda e: [m.value for m in e]),
        default=BriefStatus.DRAFT,
        nullable=False,
        index=True,
    )

    # Strategy fields produced by brief generation
    unique_angle = Column(Text, nullable=True)
    competitive_gap = Column(Text, nullable=True)
    target_audience = Column(Text, nullable=True)
    serp_content_analysis = Column(Text, nullable=True)
    authority_signals = Column(Text, nullable=True)
    controversial_positions = Column(Text, nullable=True)
    ai_citation_opportunity = Column(Text, nullable=True)
    target_word_count = Column(Integer, default=1500, nullable=False)
    required_sections = Column(ARRAY(String), nullable=True)
    semantic_keywords = Column(ARRAY(String), nullable=True)
    internal_links = Column(ARRAY(String), nullable=True)
    priority_level = Column(String, default=PriorityLevel.MEDIUM.value, nullable=False)
    competitive_gap_analysis = Column(JSONB, nullable=True)
    ai_citation_opportunity_data = Column(JSONB, nullable=True)
    client_voice_profile = Column(JSONB, nullable=True)

    # Lifecycle stamps, written only by the workflow
    approved_at = Column(DateTime, nullable=True)
    approved_by = Column(UUID(as_uuid=True), nullable=True)
    generation_started_at = Column(DateTime, nullable=True)
    generated_at = Column(DateTime, nullable=True)
    content_id = Column(UUID(as_uuid=True), nullable=True)
    published_at = Column(DateTime, nullable=True)
    published_url = Column(String, nullable=True)
    revision_requested_at = Column(DateTime, nullable=True)
    revision_notes = Column(Text, nullable=True)
    revised_at = Column(DateTime, nullable=True)
