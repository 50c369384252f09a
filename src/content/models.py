from sqlalchemy import Column, String, ForeignKey, Integer, DateTime, Text, Numeric, ARRAY, Float
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from src.database import Base
from src.shared.models import AuditMixin, AppendOnlyMixin


class GeneratedContent(Base, AuditMixin):
    __tablename__ = "generated_content"

    brief_id = Column(ForeignKey("content_briefs.id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = Column(ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String, nullable=True)
    meta_description = Column(String(155), nullable=True)
    excerpt = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    word_count = Column(Integer, nullable=False, default=0)
    status = Column(String, default="generated", nullable=False, index=True)

    ai_model_used = Column(String, nullable=False)
    generation_prompt = Column(Text, nullable=True)
    generation_time_seconds = Column(Float, nullable=True)

    internal_links_added = Column(ARRAY(String), nullable=True)
    external_references = Column(ARRAY(String), nullable=True)
    aeo_optimizations = Column(JSONB, nullable=True)

    # Denormalized from the latest ContentQualityAnalysis for list views
    quality_score = Column(Numeric(5, 2), nullable=True)
    readability_score = Column(Numeric(5, 2), nullable=True)
    authority_score = Column(Numeric(5, 2), nullable=True)
    optimization_score = Column(Numeric(5, 2), nullable=True)

    # Human review
    reviewer_notes = Column(Text, nullable=True)
    revision_requests = Column(ARRAY(String), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    approved_at = Column(DateTime, nullable=True)
    human_review_time_minutes = Column(Numeric(8, 2), nullable=True)

    analyses = relationship("ContentQualityAnalysis", back_populates="content", cascade="all, delete-orphan")


class ContentQualityAnalysis(Base, AppendOnlyMixin):
    """One scoring pass. History is append-only; the newest row is authoritative."""
    __tablename__ = "content_quality_analysis"

    content_id = Column(ForeignKey("generated_content.id", ondelete="CASCADE"), nullable=False, index=True)
    overall_score = Column(Numeric(5, 2), nullable=False)
    seo_score = Column(Numeric(5, 2), nullable=False)
    readability_score = Column(Numeric(5, 2), nullable=False)
    authority_score = Column(Numeric(5, 2), nullable=False)
    engagement_score = Column(Numeric(5, 2), nullable=False)
    aeo_score = Column(Numeric(5, 2), nullable=False)
    detailed_feedback = Column(JSONB, nullable=True)

    content = relationship("GeneratedContent", back_populates="analyses")


class QualityScoreCacheEntry(Base):
    __tablename__ = "quality_score_cache"

    key = Column(String, primary_key=True)
    scores = Column(JSONB, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
