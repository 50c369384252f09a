from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, Boolean, DateTime, Numeric, Text
from sqlalchemy.dialects.postgresql import JSONB
from src.database import Base
from src.shared.models import AuditMixin, UUIDMixin, CreatedAtMixin


class Client(Base, AuditMixin):
    """Marketing client whose content the pipeline produces.

    Owned by the account-management side of the product; read-only here.
    """
    __tablename__ = "clients"

    name = Column(String, nullable=False)
    domain = Column(String, nullable=False)
    industry = Column(String, nullable=True)
    target_keywords = Column(JSONB, nullable=True)
    brand_voice = Column(JSONB, nullable=True)


class CompetitiveAnalysis(Base, UUIDMixin, CreatedAtMixin):
    """Snapshot produced by the SEO connectors. ``data`` is passed through unexamined."""
    __tablename__ = "competitive_analysis"

    client_id = Column(ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    analysis_type = Column(String, nullable=False)  # "keyword_gap" | "domain_metrics" | "serp_overlap"
    data = Column(JSONB, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)


class AICitation(Base, UUIDMixin):
    """Answer-engine citation sample for a client. ``data`` is opaque."""
    __tablename__ = "ai_citations"

    client_id = Column(ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    platform = Column(String, nullable=False)
    query = Column(Text, nullable=False)
    cited = Column(Boolean, default=False)
    share_of_voice = Column(Numeric(5, 2), nullable=True)
    citation_url = Column(String, nullable=True)
    data = Column(JSONB, nullable=True)
    tracked_at = Column(DateTime, default=datetime.utcnow, nullable=False)
