from sqlalchemy import Column, String, ForeignKey, Integer, Numeric

from src.database import Base
from src.shared.models import AppendOnlyMixin


class UsageRecord(Base, AppendOnlyMixin):
    """Token counts and cost for one upstream completion. Never updated."""
    __tablename__ = "ai_usage_tracking"

    client_id = Column(ForeignKey("clients.id", ondelete="SET NULL"), nullable=True, index=True)
    provider = Column(String, nullable=False)
    model = Column(String, nullable=False)
    operation = Column(String, nullable=False)
    input_tokens = Column(Integer, nullable=False, default=0)
    output_tokens = Column(Integer, nullable=False, default=0)
    estimated_cost_usd = Column(Numeric(10, 6), nullable=False, default=0)

    brief_id = Column(ForeignKey("content_briefs.id", ondelete="SET NULL"), nullable=True)
    content_id = Column(ForeignKey("generated_content.id", ondelete="SET NULL"), nullable=True)
