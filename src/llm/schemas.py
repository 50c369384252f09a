from typing import Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ModelPricing(BaseModel):
    """USD per million tokens."""
    input_per_million: float
    output_per_million: float


class CompletionMetadata(BaseModel):
    operation: str
    client_id: Optional[UUID] = None
    brief_id: Optional[UUID] = None
    content_id: Optional[UUID] = None


class CompletionResult(BaseModel):
    text: str
    input_tokens: int
    output_tokens: int
    model_name: str


class Admission(BaseModel):
    allowed: bool
    retry_after_seconds: float = 0.0


class UsageRecordCreate(BaseModel):
    provider: str
    model: str
    operation: str
    input_tokens: int
    output_tokens: int
    estimated_cost_usd: float
    client_id: Optional[UUID] = None
    brief_id: Optional[UUID] = None
    content_id: Optional[UUID] = None


class UsageBucket(BaseModel):
    calls: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    cost: float = 0.0


class UsageSummary(BaseModel):
    total_calls: int = 0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    total_cost: float = 0.0
    by_provider: Dict[str, UsageBucket] = Field(default_factory=dict)
    by_operation: Dict[str, UsageBucket] = Field(default_factory=dict)


class ContentPerformance(BaseModel):
    usage_summary: UsageSummary
    pipeline_stats: Dict[str, int] = Field(default_factory=dict)
