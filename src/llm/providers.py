"""Upstream model clients.

Each client wraps one model family. A call is admitted by the rate
limiter before anything is sent upstream, and its token usage is handed
to the usage tracker without being awaited.
"""
import logging
from abc import ABC
from typing import Any, Dict, List, Optional, Type

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from src.llm.factory import get_chat_model, model_name_for
from src.llm.rate_limit import RateLimiter, get_rate_limiter
from src.llm.schemas import CompletionMetadata, CompletionResult, ModelPricing, UsageRecordCreate
from src.llm.usage import UsageTracker, get_usage_tracker
from src.shared.errors import ContentEngineError, PreconditionError, RateLimitError, UpstreamError

logger = logging.getLogger(__name__)

# USD per million tokens
MODEL_PRICING: Dict[str, ModelPricing] = {
    "claude-sonnet-4-20250514": ModelPricing(input_per_million=3, output_per_million=15),
    "gpt-4o": ModelPricing(input_per_million=10, output_per_million=30),
}
PROVIDER_DEFAULT_PRICING: Dict[str, ModelPricing] = {
    "claude": MODEL_PRICING["claude-sonnet-4-20250514"],
    "openai": MODEL_PRICING["gpt-4o"],
}


def compute_cost(input_tokens: int, output_tokens: int, pricing: ModelPricing) -> float:
    """Cost in USD, rounded to the 6 decimal places the usage table stores."""
    cost = (
        input_tokens / 1_000_000 * pricing.input_per_million
        + output_tokens / 1_000_000 * pricing.output_per_million
    )
    return round(cost, 6)


class ProviderClient(ABC):
    provider: str

    def __init__(
        self,
        model_name: Optional[str] = None,
        pricing: Optional[ModelPricing] = None,
        rate_limiter: Optional[RateLimiter] = None,
        usage_tracker: Optional[UsageTracker] = None,
    ):
        self.model_name = model_name or model_name_for(self.provider)
        self.pricing = pricing or MODEL_PRICING.get(self.model_name, PROVIDER_DEFAULT_PRICING[self.provider])
        self.rate_limiter = rate_limiter or get_rate_limiter()
        self.usage_tracker = usage_tracker or get_usage_tracker()

    async def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 4096,
        metadata: Optional[CompletionMetadata] = None,
    ) -> CompletionResult:
        metadata = metadata or CompletionMetadata(operation="completion")
        tenant_key = str(metadata.client_id) if metadata.client_id else None

        admission = await self.rate_limiter.admit(self.provider, tenant_key)
        if not admission.allowed:
            raise RateLimitError(self.provider, admission.retry_after_seconds)

        messages: List[BaseMessage] = []
        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))
        messages.append(HumanMessage(content=prompt))

        try:
            response = await self._invoke(messages, max_tokens)
        except ContentEngineError:
            raise
        except Exception as e:
            raise UpstreamError(self.provider, str(e)) from e

        usage = response.usage_metadata or {}
        input_tokens = int(usage.get("input_tokens", 0))
        output_tokens = int(usage.get("output_tokens", 0))
        cost = compute_cost(input_tokens, output_tokens, self.pricing)

        self.usage_tracker.record(
            UsageRecordCreate(
                provider=self.provider,
                model=self.model_name,
                operation=metadata.operation,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                estimated_cost_usd=cost,
                client_id=metadata.client_id,
                brief_id=metadata.brief_id,
                content_id=metadata.content_id,
            )
        )
        logger.info(
            f"{self.provider}/{self.model_name} {metadata.operation}: "
            f"{input_tokens} in, {output_tokens} out, ${cost:.6f}"
        )

        return CompletionResult(
            text=self._extract_text(response),
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            model_name=self.model_name,
        )

    async def _invoke(self, messages: List[BaseMessage], max_tokens: int) -> AIMessage:
        llm = get_chat_model(self.provider, max_tokens)
        return await llm.ainvoke(messages)

    def _extract_text(self, response: AIMessage) -> str:
        content = response.content
        return content if isinstance(content, str) else str(content)


class ClaudeProvider(ProviderClient):
    provider = "claude"

    def _extract_text(self, response: AIMessage) -> str:
        # Anthropic may answer with a list of content blocks; keep the text ones.
        content: Any = response.content
        if isinstance(content, str):
            return content
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)


class OpenAIProvider(ProviderClient):
    provider = "openai"


PROVIDERS: Dict[str, Type[ProviderClient]] = {
    ClaudeProvider.provider: ClaudeProvider,
    OpenAIProvider.provider: OpenAIProvider,
}


def get_provider(name: str) -> ProviderClient:
    try:
        provider_cls = PROVIDERS[name]
    except KeyError:
        raise PreconditionError(f"Unknown model provider {name!r}. Valid: {', '.join(PROVIDERS)}")
    return provider_cls()
