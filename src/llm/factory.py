from __future__ import annotations

from typing import TYPE_CHECKING

from src.config import settings
from src.shared.errors import UpstreamError

if TYPE_CHECKING:
    from langchain_core.language_models.chat_models import BaseChatModel

# Valid provider identifiers
VALID_PROVIDERS = ("claude", "openai")

# Module-level cache keyed by provider and output budget
_llm_cache: dict[str, BaseChatModel] = {}


def clear_llm_cache() -> None:
    """Drop all cached chat model instances so they're recreated on next call."""
    _llm_cache.clear()


def model_name_for(provider: str) -> str:
    if provider == "claude":
        return settings.ANTHROPIC_MODEL
    if provider == "openai":
        return settings.OPENAI_MODEL
    raise ValueError(f"Unknown provider: {provider!r}. Valid: {VALID_PROVIDERS}")


# ---------------------------------------------------------------------------
# Internal constructors (lazy imports to avoid hard dep on unused packages)
# ---------------------------------------------------------------------------

def _create_chat_model(provider: str, *, model: str, max_tokens: int, temperature: float) -> BaseChatModel:
    if provider == "claude":
        from langchain_anthropic import ChatAnthropic

        if not settings.ANTHROPIC_API_KEY:
            raise UpstreamError(provider, "ANTHROPIC_API_KEY is required when using the claude provider")
        return ChatAnthropic(
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            api_key=settings.ANTHROPIC_API_KEY,
            max_retries=0,
        )

    if provider == "openai":
        from langchain_openai import ChatOpenAI

        if not settings.OPENAI_API_KEY:
            raise UpstreamError(provider, "OPENAI_API_KEY is required when using the openai provider")
        return ChatOpenAI(
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            api_key=settings.OPENAI_API_KEY,
            max_retries=0,
        )

    raise ValueError(f"Unknown provider: {provider!r}. Valid: {VALID_PROVIDERS}")


# ---------------------------------------------------------------------------
# Public factory function
# ---------------------------------------------------------------------------

def get_chat_model(provider: str, max_tokens: int = 4096) -> BaseChatModel:
    """Chat model for ``provider`` with the given output budget. Instances are cached."""
    key = f"{provider}:{max_tokens}"
    if key not in _llm_cache:
        _llm_cache[key] = _create_chat_model(
            provider,
            model=model_name_for(provider),
            max_tokens=max_tokens,
            temperature=settings.LLM_TEMPERATURE,
        )
    return _llm_cache[key]
