from src.llm.factory import (
    get_chat_model,
    clear_llm_cache,
)
from src.llm.providers import (
    ProviderClient,
    ClaudeProvider,
    OpenAIProvider,
    get_provider,
    compute_cost,
)
