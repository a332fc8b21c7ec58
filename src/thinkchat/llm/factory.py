from typing import Any

from .base import LLMProvider
from .providers import OllamaProvider, OpenAICompatibleProvider


def create_llm_provider(provider: str, **config: Any) -> LLMProvider:
    """Create an LLM provider instance.

    This factory function hides the instantiation logic for different providers.

    Args:
        provider: Provider type ('ollama' or 'openai')
        **config: Provider-specific configuration
            For Ollama:
                - model: str (required)
                - base_url: str (default: 'http://localhost:11434')
                - think: bool | None
            For OpenAI-compatible servers:
                - base_url: str (required, including /v1)
                - model: str (required)
                - api_key: str (default: 'not-needed')

    Returns:
        Initialized LLM provider instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> provider = create_llm_provider(
        ...     "ollama",
        ...     model="qwen3:0.6b",
        ...     think=True
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower == "ollama":
        if "model" not in config:
            raise TypeError("Ollama provider requires 'model' in config")
        return OllamaProvider(**config)

    if provider_lower in ("openai", "openai-compatible"):
        if "base_url" not in config or "model" not in config:
            raise TypeError("OpenAI-compatible provider requires 'base_url' and 'model' in config")
        return OpenAICompatibleProvider(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'ollama', 'openai'"
    )
