from .base import LLMProvider
from .factory import create_llm_provider
from .models import ChatMessage, LLMResponse, StreamIncrement, StreamingResponse
from .providers import OllamaProvider, OpenAICompatibleProvider

__all__ = [
    "LLMProvider",
    "create_llm_provider",
    "ChatMessage",
    "LLMResponse",
    "StreamIncrement",
    "StreamingResponse",
    "OllamaProvider",
    "OpenAICompatibleProvider",
]
