from .ollama import OllamaProvider
from .openai_compat import OpenAICompatibleProvider

__all__ = ["OllamaProvider", "OpenAICompatibleProvider"]
