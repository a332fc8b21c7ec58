from typing import Any

from .openai_compat import OpenAICompatibleProvider

DEFAULT_OLLAMA_URL = "http://localhost:11434"


def ollama_api_url(server_url: str) -> str:
    """Turn an Ollama server root URL into its OpenAI-compatible API URL.

    >>> ollama_api_url("http://localhost:11434/")
    'http://localhost:11434/v1'
    """
    url = server_url.rstrip("/")
    if url.endswith("/v1"):
        return url
    return f"{url}/v1"


class OllamaProvider(OpenAICompatibleProvider):
    """Provider for a locally hosted Ollama server.

    Hidden design decisions:
    - Ollama's OpenAI-compatible route lives under /v1
    - Ollama ignores the API key but the SDK requires one
    - Thinking mode is toggled per request with the ``think`` flag
    """

    def __init__(
        self,
        model: str,
        base_url: str = DEFAULT_OLLAMA_URL,
        think: bool | None = None,
        **client_kwargs: Any
    ):
        """Initialize the Ollama provider.

        Args:
            model: Default model to use (e.g. 'qwen3:0.6b')
            base_url: Ollama server root URL
            think: Ask the server to emit a reasoning trace (None leaves the
                server default in place)
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        super().__init__(
            base_url=ollama_api_url(base_url),
            model=model,
            api_key="ollama",
            **client_kwargs
        )
        self._think = think

    @property
    def think(self) -> bool | None:
        return self._think

    def _extra_request_params(self) -> dict[str, Any]:
        if self._think is None:
            return {}
        return {"extra_body": {"think": self._think}}
