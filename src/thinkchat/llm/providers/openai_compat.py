from collections.abc import AsyncIterator, Callable
from typing import Any

from openai import AsyncOpenAI

from ..base import LLMProvider
from ..models import ChatMessage, LLMResponse, StreamIncrement, StreamingResponse

# Delta fields that servers use for the reasoning trace, in lookup order
REASONING_FIELDS = ("reasoning", "reasoning_content")


def _delta_reasoning(delta: Any) -> str | None:
    """Read the side-channel reasoning text from a stream delta, if any."""
    for name in REASONING_FIELDS:
        value = getattr(delta, name, None)
        if value:
            return str(value)
    return None


def _to_wire_messages(messages: list[ChatMessage]) -> list[dict[str, str]]:
    return [{"role": msg.wire_role, "content": msg.content} for msg in messages]


class OpenAICompatibleProvider(LLMProvider):
    """Provider for any server exposing the OpenAI Chat Completions API.

    Hidden design decisions:
    - OpenAI SDK client initialization
    - Message role conversion (human -> user)
    - Where a server puts reasoning text inside a stream delta
    """

    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: str = "not-needed",
        **client_kwargs: Any
    ):
        """Initialize the provider.

        Args:
            base_url: API base URL, including the /v1 suffix
            model: Default model to use
            api_key: API key (local servers accept any value)
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        self._model = model
        self._base_url = base_url
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    @property
    def base_url(self) -> str:
        return self._base_url

    def _extra_request_params(self) -> dict[str, Any]:
        """Hook for subclasses to add server-specific request parameters."""
        return {}

    def _build_request(
        self,
        messages: list[ChatMessage],
        model: str | None,
        temperature: float,
        max_tokens: int | None,
        **kwargs: Any
    ) -> dict[str, Any]:
        request_params: dict[str, Any] = {
            "model": model or self._model,
            "messages": _to_wire_messages(messages),
            "temperature": temperature,
            **self._extra_request_params(),
            **kwargs
        }
        if max_tokens is not None:
            request_params["max_tokens"] = max_tokens
        return request_params

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a chat completion in one blocking call.

        Args:
            messages: Prompt messages
            model: Model to use (overrides default)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            **kwargs: Additional request parameters

        Returns:
            LLMResponse with generated content
        """
        request_params = self._build_request(messages, model, temperature, max_tokens, **kwargs)
        completion = await self._client.chat.completions.create(**request_params)

        usage = None
        if completion.usage:
            usage = {
                "prompt_tokens": completion.usage.prompt_tokens,
                "completion_tokens": completion.usage.completion_tokens,
                "total_tokens": completion.usage.total_tokens
            }

        return LLMResponse(
            content=completion.choices[0].message.content or "",
            model=completion.model,
            usage=usage
        )

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Generate a streaming chat completion.

        Args:
            messages: Prompt messages
            model: Model to use (overrides default)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            **kwargs: Additional request parameters

        Returns:
            StreamingResponse yielding one StreamIncrement per server chunk
        """
        request_params = self._build_request(messages, model, temperature, max_tokens, **kwargs)

        # Each response records its own usage
        def record_usage(usage: dict[str, Any]) -> None:
            response.set_usage(usage)

        response = StreamingResponse(self._stream_generator(request_params, record_usage))
        return response

    async def _stream_generator(
        self,
        request_params: dict[str, Any],
        on_usage: Callable[[dict[str, Any]], None],
    ) -> AsyncIterator[StreamIncrement]:
        """Internal generator that yields increments and captures usage."""
        stream = await self._client.chat.completions.create(
            stream=True,
            stream_options={"include_usage": True},
            **request_params,
        )

        async for chunk in stream:
            if chunk.usage is not None:
                on_usage({
                    "prompt_tokens": chunk.usage.prompt_tokens,
                    "completion_tokens": chunk.usage.completion_tokens,
                    "total_tokens": chunk.usage.total_tokens,
                })
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta
            reasoning = _delta_reasoning(delta)
            content = delta.content or ""
            if content or reasoning:
                yield StreamIncrement(content=content, reasoning=reasoning)

    async def list_models(self) -> list[str]:
        """List model identifiers served by the endpoint."""
        page = await self._client.models.list()
        return [model.id for model in page.data]

    async def close(self) -> None:
        """Close the OpenAI client.

        Note: Uses the OpenAI SDK's async context manager for proper cleanup.
        See: https://github.com/openai/openai-python#async-usage
        """
        await self._client.close()
