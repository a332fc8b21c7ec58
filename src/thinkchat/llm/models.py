from collections.abc import AsyncIterator
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class StreamIncrement(BaseModel):
    """One unit of a streamed completion as emitted by the endpoint.

    ``content`` is either plain text or a heterogeneous list of fragments
    (strings or objects carrying a ``text`` field). ``reasoning`` is the
    side-channel field some servers use for the model's thinking trace.
    """

    model_config = ConfigDict(frozen=True)

    content: str | list[Any] = Field(default="", description="Answer content of this increment")
    reasoning: str | None = Field(
        default=None,
        description="Side-channel reasoning text, if the server sends one"
    )


class StreamingResponse:
    """Wrapper for streaming LLM responses that captures usage info.

    Acts as an async iterator of StreamIncrement values while storing token
    usage that becomes available at the end of the stream.

    Usage:
        stream = await provider.chat_completion_stream(messages)
        async for increment in stream:
            print(increment.content, end="")
        # After iteration, usage is available
        print(stream.usage)  # {"prompt_tokens": 100, "completion_tokens": 50, ...}
    """

    def __init__(self, async_iter: AsyncIterator[StreamIncrement]):
        """Initialize with an async iterator of increments.

        Args:
            async_iter: Async iterator yielding StreamIncrement values
        """
        self._iter = async_iter
        self._usage: dict[str, Any] | None = None

    @property
    def usage(self) -> dict[str, Any] | None:
        """Get token usage info (available after iteration completes)."""
        return self._usage

    def set_usage(self, usage: dict[str, Any]) -> None:
        """Set token usage info (called by provider at end of stream)."""
        self._usage = usage

    def __aiter__(self) -> "StreamingResponse":
        return self

    async def __anext__(self) -> StreamIncrement:
        return await self._iter.__anext__()


class ChatMessage(BaseModel):
    """A prompt message sent to the model endpoint."""

    model_config = ConfigDict(frozen=True)

    role: Literal["system", "human", "assistant"] = Field(
        description="Role of the message sender"
    )
    content: str = Field(description="Content of the message")

    @property
    def wire_role(self) -> str:
        """Role name used by OpenAI-compatible chat endpoints."""
        return "user" if self.role == "human" else self.role


class LLMResponse(BaseModel):
    """Response from a single blocking completion call."""

    model_config = ConfigDict(frozen=True)

    content: str | list[Any] = Field(description="Generated content")
    model: str = Field(description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )
