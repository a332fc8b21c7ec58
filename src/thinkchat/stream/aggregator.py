"""Drive a model completion and accumulate its thinking and content text."""

import logging
from collections.abc import AsyncIterable, Callable
from dataclasses import dataclass, field
from typing import Any

from ..config import ModelConfig
from ..errors import RequestFailedError, StreamFailedError
from ..llm import ChatMessage, LLMProvider, StreamIncrement
from ..prompts import get_system_prompt
from .classifier import Fragment, FragmentKind, classify_increment
from .normalize import normalize_content

logger = logging.getLogger(__name__)

# Receives the fragment kind and the full buffer value after each append
BufferObserver = Callable[[FragmentKind, str], None]


@dataclass
class StreamBuffers:
    """Append-only accumulators for one in-flight request."""

    thinking: str = ""
    content: str = ""

    def append(self, fragment: Fragment) -> str:
        """Append a fragment to its buffer and return the buffer's new value."""
        if fragment.kind is FragmentKind.THINKING:
            self.thinking += fragment.text
            return self.thinking
        self.content += fragment.text
        return self.content


@dataclass(frozen=True)
class StreamResult:
    """Terminal value of a completed request."""

    content: str
    thinking: str | None = None
    usage: dict[str, Any] | None = field(default=None, compare=False)


def build_messages(text: str, system_prompt: str | None = None) -> list[ChatMessage]:
    """Build the prompt: system message first, then the user's text.

    Args:
        text: The user's message
        system_prompt: Override for the default assistant persona
    """
    return [
        ChatMessage(role="system", content=system_prompt or get_system_prompt()),
        ChatMessage(role="human", content=text),
    ]


async def consume_stream(
    stream: AsyncIterable[StreamIncrement],
    on_update: BufferObserver | None = None,
) -> StreamBuffers:
    """Classify every increment and publish each buffer change in order.

    Args:
        stream: Increments from the model endpoint
        on_update: Called after every fragment with its kind and the
            accumulated value of the matching buffer

    Returns:
        The final buffers once the stream is exhausted
    """
    buffers = StreamBuffers()
    async for increment in stream:
        for fragment in classify_increment(increment):
            value = buffers.append(fragment)
            if on_update:
                on_update(fragment.kind, value)
    return buffers


async def send_message(
    provider: LLMProvider,
    config: ModelConfig,
    text: str,
    system_prompt: str | None = None,
) -> StreamResult:
    """Ask for a complete answer in one blocking call.

    The blocking path never separates reasoning text, so ``thinking`` is
    always None.

    Raises:
        RequestFailedError: If the endpoint call fails
    """
    messages = build_messages(text, system_prompt)
    try:
        response = await provider.chat_completion(
            messages,
            model=config.model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )
    except Exception as e:
        logger.error("Completion request to %s failed: %s", config.endpoint, e)
        raise RequestFailedError() from e

    return StreamResult(content=normalize_content(response.content), usage=response.usage)


async def stream_chat(
    provider: LLMProvider,
    config: ModelConfig,
    text: str,
    system_prompt: str | None = None,
    on_update: BufferObserver | None = None,
) -> StreamResult:
    """Stream an answer, publishing partial thinking and content as it arrives.

    Args:
        provider: Client resolved for this request
        config: Settings resolved for this request
        text: The user's message
        system_prompt: Override for the default assistant persona
        on_update: Buffer observer, see consume_stream

    Returns:
        StreamResult with the final buffer values

    Raises:
        StreamFailedError: If the call or any increment fails mid-stream
    """
    messages = build_messages(text, system_prompt)
    try:
        stream = await provider.chat_completion_stream(
            messages,
            model=config.model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )
        buffers = await consume_stream(stream, on_update)
    except Exception as e:
        logger.error("Streaming request to %s failed: %s", config.endpoint, e)
        raise StreamFailedError() from e

    return StreamResult(
        content=buffers.content,
        thinking=buffers.thinking or None,
        usage=getattr(stream, "usage", None),
    )
