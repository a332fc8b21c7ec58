"""Pytest configuration and shared fixtures."""
import os
from collections.abc import AsyncIterator
from typing import Any

import pytest

from thinkchat.config import ModelConfig
from thinkchat.llm import ChatMessage, LLMProvider, LLMResponse, StreamIncrement, StreamingResponse


class FakeProvider(LLMProvider):
    """Scripted provider that replays increments without any network access."""

    def __init__(
        self,
        increments: list[StreamIncrement] | None = None,
        response: str | list[Any] = "",
        error: Exception | None = None,
        fail_after: int | None = None,
        models: list[str] | None = None,
    ):
        """Initialize the fake.

        Args:
            increments: Increments yielded by streaming calls
            response: Content returned by blocking calls
            error: Raised when the call is made, or mid-stream if fail_after is set
            fail_after: Number of increments to yield before raising ``error``
            models: Model names returned by list_models
        """
        self.increments = list(increments or [])
        self.response = response
        self.error = error
        self.fail_after = fail_after
        self.models = models or []
        self.calls: list[list[ChatMessage]] = []
        self.call_kwargs: list[dict[str, Any]] = []
        self.closed = False

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        self.calls.append(messages)
        self.call_kwargs.append({"model": model, "temperature": temperature, "max_tokens": max_tokens})
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.response, model=model or "fake")

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        self.calls.append(messages)
        self.call_kwargs.append({"model": model, "temperature": temperature, "max_tokens": max_tokens})
        if self.error is not None and self.fail_after is None:
            raise self.error
        return StreamingResponse(self._replay())

    async def _replay(self) -> AsyncIterator[StreamIncrement]:
        for i, increment in enumerate(self.increments):
            if self.fail_after is not None and i == self.fail_after:
                raise self.error
            yield increment
        if self.fail_after is not None and self.fail_after >= len(self.increments):
            raise self.error

    async def list_models(self) -> list[str]:
        return self.models

    async def close(self) -> None:
        self.closed = True


def content_increments(*texts: str) -> list[StreamIncrement]:
    return [StreamIncrement(content=text) for text in texts]


@pytest.fixture
def make_provider():
    """Return the FakeProvider class for building scripted providers."""
    return FakeProvider


@pytest.fixture
def increments():
    """Return a helper building plain-content increments."""
    return content_increments


@pytest.fixture
def model_config():
    """Return a deterministic model config."""
    return ModelConfig(
        endpoint="http://localhost:11434",
        model="qwen3:0.6b",
        temperature=0.2,
        max_tokens=256,
        show_thinking=False,
    )


@pytest.fixture
def record_json():
    """Return a valid extraction payload."""
    return (
        '{"name":"Li","age":30,"email":"a@b.com","phone":"13800000000",'
        '"address":{"city":"X","district":"Y","street":"Z"},"hobbies":["a"]}'
    )


@pytest.fixture
def ollama_server():
    """Return the URL of a live Ollama server for integration tests."""
    return os.getenv("THINKCHAT_TEST_OLLAMA_URL")
