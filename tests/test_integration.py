"""Integration tests against a live Ollama server."""
import os

import pytest

from thinkchat.config import ModelConfig
from thinkchat.session import ChatSession, ClientHandle, SubmitMode


@pytest.fixture
def live_session(ollama_server):
    if not ollama_server:
        pytest.skip("THINKCHAT_TEST_OLLAMA_URL not set")
    config = ModelConfig(
        endpoint=ollama_server,
        model=os.getenv("THINKCHAT_TEST_MODEL", "qwen3:0.6b"),
        temperature=0.0,
        max_tokens=512,
        show_thinking=True,
    )
    return ChatSession(ClientHandle(config))


@pytest.mark.asyncio
@pytest.mark.integration
async def test_streaming_round_trip(live_session):
    """Integration test: a streamed answer lands in the transcript."""
    try:
        answer = await live_session.submit("Reply with the single word: pong")

        assert answer
        assert [m.role for m in live_session.messages] == ["user", "assistant"]
        assert live_session.error is None
    finally:
        await live_session.client.close()


@pytest.mark.asyncio
@pytest.mark.integration
async def test_model_is_listed(live_session):
    """Integration test: the configured model is served by the endpoint."""
    try:
        names = await live_session.client.provider().list_models()
        assert live_session.client.config.model in names
    finally:
        await live_session.client.close()


@pytest.mark.asyncio
@pytest.mark.integration
async def test_extraction_completes(live_session):
    """Integration test: extraction always finishes with a marker message."""
    try:
        await live_session.submit(
            "I am Zhang San, 28, email zhangsan@example.com, phone 13812345678, "
            "I live at 1 Main Road, Chaoyang, Beijing and I like reading.",
            mode=SubmitMode.EXTRACT,
        )
        assert live_session.messages[-1].content in (
            "Extracted user information",
            "Failed to extract user information",
        )
    finally:
        await live_session.client.close()
