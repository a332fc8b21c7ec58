"""Streaming response parsing.

Module structure:
- normalize.py: flattening raw content values into text
- classifier.py: splitting increments into thinking/content fragments
- aggregator.py: driving a completion and accumulating its buffers
"""

from .aggregator import (
    BufferObserver,
    StreamBuffers,
    StreamResult,
    build_messages,
    consume_stream,
    send_message,
    stream_chat,
)
from .classifier import Fragment, FragmentKind, PayloadParse, classify_increment, parse_payload
from .normalize import normalize_content

__all__ = [
    "BufferObserver",
    "Fragment",
    "FragmentKind",
    "PayloadParse",
    "StreamBuffers",
    "StreamResult",
    "build_messages",
    "classify_increment",
    "consume_stream",
    "normalize_content",
    "parse_payload",
    "send_message",
    "stream_chat",
]
