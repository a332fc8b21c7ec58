"""Classify streamed increments into thinking and content fragments.

Servers deliver the reasoning trace in one of three encodings:
- a side-channel ``reasoning`` field next to the content
- an Ollama-native JSON payload ``{"message": {"thinking": ..., "content": ...}}``
  embedded in the content string
- not at all, in which case the content is plain answer text
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from ..llm.models import StreamIncrement
from .normalize import normalize_content

logger = logging.getLogger(__name__)


class FragmentKind(str, Enum):
    """Which buffer a fragment belongs to."""

    THINKING = "thinking"
    CONTENT = "content"


@dataclass(frozen=True)
class Fragment:
    """A classified piece of streamed text."""

    kind: FragmentKind
    text: str


@dataclass(frozen=True)
class PayloadParse:
    """Outcome of trying to read a content string as a native payload.

    ``status`` is "parsed" when the text is a JSON object carrying a
    ``message`` object, otherwise "raw" and ``raw`` holds the input verbatim.
    """

    status: Literal["parsed", "raw"]
    thinking: str = ""
    content: str = ""
    raw: str = ""


def parse_payload(text: str) -> PayloadParse:
    """Try to read ``text`` as an Ollama-native message payload."""
    try:
        data: Any = json.loads(text)
    except (ValueError, RecursionError) as e:
        # Malformed JSON and over-long integer literals both raise ValueError
        logger.debug("Increment is not a JSON payload, using as text: %s", e)
        return PayloadParse(status="raw", raw=text)

    message = data.get("message") if isinstance(data, dict) else None
    if not isinstance(message, dict):
        return PayloadParse(status="raw", raw=text)

    return PayloadParse(
        status="parsed",
        thinking=normalize_content(message.get("thinking")),
        content=normalize_content(message.get("content")),
    )


def classify_increment(increment: StreamIncrement) -> list[Fragment]:
    """Extract the ordered fragments carried by one stream increment.

    The side-channel reasoning fragment (if any) always comes first, followed
    by the fragments derived from the content. Never raises.

    Args:
        increment: One streamed unit from the model endpoint

    Returns:
        Zero or more fragments in emission order
    """
    fragments: list[Fragment] = []

    if increment.reasoning:
        fragments.append(Fragment(FragmentKind.THINKING, increment.reasoning))

    text = normalize_content(increment.content)
    if not text:
        return fragments

    parsed = parse_payload(text)
    if parsed.status == "raw":
        fragments.append(Fragment(FragmentKind.CONTENT, parsed.raw))
        return fragments

    if parsed.thinking:
        fragments.append(Fragment(FragmentKind.THINKING, parsed.thinking))
    if parsed.content:
        fragments.append(Fragment(FragmentKind.CONTENT, parsed.content))
    return fragments
