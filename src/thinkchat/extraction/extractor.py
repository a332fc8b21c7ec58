"""Structured extraction of a personal-details record from model output.

Two kinds of failure are kept apart. Output that fails to parse or
validate is reported as EXTRACTION_FAILED and never raised. A transport
failure is not folded into that marker: it raises StreamFailedError, exactly
as in plain streaming, so callers see "Stream failed" in both modes.
"""

import json
import logging
import re
from dataclasses import dataclass

from pydantic import ValidationError

from ..config import ModelConfig
from ..errors import StreamFailedError
from ..llm import ChatMessage, LLMProvider
from ..prompts import get_extraction_prompt
from ..stream import BufferObserver, consume_stream
from .models import ExtractedRecord

logger = logging.getLogger(__name__)

EXTRACTION_SUCCEEDED = "Extracted user information"
EXTRACTION_FAILED = "Failed to extract user information"

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)```")
_BRACED_SPAN = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class ExtractionResult:
    """Completion signal of an extraction run.

    ``record`` is None whenever any step failed; ``message`` is the
    human-readable success or failure marker.
    """

    record: ExtractedRecord | None
    message: str
    content: str = ""
    thinking: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.record is not None


def locate_json_block(text: str) -> str:
    """Find the JSON payload inside free-form model output.

    A ```json fenced block wins; otherwise the widest ``{...}`` span is used;
    if neither is present the whole text is returned.
    """
    fenced = _FENCED_JSON.search(text)
    if fenced:
        return fenced.group(1)
    braced = _BRACED_SPAN.search(text)
    if braced:
        return braced.group(0)
    return text


def parse_record(text: str) -> ExtractedRecord | None:
    """Locate, parse and validate a record. Returns None on any failure."""
    json_str = locate_json_block(text)
    try:
        data = json.loads(json_str)
    except (ValueError, RecursionError) as e:
        # Malformed JSON and over-long integer literals both raise ValueError
        logger.debug("Extraction output is not valid JSON: %s", e)
        return None

    try:
        return ExtractedRecord.model_validate(data)
    except ValidationError as e:
        logger.debug("Extracted JSON failed validation: %s", e)
        return None


def finalize_extraction(content: str, thinking: str | None = None) -> ExtractionResult:
    """Turn the collected answer text into the extraction completion signal."""
    record = parse_record(content)
    if record is None:
        logger.info("Could not extract a record from %d characters of output", len(content))
        return ExtractionResult(record=None, message=EXTRACTION_FAILED, content=content, thinking=thinking)
    return ExtractionResult(record=record, message=EXTRACTION_SUCCEEDED, content=content, thinking=thinking)


def build_extraction_messages(text: str, show_thinking: bool = False) -> list[ChatMessage]:
    return [
        ChatMessage(role="system", content=get_extraction_prompt(show_thinking)),
        ChatMessage(role="human", content=text),
    ]


async def extract_record(
    provider: LLMProvider,
    config: ModelConfig,
    text: str,
    on_update: BufferObserver | None = None,
) -> ExtractionResult:
    """Run the extraction prompt, streaming fragments, then validate the answer.

    Fragments are published through ``on_update`` exactly as in plain
    streaming. Once the stream ends only the content-classified text is
    searched for a record. Parse and validation failures are reported in the
    returned ExtractionResult and never raised.

    Raises:
        StreamFailedError: If the endpoint fails before the stream completes
    """
    messages = build_extraction_messages(text, config.show_thinking)
    try:
        stream = await provider.chat_completion_stream(
            messages,
            model=config.model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )
        buffers = await consume_stream(stream, on_update)
    except Exception as e:
        logger.error("Extraction stream from %s failed: %s", config.endpoint, e)
        raise StreamFailedError() from e

    return finalize_extraction(buffers.content, buffers.thinking or None)
