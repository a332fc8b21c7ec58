"""Data models for the chat session.

Hides the internal representation of transcript messages and session states.
"""

import time
from enum import Enum
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

Role = Literal["user", "assistant", "system"]


def _now_millis() -> int:
    return time.time_ns() // 1_000_000


class Message(BaseModel):
    """A finalized transcript message. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    role: Role
    content: str
    timestamp: int = Field(default_factory=_now_millis, description="Epoch milliseconds")
    thinking: str | None = Field(default=None, description="Reasoning trace (assistant only)")

    @field_validator("thinking")
    @classmethod
    def validate_thinking(cls, v: str | None, info: ValidationInfo) -> str | None:
        """Only assistant messages carry a reasoning trace."""
        if v is not None and info.data.get("role") != "assistant":
            raise ValueError("only assistant messages may carry thinking")
        return v

    @classmethod
    def create(cls, role: Role, content: str, thinking: str | None = None) -> "Message":
        """Build a message, dropping ``thinking`` unless the role is assistant."""
        return cls(
            role=role,
            content=content,
            thinking=(thinking or None) if role == "assistant" else None,
        )


class SubmitMode(str, Enum):
    """How a submission is answered."""

    PLAIN = "plain"        # Single blocking call
    STREAM = "stream"      # Incremental chat
    EXTRACT = "extract"    # Incremental structured extraction


class SessionState(str, Enum):
    """Lifecycle of a single submission."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    AWAITING_PLAIN = "awaiting_plain"
    STREAMING_PLAIN = "streaming_plain"
    STREAMING_EXTRACT = "streaming_extract"
    FINALIZING = "finalizing"


ACTIVE_STATE_FOR_MODE = {
    SubmitMode.PLAIN: SessionState.AWAITING_PLAIN,
    SubmitMode.STREAM: SessionState.STREAMING_PLAIN,
    SubmitMode.EXTRACT: SessionState.STREAMING_EXTRACT,
}
