"""Chat session state machine.

Owns the transcript and the transient buffers of the in-flight request, and
picks which pipeline answers each submission.

Only one submission may be active at a time. This is the caller's contract;
a submission while busy is logged but not queued or rejected.

``clear()`` does not fence an in-flight submission: if one completes after a
clear, its assistant message is appended to the emptied transcript.
"""

import logging
from collections.abc import Callable

from ..errors import ChatError
from ..extraction import ExtractedRecord, extract_record
from ..stream import FragmentKind, send_message, stream_chat
from .client import ClientHandle
from .models import ACTIVE_STATE_FOR_MODE, Message, SessionState, SubmitMode

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"

SessionListener = Callable[["ChatSession"], None]


class ChatSession:
    """In-memory state of a single conversation."""

    def __init__(self, client: ClientHandle, listener: SessionListener | None = None):
        """Initialize an empty session.

        Args:
            client: Handle resolving the model client for each request
            listener: Called whenever observable state changes, including
                every streamed buffer update
        """
        self._client = client
        self._listener = listener
        self._messages: list[Message] = []
        self._state = SessionState.IDLE
        self._error: str | None = None
        self._streaming_thinking: str | None = None
        self._streaming_content: str | None = None
        self._extracted_record: ExtractedRecord | None = None

    @property
    def client(self) -> ClientHandle:
        return self._client

    @property
    def messages(self) -> tuple[Message, ...]:
        """Read-only snapshot of the transcript, oldest first."""
        return tuple(self._messages)

    @property
    def message_count(self) -> int:
        return len(self._messages)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state is not SessionState.IDLE

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def streaming_thinking(self) -> str | None:
        """Live thinking buffer; None outside an active request."""
        return self._streaming_thinking

    @property
    def streaming_content(self) -> str | None:
        """Live content buffer; None outside an active request."""
        return self._streaming_content

    @property
    def extracted_record(self) -> ExtractedRecord | None:
        """Record from the most recent successful extraction."""
        return self._extracted_record

    def _notify(self) -> None:
        if self._listener:
            self._listener(self)

    def _set_state(self, state: SessionState) -> None:
        logger.debug("Session state %s -> %s", self._state.value, state.value)
        self._state = state
        self._notify()

    def _on_buffer_update(self, kind: FragmentKind, value: str) -> None:
        if kind is FragmentKind.THINKING:
            self._streaming_thinking = value
        else:
            self._streaming_content = value
        self._notify()

    def _append(self, message: Message) -> None:
        self._messages.append(message)
        self._notify()

    async def submit(
        self,
        text: str,
        system_prompt: str | None = None,
        mode: SubmitMode = SubmitMode.STREAM,
    ) -> str:
        """Send a user message and append the assistant's answer.

        The user message is appended before the model is called and stays in
        the transcript even if the request fails.

        Args:
            text: The user's message
            system_prompt: Override for the default assistant persona
                (ignored in extraction mode)
            mode: Which pipeline answers the message

        Returns:
            The assistant message content

        Raises:
            ChatError: On transport failure, after ``error`` has been set
        """
        if self.is_busy:
            logger.warning("Submission started while another is in state %s", self._state.value)

        self._error = None
        self._streaming_thinking = ""
        self._streaming_content = ""
        self._extracted_record = None
        self._set_state(SessionState.SUBMITTING)
        self._append(Message.create("user", text))

        provider = None
        try:
            # Resolve once so a config swap mid-request does not affect it
            provider = self._client.acquire()
            config = self._client.config

            self._set_state(ACTIVE_STATE_FOR_MODE[mode])
            if mode is SubmitMode.EXTRACT:
                extraction = await extract_record(provider, config, text, self._on_buffer_update)
                self._extracted_record = extraction.record
                content, thinking = extraction.message, extraction.thinking
            elif mode is SubmitMode.STREAM:
                result = await stream_chat(provider, config, text, system_prompt, self._on_buffer_update)
                content, thinking = result.content, result.thinking
            else:
                result = await send_message(provider, config, text, system_prompt)
                content, thinking = result.content, result.thinking

            self._set_state(SessionState.FINALIZING)
            self._append(Message.create("assistant", content, thinking))
            return content

        except ChatError as e:
            self._error = e.message
            raise
        except Exception:
            logger.exception("Unexpected failure while answering submission")
            self._error = UNKNOWN_ERROR_MESSAGE
            raise
        finally:
            self._streaming_thinking = None
            self._streaming_content = None
            self._set_state(SessionState.IDLE)
            if provider is not None:
                await self._client.release(provider)

    def clear(self) -> None:
        """Empty the transcript and forget any surfaced error."""
        self._messages = []
        self._error = None
        self._notify()
