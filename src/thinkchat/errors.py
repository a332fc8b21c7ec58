"""Error taxonomy for the chat pipeline.

Only transport failures are raised to callers. Malformed stream increments
and extraction failures degrade gracefully and never surface as exceptions.
Every message here is short and safe to show to an end user.
"""


class ChatError(Exception):
    """Base class for user-visible chat errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def is_retryable(self) -> bool:
        """Override in subclasses to control retry behavior."""
        return False


class TransportError(ChatError):
    """The model endpoint could not be reached or dropped the request."""

    def is_retryable(self) -> bool:
        return True


class StreamFailedError(TransportError):
    """A streaming call failed before the model finished generating."""

    def __init__(self, message: str = "Stream failed"):
        super().__init__(message)


class RequestFailedError(TransportError):
    """A blocking completion call failed."""

    def __init__(self, message: str = "Request failed"):
        super().__init__(message)
