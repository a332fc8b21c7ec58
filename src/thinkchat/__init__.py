"""
Thinkchat: a streaming chat client for locally hosted language models.

Separates a model's reasoning trace from its answer while streaming, and can
turn free-form answers into schema-validated records.
"""

__version__ = "0.1.0"

from .config import ConfigStore, ModelConfig, default_model_config
from .errors import ChatError, RequestFailedError, StreamFailedError, TransportError
from .extraction import ExtractedRecord, ExtractionResult, extract_record
from .session import ChatSession, ClientHandle, Message, SessionState, SubmitMode
from .stream import Fragment, FragmentKind, StreamResult, classify_increment, normalize_content

__all__ = [
    "ChatError",
    "ChatSession",
    "ClientHandle",
    "ConfigStore",
    "ExtractedRecord",
    "ExtractionResult",
    "Fragment",
    "FragmentKind",
    "Message",
    "ModelConfig",
    "RequestFailedError",
    "SessionState",
    "StreamFailedError",
    "StreamResult",
    "SubmitMode",
    "TransportError",
    "classify_increment",
    "default_model_config",
    "extract_record",
    "normalize_content",
]
