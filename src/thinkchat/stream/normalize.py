"""Flatten model-emitted content values into plain text."""

from typing import Any


def _fragment_text(item: Any) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, dict) and "text" in item:
        return str(item["text"])
    if not isinstance(item, dict) and hasattr(item, "text"):
        return str(item.text)
    return ""


def normalize_content(content: Any) -> str:
    """Convert a raw content value into a single string.

    Strings pass through unchanged. Lists and tuples are flattened: string
    items are kept, items carrying a ``text`` field contribute that field,
    anything else contributes nothing. Items are joined without a separator.
    Any other value is stringified, with None mapping to "". Never raises.

    >>> normalize_content(["a", {"text": "b"}, 3])
    'ab'
    """
    if isinstance(content, str):
        return content
    if isinstance(content, (list, tuple)):
        return "".join(_fragment_text(item) for item in content)
    if content is None:
        return ""
    try:
        return str(content)
    except Exception:
        return ""
