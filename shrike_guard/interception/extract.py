"""User-content extraction for each provider's request shape.

Produces the single span of user-authored text that gets scanned: every user
text span, in original order, joined with ``"\\n"``. Nothing found → ``""``
(never None, never an error). Callers treat empty/whitespace-only text as
trivially safe and skip the scan call entirely.

Content values are classified once at the boundary (``classify_content``) and
dispatched to one pure function per shape:

  TEXT        a bare string                         → the string itself
  BLOCK_LIST  an ordered list of typed blocks/parts → text blocks only
  NESTED      an object exposing ``text`` or ``parts`` (Gemini Content/Part)
  EMPTY       None, or anything unrecognized        → nothing

Both plain dicts (what callers usually pass) and attribute-style SDK objects
(pydantic models, protobuf messages) are accepted. Images, documents, audio,
tool results and other non-text blocks are skipped silently.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

USER_ROLE = "user"
MODEL_ROLE = "model"  # Gemini's name for assistant turns
TEXT_BLOCK_TYPE = "text"


class ContentShape(str, Enum):
    EMPTY = "empty"
    TEXT = "text"
    BLOCK_LIST = "block_list"
    NESTED = "nested"


def _field(obj: Any, name: str) -> Any:
    """Read ``name`` from a mapping key or an attribute."""
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def classify_content(value: Any) -> ContentShape:
    """Inspect a content value's structure and name its shape."""
    if value is None:
        return ContentShape.EMPTY
    if isinstance(value, str):
        return ContentShape.TEXT
    if isinstance(value, (list, tuple)):
        return ContentShape.BLOCK_LIST
    if _field(value, "parts") is not None or _field(value, "text") is not None:
        return ContentShape.NESTED
    return ContentShape.EMPTY


def _typed_text_blocks(blocks: Iterable[Any]) -> list[str]:
    """Text of every ``{"type": "text", "text": ...}`` block, in order."""
    texts: list[str] = []
    for block in blocks:
        if _field(block, "type") != TEXT_BLOCK_TYPE:
            continue
        text = _field(block, "text")
        if isinstance(text, str) and text:
            texts.append(text)
    return texts


def _role_message_texts(messages: Any) -> list[str]:
    texts: list[str] = []
    if classify_content(messages) is not ContentShape.BLOCK_LIST:
        return texts
    for message in messages:
        if _field(message, "role") != USER_ROLE:
            continue
        content = _field(message, "content")
        shape = classify_content(content)
        if shape is ContentShape.TEXT:
            if content:
                texts.append(content)
        elif shape is ContentShape.BLOCK_LIST:
            texts.extend(_typed_text_blocks(content))
    return texts


def extract_chat_messages(messages: Any) -> str:
    """OpenAI chat completions: ``messages=[{"role": ..., "content": str | [parts]}]``.

    User-role string content is included verbatim; user-role content-part
    lists contribute their ``type == "text"`` parts. System, assistant and tool
    messages are not user-authored and are skipped.
    """
    return "\n".join(_role_message_texts(messages))


def extract_message_blocks(messages: Any) -> str:
    """Anthropic messages: ``messages=[{"role": ..., "content": str | [blocks]}]``.

    User-role string content, or the ``type == "text"`` blocks of a user-role
    block list. Image, document and tool_result blocks are skipped. The
    top-level ``system`` parameter is operator-authored and never scanned.
    """
    return "\n".join(_role_message_texts(messages))


def _gemini_texts(contents: Any) -> list[str]:
    shape = classify_content(contents)

    if shape is ContentShape.TEXT:
        return [contents] if contents else []

    if shape is ContentShape.BLOCK_LIST:
        texts: list[str] = []
        for item in contents:
            texts.extend(_gemini_texts(item))
        return texts

    if shape is ContentShape.NESTED:
        if _field(contents, "role") == MODEL_ROLE:
            return []
        text = _field(contents, "text")
        if isinstance(text, str) and text:
            return [text]
        parts = _field(contents, "parts")
        if parts is not None and not isinstance(parts, (str, Mapping)):
            # Protobuf repeated fields are iterable but not lists.
            return _gemini_texts(list(parts))
        return []

    return []


def extract_gemini_contents(contents: Any) -> str:
    """Gemini ``generate_content`` / ``send_message`` input.

    Accepts a bare string, a list of strings/parts/Content objects, or a single
    Content/Part exposing ``text`` or ``parts`` (recursed with the same rules).
    Content objects with ``role == "model"`` are model-authored history and are
    skipped; inline data and other media parts contribute nothing.
    """
    return "\n".join(_gemini_texts(contents))
