"""Chat message text extraction and match summarising.

``extract_text_from_messages()`` turns a conversation into the single text
blob the filter scans. Messages may be plain mappings (OpenAI-style JSON) or
objects exposing the same names as attributes.

Message shape:
    content:    str, or a sequence of parts. A part contributes its ``text``
                when its ``type`` is ``"text"`` or the numeric text kind ``1``.
    tool_calls: optional sequence of ``{"function": {"arguments": str}}``
                (``toolCalls`` is accepted as well).

Ordering: messages in order; within a message, content before its tool-call
arguments; tool calls in their given order. Pieces are joined by ``"\\n"``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable

from leakguard.scanner.regex_engine import SensitiveDataMatch

# Part kinds treated as text: the string form and the numeric enum value
# used by prompt-rendering libraries for text parts.
TEXT_PART_KINDS: frozenset[Any] = frozenset({"text", 1})


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _is_text_kind(kind: Any) -> bool:
    # bool is an int subclass; True must not pass as the numeric kind 1
    if isinstance(kind, bool):
        return False
    try:
        return kind in TEXT_PART_KINDS
    except TypeError:
        return False


def extract_text_from_messages(messages: Iterable[Any]) -> str:
    """Concatenate all scannable text in ``messages``.

    Non-text parts (images, audio, ...) and empty text parts are skipped;
    string content is kept as is.
    Returns ``""`` for an empty conversation.
    """
    text_parts: list[str] = []

    for message in messages:
        content = _field(message, "content")
        if isinstance(content, str):
            text_parts.append(content)
        elif isinstance(content, (list, tuple)):
            for part in content:
                text = _field(part, "text")
                if _is_text_kind(_field(part, "type")) and isinstance(text, str) and text:
                    text_parts.append(text)

        tool_calls = _field(message, "tool_calls")
        if tool_calls is None:
            tool_calls = _field(message, "toolCalls")
        for tool_call in tool_calls or ():
            function = _field(tool_call, "function")
            arguments = _field(function, "arguments") if function is not None else None
            if isinstance(arguments, str) and arguments:
                text_parts.append(arguments)

    return "\n".join(text_parts)


def get_unique_categories(matches: Iterable[SensitiveDataMatch]) -> list[str]:
    """Sorted, de-duplicated categories of ``matches``."""
    return sorted({match.category for match in matches})
