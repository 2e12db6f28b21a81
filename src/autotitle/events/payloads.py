"""Event models and extractors for the host's loosely-shaped event payloads.

Payload shapes differ between host versions, so each extractor tries a
fixed list of field paths in order and returns the first match.
"""

from typing import Any

from pydantic import BaseModel, Field

PART_UPDATED = "message.part.updated"
MESSAGE_UPDATED = "message.updated"
SESSION_IDLE = "session.idle"

SESSION_ID_PATHS: list[tuple[str, ...]] = [
    ("properties", "sessionID"),
    ("properties", "session", "id"),
    ("properties", "info", "id"),
    ("sessionID",),
    ("session", "id"),
]


class HostEvent(BaseModel):
    """An event from the host's bus."""

    type: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "allow"}


class TextPart(BaseModel):
    """A text part carried by a part-updated event."""

    session_id: str
    message_id: str | None = None
    text: str
    role: str | None = None


class MessageRole(BaseModel):
    """Role announcement carried by a message-updated event."""

    session_id: str | None = None
    message_id: str
    role: str


def _get_path(obj: Any, path: tuple[str, ...]) -> Any:
    for key in path:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def _first_string(obj: Any, paths: list[tuple[str, ...]]) -> str | None:
    for path in paths:
        value = _get_path(obj, path)
        if isinstance(value, str) and value:
            return value
    return None


def extract_session_id(event: Any) -> str | None:
    """Session id of a session-level event."""
    return _first_string(event, SESSION_ID_PATHS)


def extract_text_part(event: Any) -> TextPart | None:
    """The non-empty text part of a part-updated event, if it has one."""
    part = _get_path(event, ("properties", "part"))
    if not isinstance(part, dict) or part.get("type") != "text":
        return None

    session_id = part.get("sessionID")
    text = part.get("text")
    if not isinstance(session_id, str) or not session_id:
        return None
    if not isinstance(text, str) or not text:
        return None

    message_id = part.get("messageID")
    role = _first_string(event, [("properties", "message", "role"), ("properties", "role")])
    return TextPart(
        session_id=session_id,
        message_id=message_id if isinstance(message_id, str) else None,
        text=text,
        role=role,
    )


def extract_message_role(event: Any) -> MessageRole | None:
    """Message id and role from a message-updated event."""
    info = _get_path(event, ("properties", "info"))
    if not isinstance(info, dict):
        return None
    message_id = info.get("id")
    role = info.get("role")
    if not isinstance(message_id, str) or not isinstance(role, str):
        return None
    session_id = info.get("sessionID")
    return MessageRole(
        session_id=session_id if isinstance(session_id, str) else None,
        message_id=message_id,
        role=role,
    )


def _message_text(message: dict[str, Any]) -> str | None:
    for key in ("content", "text"):
        if isinstance(message.get(key), str):
            return message[key]
    for part in message.get("parts") or []:
        if isinstance(part, dict) and part.get("type") == "text" and part.get("text"):
            return part["text"]
    return None


def extract_message_content(event: Any) -> str | None:
    """Text of the first user message in an event that carries a message list."""
    messages = _get_path(event, ("properties", "messages")) or _get_path(event, ("messages",))
    if not isinstance(messages, list):
        return None

    for message in messages:
        if not isinstance(message, dict):
            continue
        role = message.get("role") or _get_path(message, ("info", "role"))
        if role != "user":
            continue
        text = _message_text(message)
        if text is not None:
            return text
    return None
