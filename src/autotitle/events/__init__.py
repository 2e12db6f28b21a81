"""Host event ingestion module."""

from .handler import EventHandler
from .payloads import (
    HostEvent,
    extract_message_content,
    extract_session_id,
    extract_text_part,
)
from .stream import EventStream, parse_sse

__all__ = [
    "EventHandler",
    "EventStream",
    "HostEvent",
    "extract_message_content",
    "extract_session_id",
    "extract_text_part",
    "parse_sse",
]
