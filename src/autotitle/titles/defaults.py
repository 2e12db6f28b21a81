"""Decide which session titles belong to the plugin and may be rewritten."""

import re

KEYWORD_MARKER = "🔍"
AI_MARKER = "✨"

_MONTHS = "Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec"

DEFAULT_TITLE_PATTERNS = [
    re.compile(r"^\d{4}-\d{2}-\d{2}"),
    re.compile(r"^\d{1,2}/\d{1,2}/\d{2,4}"),
    re.compile(rf"^({_MONTHS})\s+\d{{1,2}}", re.IGNORECASE),
    re.compile(rf"^\d{{1,2}}\s+({_MONTHS})", re.IGNORECASE),
    re.compile(r"^Session\s+\d+", re.IGNORECASE),
    re.compile(r"^New\s+Session", re.IGNORECASE),
    re.compile(r"^Untitled", re.IGNORECASE),
]


def is_default_title(title: str | None) -> bool:
    """True for empty titles and titles the host generated (dates, "New Session", ...)."""
    if not title or not title.strip():
        return True
    stripped = title.strip()
    return any(pattern.search(stripped) for pattern in DEFAULT_TITLE_PATTERNS)


def has_plugin_marker(title: str | None) -> bool:
    """True if the title starts with one of the plugin's own markers."""
    if not title:
        return False
    return title.startswith(KEYWORD_MARKER) or title.startswith(AI_MARKER)


def should_modify_title(title: str | None) -> bool:
    """False only for a title the user wrote by hand."""
    return is_default_title(title) or has_plugin_marker(title)


def with_marker(marker: str, title: str) -> str:
    return f"{marker} {title}"


def marker_length(marker: str) -> int:
    """Characters a marker and its separator take up in a title."""
    return len(with_marker(marker, ""))
