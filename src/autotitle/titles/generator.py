"""Model-generated session titles, requested through a throwaway session."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from ..host.client import HostClient, HostError
from ..host.models import ModelRef
from .text import sanitize_title

logger = logging.getLogger(__name__)

SCRATCH_SESSION_TITLE = "autotitle-temp"
USER_CONTEXT_CHARS = 300
ASSISTANT_CONTEXT_CHARS = 400
# Headroom for a slightly long first line; sanitizing truncates it anyway
RESPONSE_OVERSHOOT = 20


def build_title_prompt(
    user_text: str, assistant_text: str | None, max_length: int
) -> str:
    """The instruction sent to the model."""
    context = f'User asked: "{user_text[:USER_CONTEXT_CHARS]}"'
    if assistant_text:
        context += f'\n\nAssistant responded: "{assistant_text[:ASSISTANT_CONTEXT_CHARS]}"'

    return f"""Generate a concise, specific title (3-6 words) for this conversation:

{context}

Rules:
- MUST NOT exceed {max_length} characters - this is a hard limit
- No quotes or special punctuation
- Use title case
- Be SPECIFIC about the actual content discussed (e.g., "British Shorthair Cat Photo" not "Image Identification")
- If the response mentions specific things (names, technologies, animals, etc.), include them
- If there's a ticket/issue reference (JIRA like ABC-123, GitHub PR #123, Trello, Linear, etc.), include it as a prefix (e.g., "ABC-123 Fix Login Bug")
- Return ONLY the title, nothing else"""


def parse_title_response(response: Any, max_length: int) -> str | None:
    """Pull a sanitized title out of a prompt response body.

    The first non-empty line of the first usable text part wins; a flat
    ``content`` field is accepted as a fallback.
    """
    if not isinstance(response, dict):
        return None

    for part in response.get("parts") or []:
        if not isinstance(part, dict) or part.get("type") != "text":
            continue
        text = part.get("text")
        if not isinstance(text, str) or not text.strip():
            continue

        lines = [line for line in text.strip().splitlines() if line.strip()]
        candidate = lines[0].strip() if lines else ""
        logger.debug(f'Got AI text: "{text.strip()[:100]}"')
        if 0 < len(candidate) <= max_length + RESPONSE_OVERSHOOT:
            return sanitize_title(candidate, max_length) or None

    content = response.get("content")
    if isinstance(content, str) and content.strip():
        return sanitize_title(content, max_length) or None

    return None


@asynccontextmanager
async def scratch_session(client: HostClient) -> AsyncIterator[str]:
    """A temporary host session, deleted on every exit path.

    Deletion failures are logged and never raised.
    """
    session_id = await client.create_session(SCRATCH_SESSION_TITLE)
    logger.debug(f"Created temp session {session_id}")
    try:
        yield session_id
    finally:
        try:
            await client.delete_session(session_id)
        except HostError as e:
            logger.debug(f"Failed to delete temp session {session_id}: {e}")


async def generate_ai_title(
    client: HostClient,
    user_text: str,
    assistant_text: str | None,
    model: ModelRef | None,
    max_length: int,
) -> str | None:
    """Ask the model for a title. Returns None on any failure."""
    prompt = build_title_prompt(user_text, assistant_text, max_length)

    try:
        async with scratch_session(client) as scratch_id:
            if model:
                logger.debug(f"Using model: {model}")
            response = await client.prompt(scratch_id, prompt, model)
    except HostError as e:
        logger.debug(f"AI generation failed: {e}")
        return None

    logger.debug(f"Prompt response: {str(response)[:300]}")
    title = parse_title_response(response, max_length)
    if title:
        logger.debug(f'AI generated title: "{title}"')
    else:
        logger.debug("No valid title in AI response")
    return title
