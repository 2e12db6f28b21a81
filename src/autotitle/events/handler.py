"""Route host events to the title controller."""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from ..titles.controller import TitleController
from .payloads import (
    MESSAGE_UPDATED,
    PART_UPDATED,
    SESSION_IDLE,
    extract_message_content,
    extract_message_role,
    extract_session_id,
    extract_text_part,
)

logger = logging.getLogger(__name__)

MAX_TRACKED_MESSAGES = 10_000


class EventHandler:
    """Turns raw events into controller calls.

    The host does not serialize event dispatch, so each controller call runs
    as its own task; one failing handler never blocks the stream.
    """

    def __init__(self, controller: TitleController):
        self.controller = controller
        self._roles: dict[str, str] = {}
        self._tasks: set[asyncio.Task] = set()

    @property
    def disabled(self) -> bool:
        return self.controller.settings.disabled

    def dispatch(self, event: Any) -> None:
        """Route one event. Never raises."""
        if self.disabled or not isinstance(event, dict):
            return

        event_type = event.get("type")
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Event: {event_type} - {str(event)[:500]}")

        handlers = {
            PART_UPDATED: self._on_part_updated,
            MESSAGE_UPDATED: self._on_message_updated,
            SESSION_IDLE: self._on_session_idle,
        }
        handler = handlers.get(event_type, self._on_other)
        try:
            handler(event)
        except Exception:
            logger.exception(f"Error routing event {event_type}")

    def _on_part_updated(self, event: dict[str, Any]) -> None:
        part = extract_text_part(event)
        if not part:
            return

        role = part.role or self._roles.get(part.message_id or "")
        if role and role != "user":
            return

        state = self.controller.state
        if part.session_id in state.keyword_titled or part.session_id in state.ai_titled:
            return

        self._spawn(self.controller.handle_user_message(part.session_id, part.text))

    def _on_message_updated(self, event: dict[str, Any]) -> None:
        message = extract_message_role(event)
        if message:
            self._remember_role(message.message_id, message.role)
        self._on_other(event)

    def _on_session_idle(self, event: dict[str, Any]) -> None:
        session_id = extract_session_id(event)
        if session_id:
            self._spawn(self.controller.handle_session_idle(session_id))

    def _on_other(self, event: dict[str, Any]) -> None:
        text = extract_message_content(event)
        if not text:
            return
        session_id = extract_session_id(event)
        if session_id:
            self._spawn(self.controller.handle_user_message(session_id, text))

    def _remember_role(self, message_id: str, role: str) -> None:
        if len(self._roles) >= MAX_TRACKED_MESSAGES:
            # Drop the oldest entry; dicts keep insertion order
            self._roles.pop(next(iter(self._roles)))
        self._roles[message_id] = role

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for every scheduled handler to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def cleanup(self) -> None:
        """Cancel in-flight handlers."""
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
        self._tasks.clear()
