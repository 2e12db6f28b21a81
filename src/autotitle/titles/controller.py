"""Per-session title state machine.

Phase 1 writes a keyword title as soon as the first user message arrives.
Phase 2 replaces it with a model-generated title once the session goes idle.
Handlers for different events may run interleaved, so every decision is
taken against the tracking sets in ``TitleState`` and re-checked after each
awaited host call.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from ..config import Settings
from ..host.client import HostClient
from ..host.models import ConversationTurn, ModelRef
from .defaults import (
    AI_MARKER,
    KEYWORD_MARKER,
    marker_length,
    should_modify_title,
    with_marker,
)
from .generator import generate_ai_title
from .models import find_cheapest_model
from .text import generate_fallback_title, infer_intent

logger = logging.getLogger(__name__)


@dataclass
class TitleState:
    """Process-lifetime tracking state, owned by one controller."""

    # Sessions currently showing a phase-1 title
    keyword_titled: set[str] = field(default_factory=set)
    # Terminal: AI title applied, custom title left alone, or fallback kept
    ai_titled: set[str] = field(default_factory=set)
    # In-flight guards
    pending_ai: set[str] = field(default_factory=set)
    pending_keyword: set[str] = field(default_factory=set)
    # Idle events that found no user text yet
    idle_misses: dict[str, int] = field(default_factory=dict)

    model: ModelRef | None = None
    model_resolved: bool = False

    def mark_done(self, session_id: str) -> None:
        self.ai_titled.add(session_id)
        self.keyword_titled.discard(session_id)
        self.idle_misses.pop(session_id, None)


class TitleController:
    """Decides when to write keyword and AI titles for each session."""

    def __init__(
        self,
        client: HostClient,
        settings: Settings,
        state: TitleState | None = None,
    ):
        self.client = client
        self.settings = settings
        self.state = state or TitleState()
        self._model_lock = asyncio.Lock()

    # =========================================================================
    # Phase 1: keyword title
    # =========================================================================

    async def handle_user_message(self, session_id: str, text: str) -> None:
        """Write a keyword title for the session's first user message."""
        state = self.state
        if (
            session_id in state.keyword_titled
            or session_id in state.ai_titled
            or session_id in state.pending_keyword
        ):
            return

        state.pending_keyword.add(session_id)
        try:
            await self._write_keyword_title(session_id, text)
        except Exception:
            logger.exception(f"Error in keyword titling for session {session_id}")
        finally:
            state.pending_keyword.discard(session_id)

    async def _write_keyword_title(self, session_id: str, text: str) -> None:
        state = self.state
        current_title = await self.client.get_session_title(session_id)
        if session_id in state.ai_titled:
            return

        if not should_modify_title(current_title):
            logger.debug(f"Session {session_id} has custom title, skipping: {current_title}")
            state.mark_done(session_id)
            return

        budget = self.settings.max_length - marker_length(KEYWORD_MARKER)
        keyword_title = generate_fallback_title(text, budget)
        if not keyword_title:
            logger.debug(f"Could not generate keyword title for session {session_id}")
            return

        full_title = with_marker(KEYWORD_MARKER, keyword_title)
        intent = infer_intent(text) or "general"
        if not await self.client.update_session_title(session_id, full_title):
            return

        logger.info(f"Set keyword title: {full_title} (intent: {intent})")
        if session_id not in state.ai_titled:
            state.keyword_titled.add(session_id)

    # =========================================================================
    # Phase 2: AI title
    # =========================================================================

    async def handle_session_idle(self, session_id: str) -> None:
        """Replace the session's title with a model-generated one."""
        state = self.state
        if session_id in state.ai_titled or session_id in state.pending_ai:
            return

        state.pending_ai.add(session_id)
        try:
            await self._write_ai_title(session_id)
        except Exception:
            logger.exception(f"Failed to generate AI title for session {session_id}")
        finally:
            state.pending_ai.discard(session_id)

    async def _write_ai_title(self, session_id: str) -> None:
        state = self.state
        current_title = await self.client.get_session_title(session_id)
        if not should_modify_title(current_title):
            logger.debug(f"Session {session_id} has custom title, skipping AI: {current_title}")
            state.mark_done(session_id)
            return

        turn = ConversationTurn.from_messages(
            await self.client.list_messages(session_id)
        )
        if not turn.user_text:
            self._record_idle_miss(session_id)
            return
        state.idle_misses.pop(session_id, None)

        logger.debug(f"Generating AI title for session {session_id}")
        logger.debug(f"User: {turn.user_text[:100]}...")
        if turn.assistant_text:
            logger.debug(f"Assistant: {turn.assistant_text[:100]}...")

        model = await self.resolve_model()
        ai_title = await generate_ai_title(
            self.client,
            turn.user_text,
            turn.assistant_text,
            model,
            self.settings.max_length - marker_length(AI_MARKER),
        )

        if ai_title:
            current_title = await self.client.get_session_title(session_id)
            if not should_modify_title(current_title):
                logger.debug(f"Session {session_id} was renamed during generation: {current_title}")
                state.mark_done(session_id)
                return
            full_title = with_marker(AI_MARKER, ai_title)
            if await self.client.update_session_title(session_id, full_title):
                logger.info(f"Set AI title: {full_title}")
                state.mark_done(session_id)
        elif session_id in state.keyword_titled:
            logger.debug(f"AI title generation failed for {session_id}, keeping keyword title")
            state.mark_done(session_id)
        else:
            logger.debug(f"AI title generation failed for session {session_id}")

    def _record_idle_miss(self, session_id: str) -> None:
        misses = self.state.idle_misses.get(session_id, 0) + 1
        limit = self.settings.max_idle_retries
        if limit > 0 and misses >= limit:
            logger.debug(f"No user message for session {session_id} after {misses} idle events, giving up")
            self.state.mark_done(session_id)
        else:
            logger.debug(f"No user message found for session {session_id}")
            self.state.idle_misses[session_id] = misses

    # =========================================================================
    # Model choice
    # =========================================================================

    async def resolve_model(self) -> ModelRef | None:
        """The cached model choice, looked up once on first use."""
        async with self._model_lock:
            if not self.state.model_resolved:
                try:
                    self.state.model = await find_cheapest_model(self.client, self.settings)
                except Exception:
                    logger.exception("Model lookup failed, using the host default model")
                    self.state.model = None
                self.state.model_resolved = True
                if self.state.model:
                    logger.debug(f"Selected model: {self.state.model}")
        return self.state.model

    def snapshot(self) -> dict[str, int | str | None]:
        """Counters for the health endpoint."""
        state = self.state
        return {
            "keyword_titled": len(state.keyword_titled),
            "ai_titled": len(state.ai_titled),
            "pending_ai": len(state.pending_ai),
            "model": str(state.model) if state.model else None,
        }
