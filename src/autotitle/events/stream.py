"""Subscription to the host's server-sent event stream."""

import asyncio
import contextlib
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

from ..host.client import HostClient, HostError
from .handler import EventHandler

logger = logging.getLogger(__name__)


async def parse_sse(lines: AsyncIterable[str]) -> AsyncIterator[Any]:
    """Decode ``data:`` lines into JSON events; a blank line ends an event."""
    data: list[str] = []
    async for line in lines:
        if line.startswith("data:"):
            data.append(line[5:].lstrip())
            continue
        if line.strip() or not data:
            continue

        payload = "\n".join(data)
        data = []
        try:
            yield json.loads(payload)
        except json.JSONDecodeError:
            logger.debug(f"Skipping malformed event: {payload[:200]}")

    if data:
        with contextlib.suppress(json.JSONDecodeError):
            yield json.loads("\n".join(data))


class EventStream:
    """Keeps one subscription open, reconnecting with backoff."""

    def __init__(
        self,
        client: HostClient,
        handler: EventHandler,
        *,
        initial_backoff: float = 1.0,
        max_backoff: float = 30.0,
    ):
        self.client = client
        self.handler = handler
        self.initial_backoff = initial_backoff
        self.max_backoff = max_backoff
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Subscribe in the background."""
        if not self.running:
            self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def run(self) -> None:
        """Consume events until cancelled."""
        backoff = self.initial_backoff
        while True:
            try:
                logger.info(f"Subscribing to events at {self.client.base_url}")
                async for event in parse_sse(self.client.event_lines()):
                    backoff = self.initial_backoff
                    self.handler.dispatch(event)
                logger.info("Event stream closed by host")
            except HostError as e:
                logger.warning(f"Event stream error: {e}")

            await asyncio.sleep(backoff)
            backoff = min(backoff * 2, self.max_backoff)
