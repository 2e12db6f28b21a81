"""Logging setup for the debug modes and the host's log sink."""

import asyncio
import logging
import sys
from datetime import datetime, timezone

from .config import DebugMode, Settings
from .host.client import HostClient

LOGGER_NAME = "autotitle"
SERVICE_NAME = "autotitle"
LOG_FORMAT = "[autotitle] %(asctime)s %(levelname)s: %(message)s"


def _file_handler(settings: Settings) -> logging.Handler | None:
    path = settings.debug_file
    if path is None:
        return None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    except OSError:
        return None
    handler.stream.write(
        f"[autotitle] Log started at {datetime.now(timezone.utc).isoformat()}\n"
    )
    return handler


def configure_logging(settings: Settings) -> logging.Logger:
    """Attach a stderr or file handler to the package logger.

    With debug off only warnings and errors are written, to stderr.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if not isinstance(handler, HostLogHandler):
            logger.removeHandler(handler)
            handler.close()

    mode = settings.debug_mode
    handler = _file_handler(settings) if mode == DebugMode.FILE else None
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.WARNING if mode == DebugMode.OFF else logging.DEBUG)
    logger.propagate = False
    return logger


class HostLogHandler(logging.Handler):
    """Forward records to the host's structured log. Best effort."""

    def __init__(self, client: HostClient, level: int = logging.NOTSET):
        super().__init__(level)
        self.client = client
        self._tasks: set[asyncio.Task] = set()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        level = record.levelname.lower()
        if level == "warning":
            level = "warn"
        elif level == "critical":
            level = "error"
        task = loop.create_task(self.client.log(SERVICE_NAME, level, record.getMessage()))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
        self._tasks.clear()


def attach_host_sink(client: HostClient) -> HostLogHandler:
    handler = HostLogHandler(client)
    logging.getLogger(LOGGER_NAME).addHandler(handler)
    return handler


async def detach_host_sink(handler: HostLogHandler) -> None:
    """Stop forwarding and wait for records already handed to the host."""
    logging.getLogger(LOGGER_NAME).removeHandler(handler)
    await handler.drain()
