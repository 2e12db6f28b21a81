"""FastAPI application entry point for the autotitle sidecar."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from .auth import rest_auth
from .config import DebugMode, Settings, load_settings
from .events.handler import EventHandler
from .events.payloads import HostEvent
from .events.stream import EventStream
from .host.client import HostClient
from .log import attach_host_sink, configure_logging, detach_host_sink
from .titles.controller import TitleController

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, client: HostClient | None = None) -> FastAPI:
    """Build the app; the host client is created at startup unless given."""
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        configure_logging(settings)
        host = client or HostClient(
            settings.host_url,
            directory=settings.directory,
            timeout=settings.request_timeout,
        )
        sink = attach_host_sink(host) if settings.debug_mode != DebugMode.OFF else None

        controller = TitleController(host, settings)
        events = EventHandler(controller)
        stream = EventStream(host, events)
        app.state.controller = controller
        app.state.events = events
        app.state.stream = stream

        if settings.disabled:
            logger.info("Plugin is disabled via OPENCODE_AUTOTITLE_DISABLED")
        else:
            logger.info(f"AutoTitle plugin initialized for host {settings.host_url}")
            if settings.event_stream:
                stream.start()

        yield

        logger.info("Shutting down autotitle")
        await stream.stop()
        await events.cleanup()
        if sink:
            await detach_host_sink(sink)
        if client is None:
            await host.close()

    app = FastAPI(
        title="opencode-autotitle",
        description="Automatic titles for opencode sessions",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        if settings.disabled:
            return {"status": "disabled"}
        return {
            "status": "healthy",
            "subscribed": app.state.stream.running,
            "sessions": app.state.controller.snapshot(),
        }

    @app.post("/events", dependencies=[Depends(rest_auth)])
    async def push_event(event: HostEvent):
        """Accept an event pushed by the host instead of streamed."""
        if settings.disabled:
            return {"accepted": False}
        app.state.events.dispatch(event.model_dump())
        return {"accepted": True}

    return app


app = create_app()


def run():
    """Run the application using uvicorn."""
    import uvicorn

    settings = app.state.settings
    uvicorn.run(
        "autotitle.main:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    run()
