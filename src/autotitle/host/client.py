"""HTTP client for the host runtime's session, provider and event APIs."""

import contextlib
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx
from pydantic import ValidationError

from .models import Message, ModelRef, ProviderCatalogEntry, SessionInfo

logger = logging.getLogger(__name__)


class HostError(Exception):
    """A host request failed or returned an unusable body."""


def _unwrap(body: Any) -> Any:
    """Strip the optional ``{"data": ...}`` envelope some host versions add."""
    if isinstance(body, dict) and body.get("data") is not None:
        return body["data"]
    return body


class HostClient:
    """Async client for the host runtime.

    Read and update operations fail soft: errors are logged and a degraded
    value is returned. Scratch-session operations and generation requests
    raise HostError so callers can decide how to degrade.
    """

    def __init__(
        self,
        base_url: str,
        *,
        directory: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self._params = {"directory": directory} if directory else {}
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "HostClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(
                method, path, params=self._params, **kwargs
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise HostError(f"{method} {path} failed: {e}") from e

        if not response.content:
            return None
        try:
            return _unwrap(response.json())
        except ValueError as e:
            raise HostError(f"{method} {path} returned invalid JSON") from e

    # =========================================================================
    # Sessions
    # =========================================================================

    async def get_session(self, session_id: str) -> SessionInfo | None:
        """Fetch a session; None when it cannot be read."""
        try:
            body = await self._request("GET", f"/session/{session_id}")
            return SessionInfo.model_validate(body)
        except (HostError, ValidationError) as e:
            logger.debug(f"Failed to fetch session {session_id}: {e}")
            return None

    async def get_session_title(self, session_id: str) -> str | None:
        session = await self.get_session(session_id)
        return session.title if session else None

    async def list_messages(self, session_id: str) -> list[Message]:
        """List a session's messages in order; empty when they cannot be read."""
        try:
            body = await self._request("GET", f"/session/{session_id}/message")
        except HostError as e:
            logger.debug(f"Failed to list messages for {session_id}: {e}")
            return []

        messages: list[Message] = []
        for item in body if isinstance(body, list) else []:
            try:
                messages.append(Message.model_validate(item))
            except ValidationError:
                continue
        return messages

    async def update_session_title(self, session_id: str, title: str) -> bool:
        """Set a session's title. Failures are logged, not retried."""
        try:
            await self._request("PATCH", f"/session/{session_id}", json={"title": title})
        except HostError as e:
            logger.error(f"Failed to update session title: {e}")
            return False
        logger.debug(f"Updated session {session_id} title to: {title}")
        return True

    async def create_session(self, title: str) -> str:
        """Create a session and return its id."""
        body = await self._request("POST", "/session", json={"title": title})
        session_id = body.get("id") if isinstance(body, dict) else None
        if not session_id:
            raise HostError(f"Session create returned no id: {str(body)[:200]}")
        return session_id

    async def delete_session(self, session_id: str) -> None:
        await self._request("DELETE", f"/session/{session_id}")

    async def prompt(
        self, session_id: str, text: str, model: ModelRef | None = None
    ) -> Any:
        """Send a single text prompt and return the assistant response body."""
        body: dict[str, Any] = {"parts": [{"type": "text", "text": text}]}
        if model:
            body["model"] = model.model_dump(by_alias=True)
        return await self._request(
            "POST", f"/session/{session_id}/message", json=body
        )

    # =========================================================================
    # Providers
    # =========================================================================

    async def list_connected_providers(self) -> list[str]:
        """Ids of providers the user is logged in to."""
        try:
            body = await self._request("GET", "/provider")
        except HostError as e:
            logger.debug(f"Failed to fetch connected providers: {e}")
            return []
        connected = body.get("connected") if isinstance(body, dict) else None
        return [p for p in connected or [] if isinstance(p, str)]

    async def list_providers_with_models(self) -> list[ProviderCatalogEntry]:
        """The full provider catalog with each provider's models."""
        try:
            body = await self._request("GET", "/config/providers")
        except HostError as e:
            logger.debug(f"Failed to fetch providers: {e}")
            return []

        providers = body.get("providers") if isinstance(body, dict) else None
        entries: list[ProviderCatalogEntry] = []
        for item in providers or []:
            try:
                entries.append(ProviderCatalogEntry.model_validate(item))
            except ValidationError:
                continue
        return entries

    # =========================================================================
    # Logging and events
    # =========================================================================

    async def log(self, service: str, level: str, message: str) -> None:
        """Write to the host's structured log. Best effort."""
        with contextlib.suppress(HostError, RuntimeError):
            await self._request(
                "POST",
                "/log",
                json={"service": service, "level": level, "message": message},
            )

    async def event_lines(self) -> AsyncIterator[str]:
        """Yield raw lines of the host's server-sent event stream."""
        try:
            async with self._client.stream(
                "GET", "/event", params=self._params, timeout=None
            ) as response:
                response.raise_for_status()
                async for line in response.aiter_lines():
                    yield line
        except httpx.HTTPError as e:
            raise HostError(f"Event stream failed: {e}") from e
