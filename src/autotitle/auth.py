"""Token authentication for the pushed-event endpoint."""

import logging
from typing import Annotated

from fastapi import Header, HTTPException, Request, status

logger = logging.getLogger(__name__)


def verify_token(expected: str | None, token: str | None) -> bool:
    """Check a token against the configured one; no token configured means open."""
    if not expected:
        return True
    is_valid = token == expected
    if not is_valid:
        logger.warning("Event push auth failed: invalid token")
    return is_valid


async def rest_auth(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """Authenticate REST requests with "Bearer <token>" or a bare token."""
    token = None
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            token = parts[1]
        else:
            token = authorization

    if not verify_token(request.app.state.settings.auth_token, token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
        )
