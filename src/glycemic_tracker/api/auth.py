"""Bearer token dependency for user-scoped routes."""

from fastapi import Header, Request

from glycemic_tracker.containers import AppContainer
from glycemic_tracker.domain.models import AuthUser


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the app."""
    return request.app.state.container


async def require_user(
    request: Request, authorization: str | None = Header(default=None)
) -> AuthUser:
    """Resolve the ``Authorization: Bearer`` header to a user."""
    container = get_container(request)
    return await container.auth_service.require_user(_bearer_token(authorization))


def _bearer_token(header: str | None) -> str | None:
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None
