"""Access token verification."""

from dataclasses import dataclass
from typing import Protocol

from glycemic_tracker.domain.errors import NotAuthenticated
from glycemic_tracker.domain.models import AuthUser
from glycemic_tracker.services.boundary import StoreGuard


class AuthGateway(Protocol):
    """Interface to the identity provider."""

    def authenticate(self, access_token: str) -> AuthUser | None:
        """Return the user owning the token, or None when it is rejected."""


@dataclass
class AuthService:
    """Service that resolves bearer tokens to users."""

    gateway: AuthGateway
    guard: StoreGuard
    login_url: str

    async def require_user(self, access_token: str | None) -> AuthUser:
        """Return the authenticated user or raise ``NotAuthenticated``."""
        if not access_token:
            raise NotAuthenticated(self.login_url)
        user = await self.guard.read(
            lambda: self.gateway.authenticate(access_token), action="authenticate"
        )
        if user is None:
            raise NotAuthenticated(self.login_url)
        return user
