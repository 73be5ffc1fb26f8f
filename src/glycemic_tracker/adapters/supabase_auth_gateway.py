"""Supabase Auth gateway."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import AuthApiError, Client

from glycemic_tracker.domain.models import AuthUser
from glycemic_tracker.services.auth import AuthGateway

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Verify access tokens against Supabase Auth."""

    client: Client

    def authenticate(self, access_token: str) -> AuthUser | None:
        """Return the token's user, or None when Supabase rejects it."""
        try:
            response = self.client.auth.get_user(access_token)
        except AuthApiError as exc:
            _logger.info("Access token rejected (status=%s)", exc.status)
            return None
        if response is None or response.user is None:
            return None
        return AuthUser(id=UUID(str(response.user.id)), email=response.user.email)
