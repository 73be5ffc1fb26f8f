"""Domain models for the glycemic tracker."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID


@dataclass(frozen=True)
class AuthUser:
    """Represents a user authenticated by the identity provider."""

    id: UUID
    email: str | None = None


class StoreMode(StrEnum):
    """Which persistence variant the container was built with."""

    ONLINE = "online"
    OFFLINE = "offline"
