"""Application error taxonomy.

Every error carries the HTTP status it maps to, so the API layer can render
it without knowing which service raised it.
"""


class AppError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500

    def __init__(self, message: str, details: dict[str, object] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidInput(AppError):
    """Raised when a caller violates an operation's input contract."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, details={"field": field} if field else None)


class UpstreamUnavailable(AppError):
    """Raised when the AI provider or the store is unreachable or timed out."""

    status_code = 503

    def __init__(self, service: str, action: str):
        super().__init__(
            f"{service} unavailable during {action}",
            details={"service": service, "action": action},
        )


class NotAuthenticated(AppError):
    """Raised when a user-scoped call arrives without an active session."""

    status_code = 401

    def __init__(self, login_url: str):
        super().__init__("Authentication required", details={"login_url": login_url})
