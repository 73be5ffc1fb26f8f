"""Timeout race around blocking store calls."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from glycemic_tracker.domain.errors import AppError, UpstreamUnavailable

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")

_logger = logging.getLogger(__name__)


@dataclass
class StoreGuard:
    """Run store calls in a worker thread, bounded by a fixed timeout.

    Any failure surfaces as ``UpstreamUnavailable`` so callers can degrade to
    local or default data.
    """

    read_timeout_seconds: float = 5.0
    write_timeout_seconds: float = 10.0
    service: str = "store"

    async def read(self, func: "Callable[[], T]", *, action: str) -> T:
        """Run a read call."""
        return await self._call(func, self.read_timeout_seconds, action)

    async def read_or_default(
        self, func: "Callable[[], T]", *, default: T, action: str
    ) -> T:
        """Run a read call, returning ``default`` when the store is unavailable."""
        try:
            return await self.read(func, action=action)
        except UpstreamUnavailable:
            return default

    async def write(self, func: "Callable[[], T]", *, action: str) -> T:
        """Run a write call."""
        return await self._call(func, self.write_timeout_seconds, action)

    async def _call(
        self, func: "Callable[[], T]", timeout_seconds: float, action: str
    ) -> T:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func), timeout=timeout_seconds
            )
        except TimeoutError as exc:
            _logger.warning(
                "Store %s timed out after %ss", action, timeout_seconds
            )
            raise UpstreamUnavailable(self.service, action) from exc
        except AppError:
            raise
        except Exception as exc:
            _logger.warning(
                "Store %s failed (status=%s): %s",
                action,
                _status_code_from_exception(exc),
                exc,
            )
            raise UpstreamUnavailable(self.service, action) from exc


def _status_code_from_exception(exc: Exception) -> str:
    """Extract an HTTP-ish status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None) or getattr(
        exc, "code", None
    )
    if isinstance(status_code, int | str) and status_code:
        return str(status_code)
    return "n/a"
