"""
Exception hierarchy for the portal.

Pages catch PortalError and show its message; the detail is only logged.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

logger = logging.getLogger(__name__)


class PortalError(RuntimeError):
    """Base exception for all portal errors."""

    def __init__(self, message: str, *, detail: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(PortalError):
    """Form input rejected before any backend call."""

    def __init__(self, errors: Dict[str, str]) -> None:
        first = next(iter(errors.values()), "Invalid input")
        super().__init__(first)
        self.errors = errors


class AuthError(PortalError):
    pass


class AccessDenied(AuthError):
    pass


class NotFoundError(PortalError):
    pass


class BackendError(PortalError):
    """A hosted auth, table or storage call failed."""


def describe_error(exc: BaseException) -> str:
    # postgrest APIError carries message/details, storage errors carry message
    for attr in ("message", "details"):
        value = getattr(exc, attr, None)
        if value:
            return str(value)
    return str(exc) or exc.__class__.__name__


@contextmanager
def backend_call(action: str) -> Iterator[None]:
    try:
        yield
    except PortalError:
        raise
    except Exception as exc:
        detail = describe_error(exc)
        logger.error("Failed to %s: %s", action, detail)
        raise BackendError(f"Failed to {action}", detail=detail) from exc
