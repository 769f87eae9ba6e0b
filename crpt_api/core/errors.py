"""Application-level exception types.

This module defines the domain errors raised by the limiter, serializer,
submitter and client, so callers can tell each failure mode apart instead of
receiving an empty or null result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and callers.

    Fields are optional to keep the shape flexible while encouraging
    consistent keys across the codebase.
    """

    code: str
    message: str
    hint: str
    limit: int
    window_seconds: float
    http_method: str
    url: str
    path: str
    exception_type: str
    submission_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for client/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ConfigurationAppError(AppError):
    """Raised when the client or limiter is configured with invalid values."""


class ValidationAppError(AppError):
    """Raised when call arguments are invalid."""


class CancellationAppError(AppError):
    """Raised when a caller is cancelled while waiting for a permit."""


class ClosedAppError(AppError):
    """Raised when an operation is attempted after shutdown."""


class SerializationAppError(AppError):
    """Raised when a document cannot be serialized or deserialized."""


class TransportAppError(AppError):
    """Raised when the HTTP submission fails at the network/protocol level."""
