"""Exception hierarchy and Bot API error mapping for chatdrive."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Optional


class ChatDriveError(Exception):
    """
    Base exception for chatdrive.

    Attributes:
        details: Optional structured information (e.g., error code, retry_after).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class InvalidArgumentError(ChatDriveError):
    """Raised when caller-supplied arguments are rejected before any I/O."""


# ----------------------------
# Transport errors
# ----------------------------
class TransportError(ChatDriveError):
    """Base for failures reported by the log transport."""

    kind: ClassVar[str] = "api"


class NetworkError(TransportError):
    """Raised when network/timeout issues prevent the request."""

    kind = "network"


class RateLimitError(TransportError):
    """Raised when flood control kicks in (HTTP 429). See details['retry_after']."""

    kind = "rate_limit"


class AuthError(TransportError):
    """Raised when the bot token is rejected (HTTP 401)."""

    kind = "auth"


class ForbiddenError(TransportError):
    """Raised when the bot may not act in the chat (HTTP 403)."""

    kind = "forbidden"


class RejectedPayloadError(TransportError):
    """Raised when the request itself is rejected (HTTP 400, 413)."""

    kind = "rejected"


class NotFoundError(TransportError):
    """Raised when the referenced object does not exist (HTTP 404)."""

    kind = "not_found"


class ConflictError(TransportError):
    """Raised on HTTP 409, e.g. another getUpdates consumer or a webhook."""

    kind = "conflict"


class ApiError(TransportError):
    """Raised for unclassified API errors (5xx, malformed responses, etc.)."""

    kind = "api"


# ----------------------------
# Operation errors
# ----------------------------
class DecodeSkipError(ChatDriveError):
    """Raised by the codec for a single entry that cannot become a record."""


class OperationError(ChatDriveError):
    """
    Base for failed store operations.

    The transport error is kept as `cause` and its details are copied, so
    callers can branch on `kind` without unwrapping.
    """

    @property
    def kind(self) -> str:
        if isinstance(self.cause, TransportError):
            return self.cause.kind
        return "api"

    @classmethod
    def from_transport_error(
        cls,
        message: str,
        exc: TransportError,
        **extra: Any,
    ) -> OperationError:
        details: dict[str, Any] = dict(exc.details)
        details.update(extra)
        details.setdefault("error_type", exc.__class__.__name__)
        return cls(f"{message}: {exc}", details=details, cause=exc)


class FetchFailedError(OperationError):
    """Raised when a page fetch (or URL resolution for it) fails."""


class CreateFailedError(OperationError):
    """Raised when appending a folder declaration fails."""


class UploadFailedError(OperationError):
    """Raised when appending a document (or resolving its URL) fails."""


@dataclass(frozen=True)
class ApiErrorInfo:
    """Lightweight Bot API error information for mapping to chatdrive exceptions."""

    error_code: int
    description: str | None = None
    retry_after: int | None = None
    details: dict[str, Any] | None = None


def map_api_error(
    info: ApiErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> TransportError:
    """
    Map a Bot API error to a chatdrive exception.

    Policy:
        - 400/413 -> RejectedPayloadError
        - 401 -> AuthError
        - 403 -> ForbiddenError
        - 404 -> NotFoundError
        - 409 -> ConflictError
        - 429 -> RateLimitError
        - 5xx -> ApiError
        - otherwise -> ApiError
    """
    details: dict[str, Any] = {
        "error_code": info.error_code,
        "description": info.description,
    }
    if info.retry_after is not None:
        details["retry_after"] = info.retry_after
    if info.details:
        details.update(info.details)

    message = info.description or f"Bot API error {info.error_code}"

    if info.error_code in (400, 413):
        return RejectedPayloadError(message, details=details, cause=cause)
    if info.error_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.error_code == 403:
        return ForbiddenError(message, details=details, cause=cause)
    if info.error_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.error_code == 409:
        return ConflictError(message, details=details, cause=cause)
    if info.error_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)
