"""Public error exports for chatdrive."""

from __future__ import annotations

from .exceptions import (
    ApiError,
    ApiErrorInfo,
    AuthError,
    ChatDriveError,
    ConflictError,
    CreateFailedError,
    DecodeSkipError,
    FetchFailedError,
    ForbiddenError,
    InvalidArgumentError,
    NetworkError,
    NotFoundError,
    OperationError,
    RateLimitError,
    RejectedPayloadError,
    TransportError,
    UploadFailedError,
    map_api_error,
)

__all__ = [
    "ChatDriveError",
    "InvalidArgumentError",
    "TransportError",
    "NetworkError",
    "RateLimitError",
    "AuthError",
    "ForbiddenError",
    "RejectedPayloadError",
    "NotFoundError",
    "ConflictError",
    "ApiError",
    "DecodeSkipError",
    "OperationError",
    "FetchFailedError",
    "CreateFailedError",
    "UploadFailedError",
    "ApiErrorInfo",
    "map_api_error",
]
