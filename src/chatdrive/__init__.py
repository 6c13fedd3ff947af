"""chatdrive public API."""

from __future__ import annotations

from chatdrive.auth import BotClient, BotCredentials
from chatdrive.codec import (
    decode_entry,
    encode_file_caption,
    encode_folder_text,
)
from chatdrive.config import StoreSettings, setup_logging
from chatdrive.controller import InMemoryLogTransport, LogTransport, TelegramBotController
from chatdrive.coordinator import PlacementCoordinator
from chatdrive.errors import (
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
from chatdrive.manager import ChatDriveManager
from chatdrive.models import (
    BatchUploadResult,
    EntryKind,
    FileRecord,
    FolderRecord,
    RawEntry,
    Record,
    RecordKind,
    UploadResult,
)
from chatdrive.reader import LogReader, PageIndex
from chatdrive.view import (
    FolderNavigator,
    FolderView,
    RenderItem,
    RendererKind,
    build_render_items,
    classify_record,
)

__all__ = [
    # High-level
    "ChatDriveManager",
    "PlacementCoordinator",
    "LogReader",
    "PageIndex",
    "FolderNavigator",
    "FolderView",
    # Config / Auth
    "BotCredentials",
    "BotClient",
    "StoreSettings",
    "setup_logging",
    # Transport
    "LogTransport",
    "TelegramBotController",
    "InMemoryLogTransport",
    # Codec
    "encode_file_caption",
    "encode_folder_text",
    "decode_entry",
    # Models
    "EntryKind",
    "RawEntry",
    "RecordKind",
    "FileRecord",
    "FolderRecord",
    "Record",
    "UploadResult",
    "BatchUploadResult",
    # Rendering
    "RendererKind",
    "RenderItem",
    "classify_record",
    "build_render_items",
    # Errors
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
