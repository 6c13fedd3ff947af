"""Telegram Bot API controller: the concrete log transport."""

from __future__ import annotations

import io
import logging
from datetime import timedelta
from typing import Any, Awaitable, Optional, TypeVar

import httpx
from telegram import Message
from telegram import error as tg_error

from chatdrive.auth import BotClient, BotCredentials
from chatdrive.config import StoreSettings
from chatdrive.errors import (
    ApiError,
    ApiErrorInfo,
    AuthError,
    ChatDriveError,
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    NetworkError,
    RateLimitError,
    RejectedPayloadError,
    TransportError,
    map_api_error,
)
from chatdrive.models import EntryKind, RawEntry
from chatdrive.util.ids import message_id_to_entry_id
from chatdrive.util.mime import guess_mime_type

from .fields import ALLOWED_UPDATES, DOCUMENT_FIELD, MAX_PAGE_SIZE, SEND_DOCUMENT
from .transport import ByteProgressCallback

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TelegramBotController:
    """
    Bot API transport for one storage chat.

    Notes:
        - Text entries, page fetches and file resolution go through
          python-telegram-bot's Bot.
        - Documents are posted with httpx directly, so that progress can be
          reported per chunk of the request body.
        - No call is retried here; an append that is retried blindly may
          create a duplicate entry.
    """

    def __init__(
        self,
        credentials: BotCredentials,
        *,
        settings: Optional[StoreSettings] = None,
    ) -> None:
        self._settings = settings or StoreSettings()
        client = BotClient(credentials, settings=self._settings)
        self._chat_id = credentials.chat_id
        self._method_base_url = client.method_base_url
        self._bot = client.build_bot()
        self._http = client.build_upload_client()

    @classmethod
    def from_bot(
        cls,
        bot: Any,
        chat_id: int,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        method_base_url: str = "https://api.telegram.org/botTEST",
        settings: Optional[StoreSettings] = None,
    ) -> "TelegramBotController":
        """Create controller from pre-built clients (useful for tests)."""
        obj = cls.__new__(cls)
        obj._settings = settings or StoreSettings()
        obj._chat_id = chat_id
        obj._method_base_url = method_base_url
        obj._bot = bot
        obj._http = http_client if http_client is not None else httpx.AsyncClient()
        return obj

    # ----------------------------
    # Lifecycle
    # ----------------------------
    async def initialize(self) -> None:
        await self._call(self._bot.initialize())

    async def shutdown(self) -> None:
        try:
            await self._bot.shutdown()
        finally:
            await self._http.aclose()

    async def __aenter__(self) -> "TelegramBotController":
        try:
            await self.initialize()
        except BaseException:
            await self.shutdown()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()

    # ----------------------------
    # LogTransport
    # ----------------------------
    async def append_text_entry(self, text: str) -> RawEntry:
        message = await self._call(self._bot.send_message(chat_id=self._chat_id, text=text))
        entry = _message_to_raw_entry(message)
        if entry is None or entry.kind is not EntryKind.TEXT:
            raise ApiError("sendMessage returned no text message")
        return entry

    async def append_binary_entry(
        self,
        payload: bytes,
        display_name: str,
        caption: str,
        on_progress: Optional[ByteProgressCallback] = None,
    ) -> RawEntry:
        if not isinstance(payload, (bytes, bytearray, memoryview)):
            raise InvalidArgumentError("payload must be bytes")

        data = {"chat_id": str(self._chat_id)}
        if caption:
            data["caption"] = caption
        stream = _ProgressStream(
            bytes(payload),
            on_progress,
            chunk_size=self._settings.upload_chunk_size,
        )
        files = {DOCUMENT_FIELD: (display_name, stream, guess_mime_type(display_name))}

        logger.debug("Uploading %s (%d bytes)", display_name, len(payload))
        try:
            response = await self._http.post(
                f"{self._method_base_url}/{SEND_DOCUMENT}",
                data=data,
                files=files,
            )
        except httpx.TimeoutException as exc:
            raise NetworkError("Upload timed out", cause=exc) from exc
        except httpx.TransportError as exc:
            raise NetworkError("Upload connection failed", cause=exc) from exc

        result = _unwrap_api_response(response)
        message = Message.de_json(result, self._bot)
        entry = _message_to_raw_entry(message)
        if entry is None or entry.kind is not EntryKind.BINARY:
            raise ApiError("sendDocument returned no document", details={"result": result})
        return entry

    async def fetch_recent_entries(
        self,
        page_size_limit: int,
        *,
        offset: Optional[int] = None,
    ) -> list[RawEntry]:
        """
        Return the most recent window of entries for the storage chat.

        Notes:
            - The Bot API caps the window at 100 updates.
            - Passing offset confirms every earlier update on the server side;
              it is an explicit cursor, never set implicitly.
        """
        limit = max(1, min(MAX_PAGE_SIZE, page_size_limit))
        updates = await self._call(
            self._bot.get_updates(
                offset=offset,
                limit=limit,
                timeout=0,
                allowed_updates=list(ALLOWED_UPDATES),
            )
        )

        entries: list[RawEntry] = []
        for update in updates:
            message = update.message or update.channel_post
            if message is None or message.chat_id != self._chat_id:
                continue
            entry = _message_to_raw_entry(message)
            if entry is not None:
                entries.append(entry)

        logger.debug("Fetched %d updates, %d entries", len(updates), len(entries))
        return entries

    async def resolve_blob_url(self, ref: str) -> str:
        tg_file = await self._call(self._bot.get_file(ref))
        if not tg_file.file_path:
            raise ApiError("getFile returned no file_path", details={"file_id": ref})
        return tg_file.file_path

    # ----------------------------
    # Internals
    # ----------------------------
    async def _call(self, awaitable: Awaitable[T]) -> T:
        try:
            return await awaitable
        except ChatDriveError:
            raise
        except Exception as exc:
            raise _map_exception(exc) from exc


class _ProgressStream(io.BytesIO):
    """
    In-memory payload that reports how much of it has been read.

    httpx pulls multipart file content through read(); each read is one
    chunk handed to the connection. Reads are capped at chunk_size.
    """

    def __init__(
        self,
        payload: bytes,
        on_progress: Optional[ByteProgressCallback],
        *,
        chunk_size: int,
    ) -> None:
        super().__init__(payload)
        self._total = len(payload)
        self._on_progress = on_progress
        self._chunk_size = chunk_size

    def read(self, size: Optional[int] = -1) -> bytes:
        if size is None or size < 0 or size > self._chunk_size:
            size = self._chunk_size
        chunk = super().read(size)
        if self._on_progress is not None and self._total:
            self._on_progress(self.tell(), self._total)
        return chunk


def _message_to_raw_entry(message: Message) -> Optional[RawEntry]:
    document = message.document
    if document is not None:
        thumbnail = document.thumbnail
        return RawEntry(
            kind=EntryKind.BINARY,
            entry_id=document.file_id,
            mime_type=document.mime_type,
            display_name=document.file_name,
            caption=message.caption,
            blob_ref=document.file_id,
            preview_ref=thumbnail.file_id if thumbnail is not None else None,
            created_time=message.date,
        )

    if message.text is not None:
        return RawEntry(
            kind=EntryKind.TEXT,
            entry_id=message_id_to_entry_id(message.message_id),
            text=message.text,
            created_time=message.date,
        )

    return None


def _unwrap_api_response(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError as exc:
        raise ApiError(
            "Bot API returned a non-JSON response",
            details={"status_code": response.status_code},
            cause=exc,
        ) from exc

    if not isinstance(body, dict):
        raise ApiError(
            "Bot API returned an unexpected payload",
            details={"status_code": response.status_code},
        )

    if body.get("ok") and isinstance(body.get("result"), dict):
        return body["result"]

    params = body.get("parameters") or {}
    extra: dict[str, Any] = {}
    if isinstance(params.get("migrate_to_chat_id"), int):
        extra["migrate_to_chat_id"] = params["migrate_to_chat_id"]

    error_code = body.get("error_code")
    raise map_api_error(
        ApiErrorInfo(
            error_code=error_code if isinstance(error_code, int) else response.status_code,
            description=body.get("description"),
            retry_after=params.get("retry_after") if isinstance(params.get("retry_after"), int) else None,
            details=extra or None,
        )
    )


def _retry_after_seconds(value: Any) -> Optional[int]:
    if isinstance(value, timedelta):
        return int(value.total_seconds())
    if isinstance(value, (int, float)):
        return int(value)
    return None


def _map_exception(exc: Exception) -> TransportError:
    # Subclass checks first: BadRequest and TimedOut derive from NetworkError.
    if isinstance(exc, tg_error.RetryAfter):
        return RateLimitError(
            str(exc),
            details={"retry_after": _retry_after_seconds(exc.retry_after)},
            cause=exc,
        )
    if isinstance(exc, tg_error.InvalidToken):
        return AuthError(str(exc), cause=exc)
    if isinstance(exc, tg_error.Forbidden):
        return ForbiddenError(str(exc), cause=exc)
    if isinstance(exc, tg_error.BadRequest):
        return RejectedPayloadError(str(exc), cause=exc)
    if isinstance(exc, tg_error.Conflict):
        return ConflictError(str(exc), cause=exc)
    if isinstance(exc, tg_error.ChatMigrated):
        return ApiError(
            str(exc),
            details={"migrate_to_chat_id": exc.new_chat_id},
            cause=exc,
        )
    if isinstance(exc, tg_error.NetworkError):
        return NetworkError(str(exc), cause=exc)
    if isinstance(exc, tg_error.TelegramError):
        return ApiError(str(exc), cause=exc)
    if isinstance(exc, (httpx.TransportError, OSError, TimeoutError)):
        return NetworkError("Network error", cause=exc)

    return ApiError("Bot API error", cause=exc)
