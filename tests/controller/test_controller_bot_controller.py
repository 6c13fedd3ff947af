import json
import unittest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

import httpx
from telegram import Chat, Document, Message, PhotoSize, Update
from telegram import error as tg_error

from chatdrive.config import StoreSettings
from chatdrive.controller.bot_controller import (
    TelegramBotController,
    _map_exception,
    _message_to_raw_entry,
)
from chatdrive.errors import (
    ApiError,
    AuthError,
    ConflictError,
    ForbiddenError,
    NetworkError,
    RateLimitError,
    RejectedPayloadError,
)
from chatdrive.models import EntryKind

CHAT_ID = -1001
DATE = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _text_message(message_id: int, text: str, chat_id: int = CHAT_ID) -> Message:
    return Message(
        message_id=message_id,
        date=DATE,
        chat=Chat(id=chat_id, type=Chat.CHANNEL),
        text=text,
    )


def _document_message(file_id: str, caption=None, chat_id: int = CHAT_ID) -> Message:
    return Message(
        message_id=50,
        date=DATE,
        chat=Chat(id=chat_id, type=Chat.CHANNEL),
        document=Document(
            file_id=file_id,
            file_unique_id="u-" + file_id,
            file_name="a.png",
            mime_type="image/png",
            thumbnail=PhotoSize(file_id="T-" + file_id, file_unique_id="tu", width=90, height=90),
        ),
        caption=caption,
    )


def _mock_bot() -> Mock:
    bot = Mock()
    bot.defaults = None
    bot.initialize = AsyncMock()
    bot.shutdown = AsyncMock()
    bot.send_message = AsyncMock()
    bot.get_updates = AsyncMock(return_value=[])
    bot.get_file = AsyncMock()
    return bot


class TestMessageConversion(unittest.TestCase):
    def test_document_message(self) -> None:
        entry = _message_to_raw_entry(_document_message("BQAC", caption="parent:10"))
        self.assertIs(entry.kind, EntryKind.BINARY)
        self.assertEqual(entry.entry_id, "BQAC")
        self.assertEqual(entry.blob_ref, "BQAC")
        self.assertEqual(entry.preview_ref, "T-BQAC")
        self.assertEqual(entry.display_name, "a.png")
        self.assertEqual(entry.caption, "parent:10")
        self.assertEqual(entry.created_time, DATE)

    def test_text_message(self) -> None:
        entry = _message_to_raw_entry(_text_message(12, "folder:Photos"))
        self.assertIs(entry.kind, EntryKind.TEXT)
        self.assertEqual(entry.entry_id, "12")
        self.assertEqual(entry.text, "folder:Photos")

    def test_other_message(self) -> None:
        message = Message(message_id=1, date=DATE, chat=Chat(id=CHAT_ID, type=Chat.CHANNEL))
        self.assertIsNone(_message_to_raw_entry(message))


class TestExceptionMapping(unittest.TestCase):
    def test_mapping(self) -> None:
        cases = [
            (tg_error.InvalidToken(), AuthError),
            (tg_error.Forbidden("bot was kicked"), ForbiddenError),
            (tg_error.BadRequest("file is too big"), RejectedPayloadError),
            (tg_error.Conflict("terminated by other getUpdates request"), ConflictError),
            (tg_error.TimedOut(), NetworkError),
            (tg_error.NetworkError("reset"), NetworkError),
            (tg_error.TelegramError("odd"), ApiError),
            (httpx.ConnectError("refused"), NetworkError),
            (RuntimeError("boom"), ApiError),
        ]
        for exc, expected in cases:
            with self.subTest(exc=type(exc).__name__):
                mapped = _map_exception(exc)
                self.assertIsInstance(mapped, expected)
                self.assertIs(mapped.cause, exc)

    def test_retry_after(self) -> None:
        mapped = _map_exception(tg_error.RetryAfter(5))
        self.assertIsInstance(mapped, RateLimitError)
        self.assertEqual(mapped.details["retry_after"], 5)

    def test_chat_migrated(self) -> None:
        mapped = _map_exception(tg_error.ChatMigrated(-100999))
        self.assertIsInstance(mapped, ApiError)
        self.assertEqual(mapped.details["migrate_to_chat_id"], -100999)


class TestBotControllerMocked(unittest.IsolatedAsyncioTestCase):
    async def test_append_text_entry(self) -> None:
        bot = _mock_bot()
        bot.send_message.return_value = _text_message(77, "folder:Photos")
        controller = TelegramBotController.from_bot(bot, CHAT_ID)

        entry = await controller.append_text_entry("folder:Photos")

        self.assertEqual(entry.entry_id, "77")
        bot.send_message.assert_awaited_once_with(chat_id=CHAT_ID, text="folder:Photos")

    async def test_append_text_entry_maps_errors(self) -> None:
        bot = _mock_bot()
        bot.send_message.side_effect = tg_error.RetryAfter(3)
        controller = TelegramBotController.from_bot(bot, CHAT_ID)

        with self.assertRaises(RateLimitError) as cm:
            await controller.append_text_entry("folder:Photos")
        self.assertEqual(cm.exception.details["retry_after"], 3)

    async def test_fetch_filters_chat_and_passes_cursor(self) -> None:
        bot = _mock_bot()
        bot.get_updates.return_value = [
            Update(update_id=1, channel_post=_text_message(1, "folder:Photos")),
            Update(update_id=2, message=_text_message(2, "folder:Elsewhere", chat_id=42)),
            Update(update_id=3, channel_post=_document_message("BQAC", caption="parent:1")),
            Update(update_id=4),
        ]
        controller = TelegramBotController.from_bot(bot, CHAT_ID)

        entries = await controller.fetch_recent_entries(500, offset=9)

        self.assertEqual([e.entry_id for e in entries], ["1", "BQAC"])
        kwargs = bot.get_updates.call_args.kwargs
        self.assertEqual(kwargs["limit"], 100)
        self.assertEqual(kwargs["offset"], 9)
        self.assertEqual(kwargs["timeout"], 0)
        self.assertEqual(kwargs["allowed_updates"], ["message", "channel_post"])

    async def test_fetch_maps_errors(self) -> None:
        bot = _mock_bot()
        bot.get_updates.side_effect = tg_error.TimedOut()
        controller = TelegramBotController.from_bot(bot, CHAT_ID)

        with self.assertRaises(NetworkError):
            await controller.fetch_recent_entries(10)

    async def test_resolve_blob_url(self) -> None:
        bot = _mock_bot()
        bot.get_file.return_value = Mock(file_path="https://api.telegram.org/file/botTEST/documents/a.png")
        controller = TelegramBotController.from_bot(bot, CHAT_ID)

        url = await controller.resolve_blob_url("BQAC")

        self.assertTrue(url.endswith("documents/a.png"))
        bot.get_file.assert_awaited_once_with("BQAC")

    async def test_resolve_blob_url_without_path(self) -> None:
        bot = _mock_bot()
        bot.get_file.return_value = Mock(file_path=None)
        controller = TelegramBotController.from_bot(bot, CHAT_ID)

        with self.assertRaises(ApiError):
            await controller.resolve_blob_url("BQAC")

    async def test_shutdown_closes_both_clients(self) -> None:
        bot = _mock_bot()
        http = Mock()
        http.aclose = AsyncMock()
        controller = TelegramBotController.from_bot(bot, CHAT_ID, http_client=http)

        async with controller:
            bot.initialize.assert_awaited_once()

        bot.shutdown.assert_awaited_once()
        http.aclose.assert_awaited_once()


class TestBotControllerUpload(unittest.IsolatedAsyncioTestCase):
    def _controller(self, handler) -> TelegramBotController:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return TelegramBotController.from_bot(
            _mock_bot(),
            CHAT_ID,
            http_client=http,
            settings=StoreSettings(upload_chunk_size=1024),
        )

    async def test_send_document_reports_progress(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = request.content
            result = {
                "message_id": 91,
                "date": 1735689600,
                "chat": {"id": CHAT_ID, "type": "channel"},
                "caption": "parent:10",
                "document": {
                    "file_id": "BQAC",
                    "file_unique_id": "u1",
                    "file_name": "a.png",
                    "mime_type": "image/png",
                },
            }
            return httpx.Response(200, json={"ok": True, "result": result})

        controller = self._controller(handler)
        progress: list[tuple[int, int]] = []
        payload = b"x" * 4000

        try:
            entry = await controller.append_binary_entry(
                payload, "a.png", "parent:10", lambda sent, total: progress.append((sent, total))
            )
        finally:
            await controller.shutdown()

        self.assertEqual(entry.entry_id, "BQAC")
        self.assertEqual(entry.caption, "parent:10")
        self.assertTrue(seen["url"].endswith("/botTEST/sendDocument"))
        self.assertIn(b'name="document"; filename="a.png"', seen["body"])
        self.assertIn(b"parent:10", seen["body"])
        self.assertGreater(len(progress), 1)
        self.assertEqual(progress[-1], (4000, 4000))
        self.assertEqual([p[0] for p in progress], sorted(p[0] for p in progress))

    async def test_root_upload_sends_no_caption(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = request.content
            return httpx.Response(
                200,
                json={
                    "ok": True,
                    "result": {
                        "message_id": 1,
                        "date": 1735689600,
                        "chat": {"id": CHAT_ID, "type": "channel"},
                        "document": {"file_id": "F", "file_unique_id": "u"},
                    },
                },
            )

        controller = self._controller(handler)
        try:
            await controller.append_binary_entry(b"abc", "a.bin", "")
        finally:
            await controller.shutdown()

        self.assertNotIn(b'name="caption"', seen["body"])

    async def test_send_document_api_errors(self) -> None:
        cases = [
            (400, {"ok": False, "error_code": 400, "description": "Bad Request: file is too big"}, RejectedPayloadError),
            (
                429,
                {
                    "ok": False,
                    "error_code": 429,
                    "description": "Too Many Requests: retry after 7",
                    "parameters": {"retry_after": 7},
                },
                RateLimitError,
            ),
            (403, {"ok": False, "error_code": 403, "description": "Forbidden"}, ForbiddenError),
            (502, {"ok": False, "error_code": 502, "description": "Bad Gateway"}, ApiError),
        ]
        for status, body, expected in cases:
            with self.subTest(status=status):
                controller = self._controller(
                    lambda request, s=status, b=body: httpx.Response(s, content=json.dumps(b))
                )
                try:
                    with self.assertRaises(expected) as cm:
                        await controller.append_binary_entry(b"abc", "a.bin", "")
                finally:
                    await controller.shutdown()
                self.assertEqual(cm.exception.details["error_code"], status)
                if status == 429:
                    self.assertEqual(cm.exception.details["retry_after"], 7)

    async def test_send_document_non_json(self) -> None:
        controller = self._controller(lambda request: httpx.Response(502, text="<html>"))
        try:
            with self.assertRaises(ApiError) as cm:
                await controller.append_binary_entry(b"abc", "a.bin", "")
        finally:
            await controller.shutdown()
        self.assertEqual(cm.exception.details["status_code"], 502)

    async def test_send_document_network_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out")

        controller = self._controller(handler)
        try:
            with self.assertRaises(NetworkError):
                await controller.append_binary_entry(b"abc", "a.bin", "")
        finally:
            await controller.shutdown()


if __name__ == "__main__":
    unittest.main()
