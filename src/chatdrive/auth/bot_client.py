"""Client factories for the Bot API."""

from __future__ import annotations

from typing import Optional

from chatdrive.config import StoreSettings

from .bot_credentials import BotCredentials

API_BASE_URL: str = "https://api.telegram.org/bot"
API_FILE_BASE_URL: str = "https://api.telegram.org/file/bot"


class BotClient:
    """Create the network clients a TelegramBotController owns."""

    def __init__(
        self,
        credentials: BotCredentials,
        *,
        settings: Optional[StoreSettings] = None,
    ) -> None:
        self._credentials = credentials
        self._settings = settings or StoreSettings()

    @property
    def method_base_url(self) -> str:
        """Base URL for Bot API methods, e.g. <base>/sendDocument."""
        return f"{API_BASE_URL}{self._credentials.token}"

    def build_bot(self):
        """
        Build a python-telegram-bot Bot with the configured timeouts.

        Returns:
            telegram.Bot
        """
        from telegram import Bot
        from telegram.request import HTTPXRequest

        request = HTTPXRequest(
            connect_timeout=self._settings.connect_timeout_sec,
            read_timeout=self._settings.read_timeout_sec,
            write_timeout=self._settings.read_timeout_sec,
        )
        return Bot(
            token=self._credentials.token,
            base_url=API_BASE_URL,
            base_file_url=API_FILE_BASE_URL,
            request=request,
            get_updates_request=HTTPXRequest(
                connect_timeout=self._settings.connect_timeout_sec,
                read_timeout=self._settings.read_timeout_sec,
            ),
        )

    def build_upload_client(self):
        """
        Build the httpx client used for streamed document uploads.

        Returns:
            httpx.AsyncClient
        """
        import httpx

        timeout = httpx.Timeout(
            self._settings.upload_timeout_sec,
            connect=self._settings.connect_timeout_sec,
        )
        return httpx.AsyncClient(timeout=timeout)
