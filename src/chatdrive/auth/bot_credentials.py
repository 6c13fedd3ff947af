"""Bot credentials for chatdrive."""

from __future__ import annotations

from dataclasses import dataclass

from chatdrive.config import get_env


@dataclass(slots=True, frozen=True)
class BotCredentials:
    """
    Credentials of the bot that owns the storage chat.

    token:   bot token issued by @BotFather
    chat_id: the chat whose history is the store
    """

    token: str
    chat_id: int

    def __post_init__(self) -> None:
        if not isinstance(self.token, str) or not self.token.strip():
            raise ValueError("BotCredentials.token must be a non-empty string")
        if isinstance(self.chat_id, bool) or not isinstance(self.chat_id, int):
            raise TypeError("BotCredentials.chat_id must be an int")
        if self.chat_id == 0:
            raise ValueError("BotCredentials.chat_id must not be 0")

    @classmethod
    def from_env(cls) -> BotCredentials:
        """Read TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID."""
        token = get_env("TELEGRAM_BOT_TOKEN", "") or ""
        raw_chat_id = (get_env("TELEGRAM_CHAT_ID", "") or "").strip()
        if not raw_chat_id:
            raise ValueError("TELEGRAM_CHAT_ID is not set")
        try:
            chat_id = int(raw_chat_id)
        except ValueError as exc:
            raise ValueError(f"TELEGRAM_CHAT_ID must be a number, got: {raw_chat_id}") from exc
        return cls(token=token.strip(), chat_id=chat_id)

    def __repr__(self) -> str:
        return f"BotCredentials(token='***', chat_id={self.chat_id})"
