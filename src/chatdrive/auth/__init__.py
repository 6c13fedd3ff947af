"""Public auth exports for chatdrive."""

from __future__ import annotations

from .bot_client import BotClient
from .bot_credentials import BotCredentials

__all__ = ["BotCredentials", "BotClient"]
