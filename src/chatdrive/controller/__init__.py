"""Transport exports for chatdrive."""

from __future__ import annotations

from .bot_controller import TelegramBotController
from .memory import InMemoryLogTransport
from .transport import ByteProgressCallback, LogTransport

__all__ = [
    "LogTransport",
    "ByteProgressCallback",
    "TelegramBotController",
    "InMemoryLogTransport",
]
