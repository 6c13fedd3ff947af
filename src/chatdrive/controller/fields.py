"""Bot API method names and update filters used by the controller."""

from __future__ import annotations

from chatdrive.config import MAX_PAGE_SIZE

SEND_DOCUMENT: str = "sendDocument"

DOCUMENT_FIELD: str = "document"

ALLOWED_UPDATES: tuple[str, ...] = (
    "message",
    "channel_post",
)

__all__ = ["MAX_PAGE_SIZE", "SEND_DOCUMENT", "DOCUMENT_FIELD", "ALLOWED_UPDATES"]
