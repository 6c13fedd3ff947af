"""The log transport contract consumed by the store."""

from __future__ import annotations

from typing import Callable, Optional, Protocol

from chatdrive.models import RawEntry

ByteProgressCallback = Callable[[int, int], None]
"""Called as on_progress(bytes_sent, total_bytes) while a payload is sent."""


class LogTransport(Protocol):
    """
    Append-only log with a bounded read window.

    Every method raises a chatdrive TransportError subclass on failure.
    Appends return the appended entry; its entry_id is assigned by the
    transport and is the only way to learn the id of a new record.
    """

    async def append_binary_entry(
        self,
        payload: bytes,
        display_name: str,
        caption: str,
        on_progress: Optional[ByteProgressCallback] = None,
    ) -> RawEntry: ...

    async def append_text_entry(self, text: str) -> RawEntry: ...

    async def fetch_recent_entries(
        self,
        page_size_limit: int,
        *,
        offset: Optional[int] = None,
    ) -> list[RawEntry]: ...

    async def resolve_blob_url(self, ref: str) -> str: ...
