"""InMemoryLogTransport: an in-process log with the Bot API's window semantics."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from chatdrive.config import MAX_PAGE_SIZE
from chatdrive.errors import InvalidArgumentError, NotFoundError, TransportError
from chatdrive.models import EntryKind, RawEntry
from chatdrive.util.ids import message_id_to_entry_id
from chatdrive.util.mime import guess_mime_type

from .transport import ByteProgressCallback

_OPERATIONS: tuple[str, ...] = (
    "append_binary_entry",
    "append_text_entry",
    "fetch_recent_entries",
    "resolve_blob_url",
)


@dataclass(slots=True)
class _InjectedFailure:
    error: TransportError
    after_chunks: int = 0


class InMemoryLogTransport:
    """
    LogTransport kept in a Python list (no external I/O).

    Notes:
        - Text entries get increasing message ids ("1", "2", ...); documents
          get "doc-<n>" file ids, like opaque Bot API file ids.
        - fetch_recent_entries returns only the newest page_size_limit
          entries; with offset, entries before that position are skipped.
        - Every call yields to the event loop at least once.
        - fail_next() makes the next call of an operation raise.
    """

    def __init__(self, *, chunk_size: int = 4, url_base: str = "memory://") -> None:
        if chunk_size <= 0:
            raise InvalidArgumentError("chunk_size must be positive")
        self._chunk_size = chunk_size
        self._url_base = url_base
        self._entries: list[RawEntry] = []
        self._blobs: dict[str, bytes] = {}
        self._next_message_id = 1
        self._next_file_id = 1
        self._failures: dict[str, list[_InjectedFailure]] = {}
        self.calls: list[tuple[str, ...]] = []

    # ----------------------------
    # Test/seed helpers
    # ----------------------------
    @property
    def entries(self) -> list[RawEntry]:
        return list(self._entries)

    def add_entry(self, entry: RawEntry, *, blob: bytes = b"") -> None:
        """Append an arbitrary raw entry (foreign chat traffic, legacy data)."""
        self._entries.append(entry)
        for ref in (entry.blob_ref, entry.preview_ref):
            if ref:
                self._blobs.setdefault(ref, blob)

    def next_message_id(self) -> str:
        entry_id = message_id_to_entry_id(self._next_message_id)
        self._next_message_id += 1
        return entry_id

    def fail_next(
        self,
        operation: str,
        error: TransportError,
        *,
        after_chunks: int = 0,
    ) -> None:
        """
        Make the next call of `operation` raise `error`.

        For append_binary_entry, after_chunks chunks are reported as sent
        before the failure.
        """
        if operation not in _OPERATIONS:
            raise InvalidArgumentError(f"Unknown operation: {operation}")
        self._failures.setdefault(operation, []).append(
            _InjectedFailure(error=error, after_chunks=after_chunks)
        )

    def blob(self, ref: str) -> bytes:
        return self._blobs[ref]

    # ----------------------------
    # LogTransport
    # ----------------------------
    async def append_binary_entry(
        self,
        payload: bytes,
        display_name: str,
        caption: str,
        on_progress: Optional[ByteProgressCallback] = None,
    ) -> RawEntry:
        self.calls.append(("append_binary_entry", display_name, caption))
        failure = self._pop_failure("append_binary_entry")

        total = len(payload)
        sent = 0
        chunks = 0
        while sent < total:
            if failure is not None and chunks >= failure.after_chunks:
                raise failure.error
            await asyncio.sleep(0)
            sent = min(total, sent + self._chunk_size)
            chunks += 1
            if on_progress is not None:
                on_progress(sent, total)
        if failure is not None:
            raise failure.error
        await asyncio.sleep(0)

        file_id = f"doc-{self._next_file_id}"
        self._next_file_id += 1
        self._next_message_id += 1
        self._blobs[file_id] = bytes(payload)

        entry = RawEntry(
            kind=EntryKind.BINARY,
            entry_id=file_id,
            mime_type=guess_mime_type(display_name),
            display_name=display_name,
            caption=caption or None,
            blob_ref=file_id,
            created_time=datetime.now(timezone.utc),
        )
        self._entries.append(entry)
        return entry

    async def append_text_entry(self, text: str) -> RawEntry:
        self.calls.append(("append_text_entry", text))
        await asyncio.sleep(0)
        failure = self._pop_failure("append_text_entry")
        if failure is not None:
            raise failure.error

        entry = RawEntry(
            kind=EntryKind.TEXT,
            entry_id=self.next_message_id(),
            text=text,
            created_time=datetime.now(timezone.utc),
        )
        self._entries.append(entry)
        return entry

    async def fetch_recent_entries(
        self,
        page_size_limit: int,
        *,
        offset: Optional[int] = None,
    ) -> list[RawEntry]:
        self.calls.append(("fetch_recent_entries", str(page_size_limit)))
        await asyncio.sleep(0)
        failure = self._pop_failure("fetch_recent_entries")
        if failure is not None:
            raise failure.error

        limit = max(1, min(MAX_PAGE_SIZE, page_size_limit))
        visible = self._entries[offset:] if offset is not None else self._entries
        return list(visible[-limit:])

    async def resolve_blob_url(self, ref: str) -> str:
        self.calls.append(("resolve_blob_url", ref))
        await asyncio.sleep(0)
        failure = self._pop_failure("resolve_blob_url")
        if failure is not None:
            raise failure.error
        if ref not in self._blobs:
            raise NotFoundError("Unknown blob reference", details={"ref": ref})
        return f"{self._url_base}{ref}"

    # ----------------------------
    # Internals
    # ----------------------------
    def _pop_failure(self, operation: str) -> Optional[_InjectedFailure]:
        queue = self._failures.get(operation)
        if not queue:
            return None
        return queue.pop(0)
