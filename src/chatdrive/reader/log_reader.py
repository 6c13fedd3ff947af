"""LogReader: one bounded page of the log -> records of one folder."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Iterable, Optional

from chatdrive.codec import decode_entry
from chatdrive.config import MAX_PAGE_SIZE
from chatdrive.controller.transport import LogTransport
from chatdrive.errors import (
    DecodeSkipError,
    FetchFailedError,
    InvalidArgumentError,
    TransportError,
)
from chatdrive.models import FileRecord, FolderRecord, RawEntry, Record

from .page_index import PageIndex

logger = logging.getLogger(__name__)


def decode_page(entries: Iterable[RawEntry]) -> list[Record]:
    """Decode a page, dropping unrelated entries and skipping malformed ones."""
    records: list[Record] = []
    for raw in entries:
        try:
            record = decode_entry(raw)
        except DecodeSkipError as exc:
            logger.warning("Skipping entry %s: %s", raw.entry_id, exc)
            continue
        if record is not None:
            records.append(record)
    return records


class LogReader:
    """
    Read folder listings from the most recent window of the log.

    Only the window the transport returns is visible: records older than the
    last page_size_limit entries do not appear, and a freshly created record
    may not be listed yet. `offset` is passed through to the transport as an
    explicit cursor for callers that track one.
    """

    def __init__(
        self,
        transport: LogTransport,
        *,
        page_size_limit: int = MAX_PAGE_SIZE,
    ) -> None:
        if not 1 <= page_size_limit <= MAX_PAGE_SIZE:
            raise InvalidArgumentError(
                f"page_size_limit must be within 1..{MAX_PAGE_SIZE}",
                details={"page_size_limit": page_size_limit},
            )
        self._transport = transport
        self._page_size_limit = page_size_limit

    @property
    def page_size_limit(self) -> int:
        return self._page_size_limit

    async def read_page(self, *, offset: Optional[int] = None) -> PageIndex:
        """
        Fetch and decode one page without resolving any URLs.

        Raises:
            FetchFailedError: if the transport fails.
        """
        try:
            entries = await self._transport.fetch_recent_entries(
                self._page_size_limit,
                offset=offset,
            )
        except TransportError as exc:
            raise FetchFailedError.from_transport_error(
                "Failed to fetch entries", exc, stage="fetch"
            ) from exc

        return PageIndex.from_records(decode_page(entries))

    async def list_folder(
        self,
        folder_id: Optional[str] = None,
        *,
        offset: Optional[int] = None,
    ) -> list[Record]:
        """
        List the records of one folder (None = root) from the current page.

        File URLs are resolved only for the records returned. All or nothing:
        a failed resolution fails the whole listing.

        Raises:
            FetchFailedError: if fetching or resolving fails.
        """
        index = await self.read_page(offset=offset)
        selected = index.list_children(folder_id)

        try:
            resolved = await asyncio.gather(*(self._resolve(record) for record in selected))
        except TransportError as exc:
            raise FetchFailedError.from_transport_error(
                "Failed to resolve file URLs", exc, stage="resolve", folder_id=folder_id
            ) from exc

        logger.debug(
            "Listed folder %s: %d of %d records in page",
            folder_id or "<root>",
            len(resolved),
            len(index),
        )
        return list(resolved)

    async def _resolve(self, record: Record) -> Record:
        if isinstance(record, FolderRecord):
            return record
        if isinstance(record, FileRecord):
            url = await self._transport.resolve_blob_url(record.blob_ref)
            preview_url = None
            if record.preview_ref:
                preview_url = await self._transport.resolve_blob_url(record.preview_ref)
            return dataclasses.replace(record, url=url, preview_url=preview_url)
        raise TypeError(f"Unsupported record type: {type(record).__name__}")
