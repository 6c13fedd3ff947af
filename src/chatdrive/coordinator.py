"""PlacementCoordinator: create files and folders in the log."""

from __future__ import annotations

import logging
from typing import Optional

from chatdrive.codec import (
    decode_entry,
    encode_file_caption,
    encode_folder_text,
    validate_file_name,
)
from chatdrive.controller.transport import LogTransport
from chatdrive.errors import (
    ApiError,
    CreateFailedError,
    DecodeSkipError,
    InvalidArgumentError,
    TransportError,
    UploadFailedError,
)
from chatdrive.models import FileRecord, FolderRecord, RawEntry
from chatdrive.util.progress import PercentCallback, ProgressTracker

logger = logging.getLogger(__name__)


class PlacementCoordinator:
    """
    Create records under a target folder.

    Policy:
        - Names and parent ids are validated before anything is sent.
        - No retries and no deduplication: the id of a new record is only
          known after its append succeeded, so a retried append is a new
          record with the same name and parent.
        - Failures keep the transport error as `cause`; `kind` tells network,
          rate limit, rejected payload, etc. apart.
    """

    def __init__(self, transport: LogTransport) -> None:
        self._transport = transport

    async def create_folder(self, name: str, parent_id: Optional[str] = None) -> FolderRecord:
        """
        Declare a folder.

        Raises:
            InvalidArgumentError: if name is blank or contains the separator.
            CreateFailedError: if the append fails.
        """
        text = encode_folder_text(name, parent_id)

        try:
            entry = await self._transport.append_text_entry(text)
        except TransportError as exc:
            raise CreateFailedError.from_transport_error(
                "Failed to create folder", exc, name=name, parent_id=parent_id
            ) from exc

        logger.info("Created folder %r (id=%s, parent=%s)", name, entry.entry_id, parent_id)
        return FolderRecord(
            id=entry.entry_id,
            name=name,
            parent_id=parent_id,
            created_time=entry.created_time,
        )

    async def create_file(
        self,
        payload: bytes,
        name: str,
        parent_id: Optional[str] = None,
        on_progress: Optional[PercentCallback] = None,
    ) -> FileRecord:
        """
        Upload a document and return it with resolved URLs.

        on_progress receives non-decreasing percentages; 100 is reported once,
        after the URL is resolved, and never after a failure.

        Raises:
            InvalidArgumentError: if name or parent_id is invalid.
            UploadFailedError: if the append or the URL resolution fails.
        """
        validate_file_name(name)
        if not isinstance(payload, (bytes, bytearray, memoryview)):
            raise InvalidArgumentError("payload must be bytes")
        caption = encode_file_caption(parent_id)

        tracker = ProgressTracker(on_progress)
        tracker.update(0, max(1, len(payload)))

        try:
            entry = await self._transport.append_binary_entry(
                bytes(payload),
                name,
                caption,
                tracker.update,
            )
        except TransportError as exc:
            tracker.fail()
            raise UploadFailedError.from_transport_error(
                "Failed to upload file", exc, name=name, parent_id=parent_id, stage="append"
            ) from exc
        except BaseException:
            tracker.fail()
            raise

        try:
            record = _appended_file_record(entry, name, parent_id)
            url = await self._transport.resolve_blob_url(record.blob_ref)
            preview_url = None
            if record.preview_ref:
                preview_url = await self._transport.resolve_blob_url(record.preview_ref)
        except TransportError as exc:
            tracker.fail()
            # The document is already in the log at this point.
            raise UploadFailedError.from_transport_error(
                "File uploaded but its URL could not be resolved",
                exc,
                name=name,
                parent_id=parent_id,
                stage="resolve",
                entry_id=entry.entry_id,
            ) from exc
        except BaseException:
            tracker.fail()
            raise

        tracker.complete()
        logger.info("Uploaded %r (id=%s, parent=%s)", name, record.id, parent_id)
        return FileRecord(
            id=record.id,
            blob_ref=record.blob_ref,
            mime_type=record.mime_type,
            name=name,
            preview_ref=record.preview_ref,
            parent_id=parent_id,
            url=url,
            preview_url=preview_url,
            created_time=record.created_time,
        )


def _appended_file_record(entry: RawEntry, name: str, parent_id: Optional[str]) -> FileRecord:
    try:
        record = decode_entry(entry)
    except DecodeSkipError as exc:
        raise ApiError(
            "Transport returned an unusable document entry",
            details={"entry_id": entry.entry_id, "name": name, "parent_id": parent_id},
            cause=exc,
        ) from exc
    if not isinstance(record, FileRecord):
        raise ApiError(
            "Transport returned a non-document entry for an upload",
            details={"entry_id": entry.entry_id},
        )
    return record
