"""Entry codec: records <-> the two payload shapes the log accepts."""

from __future__ import annotations

from typing import Optional

from chatdrive.errors import DecodeSkipError
from chatdrive.models import EntryKind, FileRecord, FolderRecord, RawEntry, Record
from chatdrive.util.ids import fallback_file_name
from chatdrive.util.mime import normalize_mime

from .validators import (
    SEPARATOR,
    validate_folder_name,
    validate_parent_id,
)

FOLDER_PREFIX: str = "folder" + SEPARATOR
PARENT_PREFIX: str = "parent" + SEPARATOR


# ----------------------------
# Encoding
# ----------------------------
def encode_file_caption(parent_id: Optional[str]) -> str:
    """
    Caption attached to an uploaded document.

    Returns "" for root items; the transport omits an empty caption.
    """
    validate_parent_id(parent_id)
    if parent_id is None:
        return ""
    return PARENT_PREFIX + parent_id


def encode_folder_text(name: str, parent_id: Optional[str]) -> str:
    """
    Text of a folder declaration: `folder:<name>` or `folder:<name>:<parent>`.

    Raises:
        InvalidArgumentError: if name contains the separator or is blank.
    """
    validate_folder_name(name)
    validate_parent_id(parent_id)
    if parent_id is None:
        return FOLDER_PREFIX + name
    return FOLDER_PREFIX + name + SEPARATOR + parent_id


# ----------------------------
# Decoding
# ----------------------------
def decode_file_parent(caption: Optional[str]) -> Optional[str]:
    """
    Parent id from a document caption.

    Anything that is not `parent:<id>` means root; this never raises.
    """
    if not caption or not caption.startswith(PARENT_PREFIX):
        return None
    parent_id = caption[len(PARENT_PREFIX):].strip()
    if not parent_id or any(ch.isspace() for ch in parent_id):
        return None
    return parent_id


def decode_folder_text(text: Optional[str]) -> Optional[tuple[str, Optional[str]]]:
    """
    Parse a folder declaration into (name, parent_id).

    Returns None for text that is not a declaration. The body is split on
    the FIRST separator only, so `folder:a:b:c` is folder "a" under parent
    "b:c". Names containing the separator cannot be created any more, but
    older entries may still carry them.

    Raises:
        DecodeSkipError: if the declaration has an empty name.
    """
    if not text or not text.startswith(FOLDER_PREFIX):
        return None

    body = text[len(FOLDER_PREFIX):]
    name, _, parent = body.partition(SEPARATOR)
    if not name.strip():
        raise DecodeSkipError("Folder declaration without a name", details={"text": text})

    parent = parent.strip()
    return name, (parent or None)


def decode_entry(raw: RawEntry) -> Optional[Record]:
    """
    Decode one raw entry.

    Returns:
        FileRecord for documents, FolderRecord for folder declarations, None
        for unrelated text.

    Raises:
        DecodeSkipError: if the entry has a known kind but unusable content.
    """
    if raw.kind is EntryKind.BINARY:
        if not raw.entry_id or not raw.blob_ref:
            raise DecodeSkipError(
                "Binary entry without id or blob reference",
                details={"entry_id": raw.entry_id},
            )
        return FileRecord(
            id=raw.entry_id,
            blob_ref=raw.blob_ref,
            mime_type=normalize_mime(raw.mime_type),
            name=raw.display_name or fallback_file_name(raw.entry_id),
            preview_ref=raw.preview_ref,
            parent_id=decode_file_parent(raw.caption),
            created_time=raw.created_time,
        )

    if raw.kind is EntryKind.TEXT:
        decoded = decode_folder_text(raw.text)
        if decoded is None:
            return None
        if not raw.entry_id:
            raise DecodeSkipError("Folder declaration without an entry id")
        name, parent_id = decoded
        return FolderRecord(
            id=raw.entry_id,
            name=name,
            parent_id=parent_id,
            created_time=raw.created_time,
        )

    raise DecodeSkipError("Unknown entry kind", details={"kind": str(raw.kind)})
