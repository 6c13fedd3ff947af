"""Transport-level view of a single log entry."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class EntryKind(str, Enum):
    BINARY = "binary"
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class RawEntry:
    """
    One entry as returned by the transport, before decoding.

    Binary entries carry blob_ref (and optionally preview_ref, mime_type,
    display_name, caption); text entries carry text.
    """

    kind: EntryKind
    entry_id: str

    mime_type: Optional[str] = None
    display_name: Optional[str] = None
    caption: Optional[str] = None
    text: Optional[str] = None
    blob_ref: Optional[str] = None
    preview_ref: Optional[str] = None
    created_time: Optional[datetime] = None
