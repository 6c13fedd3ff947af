"""Data model for decoded store records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import ClassVar, Optional, Union


class RecordKind(str, Enum):
    """Tag for the two record variants."""

    FILE = "file"
    FOLDER = "folder"


@dataclass(frozen=True, slots=True)
class FileRecord:
    """
    A document stored in the log.

    Notes:
        - id and blob_ref are both the transport file id; they are kept apart
          because only blob_ref is meant to be resolved to a URL.
        - url / preview_url stay None until resolved by the reader or the
          coordinator.
    """

    kind: ClassVar[RecordKind] = RecordKind.FILE

    id: str
    blob_ref: str
    mime_type: str
    name: str

    preview_ref: Optional[str] = None
    parent_id: Optional[str] = None
    url: Optional[str] = None
    preview_url: Optional[str] = None
    created_time: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class FolderRecord:
    """
    A folder declared by a text entry.

    The id is the message id of the declaring entry, so it is only known
    after the append succeeded.
    """

    kind: ClassVar[RecordKind] = RecordKind.FOLDER

    id: str
    name: str

    parent_id: Optional[str] = None
    created_time: Optional[datetime] = None


Record = Union[FileRecord, FolderRecord]
