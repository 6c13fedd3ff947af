"""Public model exports for chatdrive."""

from __future__ import annotations

from .raw_entry import EntryKind, RawEntry
from .records import FileRecord, FolderRecord, Record, RecordKind
from .results import BatchStatus, BatchUploadResult, UploadResult, UploadStatus

__all__ = [
    "EntryKind",
    "RawEntry",
    "RecordKind",
    "FileRecord",
    "FolderRecord",
    "Record",
    "UploadStatus",
    "BatchStatus",
    "UploadResult",
    "BatchUploadResult",
]
