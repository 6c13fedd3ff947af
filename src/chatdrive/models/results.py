"""Result models for batch uploads."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Optional

from .records import FileRecord

UploadStatus = Literal["success", "failed"]
BatchStatus = Literal["success", "partial", "failed"]


@dataclass(slots=True)
class UploadResult:
    """Result for a single item of a batch upload."""

    name: str
    status: UploadStatus

    record: Optional[FileRecord] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None
    error_details: Optional[dict[str, Any]] = None


@dataclass(slots=True)
class BatchUploadResult:
    """Aggregate result for ChatDriveManager.upload_many."""

    status: BatchStatus
    results: list[UploadResult]

    summary: dict[str, int] = field(default_factory=dict)

    @property
    def records(self) -> list[FileRecord]:
        return [r.record for r in self.results if r.record is not None]
