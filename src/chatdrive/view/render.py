"""Renderer selection for listed records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from chatdrive.models import FileRecord, FolderRecord, Record
from chatdrive.util.mime import media_category


class RendererKind(str, Enum):
    FOLDER = "folder"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    OTHER = "other"


_FILE_RENDERERS: dict[str, RendererKind] = {
    "image": RendererKind.IMAGE,
    "video": RendererKind.VIDEO,
    "audio": RendererKind.AUDIO,
    "other": RendererKind.OTHER,
}


@dataclass(frozen=True, slots=True)
class RenderItem:
    """
    One tile of a folder listing.

    preview_url: what to show inline (None for folders and files without one)
    open_url:    resolved URL to open/download (None for folders)
    """

    record: Record
    kind: RendererKind
    title: str
    preview_url: Optional[str] = None
    open_url: Optional[str] = None

    @property
    def navigable(self) -> bool:
        return self.kind is RendererKind.FOLDER


def classify_record(record: Record) -> RendererKind:
    if isinstance(record, FolderRecord):
        return RendererKind.FOLDER
    if isinstance(record, FileRecord):
        return _FILE_RENDERERS[media_category(record.mime_type)]
    raise TypeError(f"Unsupported record type: {type(record).__name__}")


def to_render_item(record: Record) -> RenderItem:
    kind = classify_record(record)
    if isinstance(record, FolderRecord):
        return RenderItem(record=record, kind=kind, title=record.name)

    # Images preview as themselves; everything else uses the thumbnail.
    preview_url = record.url if kind is RendererKind.IMAGE else record.preview_url
    return RenderItem(
        record=record,
        kind=kind,
        title=record.name,
        preview_url=preview_url,
        open_url=record.url,
    )


def build_render_items(records: Iterable[Record]) -> list[RenderItem]:
    return [to_render_item(record) for record in records]
