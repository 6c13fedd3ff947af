from __future__ import annotations

import mimetypes
from typing import Literal

DEFAULT_MIME: str = "application/octet-stream"

MediaCategory = Literal["image", "video", "audio", "other"]

_MEDIA_PREFIXES: tuple[tuple[str, MediaCategory], ...] = (
    ("image/", "image"),
    ("video/", "video"),
    ("audio/", "audio"),
)


def normalize_mime(mime_type: str | None) -> str:
    """Return mime_type, or DEFAULT_MIME when the transport gave none."""
    if not mime_type or not mime_type.strip():
        return DEFAULT_MIME
    return mime_type.strip()


def media_category(mime_type: str) -> MediaCategory:
    """Classify a MIME type by its top-level prefix."""
    lowered = mime_type.lower()
    for prefix, category in _MEDIA_PREFIXES:
        if lowered.startswith(prefix):
            return category
    return "other"


def is_image(mime_type: str) -> bool:
    return media_category(mime_type) == "image"


def guess_mime_type(name: str) -> str:
    """
    Guess the MIME type for an outgoing document from its file name.

    Note: .webm is registered as video/webm on most platforms but not all,
    so recordings are mapped explicitly.
    """
    if name.lower().endswith(".webm"):
        return "video/webm"
    guessed, _ = mimetypes.guess_type(name)
    return guessed or DEFAULT_MIME
