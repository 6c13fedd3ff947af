from .ids import fallback_file_name, message_id_to_entry_id, recording_file_name
from .mime import (
    DEFAULT_MIME,
    guess_mime_type,
    is_image,
    media_category,
    normalize_mime,
)
from .progress import PercentCallback, ProgressTracker

__all__ = [
    "fallback_file_name",
    "recording_file_name",
    "message_id_to_entry_id",
    "DEFAULT_MIME",
    "normalize_mime",
    "media_category",
    "is_image",
    "guess_mime_type",
    "PercentCallback",
    "ProgressTracker",
]
