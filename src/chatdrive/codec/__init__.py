"""Public codec exports for chatdrive."""

from __future__ import annotations

from .entry_codec import (
    FOLDER_PREFIX,
    PARENT_PREFIX,
    decode_entry,
    decode_file_parent,
    decode_folder_text,
    encode_file_caption,
    encode_folder_text,
)
from .validators import (
    SEPARATOR,
    validate_file_name,
    validate_folder_name,
    validate_parent_id,
)

__all__ = [
    "SEPARATOR",
    "FOLDER_PREFIX",
    "PARENT_PREFIX",
    "encode_file_caption",
    "encode_folder_text",
    "decode_entry",
    "decode_file_parent",
    "decode_folder_text",
    "validate_folder_name",
    "validate_file_name",
    "validate_parent_id",
]
