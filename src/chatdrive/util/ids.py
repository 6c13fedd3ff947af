from __future__ import annotations

import time
from typing import Optional


def fallback_file_name(entry_id: str) -> str:
    """Name used for documents that arrive without a file name."""
    return f"file_{entry_id}"


def recording_file_name(now_ms: Optional[int] = None, *, extension: str = "webm") -> str:
    """Generate the upload name for a captured recording (video_<epoch ms>.<ext>)."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"video_{now_ms}.{extension}"


def message_id_to_entry_id(message_id: int) -> str:
    """Text entries are identified by their message id, as a string."""
    return str(message_id)
