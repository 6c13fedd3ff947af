"""Log reading exports for chatdrive."""

from __future__ import annotations

from .log_reader import LogReader, decode_page
from .page_index import PageIndex

__all__ = ["LogReader", "PageIndex", "decode_page"]
