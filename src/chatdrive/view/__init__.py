"""Presentation-side exports for chatdrive."""

from __future__ import annotations

from .navigator import FolderNavigator, FolderView
from .render import (
    RenderItem,
    RendererKind,
    build_render_items,
    classify_record,
    to_render_item,
)

__all__ = [
    "FolderNavigator",
    "FolderView",
    "RendererKind",
    "RenderItem",
    "classify_record",
    "to_render_item",
    "build_render_items",
]
