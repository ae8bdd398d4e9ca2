"""
Renderer-agnostic display list built from panel snapshots.
"""

from .display_list import (
    CircleShape,
    ContentSlot,
    LineShape,
    MarkerShape,
    RectShape,
    TextShape,
    build_display_list,
    build_panel_shapes,
)

__all__ = [
    "CircleShape",
    "ContentSlot",
    "LineShape",
    "MarkerShape",
    "RectShape",
    "TextShape",
    "build_display_list",
    "build_panel_shapes",
]
