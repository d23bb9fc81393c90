"""Region administration for mapfence.

Key Components:
    - MapEditor: store-backed controller for drawing and editing regions
    - RegionPanel: edit buffer and delete confirmations
    - ColorPalette: round-robin colours for new regions
"""

from mapfence.editor.map_editor import (
    MSG_DELETE_PLAYING_AREA_FAILED,
    MSG_DELETE_REGION_FAILED,
    MSG_LOAD_FAILED,
    MSG_SAVE_PLAYING_AREA_FAILED,
    MSG_SAVE_REGION_FAILED,
    MSG_UPDATE_REGION_FAILED,
    MapEditor,
)
from mapfence.editor.palette import ColorPalette
from mapfence.editor.panel import RegionPanel, format_floors, remove_floor

__all__ = [
    "MSG_DELETE_PLAYING_AREA_FAILED",
    "MSG_DELETE_REGION_FAILED",
    "MSG_LOAD_FAILED",
    "MSG_SAVE_PLAYING_AREA_FAILED",
    "MSG_SAVE_REGION_FAILED",
    "MSG_UPDATE_REGION_FAILED",
    "ColorPalette",
    "MapEditor",
    "RegionPanel",
    "format_floors",
    "remove_floor",
]
