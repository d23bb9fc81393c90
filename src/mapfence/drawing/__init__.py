"""Interactive polygon editing for mapfence.

Key Components:
    - DrawingEngine: Idle / Drawing / Dragging state machine
    - ImageSurface: bounding box of the floor-plan image for pointer mapping
    - ConfirmAction: arm-then-confirm guard for destructive actions
"""

from mapfence.drawing.confirm import ConfirmAction, ConfirmState
from mapfence.drawing.engine import (
    ESCAPE_KEY,
    DragEnded,
    DragStarted,
    Dragging,
    Drawing,
    DrawingCancelled,
    DrawingEngine,
    DrawingStarted,
    Effect,
    EngineState,
    Idle,
    PointAdded,
    PolygonCompleted,
    Rejected,
    VertexMoved,
)
from mapfence.drawing.surface import ImageSurface

__all__ = [
    "ESCAPE_KEY",
    "ConfirmAction",
    "ConfirmState",
    "DragEnded",
    "DragStarted",
    "Dragging",
    "Drawing",
    "DrawingCancelled",
    "DrawingEngine",
    "DrawingStarted",
    "Effect",
    "EngineState",
    "Idle",
    "ImageSurface",
    "PointAdded",
    "PolygonCompleted",
    "Rejected",
    "VertexMoved",
]
