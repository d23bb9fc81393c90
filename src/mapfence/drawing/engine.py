"""Polygon drawing engine.

Turns pointer and keyboard input on the floor-plan image into polygon
edits. The engine holds only transient interaction state and performs no
I/O: every input returns an effect (or None) that the map editor applies
against the store.

States:
- Idle: nothing in progress; a selected region shows vertex handles
- Drawing(mode, points): clicks append vertices; clicking within the close
  threshold of the first vertex (with >= 3 vertices) completes the polygon
- Dragging(region_id, vertex_index): pointer moves relocate one vertex of a
  persisted region; pointer-up ends the drag and keeps the position reached

Drawing and Dragging are mutually exclusive. Inputs that are not valid in
the current state return ``Rejected`` and leave the state untouched.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeAlias

from mapfence.config import settings
from mapfence.drawing.surface import ImageSurface
from mapfence.geometry.polygon import MIN_POLYGON_VERTICES, distance
from mapfence.geometry.primitives import Point
from mapfence.geometry.validators import GeometryValidator
from mapfence.regions.models import DrawMode, Region
from mapfence.utils.logging import get_logger

logger = get_logger(__name__)

ESCAPE_KEY = "Escape"

RegionLookup = Callable[[str], Region | None]


# =============================================================================
# States
# =============================================================================


@dataclass(frozen=True)
class Idle:
    """No draw or drag in progress."""


@dataclass(frozen=True)
class Drawing:
    """A polygon under construction."""

    mode: DrawMode
    points: tuple[Point, ...] = ()


@dataclass(frozen=True)
class Dragging:
    """A persisted region's vertex following the pointer."""

    region_id: str
    vertex_index: int


EngineState: TypeAlias = Idle | Drawing | Dragging


# =============================================================================
# Effects
# =============================================================================


@dataclass(frozen=True)
class DrawingStarted:
    mode: DrawMode


@dataclass(frozen=True)
class PointAdded:
    point: Point
    count: int


@dataclass(frozen=True)
class PolygonCompleted:
    """A finished polygon to persist as a new region or the playing area."""

    mode: DrawMode
    polygon: tuple[Point, ...]


@dataclass(frozen=True)
class DrawingCancelled:
    mode: DrawMode
    discarded: int


@dataclass(frozen=True)
class DragStarted:
    region_id: str
    vertex_index: int


@dataclass(frozen=True)
class VertexMoved:
    """A dragged vertex moved; ``polygon`` is the region's full new boundary."""

    region_id: str
    vertex_index: int
    point: Point
    polygon: tuple[Point, ...]


@dataclass(frozen=True)
class DragEnded:
    region_id: str
    vertex_index: int


@dataclass(frozen=True)
class Rejected:
    """An input that was not valid in the current state."""

    reason: str


Effect: TypeAlias = (
    DrawingStarted
    | PointAdded
    | PolygonCompleted
    | DrawingCancelled
    | DragStarted
    | VertexMoved
    | DragEnded
    | Rejected
)


# =============================================================================
# Engine
# =============================================================================


class DrawingEngine:
    """State machine for drawing new polygons and dragging existing vertices.

    Args:
        surface: Image surface used to convert pointer positions.
        lookup: Returns the currently known region for an id (normally the
            region cache's provisional view).
        close_threshold: Percentage-space distance to the first vertex
            under which a click closes the polygon. Defaults to
            settings.CLOSE_THRESHOLD.
    """

    def __init__(
        self,
        surface: ImageSurface,
        lookup: RegionLookup,
        *,
        close_threshold: float | None = None,
        validator: GeometryValidator | None = None,
    ) -> None:
        self.surface = surface
        self.lookup = lookup
        self.close_threshold = (
            close_threshold
            if close_threshold is not None
            else settings.require_close_threshold()
        )
        if self.close_threshold <= 0:
            raise ValueError(f"close_threshold must be positive, got {close_threshold}")
        self.validator = validator or GeometryValidator()
        self._state: EngineState = Idle()
        self._selected_region_id: str | None = None
        self._hover_close = False

    # ------------------------------------------------------------- properties

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def is_idle(self) -> bool:
        return isinstance(self._state, Idle)

    @property
    def is_drawing(self) -> bool:
        return isinstance(self._state, Drawing)

    @property
    def is_dragging(self) -> bool:
        return isinstance(self._state, Dragging)

    @property
    def draw_mode(self) -> DrawMode:
        return self._state.mode if isinstance(self._state, Drawing) else DrawMode.NONE

    @property
    def points(self) -> tuple[Point, ...]:
        """Vertices of the polygon under construction (empty unless drawing)."""
        return self._state.points if isinstance(self._state, Drawing) else ()

    @property
    def selected_region_id(self) -> str | None:
        return self._selected_region_id

    @property
    def hover_close(self) -> bool:
        """Whether the pointer is close enough to the first vertex to close.

        Advisory only: used to emphasise the first vertex.
        """
        return self._hover_close

    # -------------------------------------------------------------- selection

    def select_region(self, region_id: str | None) -> bool:
        """Select a region for editing. Ignored while drawing or dragging."""
        if not self.is_idle:
            logger.debug("Selection ignored", state=type(self._state).__name__)
            return False
        self._selected_region_id = region_id
        return True

    def clear_selection(self) -> None:
        if not self.is_dragging:
            self._selected_region_id = None

    # ---------------------------------------------------------------- drawing

    def start_drawing(self, mode: DrawMode) -> DrawingStarted | Rejected:
        """Begin a new draw session, clearing any selection."""
        if mode == DrawMode.NONE:
            return self._reject("start_drawing needs a region or playing-area mode")
        if not self.is_idle:
            return self._reject(f"cannot start drawing while {self._state_name()}")
        self._selected_region_id = None
        self._hover_close = False
        self._state = Drawing(mode=mode)
        logger.debug("Drawing started", draw_mode=mode.value)
        return DrawingStarted(mode)

    def click(
        self, position: tuple[float, float]
    ) -> PointAdded | PolygonCompleted | Rejected | None:
        """Handle a click on the image at a pointer position.

        Returns None when there is nothing to do (not drawing, or the image
        has not been measured yet).
        """
        state = self._state
        if isinstance(state, Dragging):
            return self._reject("click ignored while dragging")
        if not isinstance(state, Drawing):
            return None
        point = self.surface.to_percent(position)
        if point is None:
            logger.debug("Click dropped, image not measured")
            return None

        if self._is_close_gesture(point, state.points):
            return self._finish(state)

        self._state = Drawing(mode=state.mode, points=(*state.points, point))
        return PointAdded(point=point, count=len(state.points) + 1)

    def complete(self) -> PolygonCompleted | Rejected:
        """Finish the polygon explicitly, without a close gesture."""
        state = self._state
        if not isinstance(state, Drawing):
            return self._reject("nothing is being drawn")
        if not self.validator.is_valid_polygon(state.points):
            return self._reject(
                f"polygon needs at least {MIN_POLYGON_VERTICES} points, "
                f"has {len(state.points)}"
            )
        return self._finish(state)

    def cancel(self) -> DrawingCancelled | None:
        """Discard the polygon under construction without persisting."""
        state = self._state
        if not isinstance(state, Drawing):
            return None
        self._state = Idle()
        self._hover_close = False
        logger.debug("Drawing cancelled", draw_mode=state.mode.value, points=len(state.points))
        return DrawingCancelled(mode=state.mode, discarded=len(state.points))

    def key_down(self, key: str) -> DrawingCancelled | None:
        """Keyboard input; Escape cancels drawing."""
        if key == ESCAPE_KEY:
            return self.cancel()
        return None

    # --------------------------------------------------------------- dragging

    def vertex_pointer_down(
        self, region_id: str, vertex_index: int
    ) -> DragStarted | Rejected:
        """Pointer pressed on a vertex handle of the selected region."""
        if not self.is_idle:
            return self._reject(f"cannot drag while {self._state_name()}")
        if region_id != self._selected_region_id:
            return self._reject("only the selected region's vertices can be dragged")
        region = self.lookup(region_id)
        if region is None:
            return self._reject("region is not persisted")
        if not 0 <= vertex_index < len(region.polygon):
            return self._reject(f"vertex {vertex_index} out of range")
        self._state = Dragging(region_id=region_id, vertex_index=vertex_index)
        logger.debug("Drag started", region_id=region_id, vertex_index=vertex_index)
        return DragStarted(region_id, vertex_index)

    def pointer_move(self, position: tuple[float, float]) -> VertexMoved | None:
        """Pointer moved over the image: update hover and any active drag."""
        point = self.surface.to_percent(position)
        if point is None:
            return None

        state = self._state
        if isinstance(state, Drawing) and len(state.points) >= MIN_POLYGON_VERTICES:
            self._hover_close = distance(point, state.points[0]) < self.close_threshold
        else:
            self._hover_close = False

        if not isinstance(state, Dragging):
            return None
        region = self.lookup(state.region_id)
        if region is None or state.vertex_index >= len(region.polygon):
            # Region deleted or reshaped elsewhere mid-drag
            logger.info("Drag target vanished, ending drag", region_id=state.region_id)
            self._state = Idle()
            if region is None:
                self._drop_selection(state.region_id)
            return None
        polygon = list(region.polygon)
        polygon[state.vertex_index] = point
        return VertexMoved(
            region_id=state.region_id,
            vertex_index=state.vertex_index,
            point=point,
            polygon=tuple(polygon),
        )

    def pointer_up(self) -> DragEnded | None:
        """Pointer released; ends a drag at the position reached."""
        state = self._state
        if not isinstance(state, Dragging):
            return None
        self._state = Idle()
        if self.lookup(state.region_id) is None:
            self._drop_selection(state.region_id)
        logger.debug("Drag ended", region_id=state.region_id)
        return DragEnded(state.region_id, state.vertex_index)

    def pointer_leave(self) -> DragEnded | None:
        """Pointer left the image; behaves like a release."""
        self._hover_close = False
        return self.pointer_up()

    # --------------------------------------------------------------- internal

    def _is_close_gesture(self, point: Point, points: tuple[Point, ...]) -> bool:
        return (
            len(points) >= MIN_POLYGON_VERTICES
            and distance(point, points[0]) < self.close_threshold
        )

    def _finish(self, state: Drawing) -> PolygonCompleted:
        self._state = Idle()
        self._hover_close = False
        logger.info(
            "Polygon completed", draw_mode=state.mode.value, vertices=len(state.points)
        )
        return PolygonCompleted(mode=state.mode, polygon=state.points)

    def _drop_selection(self, region_id: str) -> None:
        # a deselect that arrived mid-drag is applied once the drag is over
        if self._selected_region_id == region_id:
            self._selected_region_id = None

    def _state_name(self) -> str:
        return type(self._state).__name__.lower()

    def _reject(self, reason: str) -> Rejected:
        logger.debug("Input rejected", reason=reason)
        return Rejected(reason)
