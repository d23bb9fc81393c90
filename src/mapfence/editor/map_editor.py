"""Map editor controller.

Wires the pieces of region administration together:

- the store subscription feeds the RegionCache (the only source of what is
  shown and queried)
- pointer and keyboard input go to the DrawingEngine, whose effects are
  turned into store mutations here
- the RegionPanel buffers edits to the selected region until saved

Store failures never escape this class: they are logged, turned into a
dismissible operator-facing message, and the screen falls back to the last
state the store pushed.
"""

from __future__ import annotations

import uuid
from collections.abc import Awaitable, Sequence
from typing import TypeVar

from mapfence.config import settings
from mapfence.drawing.engine import (
    DragEnded,
    DragStarted,
    DrawingCancelled,
    DrawingEngine,
    DrawingStarted,
    PointAdded,
    PolygonCompleted,
    Rejected,
    VertexMoved,
)
from mapfence.drawing.surface import ImageSurface
from mapfence.editor.palette import ColorPalette
from mapfence.editor.panel import RegionPanel
from mapfence.geometry.primitives import BoundingBox, Point
from mapfence.regions.cache import RegionCache
from mapfence.regions.exceptions import StoreError
from mapfence.regions.models import (
    DrawMode,
    PlayingArea,
    Region,
    RegionDefaults,
    RegionUpdate,
)
from mapfence.regions.store import RegionStore
from mapfence.utils.logging import (
    clear_correlation_context,
    correlation_scope,
    get_logger,
    set_correlation_context,
)

logger = get_logger(__name__)

T = TypeVar("T")

# Operator-facing failure messages
MSG_LOAD_FAILED = "Failed to load regions"
MSG_SAVE_REGION_FAILED = "Failed to save region"
MSG_SAVE_PLAYING_AREA_FAILED = "Failed to save playing area"
MSG_UPDATE_REGION_FAILED = "Failed to update region"
MSG_DELETE_REGION_FAILED = "Failed to delete region"
MSG_DELETE_PLAYING_AREA_FAILED = "Failed to delete playing area"


class MapEditor:
    """Region and playing-area administration for one operator session.

    Args:
        store: Persistent collaborator holding regions.
        surface: Floor-plan image surface; a new one is created if omitted.
        close_threshold: Close-gesture distance in percentage units.
        default_floor: Floor given to newly drawn regions.
        palette: Colour rotation for new regions.
        session_id: Correlation id for log events.
    """

    def __init__(
        self,
        store: RegionStore,
        *,
        surface: ImageSurface | None = None,
        close_threshold: float | None = None,
        default_floor: int | None = None,
        palette: ColorPalette | None = None,
        floor_options: Sequence[int] | None = None,
        session_id: str | None = None,
    ) -> None:
        self.store = store
        self.surface = surface or ImageSurface()
        self.cache = RegionCache()
        self.engine = DrawingEngine(
            self.surface, self.cache.get, close_threshold=close_threshold
        )
        self.panel = RegionPanel(
            floor_options=tuple(floor_options)
            if floor_options is not None
            else settings.FLOOR_OPTIONS
        )
        self.palette = palette or ColorPalette()
        self.default_floor = (
            default_floor if default_floor is not None else settings.DEFAULT_FLOOR
        )
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self.error: str | None = None
        self._started = False
        self.cache.add_listener(self._on_cache_changed)

    # --------------------------------------------------------------- lifecycle

    def start(self) -> None:
        """Subscribe to the store. The first push arrives synchronously."""
        if self._started:
            return
        set_correlation_context(session_id=self.session_id)
        self.cache.attach(self.store)
        self._started = True
        if self.cache.load_error is None:
            self.palette.seed(len(self.cache.regions))
        logger.info("Map editor started", regions=len(self.cache.regions))

    def close(self) -> None:
        self.cache.detach()
        self._started = False
        clear_correlation_context()

    def resize_image(self, box: BoundingBox) -> None:
        """The floor-plan image loaded or changed size."""
        self.surface.update(box)

    # ------------------------------------------------------------------ views

    @property
    def loading(self) -> bool:
        return not self.cache.loaded

    @property
    def regions(self) -> list[Region]:
        return self.cache.regions

    @property
    def playing_area(self) -> PlayingArea | None:
        return self.cache.playing_area

    @property
    def selected_region_id(self) -> str | None:
        return self.engine.selected_region_id

    @property
    def selected_region(self) -> Region | None:
        region_id = self.engine.selected_region_id
        return self.cache.get(region_id) if region_id is not None else None

    @property
    def is_drawing(self) -> bool:
        return self.engine.is_drawing

    @property
    def draw_mode(self) -> DrawMode:
        return self.engine.draw_mode

    @property
    def new_polygon_points(self) -> tuple[Point, ...]:
        return self.engine.points

    @property
    def hover_close(self) -> bool:
        return self.engine.hover_close

    def dismiss_error(self) -> None:
        self.error = None

    # -------------------------------------------------------------- selection

    def select_region(self, region_id: str) -> bool:
        """Select a region for editing; ignored while drawing."""
        if self.cache.get(region_id) is None:
            return False
        if not self.engine.select_region(region_id):
            return False
        self.panel.load(self.cache.get(region_id))
        return True

    def clear_selection(self) -> None:
        self.engine.clear_selection()
        self.panel.load(None)

    # ---------------------------------------------------------------- drawing

    def start_drawing(self, mode: DrawMode = DrawMode.REGION) -> bool:
        """Start drawing a new region (or the playing area)."""
        effect = self.engine.start_drawing(mode)
        if isinstance(effect, DrawingStarted):
            set_correlation_context(draw_mode=mode.value)
            self.panel.load(None)
            return True
        return False

    def start_drawing_playing_area(self) -> bool:
        """Draw or redraw the playing area.

        The existing playing area stays in force until the new polygon is
        completed, and is then replaced whole. Cancelling keeps it.
        """
        return self.start_drawing(DrawMode.PLAYING_AREA)

    def cancel_drawing(self) -> bool:
        return self._drawing_ended(self.engine.cancel())

    def key_down(self, key: str) -> bool:
        return self._drawing_ended(self.engine.key_down(key))

    async def click(self, position: tuple[float, float]) -> bool:
        """Click on the map image. Returns True if the click changed anything."""
        effect = self.engine.click(position)
        if isinstance(effect, PolygonCompleted):
            await self._persist_polygon(effect)
            return True
        return isinstance(effect, PointAdded)

    async def complete_drawing(self) -> bool:
        """Finish the polygon without a close gesture (needs >= 3 points)."""
        effect = self.engine.complete()
        if isinstance(effect, Rejected):
            return False
        await self._persist_polygon(effect)
        return True

    # --------------------------------------------------------------- dragging

    def vertex_pointer_down(self, region_id: str, vertex_index: int) -> bool:
        return isinstance(
            self.engine.vertex_pointer_down(region_id, vertex_index), DragStarted
        )

    async def pointer_move(self, position: tuple[float, float]) -> None:
        """Pointer moved over the map; persists the dragged vertex if any."""
        effect = self.engine.pointer_move(position)
        if not isinstance(effect, VertexMoved):
            return
        current = self.cache.get(effect.region_id)
        if current is None:
            return
        interim = current.model_copy(update={"polygon": effect.polygon})
        self.cache.apply_provisional(interim)
        ok, _ = await self._guarded(
            self.store.update_region(
                effect.region_id, RegionUpdate(polygon=effect.polygon)
            ),
            MSG_UPDATE_REGION_FAILED,
            region_id=effect.region_id,
        )
        if not ok:
            self.cache.discard_provisional(effect.region_id)

    def pointer_up(self) -> bool:
        return isinstance(self.engine.pointer_up(), DragEnded)

    def pointer_leave(self) -> bool:
        return isinstance(self.engine.pointer_leave(), DragEnded)

    # ------------------------------------------------------------------ panel

    def toggle_floor(self, floor: int) -> bool:
        return self.panel.toggle_floor(floor)

    async def save_region_edits(self) -> bool:
        """Send the panel's buffered name/floors/colour for the selected region."""
        update = self.panel.build_update()
        region_id = self.panel.region_id
        if update is None or region_id is None:
            return False
        ok, _ = await self._guarded(
            self.store.update_region(region_id, update),
            MSG_UPDATE_REGION_FAILED,
            region_id=region_id,
        )
        return ok

    async def press_delete_region(self) -> bool:
        """Delete button: first press arms, second press deletes."""
        region_id = self.panel.region_id
        if region_id is None or not self.panel.press_delete():
            return False
        ok, _ = await self._guarded(
            self.store.delete_region(region_id),
            MSG_DELETE_REGION_FAILED,
            region_id=region_id,
        )
        if not ok:
            return False
        if self.engine.selected_region_id == region_id:
            self.clear_selection()
        return True

    def blur_delete_region(self) -> None:
        self.panel.blur_delete()

    async def press_remove_playing_area(self) -> bool:
        """Remove-playing-area button: first press arms, second removes."""
        if self.cache.playing_area is None or self.engine.is_drawing:
            return False
        if not self.panel.press_remove_playing_area():
            return False
        ok, _ = await self._guarded(
            self.store.delete_playing_area(), MSG_DELETE_PLAYING_AREA_FAILED
        )
        return ok

    def blur_remove_playing_area(self) -> None:
        self.panel.blur_remove_playing_area()

    # --------------------------------------------------------------- internal

    async def _persist_polygon(self, effect: PolygonCompleted) -> None:
        try:
            await self._save_polygon(effect)
        finally:
            clear_correlation_context("draw_mode")

    async def _save_polygon(self, effect: PolygonCompleted) -> None:
        if effect.mode == DrawMode.PLAYING_AREA:
            await self._guarded(
                self.store.set_playing_area(effect.polygon),
                MSG_SAVE_PLAYING_AREA_FAILED,
            )
            return

        defaults = RegionDefaults(
            name=f"Region {len(self.cache.regions) + 1}",
            floors=(self.default_floor,),
            color=self.palette.next_color(),
        )
        _, region = await self._guarded(
            self.store.create_region(effect.polygon, defaults),
            MSG_SAVE_REGION_FAILED,
        )
        if region is not None and self.engine.select_region(region.id):
            self.panel.load(self.cache.get(region.id) or region)

    async def _guarded(
        self,
        call: Awaitable[T],
        message: str,
        *,
        region_id: str | None = None,
    ) -> tuple[bool, T | None]:
        """Await a store call; on StoreError record ``message`` and report failure."""
        try:
            with correlation_scope(region_id=region_id):
                result = await call
        except StoreError as exc:
            logger.error(
                "Store operation failed",
                region_id=region_id or exc.region_id,
                operation=exc.operation,
                error=str(exc),
            )
            self.error = message
            return False, None
        return True, result

    def _drawing_ended(self, effect: DrawingCancelled | None) -> bool:
        if effect is None:
            return False
        clear_correlation_context("draw_mode")
        return True

    def _on_cache_changed(self, cache: RegionCache) -> None:
        if cache.load_error is not None and not cache.regions:
            self.error = MSG_LOAD_FAILED
        selected = self.engine.selected_region_id
        if selected is not None and cache.get(selected) is None:
            logger.info("Selected region no longer exists", region_id=selected)
            self.clear_selection()

