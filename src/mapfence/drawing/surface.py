"""Floor-plan image surface.

Tracks the current on-screen bounding box of the floor-plan image so
pointer positions can be mapped into percentage space. The UI shell calls
``update`` whenever the image loads or is resized; until the first
measurement, pointer positions cannot be converted and are dropped.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from mapfence.geometry.primitives import BoundingBox, Point
from mapfence.geometry.transforms import to_percent_coordinates
from mapfence.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ImageSurface:
    """Latest measured bounding box of the floor-plan image."""

    bounding_box: BoundingBox | None = None
    _listeners: list[Callable[[BoundingBox | None], None]] = field(
        default_factory=list, init=False
    )

    @property
    def is_measured(self) -> bool:
        return self.bounding_box is not None

    def update(self, box: BoundingBox) -> None:
        """Record a new measurement after image load or resize."""
        if box == self.bounding_box:
            return
        self.bounding_box = box
        logger.debug("Image surface measured", box=box.to_tuple())
        self._fire()

    def invalidate(self) -> None:
        """Forget the measurement, e.g. while a new image is loading."""
        if self.bounding_box is not None:
            self.bounding_box = None
            self._fire()

    def to_percent(self, position: tuple[float, float]) -> Point | None:
        """Convert a pointer position, or return None if not yet measured."""
        if self.bounding_box is None:
            return None
        return to_percent_coordinates(position, self.bounding_box)

    def add_listener(self, listener: Callable[[BoundingBox | None], None]) -> None:
        self._listeners.append(listener)

    def _fire(self) -> None:
        for listener in list(self._listeners):
            listener(self.bounding_box)
