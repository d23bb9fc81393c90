"""Coordinate transformation utilities for mapfence.

Stored polygons live in percentage space so they survive resizing and
zooming of the floor-plan image. Pointer positions arrive in the UI's
pixel coordinates and are converted here against the image's *current*
bounding box, which must be re-measured whenever the image loads or
resizes.

Coordinate Systems:
    - Pointer: pixel coordinates reported by the UI shell
    - Percentage: [0, 100] on both axes relative to the image

Transform Direction Conventions:
    - to_percent_coordinates: (pos - origin) / size * 100, then clamp
    - to_pixel_coordinates: origin + pct / 100 * size
"""

from __future__ import annotations

from mapfence.geometry.primitives import BoundingBox, Point

__all__ = [
    "to_percent_coordinates",
    "to_pixel_coordinates",
]


def to_percent_coordinates(
    position: tuple[float, float],
    box: BoundingBox,
) -> Point:
    """Map a pointer position into percentage space.

    Positions outside the image are clamped onto its border.

    Args:
        position: (x, y) pointer position in pixel coordinates.
        box: Current bounding box of the image element.

    Returns:
        Point in percentage space.
    """
    x = (position[0] - box.left) / box.width * 100.0
    y = (position[1] - box.top) / box.height * 100.0
    return Point.clamped(x, y)


def to_pixel_coordinates(point: Point, box: BoundingBox) -> tuple[float, float]:
    """Map a percentage-space point back to pointer pixel coordinates.

    Args:
        point: Point in percentage space.
        box: Current bounding box of the image element.

    Returns:
        (x, y) position in pixel coordinates.
    """
    return (
        box.left + point.x / 100.0 * box.width,
        box.top + point.y / 100.0 * box.height,
    )
