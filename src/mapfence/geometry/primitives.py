"""Geometry primitives for mapfence.

This module provides immutable Pydantic models for points in percentage
space and for the pixel bounding box of the floor-plan image. Both axes of
percentage space run over [0, 100] regardless of image resolution, with
(0, 0) at the top-left corner of the image.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Self, TypeAlias

from pydantic import BaseModel, Field

PERCENT_MIN = 0.0
PERCENT_MAX = 100.0


def clamp_percent(value: float) -> float:
    """Clamp a coordinate to the [0, 100] percentage range."""
    return max(PERCENT_MIN, min(PERCENT_MAX, value))


class Point(BaseModel, frozen=True):
    """A 2D point in percentage space.

    Represents an (x, y) position where x increases rightward and y increases
    downward. Both coordinates lie in [0, 100].

    Attributes:
        x: Horizontal position (percent of image width from left edge).
        y: Vertical position (percent of image height from top edge).
    """

    x: float = Field(..., ge=PERCENT_MIN, le=PERCENT_MAX, description="X (% of width)")
    y: float = Field(..., ge=PERCENT_MIN, le=PERCENT_MAX, description="Y (% of height)")

    def to_tuple(self) -> tuple[float, float]:
        """Convert to (x, y) tuple."""
        return (self.x, self.y)

    @classmethod
    def from_tuple(cls, coord: tuple[float, float]) -> Self:
        """Create Point from (x, y) tuple."""
        return cls(x=coord[0], y=coord[1])

    @classmethod
    def clamped(cls, x: float, y: float) -> Self:
        """Create a Point, clamping both axes into [0, 100]."""
        return cls(x=clamp_percent(x), y=clamp_percent(y))


Polygon: TypeAlias = Sequence[Point]
"""Ordered vertices of a polygon. Order defines the edges and is preserved."""


class BoundingBox(BaseModel, frozen=True):
    """Pixel bounding box of the rendered floor-plan image.

    Mirrors what a UI surface reports for the image element: the origin of
    its top-left corner in pointer coordinates and its current rendered size.

    Attributes:
        left: X of the image's left edge in pointer coordinates.
        top: Y of the image's top edge in pointer coordinates.
        width: Rendered width in pixels (> 0).
        height: Rendered height in pixels (> 0).
    """

    left: float = Field(default=0.0, description="Left edge in pointer coordinates")
    top: float = Field(default=0.0, description="Top edge in pointer coordinates")
    width: float = Field(..., gt=0, description="Rendered width in pixels")
    height: float = Field(..., gt=0, description="Rendered height in pixels")

    @property
    def right(self) -> float:
        """Return the X coordinate of the right edge."""
        return self.left + self.width

    @property
    def bottom(self) -> float:
        """Return the Y coordinate of the bottom edge."""
        return self.top + self.height

    def to_tuple(self) -> tuple[float, float, float, float]:
        """Convert to (left, top, width, height) tuple."""
        return (self.left, self.top, self.width, self.height)

    @classmethod
    def from_tuple(cls, bbox: tuple[float, float, float, float]) -> Self:
        """Create BoundingBox from (left, top, width, height) tuple."""
        return cls(left=bbox[0], top=bbox[1], width=bbox[2], height=bbox[3])
