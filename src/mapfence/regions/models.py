"""Data models for regions and the playing area.

Regions and the playing area are persisted; draw and drag sessions are
transient and live in ``mapfence.drawing``. All polygons are stored in
percentage space.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, TypeAlias

from pydantic import AfterValidator, BaseModel, Field

from mapfence.geometry.polygon import MIN_POLYGON_VERTICES
from mapfence.geometry.primitives import Point

DEFAULT_REGION_COLOR = "#4a90d9"


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


class DrawMode(str, Enum):
    """What a draw session produces when it completes."""

    NONE = "none"
    REGION = "region"
    PLAYING_AREA = "playing_area"


def _check_polygon(value: tuple[Point, ...]) -> tuple[Point, ...]:
    if len(value) < MIN_POLYGON_VERTICES:
        raise ValueError(
            f"polygon needs at least {MIN_POLYGON_VERTICES} points, got {len(value)}"
        )
    return value


def _normalize_floors(value: tuple[int, ...]) -> tuple[int, ...]:
    floors = tuple(sorted(set(value)))
    if not floors:
        raise ValueError("a region must keep at least one floor")
    return floors


PolygonPoints: TypeAlias = Annotated[tuple[Point, ...], AfterValidator(_check_polygon)]
FloorSet: TypeAlias = Annotated[tuple[int, ...], AfterValidator(_normalize_floors)]


class Region(BaseModel, frozen=True):
    """A named, floor-tagged polygon.

    Attributes:
        id: Store-assigned identifier.
        name: Display name.
        polygon: Ordered vertices (>= 3) in percentage space.
        floors: Non-empty floor numbers, sorted ascending and unique.
        color: Hex display color, stable per region.
        created_at: Store timestamp of creation; defines query order.
        updated_at: Store timestamp of the last write.
    """

    id: str = Field(..., min_length=1, description="Region identifier")
    name: str = Field(default="", description="Display name")
    polygon: PolygonPoints = Field(..., description="Boundary vertices")
    floors: FloorSet = Field(..., description="Floors legal in this region")
    color: str | None = Field(default=None, description="Hex display color")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def apply(self, update: RegionUpdate, *, updated_at: datetime) -> Region:
        """Return a copy with the non-None fields of ``update`` applied."""
        changes = update.model_dump(exclude_none=True)
        changes["updated_at"] = updated_at
        # model_copy skips validation
        return Region.model_validate({**self.model_dump(), **changes})


class PlayingArea(BaseModel, frozen=True):
    """The singleton boundary restricting where map points are legal.

    Attributes:
        polygon: Ordered vertices (>= 3) in percentage space.
        updated_at: Store timestamp of the last replacement.
    """

    polygon: PolygonPoints = Field(..., description="Boundary vertices")
    updated_at: datetime = Field(default_factory=utc_now)


class RegionDefaults(BaseModel, frozen=True):
    """Initial non-geometric fields for a newly drawn region."""

    name: str = Field(default="", description="Display name")
    floors: FloorSet = Field(default=(1,), description="Initial floors")
    color: str | None = Field(default=None, description="Hex display color")


class RegionUpdate(BaseModel, frozen=True):
    """Partial update of a region. ``None`` fields are left unchanged."""

    name: str | None = None
    polygon: PolygonPoints | None = None
    floors: FloorSet | None = None
    color: str | None = None

    @property
    def is_empty(self) -> bool:
        """Whether the update changes nothing."""
        return not self.model_dump(exclude_none=True)
