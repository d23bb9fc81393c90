"""Unit tests for region data models."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from mapfence.geometry import Point
from mapfence.regions import DrawMode, PlayingArea, Region, RegionDefaults, RegionUpdate

STAMP = datetime(2024, 5, 1, tzinfo=UTC)


class TestRegion:
    """Tests for the Region model."""

    def test_floors_sorted_and_deduplicated(self, rect: Callable[..., tuple]) -> None:
        region = Region(id="r1", polygon=rect(0, 0, 10, 10), floors=(3, 1, 3))
        assert region.floors == (1, 3)

    def test_empty_floors_rejected(self, rect: Callable[..., tuple]) -> None:
        with pytest.raises(ValidationError, match="at least one floor"):
            Region(id="r1", polygon=rect(0, 0, 10, 10), floors=())

    def test_polygon_needs_three_points(self) -> None:
        with pytest.raises(ValidationError, match="at least 3 points"):
            Region(
                id="r1",
                polygon=(Point(x=0, y=0), Point(x=1, y=1)),
                floors=(1,),
            )

    def test_polygon_order_preserved(self) -> None:
        """Test vertex order survives validation and serialization."""
        points = (Point(x=5, y=5), Point(x=1, y=9), Point(x=9, y=1), Point(x=2, y=2))
        region = Region(id="r1", polygon=points, floors=(1,))
        restored = Region.model_validate_json(region.model_dump_json())
        assert restored.polygon == points

    def test_region_is_frozen(self, make_region: Callable[..., Region]) -> None:
        region = make_region("r1", (0, 0, 10, 10))
        with pytest.raises(ValidationError):
            region.name = "renamed"  # type: ignore[misc]


class TestRegionApply:
    """Tests for Region.apply with partial updates."""

    def test_only_given_fields_change(self, make_region: Callable[..., Region]) -> None:
        region = make_region("r1", (0, 0, 10, 10), floors=(1, 2), name="Lobby")
        updated = region.apply(RegionUpdate(name="Atrium"), updated_at=STAMP)

        assert updated.name == "Atrium"
        assert updated.floors == (1, 2)
        assert updated.polygon == region.polygon
        assert updated.created_at == region.created_at
        assert updated.updated_at == STAMP

    def test_floors_normalized_on_apply(self, make_region: Callable[..., Region]) -> None:
        region = make_region("r1", (0, 0, 10, 10))
        updated = region.apply(RegionUpdate(floors=(3, 2)), updated_at=STAMP)
        assert updated.floors == (2, 3)


class TestRegionUpdate:
    """Tests for RegionUpdate."""

    def test_empty_update(self) -> None:
        assert RegionUpdate().is_empty
        assert not RegionUpdate(color="#000000").is_empty

    def test_empty_floor_set_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RegionUpdate(floors=())

    def test_short_polygon_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RegionUpdate(polygon=(Point(x=0, y=0),))


class TestPlayingAreaAndDefaults:
    """Tests for PlayingArea, RegionDefaults and DrawMode."""

    def test_playing_area_needs_polygon(self) -> None:
        with pytest.raises(ValidationError):
            PlayingArea(polygon=())

    def test_defaults(self) -> None:
        defaults = RegionDefaults()
        assert defaults.floors == (1,)
        assert defaults.color is None

    def test_draw_mode_values(self) -> None:
        assert DrawMode("playing_area") is DrawMode.PLAYING_AREA
        assert DrawMode.NONE.value == "none"
