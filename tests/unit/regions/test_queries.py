"""Unit tests for submission-time region queries.

Covers floor lookup, overlapping regions resolved by creation order, and
the playing-area check with and without a playing area.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest

from mapfence.geometry import Point
from mapfence.regions import (
    DEFAULT_OVERLAP_POLICY,
    FirstMatchByCreationOrder,
    PlayingArea,
    Region,
    get_floors_for_point,
    get_region_for_point,
    is_point_in_playing_area,
)


class LastMatch:
    """Overlap policy that prefers the most recently created region."""

    name = "last_match"

    def select(self, point: Point, regions: Sequence[Region]) -> Region | None:
        return FirstMatchByCreationOrder().select(point, list(reversed(regions)))


class TestGetFloorsForPoint:
    """Tests for get_floors_for_point."""

    def test_point_in_region(self, make_region: Callable[..., Region]) -> None:
        regions = [make_region("r", (10, 10, 50, 50), floors=(1, 2))]
        assert get_floors_for_point(Point(x=30, y=30), regions) == (1, 2)

    def test_point_outside_all_regions(self, make_region: Callable[..., Region]) -> None:
        """Test no containing region means no floor constraint."""
        regions = [make_region("r", (10, 10, 50, 50), floors=(1, 2))]
        assert get_floors_for_point(Point(x=60, y=60), regions) is None

    def test_no_regions(self) -> None:
        assert get_floors_for_point(Point(x=60, y=60), []) is None

    def test_overlap_earliest_created_wins(
        self, make_region: Callable[..., Region]
    ) -> None:
        regions = [
            make_region("a", (0, 0, 50, 50), floors=(1,), order=0),
            make_region("b", (25, 25, 75, 75), floors=(2, 3), order=1),
        ]
        assert get_floors_for_point(Point(x=30, y=30), regions) == (1,)
        assert get_floors_for_point(Point(x=60, y=60), regions) == (2, 3)

    def test_order_of_input_decides_overlap(
        self, make_region: Callable[..., Region]
    ) -> None:
        a = make_region("a", (0, 0, 50, 50), floors=(1,), order=0)
        b = make_region("b", (25, 25, 75, 75), floors=(2, 3), order=1)
        assert get_floors_for_point(Point(x=30, y=30), [b, a]) == (2, 3)

    def test_pluggable_policy(self, make_region: Callable[..., Region]) -> None:
        regions = [
            make_region("a", (0, 0, 50, 50), floors=(1,), order=0),
            make_region("b", (25, 25, 75, 75), floors=(2, 3), order=1),
        ]
        region = get_region_for_point(Point(x=30, y=30), regions, LastMatch())
        assert region is not None
        assert region.id == "b"

    def test_default_policy_name(self) -> None:
        assert DEFAULT_OVERLAP_POLICY.name == "first_match_by_creation_order"


class TestIsPointInPlayingArea:
    """Tests for is_point_in_playing_area."""

    def test_no_playing_area_allows_everything(self) -> None:
        for x, y in ((0, 0), (99, 1), (100, 100)):
            assert is_point_in_playing_area(Point(x=x, y=y), None)

    @pytest.mark.parametrize(
        ("x", "y", "expected"),
        [(50, 50, True), (10, 10, True), (95, 95, False), (90, 50, False)],
    )
    def test_inside_and_outside(
        self, rect: Callable[..., tuple], x: float, y: float, expected: bool
    ) -> None:
        area = PlayingArea(polygon=rect(10, 10, 90, 90))
        assert is_point_in_playing_area(Point(x=x, y=y), area) is expected


class TestReferenceScenarios:
    """Scenarios with a left-half region and a left-half playing area."""

    def test_floor_lookup(self, make_region: Callable[..., Region]) -> None:
        region = make_region("left", (0, 0, 50, 100), floors=(1, 2))
        assert get_floors_for_point(Point(x=25, y=25), [region]) == (1, 2)
        assert get_floors_for_point(Point(x=75, y=75), [region]) is None

    def test_playing_area(self, rect: Callable[..., tuple]) -> None:
        area = PlayingArea(polygon=rect(0, 0, 50, 100))
        assert not is_point_in_playing_area(Point(x=75, y=75), area)
        assert is_point_in_playing_area(Point(x=25, y=75), area)
        assert is_point_in_playing_area(Point(x=75, y=75), None)
