"""Submission-time queries against loaded regions and the playing area.

Two questions are asked of every map click during photo submission:

- Is the point inside the playing area? With no playing area loaded the
  whole map is legal.
- Which floors are valid here? Answered by the region containing the point.

Overlapping regions:
    When several regions contain the point, an ``OverlapPolicy`` picks one.
    The default, ``FirstMatchByCreationOrder``, returns the first containing
    region in the order given, and stores always deliver regions in
    creation order, so the oldest region wins. Passing the same regions in
    a different order changes the answer; that is the defined behaviour.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from mapfence.geometry.polygon import point_in_polygon
from mapfence.geometry.primitives import Point
from mapfence.regions.models import PlayingArea, Region


class OverlapPolicy(Protocol):
    """Chooses the region answering a point query."""

    name: str

    def select(self, point: Point, regions: Sequence[Region]) -> Region | None:
        """Return the chosen region containing ``point``, or None."""
        ...


class FirstMatchByCreationOrder:
    """First region (in the given order) whose polygon contains the point."""

    name = "first_match_by_creation_order"

    def select(self, point: Point, regions: Sequence[Region]) -> Region | None:
        for region in regions:
            if point_in_polygon(point, region.polygon):
                return region
        return None


DEFAULT_OVERLAP_POLICY: OverlapPolicy = FirstMatchByCreationOrder()


def is_point_in_playing_area(point: Point, playing_area: PlayingArea | None) -> bool:
    """Check a point against the playing area; no playing area allows everything."""
    if playing_area is None:
        return True
    return point_in_polygon(point, playing_area.polygon)


def get_region_for_point(
    point: Point,
    regions: Sequence[Region],
    policy: OverlapPolicy = DEFAULT_OVERLAP_POLICY,
) -> Region | None:
    """Return the region answering for ``point`` under ``policy``."""
    if not regions:
        return None
    return policy.select(point, regions)


def get_floors_for_point(
    point: Point,
    regions: Sequence[Region],
    policy: OverlapPolicy = DEFAULT_OVERLAP_POLICY,
) -> tuple[int, ...] | None:
    """Return the floors valid at ``point``.

    Returns:
        The chosen region's floors (sorted ascending), or None when no
        region contains the point, meaning no floor constraint is known
        and no floor selector should be shown.
    """
    region = get_region_for_point(point, regions, policy)
    return region.floors if region is not None else None
