"""Pure polygon operations in percentage space.

Everything here is stateless and side-effect free. Containment is the hot
path: it runs on every map click during photo submission.
"""

from __future__ import annotations

import math

from mapfence.geometry.primitives import Point, Polygon

MIN_POLYGON_VERTICES = 3


def point_in_polygon(point: Point, polygon: Polygon) -> bool:
    """Test whether a point lies inside a polygon (even-odd ray cast).

    A horizontal ray is cast to the right of the point and edge crossings
    are counted. An edge counts when exactly one endpoint lies strictly
    below the point's y (half-open rule), and the crossing lies strictly to
    the right of the point.

    Boundary convention: for an axis-aligned rectangle, points on the top
    and left edges are inside; points on the bottom and right edges are
    outside. Other boundary points follow the same half-open rule.

    Args:
        point: Query point.
        polygon: Ordered vertices; fewer than 3 always yields False.

    Returns:
        True if the point is inside the polygon.
    """
    n = len(polygon)
    if n < MIN_POLYGON_VERTICES:
        return False

    x, y = point.x, point.y
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y
        if (yi > y) != (yj > y):
            crossing = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < crossing:
                inside = not inside
        j = i
    return inside


def centroid(polygon: Polygon) -> Point:
    """Return the arithmetic mean of the vertices.

    Used for label placement only. An empty polygon yields (0, 0).
    """
    if not polygon:
        return Point(x=0.0, y=0.0)
    n = len(polygon)
    return Point(
        x=sum(p.x for p in polygon) / n,
        y=sum(p.y for p in polygon) / n,
    )


def distance(a: Point, b: Point) -> float:
    """Euclidean distance in percentage-space units."""
    return math.hypot(a.x - b.x, a.y - b.y)


def polygon_bounds(polygon: Polygon) -> tuple[float, float, float, float]:
    """Axis-aligned extent of a polygon as (min_x, min_y, max_x, max_y).

    Raises:
        ValueError: If the polygon has no vertices.
    """
    if not polygon:
        raise ValueError("Cannot compute bounds of an empty polygon")
    xs = [p.x for p in polygon]
    ys = [p.y for p in polygon]
    return (min(xs), min(ys), max(xs), max(ys))
