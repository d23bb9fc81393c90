"""Geometry kernel for mapfence.

This package provides percentage-space primitives, polygon containment,
coordinate conversion between pointer pixels and percentage space, and
overlay rendering for previews.

Key Components:
    - Primitives: Point (percentage space) and BoundingBox (pixels)
    - Polygon ops: point_in_polygon, centroid, distance
    - Transforms: pointer pixels <-> percentage space
    - Validators: minimum-vertex checks before persistence
    - Overlay: Pillow preview of regions and playing area

Example:
    from mapfence.geometry import BoundingBox, point_in_polygon, to_percent_coordinates

    box = BoundingBox(left=10, top=20, width=800, height=600)
    point = to_percent_coordinates((410, 320), box)  # Point(x=50.0, y=50.0)
    point_in_polygon(point, region.polygon)
"""

from mapfence.geometry.overlay import OverlayStyle, RegionOverlayRenderer
from mapfence.geometry.polygon import (
    MIN_POLYGON_VERTICES,
    centroid,
    distance,
    point_in_polygon,
    polygon_bounds,
)
from mapfence.geometry.primitives import BoundingBox, Point, Polygon, clamp_percent
from mapfence.geometry.transforms import to_percent_coordinates, to_pixel_coordinates
from mapfence.geometry.validators import GeometryValidator, InvalidGeometryError

__all__ = [
    "MIN_POLYGON_VERTICES",
    "BoundingBox",
    "GeometryValidator",
    "InvalidGeometryError",
    "OverlayStyle",
    "Point",
    "Polygon",
    "RegionOverlayRenderer",
    "centroid",
    "clamp_percent",
    "distance",
    "point_in_polygon",
    "polygon_bounds",
    "to_percent_coordinates",
    "to_pixel_coordinates",
]
