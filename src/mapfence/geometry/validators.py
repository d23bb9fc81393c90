"""Geometry validation utilities for mapfence.

This module rejects polygons that cannot be persisted before any store
call is attempted.
"""

from __future__ import annotations

from mapfence.geometry.polygon import MIN_POLYGON_VERTICES
from mapfence.geometry.primitives import Polygon


class InvalidGeometryError(Exception):
    """Raised when a polygon fails validation.

    Attributes:
        vertex_count: Number of vertices in the rejected polygon.
        message: Description of the validation failure.
    """

    def __init__(self, message: str, *, vertex_count: int) -> None:
        self.vertex_count = vertex_count
        self.message = message
        super().__init__(f"{message} (vertices={vertex_count})")


class GeometryValidator:
    """Validator for polygons about to be persisted.

    The validator is stateless and operates purely on the inputs provided
    to each method.
    """

    def validate_polygon(
        self,
        polygon: Polygon,
        *,
        strict: bool = True,
    ) -> bool:
        """Validate that a polygon has enough vertices to enclose an area.

        Args:
            polygon: The ordered vertices to validate.
            strict: If True, raise InvalidGeometryError on failure.
                If False, return False instead.

        Returns:
            True if the polygon is valid.

        Raises:
            InvalidGeometryError: If strict=True and the polygon is too small.
        """
        is_valid = len(polygon) >= MIN_POLYGON_VERTICES
        if not is_valid and strict:
            raise InvalidGeometryError(
                f"Polygon needs at least {MIN_POLYGON_VERTICES} points, "
                f"got {len(polygon)}",
                vertex_count=len(polygon),
            )
        return is_valid

    def is_valid_polygon(self, polygon: Polygon) -> bool:
        """Check a polygon without raising.

        Convenience method that wraps validate_polygon() with strict=False.
        """
        return self.validate_polygon(polygon, strict=False)
