"""Custom exceptions for region and playing-area operations.

These exceptions carry the region and operation involved so that failures
surfaced to the operator and written to the log say what was being done.
"""


class RegionError(Exception):
    """Base exception for all region-related errors."""

    def __init__(
        self,
        message: str,
        *,
        region_id: str | None = None,
        operation: str | None = None,
    ) -> None:
        """Initialize region error with optional context.

        Args:
            message: Human-readable error description.
            region_id: Region the failing operation targeted.
            operation: Name of the failing operation (e.g. "update_region").
        """
        self.message = message
        self.region_id = region_id
        self.operation = operation
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        parts = []
        if self.operation is not None:
            parts.append(f"operation={self.operation}")
        if self.region_id is not None:
            parts.append(f"region_id={self.region_id}")
        if not parts:
            return self.message
        return f"{self.message} ({', '.join(parts)})"


class StoreError(RegionError):
    """Raised when the persistent store rejects a load or mutation.

    This error is raised when:
    - The backing document cannot be read or written
    - The stored document cannot be decoded
    - The store is unavailable
    """

    pass


class RegionNotFoundError(StoreError):
    """Raised when a mutation targets a region the store does not hold."""

    pass


class FloorConstraintError(RegionError):
    """Raised when an edit would leave a region without any floor."""

    pass
