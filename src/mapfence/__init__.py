"""mapfence: geofenced playing areas and floor regions for floor-plan maps."""

__version__ = "0.1.0"
