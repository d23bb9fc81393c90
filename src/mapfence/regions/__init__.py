"""Region data layer for mapfence.

This package holds the persisted data model (regions and the singleton
playing area), the store adapters that persist it and push changes, the
client-side cache fed by those pushes, and the submission-time queries.

Key Components:
    - Region, PlayingArea, RegionUpdate: immutable models
    - RegionStore: protocol for the persistent collaborator
    - InMemoryRegionStore, JsonFileRegionStore: store implementations
    - RegionCache: subscription-owned client copy
    - get_floors_for_point, is_point_in_playing_area: point queries

Example:
    from mapfence.regions import JsonFileRegionStore, RegionCache, get_floors_for_point

    store = JsonFileRegionStore(path=Path("regions.json"))
    cache = RegionCache()
    cache.attach(store)
    floors = get_floors_for_point(point, cache.regions)
"""

from mapfence.regions.cache import RegionCache
from mapfence.regions.exceptions import (
    FloorConstraintError,
    RegionError,
    RegionNotFoundError,
    StoreError,
)
from mapfence.regions.models import (
    DrawMode,
    PlayingArea,
    Region,
    RegionDefaults,
    RegionUpdate,
)
from mapfence.regions.queries import (
    DEFAULT_OVERLAP_POLICY,
    FirstMatchByCreationOrder,
    OverlapPolicy,
    get_floors_for_point,
    get_region_for_point,
    is_point_in_playing_area,
)
from mapfence.regions.store import (
    InMemoryRegionStore,
    JsonFileRegionStore,
    RegionStore,
    StoreDocument,
    Subscription,
)

__all__ = [
    "DEFAULT_OVERLAP_POLICY",
    "DrawMode",
    "FirstMatchByCreationOrder",
    "FloorConstraintError",
    "InMemoryRegionStore",
    "JsonFileRegionStore",
    "OverlapPolicy",
    "PlayingArea",
    "Region",
    "RegionCache",
    "RegionDefaults",
    "RegionError",
    "RegionNotFoundError",
    "RegionStore",
    "RegionUpdate",
    "StoreDocument",
    "StoreError",
    "Subscription",
    "get_floors_for_point",
    "get_region_for_point",
    "is_point_in_playing_area",
]
