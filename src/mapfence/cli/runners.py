"""Store-backed runners behind the mapfence CLI commands.

Each runner opens the JSON-file store, performs one read-only operation
and returns plain data for the command layer to print.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from mapfence.geometry.overlay import RegionOverlayRenderer
from mapfence.geometry.primitives import Point
from mapfence.regions.models import PlayingArea, Region
from mapfence.regions.queries import get_region_for_point
from mapfence.regions.store import JsonFileRegionStore
from mapfence.submission.picker import LocationPicker
from mapfence.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StoreSnapshot:
    regions: list[Region]
    playing_area: PlayingArea | None


@dataclass(frozen=True)
class QueryResult:
    """Outcome of checking one map point as a submission would."""

    point: Point
    accepted: bool
    region: Region | None
    floors: tuple[int, ...] | None

    def to_dict(self) -> dict[str, object]:
        return {
            "x": self.point.x,
            "y": self.point.y,
            "accepted": self.accepted,
            "region_id": self.region.id if self.region else None,
            "region_name": self.region.name if self.region else None,
            "floors": list(self.floors) if self.floors is not None else None,
        }


def load_snapshot(store_path: Path) -> StoreSnapshot:
    """Read regions and the playing area from the store document."""
    store = JsonFileRegionStore(path=store_path)

    async def run_async() -> StoreSnapshot:
        regions = await store.load_regions()
        playing_area = await store.load_playing_area()
        return StoreSnapshot(regions=regions, playing_area=playing_area)

    return asyncio.run(run_async())


def run_query(store_path: Path, x: float, y: float, *, override: bool) -> QueryResult:
    """Check a point the same way the submission form does."""
    snapshot = load_snapshot(store_path)
    picker = LocationPicker()
    picker.load(snapshot.regions, snapshot.playing_area)
    picker.set_override(override)

    point = Point(x=x, y=y)
    accepted = picker.select_location(point)
    region = get_region_for_point(point, snapshot.regions) if accepted else None
    logger.info(
        "Point queried",
        x=x,
        y=y,
        accepted=accepted,
        region_id=region.id if region else None,
    )
    return QueryResult(
        point=point,
        accepted=accepted,
        region=region,
        floors=picker.available_floors if accepted else None,
    )


def run_render(
    image_path: Path,
    store_path: Path,
    output_path: Path,
    *,
    selected_region_id: str | None = None,
) -> Path:
    """Draw the stored regions over a floor-plan image and save it."""
    snapshot = load_snapshot(store_path)
    renderer = RegionOverlayRenderer()
    with Image.open(image_path) as image:
        rendered = renderer.render(
            image,
            snapshot.regions,
            snapshot.playing_area,
            selected_region_id=selected_region_id,
        )
    output_path.parent.mkdir(parents=True, exist_ok=True)
    rendered.save(output_path)
    logger.info(
        "Overlay rendered",
        output=str(output_path),
        regions=len(snapshot.regions),
    )
    return output_path
