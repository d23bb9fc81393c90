"""Map location and floor picking for photo submission.

Each click on the map during submission is checked against the playing
area and the floor regions:

- outside the playing area: the click is rejected with a brief pulse and
  nothing is recorded
- inside: the location is recorded and the region containing it decides
  which floors can be chosen (no region means no floor selector)

An override switch lets staff bypass both checks when testing: any
location is accepted and every known floor is offered.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence

from mapfence.config import settings
from mapfence.geometry.primitives import Point
from mapfence.regions.cache import RegionCache
from mapfence.regions.exceptions import StoreError
from mapfence.regions.models import PlayingArea, Region
from mapfence.regions.queries import (
    DEFAULT_OVERLAP_POLICY,
    OverlapPolicy,
    get_floors_for_point,
    is_point_in_playing_area,
)
from mapfence.regions.store import RegionStore, Subscription
from mapfence.utils.logging import get_logger

logger = get_logger(__name__)

MSG_LOCATION_REQUIRED = "Please select a location on the map"
MSG_FLOOR_REQUIRED = "Please select a floor"
MSG_MAP_LOAD_FAILED = "Failed to load map regions"


def floor_label(floor: int) -> str:
    """Ordinal label for a floor number ("1st", "2nd", "3rd", "4th", ...)."""
    if 10 <= floor % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(floor % 10, "th")
    return f"{floor}{suffix}"


class LocationPicker:
    """Submission-form state for the chosen map point and floor.

    Args:
        all_floors: Floors offered when the override is on.
        reject_pulse_seconds: How long the rejected indicator stays lit.
        clock: Monotonic time source.
        policy: Overlap policy for choosing among overlapping regions.
    """

    def __init__(
        self,
        *,
        all_floors: Sequence[int] | None = None,
        reject_pulse_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        policy: OverlapPolicy = DEFAULT_OVERLAP_POLICY,
    ) -> None:
        self.all_floors = tuple(
            sorted(all_floors if all_floors is not None else settings.FLOOR_OPTIONS)
        )
        self.reject_pulse_seconds = (
            reject_pulse_seconds
            if reject_pulse_seconds is not None
            else settings.REJECT_PULSE_SECONDS
        )
        self.clock = clock
        self.policy = policy

        self.regions: list[Region] = []
        self.playing_area: PlayingArea | None = None
        self.load_error: str | None = None

        self.override = False
        self.location: Point | None = None
        self.available_floors: tuple[int, ...] | None = None
        self.floor: int | None = None
        self._rejected_at: float | None = None
        self._cache: RegionCache | None = None

    # ---------------------------------------------------------------- loading

    def load(self, regions: Sequence[Region], playing_area: PlayingArea | None) -> None:
        """Use the given map data for subsequent checks."""
        self.regions = list(regions)
        self.playing_area = playing_area

    async def load_from(self, store: RegionStore) -> bool:
        """Fetch regions and the playing area from the store.

        On failure the picker keeps working without restrictions and
        records an operator-facing message in ``load_error``.
        """
        try:
            regions = await store.load_regions()
            playing_area = await store.load_playing_area()
        except StoreError as exc:
            logger.error("Loading map regions failed", error=str(exc))
            self.load_error = MSG_MAP_LOAD_FAILED
            return False
        self.load_error = None
        self.load(regions, playing_area)
        return True

    def attach(self, store: RegionStore) -> Subscription:
        """Follow the store: every push replaces the map data.

        The current location is re-checked against each push, so a playing
        area that shrinks away from it clears the location, and a region
        edit updates the floors on offer.
        """
        self.detach()
        cache = RegionCache()
        cache.add_listener(self._on_map_changed)
        self._cache = cache
        return cache.attach(store)

    def detach(self) -> None:
        if self._cache is not None:
            self._cache.detach()
            self._cache = None

    # ------------------------------------------------------------------ state

    @property
    def rejected(self) -> bool:
        """Whether the rejected-click pulse is currently showing."""
        if self._rejected_at is None:
            return False
        if self.clock() - self._rejected_at >= self.reject_pulse_seconds:
            self._rejected_at = None
            return False
        return True

    @property
    def shows_floor_selector(self) -> bool:
        return bool(self.available_floors)

    @property
    def effective_playing_area(self) -> PlayingArea | None:
        """Playing area to draw on the map; hidden while overriding."""
        return None if self.override else self.playing_area

    # ---------------------------------------------------------------- actions

    def select_location(self, point: Point) -> bool:
        """Handle a map click. Returns False if the click was rejected."""
        if not self.override and not is_point_in_playing_area(point, self.playing_area):
            self._rejected_at = self.clock()
            logger.debug("Location outside playing area", x=point.x, y=point.y)
            return False

        self._rejected_at = None
        self.location = point
        if self.override:
            self.available_floors = self.all_floors
        else:
            self._apply_floors(get_floors_for_point(point, self.regions, self.policy))
        return True

    def select_floor(self, floor: int) -> bool:
        if not self.available_floors or floor not in self.available_floors:
            return False
        self.floor = floor
        return True

    def set_override(self, enabled: bool) -> None:
        """Toggle the override, re-evaluating the current location."""
        self.override = enabled
        self._recheck_location()

    def validate(self) -> str | None:
        """Return the first problem blocking submission, or None."""
        if self.location is None:
            return MSG_LOCATION_REQUIRED
        if self.shows_floor_selector and self.floor is None:
            return MSG_FLOOR_REQUIRED
        return None

    def reset(self) -> None:
        self.location = None
        self.floor = None
        self.available_floors = None
        self._rejected_at = None

    def _recheck_location(self) -> None:
        if self.location is None:
            return
        if self.override:
            self.available_floors = self.all_floors
            return
        if not is_point_in_playing_area(self.location, self.playing_area):
            self.location = None
            self.floor = None
            self.available_floors = None
            return
        self._apply_floors(
            get_floors_for_point(self.location, self.regions, self.policy)
        )

    def _on_map_changed(self, cache: RegionCache) -> None:
        if cache.load_error is not None:
            self.load_error = MSG_MAP_LOAD_FAILED
            return
        self.load_error = None
        self.load(cache.regions, cache.playing_area)
        self._recheck_location()

    def _apply_floors(self, floors: tuple[int, ...] | None) -> None:
        self.available_floors = floors
        if floors is None or (self.floor is not None and self.floor not in floors):
            self.floor = None
