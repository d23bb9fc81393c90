"""Subscription-fed cache of regions and the playing area.

The cache is the only place region state is held on the client side, and
only store pushes replace its authoritative contents. UI code may lay a
provisional value over a region (for example a vertex mid-drag) so the
screen responds before the round-trip completes; the next push discards
every provisional value, so the screen always converges on what is saved.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from mapfence.regions.exceptions import StoreError
from mapfence.regions.models import PlayingArea, Region
from mapfence.regions.store import RegionStore, Subscription
from mapfence.utils.logging import get_logger

logger = get_logger(__name__)

ChangeListener = Callable[["RegionCache"], None]


@dataclass
class RegionCache:
    """Owned copy of the store's region list and playing area.

    Attributes:
        loaded: True once the first region push has arrived.
        load_error: The error reported by the subscription, if any.
    """

    loaded: bool = False
    load_error: StoreError | None = None

    _regions: list[Region] = field(default_factory=list, init=False)
    _playing_area: PlayingArea | None = field(default=None, init=False)
    _provisional: dict[str, Region] = field(default_factory=dict, init=False)
    _listeners: list[ChangeListener] = field(default_factory=list, init=False)
    _subscription: Subscription | None = field(default=None, init=False)

    # ----------------------------------------------------------- store wiring

    def attach(self, store: RegionStore) -> Subscription:
        """Subscribe to the store; pushes replace the cached state."""
        self.detach()
        self._subscription = store.subscribe(
            self.on_regions, self.on_playing_area, self.on_error
        )
        return self._subscription

    def detach(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    def on_regions(self, regions: list[Region]) -> None:
        """Authoritative region push from the store."""
        self._regions = list(regions)
        self._provisional.clear()
        self.loaded = True
        self.load_error = None
        logger.debug("Region snapshot received", regions=len(regions))
        self._fire()

    def on_playing_area(self, playing_area: PlayingArea | None) -> None:
        """Authoritative playing-area push from the store."""
        self._playing_area = playing_area
        logger.debug("Playing area snapshot received", present=playing_area is not None)
        self._fire()

    def on_error(self, error: StoreError) -> None:
        self.load_error = error
        self.loaded = True
        logger.error("Region subscription failed", error=str(error))
        self._fire()

    # ------------------------------------------------------------------ views

    @property
    def regions(self) -> list[Region]:
        """Regions in creation order, with provisional values laid over."""
        return [self._provisional.get(r.id, r) for r in self._regions]

    @property
    def authoritative_regions(self) -> list[Region]:
        """Regions exactly as last pushed by the store."""
        return list(self._regions)

    @property
    def playing_area(self) -> PlayingArea | None:
        return self._playing_area

    def get(self, region_id: str) -> Region | None:
        """Look up a region (provisional view) by id."""
        for region in self.regions:
            if region.id == region_id:
                return region
        return None

    def has_provisional(self, region_id: str) -> bool:
        return region_id in self._provisional

    # ------------------------------------------------------------ provisional

    def apply_provisional(self, region: Region) -> None:
        """Show an interim version of a known region until the next push."""
        if not any(r.id == region.id for r in self._regions):
            logger.debug("Ignoring provisional value for unknown region", region_id=region.id)
            return
        self._provisional[region.id] = region
        self._fire()

    def discard_provisional(self, region_id: str) -> None:
        """Drop an interim value, e.g. after its write failed."""
        if self._provisional.pop(region_id, None) is not None:
            self._fire()

    # -------------------------------------------------------------- listeners

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def _fire(self) -> None:
        for listener in list(self._listeners):
            listener(self)
