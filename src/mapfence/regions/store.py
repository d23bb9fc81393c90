"""Persistent store adapters for regions and the playing area.

The store is the single authority on saved geometry. Every successful
mutation is pushed to subscribers as the complete current region list (or
the current playing area), the way a document database's real-time
listener delivers snapshots. Clients never assume a mutation applied until
that push arrives.

Regions are always delivered in creation order. Query code relies on this
for first-match overlap resolution.
"""

from __future__ import annotations

import asyncio
import os
import tempfile
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, Field, ValidationError

from mapfence.geometry.primitives import Point
from mapfence.regions.exceptions import RegionNotFoundError, StoreError
from mapfence.regions.models import (
    PlayingArea,
    Region,
    RegionDefaults,
    RegionUpdate,
    utc_now,
)
from mapfence.utils.logging import get_logger

logger = get_logger(__name__)

RegionsCallback = Callable[[list[Region]], None]
PlayingAreaCallback = Callable[[PlayingArea | None], None]
ErrorCallback = Callable[[StoreError], None]


@dataclass
class Subscription:
    """Handle returned by ``subscribe``; call ``close`` to stop receiving pushes."""

    _unsubscribe: Callable[[], None]
    closed: bool = False

    def close(self) -> None:
        if not self.closed:
            self._unsubscribe()
            self.closed = True


class RegionStore(Protocol):
    """Protocol for the persistent collaborator holding regions.

    Implementations raise StoreError from any method whose effect could not
    be applied, and push the new state to subscribers after every
    successful mutation.
    """

    async def load_regions(self) -> list[Region]:
        """Return all regions in creation order."""
        ...

    async def load_playing_area(self) -> PlayingArea | None:
        """Return the playing area, or None when unrestricted."""
        ...

    async def create_region(
        self, polygon: Sequence[Point], defaults: RegionDefaults
    ) -> Region:
        """Persist a new region and return it with its assigned id."""
        ...

    async def update_region(self, region_id: str, update: RegionUpdate) -> None:
        """Apply a partial update to an existing region."""
        ...

    async def delete_region(self, region_id: str) -> None:
        """Delete a region."""
        ...

    async def set_playing_area(self, polygon: Sequence[Point]) -> PlayingArea:
        """Replace the playing area atomically."""
        ...

    async def delete_playing_area(self) -> None:
        """Remove the playing area, lifting the restriction."""
        ...

    def subscribe(
        self,
        on_regions: RegionsCallback,
        on_playing_area: PlayingAreaCallback,
        on_error: ErrorCallback | None = None,
    ) -> Subscription:
        """Register push callbacks; current state is delivered immediately."""
        ...


@dataclass
class _Subscriber:
    on_regions: RegionsCallback
    on_playing_area: PlayingAreaCallback
    on_error: ErrorCallback | None


@dataclass
class InMemoryRegionStore:
    """Region store held in process memory.

    Used by tests and as the shared backend of several editors in one
    process, where it behaves like a remote store: a mutation made through
    one client is pushed to every subscriber.

    Attributes:
        clock: Source of server timestamps.
        fail_on: Operation names that raise StoreError instead of applying
            (e.g. ``{"update_region"}``), for exercising failure paths.
    """

    clock: Callable[[], datetime] = utc_now
    fail_on: set[str] = field(default_factory=set)

    _regions: dict[str, Region] = field(default_factory=dict, init=False)
    _playing_area: PlayingArea | None = field(default=None, init=False)
    _subscribers: list[_Subscriber] = field(default_factory=list, init=False)
    _loaded: bool = field(default=False, init=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False)

    # ------------------------------------------------------------------ reads

    async def load_regions(self) -> list[Region]:
        await self._ready()
        return self._ordered_regions()

    async def load_playing_area(self) -> PlayingArea | None:
        await self._ready()
        return self._playing_area

    # -------------------------------------------------------------- mutations

    async def create_region(
        self, polygon: Sequence[Point], defaults: RegionDefaults
    ) -> Region:
        async with self._lock:
            await self._ready()
            now = self.clock()
            try:
                region = Region(
                    id=uuid.uuid4().hex,
                    name=defaults.name,
                    polygon=tuple(polygon),
                    floors=defaults.floors,
                    color=defaults.color,
                    created_at=now,
                    updated_at=now,
                )
            except ValidationError as exc:
                raise StoreError(
                    f"Rejected region document: {exc.error_count()} validation errors",
                    operation="create_region",
                ) from exc
            regions = {**self._regions, region.id: region}
            await self._commit("create_region", regions, self._playing_area)
            logger.info("Region created", region_id=region.id, vertices=len(polygon))
            self._notify_regions()
            return region

    async def update_region(self, region_id: str, update: RegionUpdate) -> None:
        async with self._lock:
            await self._ready()
            current = self._regions.get(region_id)
            if current is None:
                raise RegionNotFoundError(
                    "Region does not exist",
                    region_id=region_id,
                    operation="update_region",
                )
            try:
                updated = current.apply(update, updated_at=self.clock())
            except ValidationError as exc:
                raise StoreError(
                    f"Rejected region update: {exc.error_count()} validation errors",
                    region_id=region_id,
                    operation="update_region",
                ) from exc
            regions = {**self._regions, region_id: updated}
            await self._commit(
                "update_region", regions, self._playing_area, region_id=region_id
            )
            logger.debug(
                "Region updated",
                region_id=region_id,
                fields=sorted(update.model_dump(exclude_none=True)),
            )
            self._notify_regions()

    async def delete_region(self, region_id: str) -> None:
        async with self._lock:
            await self._ready()
            if region_id not in self._regions:
                raise RegionNotFoundError(
                    "Region does not exist",
                    region_id=region_id,
                    operation="delete_region",
                )
            regions = {k: v for k, v in self._regions.items() if k != region_id}
            await self._commit(
                "delete_region", regions, self._playing_area, region_id=region_id
            )
            logger.info("Region deleted", region_id=region_id)
            self._notify_regions()

    async def set_playing_area(self, polygon: Sequence[Point]) -> PlayingArea:
        async with self._lock:
            await self._ready()
            try:
                area = PlayingArea(polygon=tuple(polygon), updated_at=self.clock())
            except ValidationError as exc:
                raise StoreError(
                    f"Rejected playing area: {exc.error_count()} validation errors",
                    operation="set_playing_area",
                ) from exc
            await self._commit("set_playing_area", self._regions, area)
            logger.info("Playing area replaced", vertices=len(polygon))
            self._notify_playing_area()
            return area

    async def delete_playing_area(self) -> None:
        async with self._lock:
            await self._ready()
            await self._commit("delete_playing_area", self._regions, None)
            logger.info("Playing area removed")
            self._notify_playing_area()

    # ----------------------------------------------------------- subscription

    def subscribe(
        self,
        on_regions: RegionsCallback,
        on_playing_area: PlayingAreaCallback,
        on_error: ErrorCallback | None = None,
    ) -> Subscription:
        subscriber = _Subscriber(on_regions, on_playing_area, on_error)
        self._subscribers.append(subscriber)

        def _unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        try:
            self._ensure_loaded()
        except StoreError as exc:
            logger.error("Initial load failed", error=str(exc))
            if on_error is not None:
                on_error(exc)
            return Subscription(_unsubscribe)

        on_regions(self._ordered_regions())
        on_playing_area(self._playing_area)
        return Subscription(_unsubscribe)

    # --------------------------------------------------------------- internal

    def _ordered_regions(self) -> list[Region]:
        # dict order is insertion order; sorted() is stable for equal stamps
        return sorted(self._regions.values(), key=lambda r: r.created_at)

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self._regions, self._playing_area = self._load()
            self._loaded = True

    async def _ready(self) -> None:
        """Load the backing state off the event loop, once."""
        if self._loaded:
            return
        regions, playing_area = await asyncio.to_thread(self._load)
        # a subscriber may have loaded synchronously while the read ran
        if not self._loaded:
            self._regions, self._playing_area = regions, playing_area
            self._loaded = True

    def _load(self) -> tuple[dict[str, Region], PlayingArea | None]:
        if "load" in self.fail_on:
            raise StoreError("Store unavailable", operation="load")
        return {}, None

    def _persist(
        self,
        operation: str,
        regions: dict[str, Region],
        playing_area: PlayingArea | None,
    ) -> None:
        _ = regions, playing_area
        if operation in self.fail_on:
            raise StoreError("Store rejected the write", operation=operation)

    async def _commit(
        self,
        operation: str,
        regions: dict[str, Region],
        playing_area: PlayingArea | None,
        *,
        region_id: str | None = None,
    ) -> None:
        try:
            await asyncio.to_thread(self._persist, operation, regions, playing_area)
        except StoreError as exc:
            logger.error("Store write failed", operation=operation, error=str(exc))
            if exc.region_id is None and region_id is not None:
                raise StoreError(
                    exc.message, region_id=region_id, operation=operation
                ) from exc
            raise
        self._regions = regions
        self._playing_area = playing_area

    def _notify_regions(self) -> None:
        snapshot = self._ordered_regions()
        for subscriber in list(self._subscribers):
            subscriber.on_regions(list(snapshot))

    def _notify_playing_area(self) -> None:
        for subscriber in list(self._subscribers):
            subscriber.on_playing_area(self._playing_area)


class StoreDocument(BaseModel):
    """On-disk layout of a JSON-file store."""

    regions: list[Region] = Field(default_factory=list)
    playing_area: PlayingArea | None = None


@dataclass
class JsonFileRegionStore(InMemoryRegionStore):
    """Region store persisted as a single JSON document on disk.

    A missing file is an empty store. Writes go to a temporary file in the
    same directory and are renamed over the document, so a failed write
    leaves the previous document and the in-memory state untouched.
    """

    path: Path = Path("regions.json")

    def _load(self) -> tuple[dict[str, Region], PlayingArea | None]:
        super()._load()
        if not self.path.exists():
            logger.debug("Store file absent, starting empty", path=str(self.path))
            return {}, None
        try:
            document = StoreDocument.model_validate_json(self.path.read_text("utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as exc:
            raise StoreError(
                f"Cannot read store document {self.path}: {exc}", operation="load"
            ) from exc
        regions = {r.id: r for r in sorted(document.regions, key=lambda r: r.created_at)}
        logger.debug(
            "Store loaded",
            path=str(self.path),
            regions=len(regions),
            playing_area=document.playing_area is not None,
        )
        return regions, document.playing_area

    def _persist(
        self,
        operation: str,
        regions: dict[str, Region],
        playing_area: PlayingArea | None,
    ) -> None:
        super()._persist(operation, regions, playing_area)
        document = StoreDocument(regions=list(regions.values()), playing_area=playing_area)
        payload = document.model_dump_json(indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StoreError(
                f"Cannot write store document {self.path}: {exc}", operation=operation
            ) from exc
