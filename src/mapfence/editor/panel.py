"""Region management panel.

Holds the edit buffer for the selected region (name, floors, colour) and
the confirmation guards for destructive actions. Nothing here talks to the
store: ``build_update`` produces the single ``RegionUpdate`` the map editor
sends when the operator saves.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from mapfence.config import settings
from mapfence.drawing.confirm import ConfirmAction
from mapfence.regions.exceptions import FloorConstraintError
from mapfence.regions.models import DEFAULT_REGION_COLOR, Region, RegionUpdate
from mapfence.utils.logging import get_logger

logger = get_logger(__name__)


def format_floors(floors: Iterable[int]) -> str:
    """Human-readable floor list: "None", "Floor 2" or "Floors 1, 3"."""
    ordered = sorted(floors)
    if not ordered:
        return "None"
    if len(ordered) == 1:
        return f"Floor {ordered[0]}"
    return f"Floors {', '.join(str(f) for f in ordered)}"


def remove_floor(floors: tuple[int, ...], floor: int) -> tuple[int, ...]:
    """Return ``floors`` without ``floor``.

    Raises:
        FloorConstraintError: If ``floor`` is the only floor left.
    """
    remaining = tuple(f for f in floors if f != floor)
    if not remaining:
        raise FloorConstraintError(
            f"Cannot remove floor {floor}: a region needs at least one floor",
            operation="toggle_floor",
        )
    return remaining


def _new_confirm() -> ConfirmAction:
    return ConfirmAction(timeout_seconds=settings.CONFIRM_TIMEOUT_SECONDS)


@dataclass
class RegionPanel:
    """Edit buffer and confirmation state for the management panel.

    Attributes:
        floor_options: Floors offered as toggles.
        region_id: Region currently loaded into the buffer.
        name: Buffered name.
        floors: Buffered floors, sorted ascending, never empty once loaded.
        color: Buffered colour.
    """

    floor_options: tuple[int, ...] = field(default_factory=lambda: settings.FLOOR_OPTIONS)
    region_id: str | None = None
    name: str = ""
    floors: tuple[int, ...] = ()
    color: str = DEFAULT_REGION_COLOR
    delete_confirm: ConfirmAction = field(default_factory=_new_confirm)
    remove_playing_area_confirm: ConfirmAction = field(default_factory=_new_confirm)

    def load(self, region: Region | None) -> None:
        """Load the selected region into the buffer (or clear it)."""
        self.delete_confirm.disarm()
        if region is None:
            self.region_id = None
            self.name = ""
            self.floors = ()
            self.color = DEFAULT_REGION_COLOR
            return
        self.region_id = region.id
        self.name = region.name
        self.floors = tuple(sorted(region.floors)) or (settings.DEFAULT_FLOOR,)
        self.color = region.color or DEFAULT_REGION_COLOR

    @property
    def has_region(self) -> bool:
        return self.region_id is not None

    def set_name(self, name: str) -> None:
        self.name = name

    def set_color(self, color: str) -> None:
        self.color = color

    def toggle_floor(self, floor: int) -> bool:
        """Add or remove a floor. Removing the last floor is refused.

        Returns:
            True if the buffer changed.
        """
        if not self.has_region:
            return False
        if floor in self.floors:
            try:
                self.floors = remove_floor(self.floors, floor)
            except FloorConstraintError as exc:
                logger.debug("Floor toggle refused", region_id=self.region_id, reason=str(exc))
                return False
        else:
            self.floors = tuple(sorted((*self.floors, floor)))
        return True

    @property
    def floors_label(self) -> str:
        return format_floors(self.floors)

    def build_update(self) -> RegionUpdate | None:
        """The update that saving the buffer would send, or None if empty."""
        if not self.has_region:
            return None
        return RegionUpdate(
            name=self.name,
            floors=tuple(sorted(self.floors)),
            color=self.color,
        )

    # --------------------------------------------------------- confirmations

    def press_delete(self) -> bool:
        """Delete button pressed; True on the confirming second press."""
        if not self.has_region:
            return False
        return self.delete_confirm.press()

    def blur_delete(self) -> None:
        self.delete_confirm.blur()

    def press_remove_playing_area(self) -> bool:
        """Remove-playing-area button pressed; True on the confirming press."""
        return self.remove_playing_area_confirm.press()

    def blur_remove_playing_area(self) -> None:
        self.remove_playing_area_confirm.blur()
