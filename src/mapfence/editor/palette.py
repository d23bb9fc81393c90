"""Region colour assignment."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from mapfence.config import settings


@dataclass
class ColorPalette:
    """Fixed palette handed out round-robin.

    Consecutive regions always get different colours as long as the
    palette has more than one entry.
    """

    colors: Sequence[str] = field(default_factory=settings.require_region_colors)
    _next: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if not self.colors:
            raise ValueError("ColorPalette needs at least one colour")

    def next_color(self) -> str:
        color = self.colors[self._next % len(self.colors)]
        self._next += 1
        return color

    def seed(self, used: int) -> None:
        """Continue the rotation after ``used`` existing regions."""
        self._next = used
