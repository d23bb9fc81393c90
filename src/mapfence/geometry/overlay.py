"""Region overlay rendering for mapfence.

This module draws the playing area and the floor regions onto a copy of
the floor-plan image so operators can preview geometry outside the
interactive editor. Polygons are stored in percentage space, so every
vertex is scaled by the target image size before drawing.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from PIL import Image, ImageColor, ImageDraw, ImageFont

from mapfence.geometry.polygon import centroid, polygon_bounds
from mapfence.geometry.primitives import Polygon

if TYPE_CHECKING:
    from mapfence.regions.models import PlayingArea, Region

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverlayStyle:
    """Configuration for region overlay styling.

    Attributes:
        playing_area_color: Hex color for the playing-area boundary.
        playing_area_alpha: Fill alpha (0-255) for the playing area.
        region_alpha: Fill alpha for unselected regions.
        selected_alpha: Fill alpha for the selected region.
        selected_outline: Hex outline color of the selected region.
        line_width: Outline width in pixels.
        handle_radius: Vertex handle radius in pixels (selected region only).
        region_color: Hex fill for regions without a colour of their own.
        label_color: RGBA color for region name labels.
        font_size: Font size for labels.
    """

    playing_area_color: str = "#27ae60"
    playing_area_alpha: int = 26
    region_alpha: int = 77
    selected_alpha: int = 128
    selected_outline: str = "#2c3e50"
    line_width: int = 2
    handle_radius: int = 5
    region_color: str = "#4a90d9"
    label_color: tuple[int, int, int, int] = (44, 62, 80, 255)
    font_size: int = 14


class RegionOverlayRenderer:
    """Renders percentage-space regions onto a floor-plan image.

    Regions are drawn in the order given, on top of the playing area, so
    later regions paint over earlier ones where they overlap.
    """

    def __init__(self, style: OverlayStyle | None = None) -> None:
        """Initialize the renderer with optional custom styling.

        Args:
            style: Visual styling configuration. Uses defaults if not provided.
        """
        self.style = style or OverlayStyle()

    def render(
        self,
        image: Image.Image,
        regions: Sequence[Region],
        playing_area: PlayingArea | None = None,
        *,
        selected_region_id: str | None = None,
    ) -> Image.Image:
        """Composite the overlay onto the image.

        Args:
            image: Floor-plan image (any mode).
            regions: Regions to draw, in draw order.
            playing_area: Optional playing-area boundary.
            selected_region_id: Region drawn emphasised with vertex handles.

        Returns:
            RGB image with regions and playing area drawn.
        """
        base = image.convert("RGBA")
        overlay = Image.new("RGBA", base.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        font = self._get_font()

        if playing_area is not None:
            self._draw_polygon(
                draw,
                playing_area.polygon,
                base.size,
                color=self.style.playing_area_color,
                alpha=self.style.playing_area_alpha,
                outline=self.style.playing_area_color,
            )

        for region in regions:
            selected = region.id == selected_region_id
            color = region.color or self.style.region_color
            self._draw_polygon(
                draw,
                region.polygon,
                base.size,
                color=color,
                alpha=self.style.selected_alpha if selected else self.style.region_alpha,
                outline=self.style.selected_outline if selected else color,
            )
            if selected:
                self._draw_handles(draw, region.polygon, base.size)
            self._draw_label(draw, region, base.size, font)

        composited = Image.alpha_composite(base, overlay)
        return composited.convert("RGB")

    @staticmethod
    def _scale(
        coord: tuple[float, float], size: tuple[int, int]
    ) -> tuple[float, float]:
        return (coord[0] / 100.0 * size[0], coord[1] / 100.0 * size[1])

    def _draw_polygon(
        self,
        draw: ImageDraw.ImageDraw,
        polygon: Polygon,
        size: tuple[int, int],
        *,
        color: str,
        alpha: int,
        outline: str,
    ) -> None:
        if len(polygon) < 3:
            logger.warning("Skipping degenerate polygon with %d points", len(polygon))
            return
        rgb = ImageColor.getrgb(color)[:3]
        outline_rgb = ImageColor.getrgb(outline)[:3]
        points = [self._scale(p.to_tuple(), size) for p in polygon]
        draw.polygon(
            points,
            fill=(*rgb, alpha),
            outline=(*outline_rgb, 255),
            width=self.style.line_width,
        )

    def _draw_label(
        self,
        draw: ImageDraw.ImageDraw,
        region: Region,
        size: tuple[int, int],
        font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
    ) -> None:
        """Write the region name at its centroid if it fits the region's width."""
        if not region.name:
            return
        left, _, right, _ = polygon_bounds(region.polygon)
        region_width = (right - left) / 100.0 * size[0]
        if draw.textlength(region.name, font=font) > region_width:
            logger.debug("Label for region %s wider than the region, skipped", region.id)
            return
        draw.text(
            self._scale(centroid(region.polygon).to_tuple(), size),
            region.name,
            fill=self.style.label_color,
            font=font,
            anchor="mm",
        )

    def _draw_handles(
        self,
        draw: ImageDraw.ImageDraw,
        polygon: Polygon,
        size: tuple[int, int],
    ) -> None:
        r = self.style.handle_radius
        outline_rgb = ImageColor.getrgb(self.style.selected_outline)[:3]
        for point in polygon:
            cx, cy = self._scale(point.to_tuple(), size)
            draw.ellipse(
                [(cx - r, cy - r), (cx + r, cy + r)],
                fill=(255, 255, 255, 255),
                outline=(*outline_rgb, 255),
            )

    def _get_font(self) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        """Get font for labels, with fallback to default."""
        try:
            return ImageFont.truetype("DejaVuSans.ttf", self.style.font_size)
        except OSError:
            try:
                return ImageFont.truetype("Arial.ttf", self.style.font_size)
            except OSError:
                logger.warning(
                    "No TrueType fonts available (DejaVuSans.ttf, Arial.ttf). "
                    "Using low-resolution default font."
                )
                return ImageFont.load_default()
