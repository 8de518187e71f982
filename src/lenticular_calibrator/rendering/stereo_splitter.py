"""
Side-by-side stereo splitting.

Places the left and right halves of an SBS frame into two view buffers at a
letterboxed rectangle inside the drawable area of the output.
"""

from __future__ import annotations

import math

from ..core.constants import BLACK, ERROR_MESSAGES, VIDEO_RATIOS
from ..core.types import OutputGeometry, PlacementRect, SafeMargins, VideoRatio
from ..io.media_sources import StereoMediaSource
from .raster_surface import RasterSurface


def resolve_media_aspect(
    split_width: float, source_height: float, video_ratio: VideoRatio | str = VideoRatio.AUTO
) -> float:
    """
    PURE: Aspect ratio used to place one eye's view.

    Args:
        split_width: Width of one half of the SBS frame
        source_height: Height of the SBS frame
        video_ratio: Target ratio override, or "auto" to use the media aspect

    Returns:
        Width/height ratio (NaN if the media has no height)

    Raises:
        ValueError: If video_ratio is not a known ratio
    """
    ratio = VideoRatio(video_ratio)
    if ratio is not VideoRatio.AUTO:
        return VIDEO_RATIOS[ratio.value]
    if source_height == 0:
        return math.nan
    return split_width / source_height


def compute_available_area(
    geometry: OutputGeometry, margins: SafeMargins | None = None
) -> PlacementRect:
    """PURE: Output area left after removing the UI margins."""
    margins = margins or SafeMargins()
    return PlacementRect(
        x=margins.left,
        y=margins.top,
        width=geometry.width - margins.left - margins.right,
        height=geometry.height - margins.top - margins.bottom,
    )


def compute_letterbox_rect(media_aspect: float, area: PlacementRect) -> PlacementRect | None:
    """
    PURE: Largest rectangle of the media aspect centered inside an area.

    Media wider than the area fits its width and is centered vertically;
    otherwise it fits the height and is centered horizontally.

    Args:
        media_aspect: Width/height of the media
        area: Drawable area

    Returns:
        Placement rectangle, or None if the result is not drawable
    """
    if not area.is_drawable:
        return None

    if media_aspect > area.aspect:
        draw_w = area.width
        draw_h = area.width / media_aspect
        draw_x = area.x
        draw_y = area.y + (area.height - draw_h) / 2
    else:
        draw_h = area.height
        draw_w = area.height * media_aspect
        draw_x = area.x + (area.width - draw_w) / 2
        draw_y = area.y

    rect = PlacementRect(draw_x, draw_y, draw_w, draw_h)
    return rect if rect.is_drawable else None


class StereoSplitter:
    """
    Renders each half of an SBS frame into its own view buffer.

    Responsibilities:
    - Resolve the media aspect and the letterbox placement
    - Fill both views with black and draw each half, unsmoothed
    """

    def compute_placement(
        self,
        source: StereoMediaSource,
        geometry: OutputGeometry,
        video_ratio: VideoRatio | str = VideoRatio.AUTO,
        margins: SafeMargins | None = None,
    ) -> PlacementRect | None:
        """
        Letterbox rectangle for one eye's view.

        Returns:
            Placement rectangle, or None for degenerate geometry
        """
        split_width = source.source_width / 2
        media_aspect = resolve_media_aspect(split_width, source.source_height, video_ratio)
        area = compute_available_area(geometry, margins)
        return compute_letterbox_rect(media_aspect, area)

    def split(
        self,
        source: StereoMediaSource,
        placement: PlacementRect,
        left_view: RasterSurface,
        right_view: RasterSurface,
    ) -> tuple[RasterSurface, RasterSurface]:
        """
        Draw the left and right halves of the current frame.

        Args:
            source: Ready SBS media source
            placement: Destination rectangle shared by both views
            left_view: Buffer receiving x in [0, split_width)
            right_view: Buffer receiving x in [split_width, 2 * split_width)

        Returns:
            Tuple of (left_view, right_view)

        Raises:
            ValueError: If the source has no frame to draw
        """
        frame = source.current_frame()
        if frame is None:
            raise ValueError(ERROR_MESSAGES["media_not_ready"])

        split_width = source.source_width / 2
        source_height = source.source_height

        for view, source_x in ((left_view, 0.0), (right_view, split_width)):
            view.image_smoothing = False
            view.fill(BLACK)
            view.draw_image_region(
                frame,
                source_x,
                0,
                split_width,
                source_height,
                placement.x,
                placement.y,
                placement.width,
                placement.height,
            )

        return left_view, right_view
