"""
Final frame composition.

Combines the interlacing mask with either the calibration pattern or the two
stereo views into the output surface.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import BLACK, RGBA, TINT_GREEN, WHITE
from ..core.types import (
    CalibrationParameters,
    ColorMode,
    OutputGeometry,
    SafeMargins,
    VideoRatio,
)
from ..io.media_sources import StereoMediaSource
from .mask_generator import MaskGenerator
from .raster_surface import CompositeMode, RasterSurface
from .stereo_splitter import StereoSplitter


@dataclass
class FrameBuffers:
    """Surfaces reused across frames, all at the output size."""

    output: RasterSurface
    left_view: RasterSurface
    right_view: RasterSurface
    scratch: RasterSurface

    @classmethod
    def create(cls, width: int, height: int) -> FrameBuffers:
        return cls(
            output=RasterSurface(width, height),
            left_view=RasterSurface(width, height),
            right_view=RasterSurface(width, height),
            scratch=RasterSurface(width, height),
        )

    def resize(self, width: int, height: int) -> None:
        for surface in (self.output, self.left_view, self.right_view, self.scratch):
            surface.resize(width, height)


def stripe_color(color_mode: ColorMode, tint_color: RGBA = TINT_GREEN) -> RGBA:
    """PURE: Color used to recolor a MONO or TINTED mask."""
    return tint_color if color_mode is ColorMode.TINTED else WHITE


class Compositor:
    """
    Composites calibration patterns and stereo views through the mask.

    Responsibilities:
    - Calibration path: black background with white or tinted stripes
    - Stereo path: right view as base, left view visible under the stripes
    """

    def __init__(
        self,
        mask_generator: MaskGenerator | None = None,
        splitter: StereoSplitter | None = None,
        tint_color: RGBA = TINT_GREEN,
    ):
        """
        Initialize compositor.

        Args:
            mask_generator: Mask cache (a new one is created if omitted)
            splitter: SBS splitter (a new one is created if omitted)
            tint_color: Stripe color for TINTED mode
        """
        self.mask_generator = mask_generator or MaskGenerator()
        self.splitter = splitter or StereoSplitter()
        self.tint_color = tint_color

    def render_calibration(
        self, buffers: FrameBuffers, params: CalibrationParameters, geometry: OutputGeometry
    ) -> None:
        """
        Draw the calibration stripe pattern into ``buffers.output``.

        Args:
            buffers: Frame surfaces
            params: Calibration parameters
            geometry: Output geometry
        """
        mask = self.mask_generator.generate(params, geometry)

        output = buffers.output
        output.composite_mode = CompositeMode.SOURCE_OVER
        output.fill(BLACK)
        if mask is None:
            return

        if params.color_mode is ColorMode.RGB_SUBPIXEL:
            output.draw_surface(mask)
            return

        scratch = buffers.scratch
        scratch.composite_mode = CompositeMode.SOURCE_OVER
        scratch.clear()
        scratch.draw_surface(mask)
        scratch.composite_mode = CompositeMode.SOURCE_IN
        scratch.fill(stripe_color(params.color_mode, self.tint_color))
        scratch.composite_mode = CompositeMode.SOURCE_OVER

        output.draw_surface(scratch)

    def render_stereo(
        self,
        buffers: FrameBuffers,
        source: StereoMediaSource,
        params: CalibrationParameters,
        geometry: OutputGeometry,
        video_ratio: VideoRatio | str = VideoRatio.AUTO,
        margins: SafeMargins | None = None,
    ) -> bool:
        """
        Interlace the two halves of the current SBS frame into ``buffers.output``.

        The mask is used only as an alpha stencil, so RGB_SUBPIXEL stripes do
        not separate color channels here.

        Args:
            buffers: Frame surfaces
            source: Ready SBS media source
            params: Calibration parameters
            geometry: Output geometry
            video_ratio: Target aspect ratio override
            margins: Output pixels reserved by the UI

        Returns:
            True if a frame was composed, False if the placement was degenerate
            (the output is left untouched)
        """
        placement = self.splitter.compute_placement(source, geometry, video_ratio, margins)
        if placement is None:
            return False

        left_view, right_view = self.splitter.split(
            source, placement, buffers.left_view, buffers.right_view
        )
        mask = self.mask_generator.generate(params, geometry)

        output = buffers.output
        output.composite_mode = CompositeMode.SOURCE_OVER
        output.fill(BLACK)
        output.draw_surface(right_view)
        if mask is None:
            return True

        scratch = buffers.scratch
        scratch.composite_mode = CompositeMode.SOURCE_OVER
        scratch.clear()
        scratch.draw_surface(left_view)
        scratch.composite_mode = CompositeMode.DESTINATION_IN
        scratch.draw_surface(mask)
        scratch.composite_mode = CompositeMode.SOURCE_OVER

        output.draw_surface(scratch)
        return True
