"""
Per-refresh render driver.

The loop holds no timer: the caller invokes ``tick`` once per display refresh
and presents the returned surface. A failed frame is reported and skipped,
never propagated.
"""

from __future__ import annotations

import traceback

from ..core.types import (
    CalibrationParameters,
    OutputGeometry,
    RenderState,
    SafeMargins,
    VideoRatio,
)
from ..io.media_sources import StereoMediaSource
from ..utils.console import warning
from .compositor import Compositor, FrameBuffers
from .raster_surface import RasterSurface


def derive_render_state(media_present: bool, media_ready: bool, is_playing: bool) -> RenderState:
    """
    PURE: Render state for the current inputs.

    A present and decoded source is shown in stereo. Anything else falls
    back to the calibration pattern.

    ``is_playing`` is part of the input triple but never changes the result:
    a paused source keeps its last decoded frame on screen in stereo, it just
    stops advancing (the caller owns advancing).

    Args:
        media_present: A media source is attached
        media_ready: The source has a decoded frame with nonzero size
        is_playing: Playback intent (unused for state selection)

    Returns:
        RenderState for this tick
    """
    if media_present and media_ready:
        return RenderState.STEREO_PLAYBACK
    return RenderState.CALIBRATION


class FrameLoop:
    """
    Drives the compositor once per tick.

    Responsibilities:
    - Own the frame buffers and resize them with the output
    - Invalidate the mask on resize
    - Pick the calibration or stereo path every tick
    - Isolate per-frame failures
    """

    def __init__(
        self,
        geometry: OutputGeometry,
        compositor: Compositor | None = None,
        verbose: bool = False,
    ):
        """
        Initialize frame loop.

        Args:
            geometry: Initial output geometry
            compositor: Compositor to drive (a new one is created if omitted)
            verbose: Print tracebacks for failed frames
        """
        self.verbose = verbose
        self.compositor = compositor or Compositor()
        self.geometry = geometry
        self.buffers = FrameBuffers.create(geometry.width, geometry.height)
        self.state = RenderState.CALIBRATION
        self.frame_count = 0
        self.skipped_count = 0
        self.failure_count = 0

    @property
    def output(self) -> RasterSurface:
        return self.buffers.output

    def resize(self, geometry: OutputGeometry) -> bool:
        """
        Resize every surface to a new output geometry.

        Args:
            geometry: New output geometry

        Returns:
            True if anything changed
        """
        if geometry == self.geometry:
            return False

        self.buffers.resize(geometry.width, geometry.height)
        self.compositor.mask_generator.resize(geometry.width, geometry.height)
        self.geometry = geometry
        return True

    def tick(
        self,
        params: CalibrationParameters,
        media: StereoMediaSource | None = None,
        is_playing: bool = False,
        video_ratio: VideoRatio | str = VideoRatio.AUTO,
        margins: SafeMargins | None = None,
    ) -> RasterSurface:
        """
        Render one frame.

        Args:
            params: Calibration parameters for this frame
            media: Attached SBS media source, if any
            is_playing: Playback intent (a paused ready source still renders in stereo)
            video_ratio: Target aspect ratio override for the stereo views
            margins: Output pixels reserved by the UI

        Returns:
            The output surface (previous content if the frame was skipped)
        """
        self.frame_count += 1
        try:
            media_ready = media is not None and media.ready_for_draw()
            self.state = derive_render_state(media is not None, media_ready, is_playing)

            if self.state is RenderState.STEREO_PLAYBACK:
                composed = self.compositor.render_stereo(
                    self.buffers, media, params, self.geometry, video_ratio, margins
                )
                if not composed:
                    self.skipped_count += 1
            else:
                self.compositor.render_calibration(self.buffers, params, self.geometry)

        except Exception as e:
            self.failure_count += 1
            print(warning(f"Render loop warning: {e}"))
            if self.verbose:
                traceback.print_exc()

        return self.buffers.output
