"""Unit tests for the frame loop."""

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from lenticular_calibrator.core.types import (
    CalibrationParameters,
    OutputGeometry,
    RenderState,
    SafeMargins,
)
from lenticular_calibrator.io.media_sources import ImageSource
from lenticular_calibrator.rendering.compositor import Compositor
from lenticular_calibrator.rendering.frame_loop import FrameLoop, derive_render_state

PARAMS = CalibrationParameters(lpi=10.0, base_ppi=300.0, stripe_thickness=0.5)


def make_sbs_source(eye_width: int = 60, height: int = 10) -> ImageSource:
    image = np.zeros((height, eye_width * 2, 3), dtype=np.uint8)
    image[:, :eye_width] = [255, 0, 0]
    image[:, eye_width:] = [0, 0, 255]
    return ImageSource(image)


class TestDeriveRenderState:
    """Test render state selection."""

    @pytest.mark.parametrize(
        "present,ready,playing,expected",
        [
            (False, False, False, RenderState.CALIBRATION),
            (False, False, True, RenderState.CALIBRATION),
            (True, False, False, RenderState.CALIBRATION),
            (True, False, True, RenderState.CALIBRATION),
            (True, True, True, RenderState.STEREO_PLAYBACK),
            (True, True, False, RenderState.STEREO_PLAYBACK),
        ],
    )
    def test_state_table(self, present, ready, playing, expected):
        """Test every combination of media presence, readiness and playback."""
        assert derive_render_state(present, ready, playing) is expected


class TestFrameLoopTick:
    """Test per-tick path selection."""

    def test_no_media_renders_calibration(self):
        """Test that the calibration path runs without media."""
        loop = FrameLoop(OutputGeometry(60, 10))
        surface = loop.tick(PARAMS)

        assert loop.state is RenderState.CALIBRATION
        assert surface is loop.output
        assert np.all(surface.to_rgba8()[:, 0:15] == [255, 255, 255, 255])

    def test_not_ready_media_falls_back_to_calibration(self):
        """Test that an undecoded source is not drawn even while playing."""
        compositor = MagicMock(spec=Compositor)
        compositor.mask_generator = MagicMock()
        loop = FrameLoop(OutputGeometry(60, 10), compositor=compositor)

        loop.tick(PARAMS, media=ImageSource(None), is_playing=True)

        assert loop.state is RenderState.CALIBRATION
        compositor.render_calibration.assert_called_once()
        compositor.render_stereo.assert_not_called()

    def test_ready_media_renders_stereo(self):
        """Test that a ready source is interlaced."""
        loop = FrameLoop(OutputGeometry(60, 10))
        surface = loop.tick(PARAMS, media=make_sbs_source(), is_playing=True)

        rgba = surface.to_rgba8()
        assert loop.state is RenderState.STEREO_PLAYBACK
        assert np.all(rgba[:, 0:15] == [255, 0, 0, 255])
        assert np.all(rgba[:, 15:30] == [0, 0, 255, 255])

    def test_paused_media_keeps_stereo(self):
        """Test that pausing keeps the current frame on screen."""
        loop = FrameLoop(OutputGeometry(60, 10))
        loop.tick(PARAMS, media=make_sbs_source(), is_playing=False)
        assert loop.state is RenderState.STEREO_PLAYBACK

    def test_pause_toggle_keeps_same_frame(self):
        """Test that toggling playback on a ready source changes neither state nor output."""
        source = make_sbs_source()
        loop = FrameLoop(OutputGeometry(60, 10))

        playing = loop.tick(PARAMS, media=source, is_playing=True).to_rgba8()
        paused = loop.tick(PARAMS, media=source, is_playing=False).to_rgba8()

        assert loop.state is RenderState.STEREO_PLAYBACK
        assert np.array_equal(playing, paused)

    def test_every_tick_renders(self):
        """Test that frames are drawn even when nothing changed."""
        loop = FrameLoop(OutputGeometry(60, 10))
        with patch.object(
            loop.compositor, "render_calibration", wraps=loop.compositor.render_calibration
        ) as spy:
            for _ in range(4):
                loop.tick(PARAMS)

        assert spy.call_count == 4
        assert loop.frame_count == 4
        assert loop.compositor.mask_generator.regeneration_count == 1

    def test_degenerate_placement_is_skipped(self):
        """Test that a frame without a drawable placement is counted as skipped."""
        loop = FrameLoop(OutputGeometry(60, 10))
        loop.tick(PARAMS, media=make_sbs_source(), margins=SafeMargins(top=20))

        assert loop.state is RenderState.STEREO_PLAYBACK
        assert loop.skipped_count == 1
        assert loop.failure_count == 0


class TestFailureIsolation:
    """Test that frame failures never escape the loop."""

    def test_exception_is_reported_and_swallowed(self, capsys):
        """Test that a failing frame is logged and counted."""
        loop = FrameLoop(OutputGeometry(60, 10))
        with patch.object(
            loop.compositor, "render_calibration", side_effect=RuntimeError("boom")
        ):
            surface = loop.tick(PARAMS)

        captured = capsys.readouterr()
        assert surface is loop.output
        assert loop.failure_count == 1
        assert "Render loop warning: boom" in captured.out

    def test_loop_recovers_after_failure(self):
        """Test that the next tick renders normally."""
        loop = FrameLoop(OutputGeometry(60, 10))
        with patch.object(
            loop.compositor, "render_calibration", side_effect=RuntimeError("boom")
        ):
            loop.tick(PARAMS)

        loop.tick(PARAMS)

        assert loop.failure_count == 1
        assert loop.frame_count == 2
        assert np.all(loop.output.to_rgba8()[:, 0:15] == [255, 255, 255, 255])

    def test_verbose_prints_traceback(self, capsys):
        """Test that verbose mode adds the traceback."""
        loop = FrameLoop(OutputGeometry(60, 10), verbose=True)
        with patch.object(
            loop.compositor, "render_calibration", side_effect=RuntimeError("boom")
        ):
            loop.tick(PARAMS)

        captured = capsys.readouterr()
        assert "Traceback" in captured.err


class TestFrameLoopResize:
    """Test output resizing."""

    def test_resize_regenerates_mask(self):
        """Test that a resize forces the next frame to redraw the mask."""
        loop = FrameLoop(OutputGeometry(500, 500))
        loop.tick(PARAMS)

        assert loop.resize(OutputGeometry(600, 600)) is True
        loop.tick(PARAMS)

        generator = loop.compositor.mask_generator
        assert generator.regeneration_count == 2
        assert generator.mask.size == (600, 600)
        assert loop.output.size == (600, 600)
        assert loop.buffers.scratch.size == (600, 600)

    def test_resize_to_same_geometry_is_noop(self):
        """Test that an unchanged geometry does not invalidate the mask."""
        loop = FrameLoop(OutputGeometry(500, 500))
        loop.tick(PARAMS)

        assert loop.resize(OutputGeometry(500, 500)) is False
        loop.tick(PARAMS)

        assert loop.compositor.mask_generator.regeneration_count == 1

    def test_density_change_counts_as_resize(self):
        """Test that a pixel density change alone invalidates the mask."""
        loop = FrameLoop(OutputGeometry(500, 500, 1.0))
        loop.tick(PARAMS)

        assert loop.resize(OutputGeometry(500, 500, 2.0)) is True
        loop.tick(PARAMS)

        assert loop.compositor.mask_generator.regeneration_count == 2
