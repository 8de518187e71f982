"""Unit tests for the compositor."""

from dataclasses import replace
from unittest.mock import patch

import numpy as np
import pytest

from lenticular_calibrator.core.constants import TINT_GREEN, WHITE
from lenticular_calibrator.core.types import (
    CalibrationParameters,
    ColorMode,
    OutputGeometry,
    SafeMargins,
)
from lenticular_calibrator.io.media_sources import ImageSource
from lenticular_calibrator.rendering.compositor import Compositor, FrameBuffers, stripe_color

# 30 pixels per lens, 15 pixel stripes at [0, 15), [30, 45), ...
PARAMS = CalibrationParameters(lpi=10.0, base_ppi=300.0, stripe_thickness=0.5)
GEOMETRY = OutputGeometry(60, 10)

RED = [255, 0, 0]
BLUE = [0, 0, 255]


def make_sbs_source(eye_width: int = 60, height: int = 10) -> ImageSource:
    image = np.zeros((height, eye_width * 2, 3), dtype=np.uint8)
    image[:, :eye_width] = RED
    image[:, eye_width:] = BLUE
    return ImageSource(image)


@pytest.fixture
def buffers():
    return FrameBuffers.create(GEOMETRY.width, GEOMETRY.height)


class TestFrameBuffers:
    """Test frame buffer management."""

    def test_create(self):
        """Test that all buffers share the output size."""
        frame = FrameBuffers.create(12, 8)
        for surface in (frame.output, frame.left_view, frame.right_view, frame.scratch):
            assert surface.size == (12, 8)

    def test_resize(self):
        """Test that resize applies to every buffer."""
        frame = FrameBuffers.create(12, 8)
        frame.resize(20, 10)
        for surface in (frame.output, frame.left_view, frame.right_view, frame.scratch):
            assert surface.size == (20, 10)


class TestStripeColor:
    """Test recolor selection."""

    def test_mono_is_white(self):
        assert stripe_color(ColorMode.MONO) == WHITE

    def test_tinted_uses_tint(self):
        assert stripe_color(ColorMode.TINTED) == TINT_GREEN
        assert stripe_color(ColorMode.TINTED, (1.0, 0.0, 1.0, 1.0)) == (1.0, 0.0, 1.0, 1.0)


class TestCalibrationPath:
    """Test calibration pattern composition."""

    def test_mono_pattern(self, buffers):
        """Test white stripes on an opaque black background."""
        Compositor().render_calibration(buffers, PARAMS, GEOMETRY)
        rgba = buffers.output.to_rgba8()

        assert np.all(rgba[..., 3] == 255)
        assert np.all(rgba[:, 0:15] == [255, 255, 255, 255])
        assert np.all(rgba[:, 15:30] == [0, 0, 0, 255])
        assert np.all(rgba[:, 30:45] == [255, 255, 255, 255])

    def test_tinted_pattern(self, buffers):
        """Test that TINTED stripes use the tint color."""
        params = replace(PARAMS, color_mode=ColorMode.TINTED)
        Compositor().render_calibration(buffers, params, GEOMETRY)
        rgba = buffers.output.to_rgba8()

        assert np.all(rgba[:, 0:15] == [0, 255, 0, 255])
        assert np.all(rgba[:, 15:30] == [0, 0, 0, 255])

    def test_custom_tint_color(self, buffers):
        """Test a compositor configured with another tint."""
        params = replace(PARAMS, color_mode=ColorMode.TINTED)
        Compositor(tint_color=(1.0, 0.0, 1.0, 1.0)).render_calibration(buffers, params, GEOMETRY)
        assert np.all(buffers.output.to_rgba8()[:, 0:15] == [255, 0, 255, 255])

    def test_rgb_subpixel_pattern(self, buffers):
        """Test that RGB_SUBPIXEL draws the colored mask directly."""
        params = replace(PARAMS, stripe_thickness=0.9, color_mode=ColorMode.RGB_SUBPIXEL)
        Compositor().render_calibration(buffers, params, GEOMETRY)
        rgba = buffers.output.to_rgba8()

        assert np.all(rgba[:, 0:9] == [255, 0, 0, 255])
        assert np.all(rgba[:, 9:18] == [0, 255, 0, 255])
        assert np.all(rgba[:, 18:27] == [0, 0, 255, 255])
        assert np.all(rgba[:, 27:30] == [0, 0, 0, 255])

    def test_invalid_parameters_without_mask_render_black(self, buffers):
        """Test that a frame without any mask is plain black."""
        Compositor().render_calibration(buffers, replace(PARAMS, lpi=0.0), GEOMETRY)
        assert np.all(buffers.output.to_rgba8() == [0, 0, 0, 255])

    def test_invalid_parameters_keep_last_pattern(self, buffers):
        """Test that invalid parameters reuse the previous mask."""
        compositor = Compositor()
        compositor.render_calibration(buffers, PARAMS, GEOMETRY)
        expected = buffers.output.to_rgba8()

        compositor.render_calibration(buffers, replace(PARAMS, base_ppi=-5.0), GEOMETRY)
        assert np.array_equal(buffers.output.to_rgba8(), expected)

    def test_repeated_frames_reuse_mask(self, buffers):
        """Test that static parameters regenerate the mask once."""
        compositor = Compositor()
        for _ in range(3):
            compositor.render_calibration(buffers, PARAMS, GEOMETRY)
        assert compositor.mask_generator.regeneration_count == 1


class TestStereoPath:
    """Test stereo interlacing."""

    def test_left_under_stripes_right_elsewhere(self, buffers):
        """Test that the left view shows under stripes and the right view between them."""
        composed = Compositor().render_stereo(buffers, make_sbs_source(), PARAMS, GEOMETRY)
        rgba = buffers.output.to_rgba8()

        assert composed is True
        assert np.all(rgba[:, 0:15] == RED + [255])
        assert np.all(rgba[:, 15:30] == BLUE + [255])
        assert np.all(rgba[:, 30:45] == RED + [255])
        assert np.all(rgba[:, 45:60] == BLUE + [255])

    def test_rgb_subpixel_is_plain_stencil(self, buffers):
        """Test that RGB_SUBPIXEL stripes do not separate channels of the media."""
        params = replace(PARAMS, stripe_thickness=0.9, color_mode=ColorMode.RGB_SUBPIXEL)
        Compositor().render_stereo(buffers, make_sbs_source(), params, GEOMETRY)
        rgba = buffers.output.to_rgba8()

        assert np.all(rgba[:, 0:27] == RED + [255])
        assert np.all(rgba[:, 27:30] == BLUE + [255])

    def test_letterbox_bars_are_black(self):
        """Test that area outside the placement stays black."""
        geometry = OutputGeometry(60, 20)
        frame = FrameBuffers.create(60, 20)
        Compositor().render_stereo(frame, make_sbs_source(), PARAMS, geometry)
        rgba = frame.output.to_rgba8()

        # 6:1 media in a 3:1 output is placed at y in [5, 15)
        assert np.all(rgba[:5] == [0, 0, 0, 255])
        assert np.all(rgba[15:] == [0, 0, 0, 255])
        assert np.all(rgba[5:15, 0:15] == RED + [255])

    def test_degenerate_placement_leaves_output_untouched(self, buffers):
        """Test that a skipped stereo frame does not modify the output."""
        compositor = Compositor()
        compositor.render_calibration(buffers, PARAMS, GEOMETRY)
        before = buffers.output.to_rgba8()

        composed = compositor.render_stereo(
            buffers, make_sbs_source(), PARAMS, GEOMETRY, margins=SafeMargins(left=40, right=40)
        )

        assert composed is False
        assert np.array_equal(buffers.output.to_rgba8(), before)

    def test_split_precedes_mask_generation(self, buffers):
        """Test that views are populated before the mask is refreshed."""
        compositor = Compositor()
        calls = []
        original_split = compositor.splitter.split
        original_generate = compositor.mask_generator.generate

        def split_spy(*args, **kwargs):
            calls.append("split")
            return original_split(*args, **kwargs)

        def generate_spy(*args, **kwargs):
            calls.append("generate")
            return original_generate(*args, **kwargs)

        with patch.object(compositor.splitter, "split", side_effect=split_spy), patch.object(
            compositor.mask_generator, "generate", side_effect=generate_spy
        ):
            compositor.render_stereo(buffers, make_sbs_source(), PARAMS, GEOMETRY)

        assert calls == ["split", "generate"]

    def test_invalid_parameters_without_mask_show_right_view(self, buffers):
        """Test that with no mask the right view alone is shown."""
        Compositor().render_stereo(buffers, make_sbs_source(), replace(PARAMS, lpi=0.0), GEOMETRY)
        assert np.all(buffers.output.to_rgba8() == BLUE + [255])
