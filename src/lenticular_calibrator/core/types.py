"""
Value types shared by the rendering engine.

Calibration parameters, output geometry and placement rectangles are plain
immutable dataclasses so they can be compared and fingerprinted cheaply.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .constants import DEFAULT_SETTINGS


class Orientation(str, Enum):
    """Stripe direction on screen."""

    VERTICAL = "VERTICAL"
    HORIZONTAL = "HORIZONTAL"


class ColorMode(str, Enum):
    """How mask stripes are colored."""

    MONO = "MONO"
    TINTED = "TINTED"
    RGB_SUBPIXEL = "RGB_SUBPIXEL"


class VideoRatio(str, Enum):
    """Target aspect ratio for the placed stereo view."""

    AUTO = "auto"
    WIDE = "16:9"
    STANDARD = "4:3"
    CINEMA = "21:9"
    SQUARE = "1:1"


class RenderState(str, Enum):
    """Steady states of the frame loop."""

    CALIBRATION = "calibration"
    STEREO_PLAYBACK = "stereo_playback"


@dataclass(frozen=True)
class CalibrationParameters:
    """
    Lens calibration supplied by the caller every frame.

    Attributes:
        lpi: Lens pitch in lines per inch
        offset_phase: Fractional-lens phase shift in [-1, 1]
        stripe_thickness: Stripe width as a fraction of one lens pitch, in (0, 1]
        orientation: Stripe direction
        color_mode: Stripe coloring
        base_ppi: Physical display pixel density used for the pitch calculation
    """

    lpi: float = DEFAULT_SETTINGS["lpi"]
    offset_phase: float = DEFAULT_SETTINGS["offset"]
    stripe_thickness: float = DEFAULT_SETTINGS["thickness"]
    orientation: Orientation = Orientation.VERTICAL
    color_mode: ColorMode = ColorMode.MONO
    base_ppi: float = DEFAULT_SETTINGS["base_ppi"]

    @property
    def is_valid(self) -> bool:
        """True when the lens pitch is well defined."""
        return self.lpi > 0 and self.base_ppi > 0


@dataclass(frozen=True)
class OutputGeometry:
    """Output raster size in device pixels and the device pixel density."""

    width: int
    height: int
    pixel_density: float = 1.0

    @property
    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0

    @classmethod
    def from_viewport(
        cls, css_width: float, css_height: float, pixel_density: float = 1.0
    ) -> OutputGeometry:
        """
        Convert a viewport size in CSS pixels to device pixel geometry.

        Args:
            css_width: Viewport width in CSS pixels
            css_height: Viewport height in CSS pixels
            pixel_density: Device pixels per CSS pixel (clamped to >= 1)

        Returns:
            OutputGeometry with at least one device pixel in each direction
        """
        density = max(1.0, float(pixel_density or 1.0))
        width = max(1, int(math.floor(css_width * density)))
        height = max(1, int(math.floor(css_height * density)))
        return cls(width=width, height=height, pixel_density=density)


@dataclass(frozen=True)
class PlacementRect:
    """Axis-aligned rectangle in output pixel coordinates (may be fractional)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def aspect(self) -> float:
        if self.height == 0:
            return math.nan
        return self.width / self.height

    @property
    def is_drawable(self) -> bool:
        values = (self.x, self.y, self.width, self.height)
        return all(math.isfinite(v) for v in values) and self.width > 0 and self.height > 0


@dataclass(frozen=True)
class SafeMargins:
    """Output pixels reserved by the UI on each edge."""

    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0
