"""
Interlacing mask generation.

Computes the striped mask that registers the displayed pattern with the
physical lens sheet. Stripe geometry is the expensive part of a frame, so the
mask is cached under a fingerprint of everything it depends on and only
redrawn when that fingerprint changes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.constants import (
    EXTRA_EDGE_STRIPES,
    MIN_STRIPE_WIDTH,
    SUBPIXEL_COLORS,
    SUBPIXEL_DIVISIONS,
    WHITE,
    RGBA,
)
from ..core.types import CalibrationParameters, ColorMode, Orientation, OutputGeometry
from ..utils.console import dim
from .raster_surface import RasterSurface


@dataclass(frozen=True)
class StripeLayout:
    """
    Stripe geometry along the stripe axis.

    Attributes:
        pixels_per_lens: Output pixels covered by one lens
        phase_shift: Phase offset in output pixels
        stripe_count: Number of stripes drawn
        stripe_width: Width of one stripe in output pixels
        positions: Start position of every stripe
        vertical: True if stripes run top to bottom
    """

    pixels_per_lens: float
    phase_shift: float
    stripe_count: int
    stripe_width: float
    positions: tuple[float, ...]
    vertical: bool

    def sub_stripes(self, position: float) -> list[tuple[float, float, RGBA]]:
        """Split the stripe at ``position`` into contiguous red, green and blue parts."""
        part = self.stripe_width / SUBPIXEL_DIVISIONS
        return [(position + k * part, part, SUBPIXEL_COLORS[k]) for k in range(SUBPIXEL_DIVISIONS)]


@dataclass
class MaskCacheEntry:
    """Last generated mask and the fingerprint it was generated for."""

    key: str = ""
    surface: RasterSurface | None = None


def is_mask_computable(params: CalibrationParameters, geometry: OutputGeometry) -> bool:
    """PURE: True if the lens pitch and output size define a mask."""
    return params.is_valid and geometry.is_valid


def build_mask_fingerprint(params: CalibrationParameters, geometry: OutputGeometry) -> str:
    """
    PURE: Cache key for a mask.

    Args:
        params: Calibration parameters
        geometry: Output geometry

    Returns:
        String that changes whenever any input to the stripe geometry changes
    """
    return (
        f"{geometry.width}-{geometry.height}-{params.lpi}-{params.offset_phase}-"
        f"{params.stripe_thickness}-{params.orientation.value}-{params.color_mode.value}-"
        f"{params.base_ppi}-{geometry.pixel_density}"
    )


def compute_stripe_layout(params: CalibrationParameters, geometry: OutputGeometry) -> StripeLayout:
    """
    PURE: Stripe positions for the given calibration and output size.

    Stripe ``i`` (starting at -1) begins at
    ``i * pixels_per_lens - (phase_shift mod pixels_per_lens)``; the two extra
    stripes cover the partial lenses at both edges after the phase shift.

    Args:
        params: Calibration parameters (lpi and base_ppi must be positive)
        geometry: Output geometry

    Returns:
        StripeLayout describing every stripe to draw
    """
    pixels_per_lens = (params.base_ppi * geometry.pixel_density) / params.lpi
    phase_shift = params.offset_phase * pixels_per_lens
    vertical = params.orientation is Orientation.VERTICAL

    dim_px = geometry.width if vertical else geometry.height
    stripe_count = math.ceil(dim_px / pixels_per_lens) + EXTRA_EDGE_STRIPES
    stripe_width = max(MIN_STRIPE_WIDTH, pixels_per_lens * params.stripe_thickness)

    # Truncated remainder keeps the sign of the offset
    remainder = math.fmod(phase_shift, pixels_per_lens)
    positions = tuple(i * pixels_per_lens - remainder for i in range(-1, stripe_count - 1))

    return StripeLayout(
        pixels_per_lens=pixels_per_lens,
        phase_shift=phase_shift,
        stripe_count=stripe_count,
        stripe_width=stripe_width,
        positions=positions,
        vertical=vertical,
    )


def draw_stripes(surface: RasterSurface, layout: StripeLayout, color_mode: ColorMode) -> None:
    """
    Draw every stripe of a layout across the full orthogonal dimension.

    Args:
        surface: Target surface (expected to be cleared)
        layout: Stripe geometry
        color_mode: RGB_SUBPIXEL draws red/green/blue thirds, other modes draw white
    """
    width, height = surface.size

    def span(start: float, extent: float, color: RGBA) -> None:
        if layout.vertical:
            surface.fill_rect(start, 0, extent, height, color)
        else:
            surface.fill_rect(0, start, width, extent, color)

    for position in layout.positions:
        if color_mode is ColorMode.RGB_SUBPIXEL:
            for start, extent, color in layout.sub_stripes(position):
                span(start, extent, color)
        else:
            span(position, layout.stripe_width, WHITE)


class MaskGenerator:
    """
    Memoized interlacing mask.

    Responsibilities:
    - Derive stripe geometry from calibration parameters and output size
    - Keep one mask surface and redraw it only when the fingerprint changes
    - Leave the previous mask in place for ill-defined parameters
    """

    def __init__(self, verbose: bool = False):
        """
        Initialize mask generator.

        Args:
            verbose: Report every regeneration
        """
        self.verbose = verbose
        self._cache = MaskCacheEntry()
        self.regeneration_count = 0
        self.last_layout: StripeLayout | None = None

    @property
    def cache(self) -> MaskCacheEntry:
        return self._cache

    @property
    def mask(self) -> RasterSurface | None:
        return self._cache.surface

    def generate(
        self, params: CalibrationParameters, geometry: OutputGeometry
    ) -> RasterSurface | None:
        """
        Return the mask for the given inputs, regenerating it only if needed.

        Args:
            params: Calibration parameters
            geometry: Output geometry

        Returns:
            The current mask surface, or None if no valid mask was ever generated
        """
        if not is_mask_computable(params, geometry):
            return self._cache.surface

        key = build_mask_fingerprint(params, geometry)
        if self._cache.surface is not None and key == self._cache.key:
            return self._cache.surface

        surface = self._cache.surface
        if surface is None:
            surface = RasterSurface(geometry.width, geometry.height)
        else:
            surface.resize(geometry.width, geometry.height)
            surface.clear()

        layout = compute_stripe_layout(params, geometry)
        draw_stripes(surface, layout, params.color_mode)

        self._cache = MaskCacheEntry(key=key, surface=surface)
        self.last_layout = layout
        self.regeneration_count += 1

        if self.verbose:
            print(
                dim(
                    f"  Mask regenerated: {geometry.width}x{geometry.height}, "
                    f"{layout.pixels_per_lens:.4f} px/lens, {layout.stripe_count} stripes"
                )
            )
        return surface

    def resize(self, width: int, height: int) -> None:
        """Resize the cached mask surface and force regeneration on the next call."""
        if self._cache.surface is not None:
            self._cache.surface.resize(width, height)
            self._cache.surface.clear()
        self.invalidate()

    def invalidate(self) -> None:
        """Forget the fingerprint so the next call redraws the mask."""
        self._cache.key = ""
