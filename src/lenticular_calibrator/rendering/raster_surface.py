"""
Reusable 2D pixel buffer with canvas-style drawing operations.

Pixels are stored as premultiplied RGBA float32 in [0, 1], shape (height, width, 4).
Rectangles may have fractional edges; partially covered pixels receive
area-weighted coverage, so sub-pixel stripe positions stay visible.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Sequence

import cv2
import numpy as np


class CompositeMode(str, Enum):
    """Porter-Duff operators supported by RasterSurface."""

    SOURCE_OVER = "source-over"  # source atop destination, using source alpha
    SOURCE_IN = "source-in"  # source color kept where destination has alpha
    DESTINATION_IN = "destination-in"  # destination kept where source has alpha


def _axis_coverage(start: float, length: float, size: int) -> tuple[int, int, np.ndarray]:
    """
    PURE: Fractional coverage of pixel cells along one axis.

    Args:
        start: Span start in pixel units
        length: Span length in pixel units
        size: Number of pixel cells on the axis

    Returns:
        Tuple of (first_cell, end_cell, coverage) where coverage[i] is the
        covered fraction of cell first_cell + i
    """
    if not (math.isfinite(start) and math.isfinite(length)) or length <= 0:
        return 0, 0, np.zeros(0, dtype=np.float32)

    end = start + length
    lo = max(int(math.floor(start)), 0)
    hi = min(int(math.ceil(end)), size)
    if hi <= lo:
        return 0, 0, np.zeros(0, dtype=np.float32)

    cells = np.arange(lo, hi, dtype=np.float64)
    coverage = np.minimum(cells + 1.0, end) - np.maximum(cells, start)
    return lo, hi, np.clip(coverage, 0.0, 1.0).astype(np.float32)


def _premultiply(color: Sequence[float]) -> np.ndarray:
    r, g, b = (float(c) for c in color[:3])
    a = float(color[3]) if len(color) > 3 else 1.0
    return np.array([r * a, g * a, b * a, a], dtype=np.float32)


class RasterSurface:
    """
    Off-screen RGBA raster.

    Drawing honors ``composite_mode`` the way a 2D canvas context does; for
    the ``*-in`` modes, pixels outside the drawn region are affected as well.
    """

    def __init__(self, width: int, height: int):
        """
        Create a transparent surface.

        Args:
            width: Width in pixels (> 0)
            height: Height in pixels (> 0)

        Raises:
            ValueError: If either dimension is not positive
        """
        self._validate_size(width, height)
        self._pixels = np.zeros((height, width, 4), dtype=np.float32)
        self.composite_mode = CompositeMode.SOURCE_OVER
        self.image_smoothing = True

    @staticmethod
    def _validate_size(width: int, height: int) -> None:
        if int(width) != width or int(height) != height or width <= 0 or height <= 0:
            raise ValueError(f"Invalid surface size: {width}x{height}")

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def pixels(self) -> np.ndarray:
        """Read-only view of the premultiplied RGBA buffer."""
        view = self._pixels.view()
        view.flags.writeable = False
        return view

    def resize(self, width: int, height: int) -> bool:
        """
        Reallocate the buffer at a new size. Content is discarded.

        Returns:
            True if the size changed
        """
        self._validate_size(width, height)
        if (width, height) == self.size:
            return False
        self._pixels = np.zeros((height, width, 4), dtype=np.float32)
        return True

    def clear(self) -> None:
        """Set every pixel to transparent black."""
        self._pixels.fill(0.0)

    def fill(self, color: Sequence[float]) -> None:
        """Fill the whole surface with a color using the current composite mode."""
        self.fill_rect(0, 0, self.width, self.height, color)

    def fill_rect(
        self, x: float, y: float, width: float, height: float, color: Sequence[float]
    ) -> None:
        """
        Draw a solid rectangle with area coverage on fractional edges.

        Args:
            x, y: Top-left corner in pixels
            width, height: Rectangle size in pixels
            color: Straight RGBA (or RGB) color in [0, 1]
        """
        x0, x1, cov_x = _axis_coverage(x, width, self.width)
        y0, y1, cov_y = _axis_coverage(y, height, self.height)

        coverage = np.outer(cov_y, cov_x)[..., None]
        layer = coverage * _premultiply(color)
        self._composite(layer, x0, y0)

    def draw_surface(self, source: RasterSurface, x: int = 0, y: int = 0) -> None:
        """Draw another surface at an integer offset."""
        self._composite(source._pixels, int(x), int(y))

    def draw_image_region(
        self,
        image: np.ndarray,
        sx: float,
        sy: float,
        sw: float,
        sh: float,
        dx: float,
        dy: float,
        dw: float,
        dh: float,
    ) -> None:
        """
        Draw a region of an 8-bit image scaled into a destination rectangle.

        The destination is snapped to whole pixels. With ``image_smoothing``
        disabled, scaling uses nearest-neighbour sampling.

        Args:
            image: RGB, RGBA or grayscale uint8 array
            sx, sy, sw, sh: Source region in image pixels
            dx, dy, dw, dh: Destination rectangle in surface pixels

        Raises:
            ValueError: If the source region is empty
        """
        if image.ndim == 2:
            image = cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)

        img_h, img_w = image.shape[:2]
        src_x0 = min(max(int(round(sx)), 0), img_w)
        src_y0 = min(max(int(round(sy)), 0), img_h)
        src_x1 = min(max(int(round(sx + sw)), 0), img_w)
        src_y1 = min(max(int(round(sy + sh)), 0), img_h)
        if src_x1 <= src_x0 or src_y1 <= src_y0:
            raise ValueError(f"Empty source region: ({sx}, {sy}, {sw}, {sh})")

        dst_x0, dst_y0 = int(round(dx)), int(round(dy))
        target_w = int(round(dx + dw)) - dst_x0
        target_h = int(round(dy + dh)) - dst_y0
        if target_w <= 0 or target_h <= 0:
            return

        region = image[src_y0:src_y1, src_x0:src_x1]
        interpolation = cv2.INTER_LINEAR if self.image_smoothing else cv2.INTER_NEAREST
        scaled = cv2.resize(region, (target_w, target_h), interpolation=interpolation)
        if scaled.ndim == 2:
            scaled = scaled[..., None]

        layer = np.empty((target_h, target_w, 4), dtype=np.float32)
        rgb = scaled[..., :3].astype(np.float32) / 255.0
        if scaled.shape[2] == 4:
            alpha = scaled[..., 3:4].astype(np.float32) / 255.0
        else:
            alpha = np.ones((target_h, target_w, 1), dtype=np.float32)
        layer[..., :3] = rgb * alpha
        layer[..., 3:] = alpha

        self._composite(layer, dst_x0, dst_y0)

    def _composite(self, layer: np.ndarray, x: int, y: int) -> None:
        """Blend a premultiplied layer placed at (x, y) with the current mode."""
        layer_h, layer_w = layer.shape[:2]
        x0, y0 = max(x, 0), max(y, 0)
        x1, y1 = min(x + layer_w, self.width), min(y + layer_h, self.height)
        clipped = layer[y0 - y : y1 - y, x0 - x : x1 - x] if x1 > x0 and y1 > y0 else None

        if self.composite_mode is CompositeMode.SOURCE_OVER:
            if clipped is None:
                return
            dst = self._pixels[y0:y1, x0:x1]
            dst *= 1.0 - clipped[..., 3:4]
            dst += clipped
            return

        source = np.zeros_like(self._pixels)
        if clipped is not None:
            source[y0:y1, x0:x1] = clipped

        if self.composite_mode is CompositeMode.SOURCE_IN:
            source *= self._pixels[..., 3:4]
            self._pixels = source
        elif self.composite_mode is CompositeMode.DESTINATION_IN:
            self._pixels *= source[..., 3:4]
        else:
            raise ValueError(f"Unsupported composite mode: {self.composite_mode}")

    def to_rgba8(self) -> np.ndarray:
        """Un-premultiplied RGBA uint8 copy of the surface."""
        alpha = self._pixels[..., 3:4]
        safe_alpha = np.where(alpha > 0, alpha, 1.0)
        rgb = np.where(alpha > 0, self._pixels[..., :3] / safe_alpha, 0.0)
        out = np.concatenate([rgb, alpha], axis=2)
        return np.clip(np.rint(out * 255.0), 0, 255).astype(np.uint8)

    def to_bgr(self) -> np.ndarray:
        """Opaque BGR uint8 image (composited on black) for OpenCV display or writing."""
        rgb = np.clip(np.rint(self._pixels[..., :3] * 255.0), 0, 255).astype(np.uint8)
        return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)
