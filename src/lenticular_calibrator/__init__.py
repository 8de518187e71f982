"""
Lenticular Calibrator - Calibrate lenticular lens overlays and play side-by-side 3D media.

This package renders the interlacing stripe pattern that registers a display
with a ribbed lens sheet, and interlaces SBS stereo images or video through it
for glasses-free 3D viewing.
"""

__version__ = "0.3.0"
__author__ = "Lenticular Calibrator Team"
__description__ = "Interlacing mask generator and stereo compositor for lenticular displays"


# Lazy imports to avoid loading cv2 at package import time
def _lazy_import_rendering(name):
    from . import rendering

    return getattr(rendering, name)


# Import constants and value types (safe, no cv2 dependency)
from .core.constants import *
from .core.types import (
    Orientation,
    ColorMode,
    VideoRatio,
    RenderState,
    CalibrationParameters,
    OutputGeometry,
    PlacementRect,
    SafeMargins,
)

_LAZY_RENDERING = ("FrameLoop", "Compositor", "MaskGenerator", "StereoSplitter", "RasterSurface")

__all__ = [
    "Orientation",
    "ColorMode",
    "VideoRatio",
    "RenderState",
    "CalibrationParameters",
    "OutputGeometry",
    "PlacementRect",
    "SafeMargins",
    "DEFAULT_SETTINGS",
    "VALIDATION_RANGES",
    *_LAZY_RENDERING,
]


def __getattr__(name):
    if name in _LAZY_RENDERING:
        return _lazy_import_rendering(name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
