"""Core configuration and value types."""

from .types import (
    Orientation,
    ColorMode,
    VideoRatio,
    RenderState,
    CalibrationParameters,
    OutputGeometry,
    PlacementRect,
    SafeMargins,
)

__all__ = [
    "Orientation",
    "ColorMode",
    "VideoRatio",
    "RenderState",
    "CalibrationParameters",
    "OutputGeometry",
    "PlacementRect",
    "SafeMargins",
]
