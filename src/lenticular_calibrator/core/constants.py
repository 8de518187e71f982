"""
Constants and default configuration for Lenticular Calibrator.

This module contains all default settings, magic numbers, and configuration
values used throughout the application.
"""

from typing import Dict, Tuple

# Version and project info
PROJECT_NAME = "Lenticular Calibrator"

# Default calibration settings
DEFAULT_SETTINGS = {
    "lpi": 260.0,  # lens lines per inch
    "offset": 0.0,  # fraction of one lens pitch
    "thickness": 0.5,  # fraction of one lens pitch
    "orientation": "VERTICAL",
    "color_mode": "MONO",
    "base_ppi": 500,  # physical display pixels per inch
    "video_ratio": "auto",
    "auto_orientation": True,
    "precision_mode": False,
}

# Validation ranges
VALIDATION_RANGES = {
    "lpi": (240.0, 280.0),
    "offset": (-1.0, 1.0),
    "thickness": (0.01, 1.0),
    "base_ppi": (100, 1000),
    "pixel_density": (1.0, 8.0),
}

# LPI adjustment steps (fine, coarse)
LPI_STEPS = (0.001, 0.1)
OFFSET_STEP = 0.001

# Half-width of the narrowed LPI range used in precision mode
PRECISION_LPI_SPAN = 2.0

# Display pixel density presets (PPI)
DISPLAY_PPI_PRESETS: Dict[str, int] = {
    "s22-ultra": 506,
    "iphone-14": 460,
    "standard": 326,
}

# Target aspect ratios for the placed stereo view ("auto" uses the media aspect)
VIDEO_RATIOS: Dict[str, float] = {
    "16:9": 16 / 9,
    "4:3": 4 / 3,
    "21:9": 21 / 9,
    "1:1": 1.0,
}

# Mask geometry
MIN_STRIPE_WIDTH = 0.1  # output pixels
EXTRA_EDGE_STRIPES = 2  # partial stripes at both edges after phase shift
SUBPIXEL_DIVISIONS = 3

# Colors as straight (non-premultiplied) RGBA floats
RGBA = Tuple[float, float, float, float]
BLACK: RGBA = (0.0, 0.0, 0.0, 1.0)
WHITE: RGBA = (1.0, 1.0, 1.0, 1.0)
TINT_GREEN: RGBA = (0.0, 1.0, 0.0, 1.0)
SUBPIXEL_COLORS: Tuple[RGBA, RGBA, RGBA] = (
    (1.0, 0.0, 0.0, 1.0),
    (0.0, 1.0, 0.0, 1.0),
    (0.0, 0.0, 1.0, 1.0),
)

# Supported media formats
SUPPORTED_VIDEO_FORMATS = [".mp4", ".avi", ".mov", ".mkv", ".wmv", ".flv", ".webm"]
SUPPORTED_IMAGE_FORMATS = [".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".webp"]

# Preview window
PREVIEW_WINDOW_NAME = PROJECT_NAME
DEFAULT_PREVIEW_SIZE = (1280, 720)  # CSS pixels
PREVIEW_FRAME_DELAY_MS = 16  # ~60 Hz

# Error messages
ERROR_MESSAGES = {
    "media_not_ready": "Media source has no decoded frame yet.",
    "invalid_size": "Output size must be WIDTHxHEIGHT with positive integers.",
}
