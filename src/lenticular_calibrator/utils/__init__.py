"""Utility modules.

Console formatting and calibration settings helpers.
"""

from .console import (
    Colors,
    supports_color,
    success,
    error,
    warning,
    info,
    dim,
    title_bar,
)
from .settings import (
    apply_default_settings,
    parse_orientation,
    parse_color_mode,
    resolve_display_ppi,
    validate_calibration_settings,
    create_calibration_parameters,
    step_lpi,
    step_offset,
    precision_lpi_range,
    orientation_for_viewport,
    next_color_mode,
    format_status_line,
)

__all__ = [
    # Console
    "Colors",
    "supports_color",
    "success",
    "error",
    "warning",
    "info",
    "dim",
    "title_bar",
    # Settings
    "apply_default_settings",
    "parse_orientation",
    "parse_color_mode",
    "resolve_display_ppi",
    "validate_calibration_settings",
    "create_calibration_parameters",
    "step_lpi",
    "step_offset",
    "precision_lpi_range",
    "orientation_for_viewport",
    "next_color_mode",
    "format_status_line",
]
