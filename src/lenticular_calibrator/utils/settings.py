"""
Calibration settings utilities.

Pure functions that turn loosely typed settings (CLI arguments, dictionaries)
into validated CalibrationParameters, plus the small adjustments the control
surface applies to them.
"""

from __future__ import annotations

from typing import Any

from ..core.constants import (
    DEFAULT_SETTINGS,
    DISPLAY_PPI_PRESETS,
    PRECISION_LPI_SPAN,
    VALIDATION_RANGES,
)
from ..core.types import CalibrationParameters, ColorMode, Orientation

# Color mode names used by earlier builds of the calibrator
LEGACY_COLOR_MODES = {
    "BW": ColorMode.MONO,
    "GREEN": ColorMode.TINTED,
    "RGB": ColorMode.RGB_SUBPIXEL,
}


def apply_default_settings(params: dict[str, Any]) -> dict[str, Any]:
    """Apply default settings for missing or None parameters."""
    settings = {}
    for key, default_value in DEFAULT_SETTINGS.items():
        value = params.get(key)
        settings[key] = default_value if value is None else value
    return settings


def parse_orientation(value: Orientation | str) -> Orientation:
    """
    Parse an orientation name (case-insensitive).

    Raises:
        ValueError: If the name is unknown
    """
    if isinstance(value, Orientation):
        return value
    try:
        return Orientation(str(value).upper())
    except ValueError:
        raise ValueError(f"Invalid orientation: {value}") from None


def parse_color_mode(value: ColorMode | str) -> ColorMode:
    """
    Parse a color mode name, accepting the legacy BW/GREEN/RGB names.

    Raises:
        ValueError: If the name is unknown
    """
    if isinstance(value, ColorMode):
        return value
    name = str(value).upper().replace("-", "_")
    if name in LEGACY_COLOR_MODES:
        return LEGACY_COLOR_MODES[name]
    try:
        return ColorMode(name)
    except ValueError:
        raise ValueError(f"Invalid color mode: {value}") from None


def resolve_display_ppi(value: str | float | int) -> float:
    """
    Resolve a display PPI given as a preset name or a number.

    Raises:
        ValueError: If the value is neither a preset nor a positive number
    """
    if isinstance(value, str) and value.lower() in DISPLAY_PPI_PRESETS:
        return float(DISPLAY_PPI_PRESETS[value.lower()])
    try:
        ppi = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid display PPI: {value}") from None
    if ppi <= 0:
        raise ValueError(f"Display PPI must be positive: {value}")
    return ppi


def validate_calibration_settings(settings: dict[str, Any]) -> list[str]:
    """
    Check numeric settings against VALIDATION_RANGES.

    Args:
        settings: Settings dictionary (defaults applied for missing keys)

    Returns:
        List of error messages; empty if everything is in range
    """
    settings = apply_default_settings(settings)
    errors = []
    for key in ("lpi", "offset", "thickness", "base_ppi"):
        low, high = VALIDATION_RANGES[key]
        try:
            value = float(settings[key])
        except (TypeError, ValueError):
            errors.append(f"{key} must be a number, got {settings[key]!r}")
            continue
        if value < low or value > high:
            errors.append(f"{key} must be between {low} and {high}, got {value}")
    return errors


def create_calibration_parameters(settings: dict[str, Any]) -> CalibrationParameters:
    """
    Build CalibrationParameters from a settings dictionary.

    Values are not range-checked here: out-of-range pitch values are handled
    by the renderer, which skips mask regeneration for them.

    Raises:
        ValueError: If an enum name or PPI value cannot be parsed
    """
    settings = apply_default_settings(settings)
    return CalibrationParameters(
        lpi=float(settings["lpi"]),
        offset_phase=float(settings["offset"]),
        stripe_thickness=float(settings["thickness"]),
        orientation=parse_orientation(settings["orientation"]),
        color_mode=parse_color_mode(settings["color_mode"]),
        base_ppi=resolve_display_ppi(settings["base_ppi"]),
    )


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def step_lpi(lpi: float, delta: float) -> float:
    """Adjust LPI by a step, clamped to the LPI validation range."""
    low, high = VALIDATION_RANGES["lpi"]
    return round(_clamp(lpi + delta, low, high), 6)


def step_offset(offset: float, delta: float) -> float:
    """Adjust the phase offset by a step, clamped to [-1, 1]."""
    low, high = VALIDATION_RANGES["offset"]
    return round(_clamp(offset + delta, low, high), 6)


def precision_lpi_range(anchor: float, span: float = PRECISION_LPI_SPAN) -> tuple[float, float]:
    """
    Narrowed LPI slider range around an anchor value.

    Args:
        anchor: Center LPI
        span: Half-width of the range

    Returns:
        Tuple of (low, high) inside the LPI validation range
    """
    low, high = VALIDATION_RANGES["lpi"]
    anchor = _clamp(anchor, low, high)
    return max(low, anchor - span), min(high, anchor + span)


def orientation_for_viewport(width: float, height: float) -> Orientation:
    """Auto orientation: landscape viewports use horizontal stripes."""
    return Orientation.HORIZONTAL if width > height else Orientation.VERTICAL


def next_color_mode(color_mode: ColorMode) -> ColorMode:
    """Cycle MONO -> TINTED -> RGB_SUBPIXEL -> MONO."""
    modes = list(ColorMode)
    return modes[(modes.index(color_mode) + 1) % len(modes)]


def format_status_line(params: CalibrationParameters, precision_mode: bool = False) -> str:
    """Compact status line, e.g. 'LPI 260.000 • VERTICAL'."""
    decimals = 4 if precision_mode else 3
    return f"LPI {params.lpi:.{decimals}f} • {params.orientation.value}"
