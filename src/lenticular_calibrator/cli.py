#!/usr/bin/env python3
"""
Lenticular Calibrator - preview shell.

Wires the renderer to an OpenCV window (or a one-shot PNG snapshot) so the
stripe pattern can be tuned against a physical lens sheet.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, replace

from .core.constants import (
    DEFAULT_PREVIEW_SIZE,
    DEFAULT_SETTINGS,
    DISPLAY_PPI_PRESETS,
    ERROR_MESSAGES,
    LPI_STEPS,
    OFFSET_STEP,
    PREVIEW_FRAME_DELAY_MS,
    PREVIEW_WINDOW_NAME,
    VIDEO_RATIOS,
)
from .core.types import CalibrationParameters, ColorMode, Orientation, OutputGeometry
from .utils.console import Colors, error, info, success, supports_color, title_bar
from .utils.settings import (
    create_calibration_parameters,
    format_status_line,
    next_color_mode,
    orientation_for_viewport,
    precision_lpi_range,
    step_lpi,
    step_offset,
    validate_calibration_settings,
)

KEY_ESCAPE = 27


@dataclass(frozen=True)
class PreviewState:
    """
    Control-surface state of the preview window.

    Attributes:
        params: Current calibration
        is_playing: Advance the media source every tick
        precision_mode: LPI stepping is confined around ``precision_anchor``
        precision_anchor: LPI value when precision mode was switched on
        running: False once the user asked to quit
    """

    params: CalibrationParameters
    is_playing: bool = True
    precision_mode: bool = False
    precision_anchor: float | None = None
    running: bool = True


def _stepped_lpi(state: PreviewState, delta: float) -> float:
    lpi = step_lpi(state.params.lpi, delta)
    if state.precision_mode and state.precision_anchor is not None:
        low, high = precision_lpi_range(state.precision_anchor)
        lpi = round(max(low, min(high, lpi)), 6)
    return lpi


def apply_key(state: PreviewState, key: int) -> PreviewState:
    """
    PURE: Apply one keypress to the preview state.

    Keys:
        [ ]  LPI -/+ fine step      { }  LPI -/+ coarse step
        , .  offset -/+             o    toggle orientation
        c    cycle color mode       p    toggle precision mode (LPI kept
                                         within +/- 2 of its current value)
        space play/pause            q/Esc quit
    """
    params = state.params
    fine, coarse = LPI_STEPS
    lpi_keys = {ord("["): -fine, ord("]"): fine, ord("{"): -coarse, ord("}"): coarse}
    offset_keys = {ord(","): -OFFSET_STEP, ord("."): OFFSET_STEP}

    if key in lpi_keys:
        return replace(state, params=replace(params, lpi=_stepped_lpi(state, lpi_keys[key])))
    if key in offset_keys:
        offset = step_offset(params.offset_phase, offset_keys[key])
        return replace(state, params=replace(params, offset_phase=offset))
    if key == ord("o"):
        flipped = (
            Orientation.HORIZONTAL
            if params.orientation is Orientation.VERTICAL
            else Orientation.VERTICAL
        )
        return replace(state, params=replace(params, orientation=flipped))
    if key == ord("c"):
        return replace(state, params=replace(params, color_mode=next_color_mode(params.color_mode)))
    if key == ord("p"):
        if state.precision_mode:
            return replace(state, precision_mode=False, precision_anchor=None)
        return replace(state, precision_mode=True, precision_anchor=params.lpi)
    if key == ord(" "):
        return replace(state, is_playing=not state.is_playing)
    if key in (ord("q"), KEY_ESCAPE):
        return replace(state, running=False)
    return state


def parse_size(size_string: str) -> tuple[int, int]:
    """
    Parse 'WIDTHxHEIGHT'.

    Raises:
        ValueError: If the string is malformed or not positive
    """
    try:
        width_str, height_str = size_string.lower().split("x")
        width, height = int(width_str), int(height_str)
    except (ValueError, AttributeError):
        raise ValueError(ERROR_MESSAGES["invalid_size"]) from None
    if width <= 0 or height <= 0:
        raise ValueError(ERROR_MESSAGES["invalid_size"])
    return width, height


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description="Calibrate a lenticular lens sheet and preview SBS 3D media",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive calibration pattern
  lenticular-calibrator --lpi 260 --ppi s22-ultra

  # Render one frame of an SBS video to a PNG
  lenticular-calibrator --media clip_sbs.mp4 --size 1080x2340 --snapshot frame.png
        """,
    )

    parser.add_argument("--lpi", type=float, default=DEFAULT_SETTINGS["lpi"],
                        help=f'Lens pitch in lines per inch (default: {DEFAULT_SETTINGS["lpi"]})')
    parser.add_argument("--offset", type=float, default=DEFAULT_SETTINGS["offset"],
                        help="Phase offset as a fraction of one lens (-1 to 1)")
    parser.add_argument("--thickness", type=float, default=DEFAULT_SETTINGS["thickness"],
                        help="Stripe width as a fraction of one lens")
    parser.add_argument("--orientation", choices=["auto"] + [o.value.lower() for o in Orientation],
                        default="auto", help="Stripe direction (default: auto from window shape)")
    parser.add_argument("--color-mode", choices=[m.value.lower() for m in ColorMode],
                        default=DEFAULT_SETTINGS["color_mode"].lower(),
                        help="Stripe coloring (default: mono)")
    parser.add_argument("--ppi", default=str(DEFAULT_SETTINGS["base_ppi"]),
                        help="Display PPI, as a number or a preset name (see --list-presets)")
    parser.add_argument("--ratio", choices=["auto"] + list(VIDEO_RATIOS),
                        default=DEFAULT_SETTINGS["video_ratio"], help="Stereo view aspect ratio")
    parser.add_argument("--density", type=float, default=1.0,
                        help="Device pixels per logical pixel (default: 1.0)")
    parser.add_argument("--size", default="x".join(str(v) for v in DEFAULT_PREVIEW_SIZE),
                        help="Output size in logical pixels, WIDTHxHEIGHT")

    parser.add_argument("--media", help="SBS image or video to interlace")
    parser.add_argument("--paused", action="store_true", help="Start with playback paused")
    parser.add_argument("--snapshot", help="Render a single frame to this PNG path and exit")

    parser.add_argument("--list-presets", action="store_true", help="List display PPI presets")
    parser.add_argument("--no-color", action="store_true", help="Disable colored console output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    return parser


def build_settings(args) -> dict:
    """Collect calibration settings from parsed arguments."""
    width, height = parse_size(args.size)
    if args.orientation == "auto":
        orientation = orientation_for_viewport(width, height).value
    else:
        orientation = args.orientation
    return {
        "lpi": args.lpi,
        "offset": args.offset,
        "thickness": args.thickness,
        "orientation": orientation,
        "color_mode": args.color_mode,
        "base_ppi": args.ppi,
        "video_ratio": args.ratio,
    }


def list_presets() -> None:
    """Print display PPI presets."""
    print(title_bar("Display PPI presets"))
    for name, ppi in DISPLAY_PPI_PRESETS.items():
        print(f"  {name:<12} - {ppi} PPI")


def _run_preview(loop, state: PreviewState, media, video_ratio: str) -> None:
    import cv2

    cv2.namedWindow(PREVIEW_WINDOW_NAME, cv2.WINDOW_NORMAL)
    last_status = ""
    try:
        while state.running:
            if media is not None and state.is_playing and hasattr(media, "advance"):
                media.advance()

            surface = loop.tick(state.params, media, state.is_playing, video_ratio)
            cv2.imshow(PREVIEW_WINDOW_NAME, surface.to_bgr())

            status = format_status_line(state.params, state.precision_mode)
            if status != last_status:
                print(info(status))
                last_status = status

            key = cv2.waitKey(PREVIEW_FRAME_DELAY_MS) & 0xFF
            if key != 0xFF:
                state = apply_key(state, key)
    finally:
        cv2.destroyWindow(PREVIEW_WINDOW_NAME)


def main(argv=None) -> int:
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if args.no_color or not supports_color():
        Colors.disable()

    if args.list_presets:
        list_presets()
        return 0

    try:
        settings = build_settings(args)
        problems = validate_calibration_settings(settings)
        params = create_calibration_parameters(settings)
    except ValueError as e:
        print(error(f"Error: {e}"))
        return 1
    for problem in problems:
        print(error(f"Warning: {problem}"))

    from .io.media_sources import open_media_source
    from .rendering import Compositor, FrameLoop, MaskGenerator

    width, height = parse_size(args.size)
    geometry = OutputGeometry.from_viewport(width, height, args.density)
    compositor = Compositor(mask_generator=MaskGenerator(verbose=args.verbose))
    loop = FrameLoop(geometry, compositor=compositor, verbose=args.verbose)

    media = None
    if args.media:
        try:
            media = open_media_source(args.media)
        except ValueError as e:
            print(error(f"Error: {e}"))
            return 1

    try:
        if args.snapshot:
            import cv2

            surface = loop.tick(params, media, not args.paused, args.ratio)
            if not cv2.imwrite(args.snapshot, surface.to_bgr()):
                print(error(f"Error: Could not write {args.snapshot}"))
                return 1
            print(success(f"Saved {loop.state.value} frame to {args.snapshot}"))
            return 0

        state = PreviewState(params=params, is_playing=not args.paused)
        _run_preview(loop, state, media, args.ratio)
        return 0

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 1
    finally:
        if media is not None and hasattr(media, "release"):
            media.release()


if __name__ == "__main__":
    sys.exit(main())
