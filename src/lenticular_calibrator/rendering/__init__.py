"""Rendering engine for Lenticular Calibrator.

Raster surfaces, interlacing mask, SBS splitting, composition and the frame loop.
"""

from .raster_surface import RasterSurface, CompositeMode
from .mask_generator import (
    StripeLayout,
    MaskCacheEntry,
    MaskGenerator,
    build_mask_fingerprint,
    compute_stripe_layout,
    draw_stripes,
    is_mask_computable,
)
from .stereo_splitter import (
    StereoSplitter,
    compute_available_area,
    compute_letterbox_rect,
    resolve_media_aspect,
)
from .compositor import Compositor, FrameBuffers, stripe_color
from .frame_loop import FrameLoop, derive_render_state

__all__ = [
    "RasterSurface",
    "CompositeMode",
    "StripeLayout",
    "MaskCacheEntry",
    "MaskGenerator",
    "build_mask_fingerprint",
    "compute_stripe_layout",
    "draw_stripes",
    "is_mask_computable",
    "StereoSplitter",
    "compute_available_area",
    "compute_letterbox_rect",
    "resolve_media_aspect",
    "Compositor",
    "FrameBuffers",
    "stripe_color",
    "FrameLoop",
    "derive_render_state",
]
