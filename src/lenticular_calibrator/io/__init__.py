"""Media input.

SBS image and video sources polled by the renderer.
"""

from .media_sources import (
    StereoMediaSource,
    ImageSource,
    VideoFrameSource,
    open_media_source,
)

__all__ = [
    "StereoMediaSource",
    "ImageSource",
    "VideoFrameSource",
    "open_media_source",
]
