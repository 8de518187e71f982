"""
Side-by-side media sources.

The renderer only polls these objects: it asks whether a frame is ready and
reads the current frame. Loading, decoding and advancing belong to the caller.
Frames are returned as RGB uint8 arrays.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path

import cv2
import numpy as np

from ..core.constants import SUPPORTED_IMAGE_FORMATS, SUPPORTED_VIDEO_FORMATS


class StereoMediaSource(ABC):
    """Abstract SBS frame provider (image or video)."""

    @property
    @abstractmethod
    def source_width(self) -> int:
        """Width of the full side-by-side frame."""

    @property
    @abstractmethod
    def source_height(self) -> int:
        """Height of the full side-by-side frame."""

    @abstractmethod
    def current_frame(self) -> np.ndarray | None:
        """Current decoded frame (RGB uint8), or None if nothing is decoded."""

    def ready_for_draw(self) -> bool:
        """True when a frame is decoded and has nonzero dimensions."""
        return (
            self.current_frame() is not None and self.source_width > 0 and self.source_height > 0
        )


def _to_uint8(image: np.ndarray) -> np.ndarray:
    """Scale 16-bit or float images (as decoded with IMREAD_UNCHANGED) to uint8."""
    if image.dtype == np.uint8:
        return image
    if image.dtype == np.uint16:
        return cv2.convertScaleAbs(image, alpha=255.0 / 65535.0)
    return cv2.convertScaleAbs(image, alpha=255.0)


def _bgr_to_rgb(frame: np.ndarray) -> np.ndarray:
    if frame.ndim == 2:
        return cv2.cvtColor(frame, cv2.COLOR_GRAY2RGB)
    if frame.shape[2] == 4:
        return cv2.cvtColor(frame, cv2.COLOR_BGRA2RGBA)
    return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)


class ImageSource(StereoMediaSource):
    """Still SBS image held in memory."""

    def __init__(self, image: np.ndarray | None = None):
        """
        Args:
            image: RGB(A) uint8 array, or None for a source that never becomes ready
        """
        self._image = image

    @classmethod
    def from_file(cls, image_path: str) -> ImageSource:
        """
        Load an SBS image with OpenCV.

        Args:
            image_path: Path to image file

        Returns:
            ImageSource; not ready if the file could not be decoded

        Side Effects:
            Reads the image file from disk
        """
        image = cv2.imread(str(image_path), cv2.IMREAD_UNCHANGED)
        if image is None:
            print(f"Warning: Could not load image {image_path}")
            return cls(None)
        return cls(_bgr_to_rgb(_to_uint8(image)))

    @property
    def source_width(self) -> int:
        return 0 if self._image is None else int(self._image.shape[1])

    @property
    def source_height(self) -> int:
        return 0 if self._image is None else int(self._image.shape[0])

    def current_frame(self) -> np.ndarray | None:
        return self._image


class VideoFrameSource(StereoMediaSource):
    """
    SBS video decoded with ``cv2.VideoCapture``.

    The caller advances playback; the current frame stays put while paused.
    """

    def __init__(self, video_path: str, loop: bool = True):
        """
        Args:
            video_path: Path to video file
            loop: Restart from the first frame at end of stream
        """
        self.video_path = str(video_path)
        self.loop = loop
        self._capture = None
        self._frame: np.ndarray | None = None
        self.frames_decoded = 0

    def open(self) -> bool:
        """
        Open the capture and decode the first frame.

        Returns:
            True if the video opened

        Side Effects:
            Opens the video file with cv2.VideoCapture
        """
        self.release()
        self._capture = cv2.VideoCapture(self.video_path)
        if not self._capture.isOpened():
            print(f"Warning: Could not open video {self.video_path}")
            self._capture = None
            return False
        self.advance()
        return True

    def advance(self) -> bool:
        """
        Decode the next frame.

        Returns:
            True if a new frame was decoded
        """
        if self._capture is None:
            return False

        ok, frame = self._capture.read()
        if not ok and self.loop:
            self._capture.set(cv2.CAP_PROP_POS_FRAMES, 0)
            ok, frame = self._capture.read()

        if not ok or frame is None:
            return False

        self._frame = _bgr_to_rgb(frame)
        self.frames_decoded += 1
        return True

    def release(self) -> None:
        """Release the capture handle. The last frame stays readable."""
        if self._capture is not None:
            self._capture.release()
            self._capture = None

    def __enter__(self) -> VideoFrameSource:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    @property
    def fps(self) -> float:
        if self._capture is None:
            return 0.0
        return float(self._capture.get(cv2.CAP_PROP_FPS))

    @property
    def source_width(self) -> int:
        return 0 if self._frame is None else int(self._frame.shape[1])

    @property
    def source_height(self) -> int:
        return 0 if self._frame is None else int(self._frame.shape[0])

    def current_frame(self) -> np.ndarray | None:
        return self._frame


def open_media_source(media_path: str) -> StereoMediaSource:
    """
    Create a media source for a file, choosing image or video by extension.

    Args:
        media_path: Path to an SBS image or video

    Returns:
        ImageSource or opened VideoFrameSource

    Raises:
        ValueError: If the file does not exist or has an unsupported extension
    """
    if not os.path.exists(media_path):
        raise ValueError(f"Media file not found: {media_path}")

    file_ext = Path(media_path).suffix.lower()
    if file_ext in SUPPORTED_IMAGE_FORMATS:
        return ImageSource.from_file(media_path)
    if file_ext in SUPPORTED_VIDEO_FORMATS:
        source = VideoFrameSource(media_path)
        source.open()
        return source

    raise ValueError(f"Unsupported media format: {file_ext}")
