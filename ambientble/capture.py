"""Camera capture producing RGB video frames."""
from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Any

import cv2
import numpy as np
from PIL import Image

from ambientble import const
from ambientble.errors import CaptureError

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class VideoFrame:
    """A single RGB video frame."""

    width: int
    height: int
    data: bytes

    @classmethod
    def from_array(cls, array: np.ndarray) -> VideoFrame:
        """Build a frame from an ``(height, width, 3)`` uint8 array."""
        if array.ndim != 3 or array.shape[2] != 3:
            raise ValueError(f"Expected an (h, w, 3) array, got {array.shape}")
        height, width = array.shape[:2]
        return cls(
            width=width,
            height=height,
            data=np.ascontiguousarray(array, dtype=np.uint8).tobytes(),
        )

    def as_array(self) -> np.ndarray:
        """Return the pixels as an ``(height, width, 3)`` array."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(
            self.height, self.width, 3
        )

    def as_image(self) -> Image.Image:
        """Return the frame as a Pillow image."""
        return Image.frombytes("RGB", (self.width, self.height), self.data)

    def mean_brightness(self) -> float:
        """Return the mean channel value, 0 for an empty frame."""
        if not self.data:
            return 0.0
        return float(np.frombuffer(self.data, dtype=np.uint8).mean())


class Camera:
    """OpenCV backed camera session."""

    def __init__(
        self,
        device_index: int = const.DEFAULT_CAMERA_INDEX,
        *,
        width: int = const.DEFAULT_FRAME_WIDTH,
        height: int = const.DEFAULT_FRAME_HEIGHT,
        fps: int = const.DEFAULT_FRAME_FPS,
    ) -> None:
        self._device_index = device_index
        self._width = width
        self._height = height
        self._fps = fps
        self._capture: Any = None
        # Held across a read so release() cannot run underneath it
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        """Return whether the capture device is open."""
        return self._capture is not None

    def open(self) -> None:
        """Open the capture device and request MJPEG at the configured size."""
        if self._capture is not None:
            return
        capture = cv2.VideoCapture(self._device_index)
        if not capture.isOpened():
            capture.release()
            raise CaptureError(f"Could not open camera {self._device_index}")
        capture.set(cv2.CAP_PROP_FOURCC, cv2.VideoWriter_fourcc(*"MJPG"))
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self._width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self._height)
        capture.set(cv2.CAP_PROP_FPS, self._fps)
        self._capture = capture
        _LOGGER.info(
            "Opened camera %d at %dx%d",
            self._device_index,
            int(capture.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )

    def close(self) -> None:
        """Release the capture device."""
        with self._lock:
            if self._capture is None:
                return
            self._capture.release()
            self._capture = None
        _LOGGER.debug("Released camera %d", self._device_index)

    def _read(self) -> tuple[bool, Any]:
        with self._lock:
            if self._capture is None:
                return False, None
            return self._capture.read()

    async def next_frame(self) -> VideoFrame:
        """Read the next frame without blocking the event loop."""
        if self._capture is None:
            raise CaptureError("Camera is not open")
        ok, bgr = await asyncio.to_thread(self._read)
        if not ok or bgr is None:
            raise CaptureError(f"Failed to read a frame from camera {self._device_index}")
        return VideoFrame.from_array(cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB))

    async def __aenter__(self) -> Camera:
        self.open()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.close()
