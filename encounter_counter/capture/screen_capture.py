"""Game window handle with fast capture using MSS."""

import logging
from typing import Any, Tuple

import cv2
import mss
import numpy as np

from ..errors import CaptureError

logger = logging.getLogger(__name__)

# Type definition for window bounds
Rect = Tuple[int, int, int, int]  # x, y, width, height


class GameWindow:
    """Handle on the target window: reports its size and captures its contents as BGR."""

    def __init__(self, native_window: Any):
        self._window = native_window

    @property
    def title(self) -> str:
        return getattr(self._window, "title", "") or ""

    @property
    def bounds(self) -> Rect:
        return (self._window.left, self._window.top, self._window.width, self._window.height)

    def dimensions(self) -> Tuple[int, int]:
        """Current (width, height) of the window in pixels."""
        return self._window.width, self._window.height

    def capture(self) -> np.ndarray:
        """Capture the window region as a BGR array. Raises CaptureError."""
        left, top, width, height = self.bounds

        if width <= 0 or height <= 0:
            raise CaptureError(f"Window '{self.title}' has invalid size {width}x{height}")
        if getattr(self._window, "isMinimized", False):
            raise CaptureError(f"Window '{self.title}' is minimized")

        try:
            with mss.mss() as sct:
                # MSS expects a monitor-like dictionary
                monitor = {"left": left, "top": top, "width": width, "height": height}
                screenshot = np.array(sct.grab(monitor))  # Returns BGRA format

            bgr_image = cv2.cvtColor(screenshot, cv2.COLOR_BGRA2BGR)
            logger.debug(f"Captured window region: {bgr_image.shape[1]}x{bgr_image.shape[0]}")
            return bgr_image

        except Exception as e:
            raise CaptureError(f"Window capture failed for bounds {self.bounds}: {e}") from e

    def __repr__(self) -> str:
        return f"GameWindow(title={self.title!r}, bounds={self.bounds})"
