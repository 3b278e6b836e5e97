"""Region extraction: crop fractional screen regions and normalise them for OCR."""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np

from ..errors import CaptureError
from ..utils import DebugUtils

logger = logging.getLogger(__name__)

# Type definitions for clarity
Rect = Tuple[int, int, int, int]  # x0, x1, y0, y1 (absolute pixels, end exclusive)


@dataclass(frozen=True)
class Region:
    """Rectangle as fractions [0..1] of the window width/height."""

    name: str
    x0: float
    x1: float
    y0: float
    y1: float
    debug_filename: str


# Battle message box, where the wild-encounter trigger phrase appears
BOTTOM_REGION = Region("bottom", 0.06, 0.70, 0.60, 0.78, "debug_bottom.png")
# Opponent name plates with species and level marker
TOP_REGION = Region("top", 0.06, 0.94, 0.06, 0.30, "debug.png")


def validate_fractions(x0: float, x1: float, y0: float, y1: float) -> bool:
    """Validate the fractional bounds describe a non-empty rectangle inside the frame."""
    if not (0.0 <= x0 < x1 <= 1.0):
        return False
    if not (0.0 <= y0 < y1 <= 1.0):
        return False
    return True


class RegionExtractor:
    """Crops regions out of window snapshots and converts them to grey RGB."""

    def __init__(self, debug_utils: Optional[DebugUtils] = None):
        self.debug_utils = debug_utils or DebugUtils()

    def capture_snapshot(self, window) -> np.ndarray:
        """Capture a full snapshot of ``window``. Raises CaptureError."""
        try:
            snapshot = window.capture()
        except CaptureError:
            raise
        except Exception as e:
            raise CaptureError(f"Snapshot failed: {e}") from e

        if snapshot is None or getattr(snapshot, "size", 0) == 0:
            raise CaptureError("Snapshot is empty")
        return snapshot

    def to_pixels(self, width: int, height: int, x0: float, x1: float, y0: float, y1: float) -> Rect:
        """Truncate fractional bounds to pixel bounds."""
        return int(width * x0), int(width * x1), int(height * y0), int(height * y1)

    def extract(self, snapshot: np.ndarray, x0: float, x1: float, y0: float, y1: float) -> np.ndarray:
        """Crop [x0, x1) x [y0, y1) of the snapshot and normalise it to grey RGB."""
        if not validate_fractions(x0, x1, y0, y1):
            raise ValueError(f"Invalid region fractions: x={x0}..{x1} y={y0}..{y1}")

        height, width = snapshot.shape[:2]
        px0, px1, py0, py1 = self.to_pixels(width, height, x0, x1, y0, y1)

        cropped = np.ascontiguousarray(snapshot[py0:py1, px0:px1])
        if cropped.size == 0:
            raise ValueError(f"Empty crop for region {(x0, x1, y0, y1)} on image {width}x{height}")

        return self._normalise(cropped)

    def extract_region(self, snapshot: np.ndarray, region: Region, debug: bool = False) -> np.ndarray:
        """Extract a preset region, writing it to its debug file when ``debug`` is set."""
        image = self.extract(snapshot, region.x0, region.x1, region.y0, region.y1)
        if debug:
            self.debug_utils.save_debug_image(image, region.debug_filename)
        return image

    def _normalise(self, image: np.ndarray) -> np.ndarray:
        # Grey values replicated across three channels, whatever the source depth
        if image.ndim == 2:
            grey = image
        elif image.shape[2] == 4:
            grey = cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
        else:
            grey = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)

        if grey.dtype != np.uint8:
            grey = cv2.normalize(grey, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

        return cv2.cvtColor(grey, cv2.COLOR_GRAY2RGB)
