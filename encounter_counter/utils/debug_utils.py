"""Debug output for cropped capture regions."""

import os
import logging
from typing import Optional

import cv2
import numpy as np

from .file_utils import FileUtils

logger = logging.getLogger(__name__)


class DebugUtils:
    """Writes intermediate images to fixed filenames so the latest crop can be inspected."""

    def __init__(self, debug_dir: str = "."):
        self.debug_dir = debug_dir
        logger.debug(f"DebugUtils initialized with directory: {debug_dir}")

    def save_debug_image(self, image: np.ndarray, filename: str) -> Optional[str]:
        """Overwrite ``filename`` in the debug directory with ``image``."""
        try:
            FileUtils.ensure_directory_exists(self.debug_dir)
            debug_path = os.path.join(self.debug_dir, filename)

            success = cv2.imwrite(debug_path, image)

            if success:
                logger.debug(f"Saved debug image: {debug_path}")
                return debug_path
            else:
                logger.warning(f"Failed to save debug image: {debug_path}")
                return None

        except Exception as e:
            logger.error(f"Failed to save debug image '{filename}': {e}")
            return None
