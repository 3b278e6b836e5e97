"""Window detection utility for finding the game window."""

import logging
from typing import List, Optional

from .screen_capture import GameWindow

logger = logging.getLogger(__name__)

# Optional window detection - gracefully handle missing dependency
try:
    import pygetwindow as gw

    _CAN_GET_WINDOWS = True
except (ImportError, NotImplementedError):
    gw = None
    _CAN_GET_WINDOWS = False
    logger.warning("pygetwindow not available - window detection disabled")


def is_game_title(title: str, target_titles: List[str]) -> bool:
    """True when the window title names one of the target applications."""
    return title.strip().lower() in target_titles


class WindowDetector:
    """Window detection for the game client."""

    def __init__(self, target_titles: List[str] = None):
        self.target_titles = [t.lower() for t in (target_titles or ["pokemmo", "java"])]
        self.can_detect_windows = _CAN_GET_WINDOWS

        if not self.can_detect_windows:
            logger.warning("Window detection unavailable - pygetwindow not installed")

    def find_target_window(self) -> Optional[GameWindow]:
        """Find the first visible window whose title matches a target title."""
        if not self.can_detect_windows:
            return None

        try:
            for window in gw.getAllWindows():
                if window.isMinimized or not is_game_title(window.title or "", self.target_titles):
                    continue
                logger.debug(f"Found target window '{window.title}'")
                return GameWindow(window)

            logger.debug(f"No target windows found. Searched for: {self.target_titles}")
            return None

        except Exception as e:
            logger.error(f"Window detection failed: {e}")
            return None

    def list_available_windows(self) -> List[str]:
        """List visible window titles for debugging."""
        if not self.can_detect_windows:
            return []

        try:
            windows = gw.getAllWindows()
            titles = [f"{w.title} ({w.width}x{w.height})" for w in windows if w.title and not w.isMinimized]
            return sorted(titles)
        except Exception as e:
            logger.error(f"Failed to list windows: {e}")
            return []
