"""Screen capture module - finds the game window and captures its contents."""

from .screen_capture import GameWindow
from .window_detector import WindowDetector, is_game_title

__all__ = ["GameWindow", "WindowDetector", "is_game_title"]
