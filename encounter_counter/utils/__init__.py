"""Utilities module - shared file helpers and debug output."""

from .file_utils import FileUtils
from .debug_utils import DebugUtils

__all__ = ["FileUtils", "DebugUtils"]
