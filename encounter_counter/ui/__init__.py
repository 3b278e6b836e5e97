"""Console user interface."""

from .console import ConsoleController, format_summary

__all__ = ["ConsoleController", "format_summary"]
