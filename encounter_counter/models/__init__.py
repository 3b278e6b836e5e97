"""Data models module - Pydantic models for encounter statistics and persistence."""

from .schema import EncounterPhase, EncounterState, SavedState

__all__ = ["EncounterPhase", "EncounterState", "SavedState"]
