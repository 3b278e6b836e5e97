"""Counts wild creature encounters by reading a game window with OCR."""

__version__ = "1.0.0"

# Import main components for easy access
from .config import CounterConfig
from .core import EncounterOrchestrator, EncounterTracker, RunState, RunStateFlag, StateStore
from .capture import GameWindow, WindowDetector
from .processing import RegionExtractor, extract_species, has_wild_trigger
from .models import EncounterPhase, EncounterState, SavedState

__all__ = [
    "CounterConfig",
    "EncounterOrchestrator",
    "EncounterTracker",
    "RunState",
    "RunStateFlag",
    "StateStore",
    "GameWindow",
    "WindowDetector",
    "RegionExtractor",
    "extract_species",
    "has_wild_trigger",
    "EncounterPhase",
    "EncounterState",
    "SavedState",
]
