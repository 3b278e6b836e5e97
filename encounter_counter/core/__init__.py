# Core encounter detection: state machine, persistence, run state and polling
from .encounter_tracker import CycleObservation, EncounterTracker
from .orchestrator import EncounterOrchestrator, StateSnapshot
from .run_state import RunState, RunStateFlag
from .state_store import StateStore

__all__ = [
    "CycleObservation",
    "EncounterTracker",
    "EncounterOrchestrator",
    "StateSnapshot",
    "RunState",
    "RunStateFlag",
    "StateStore",
]
