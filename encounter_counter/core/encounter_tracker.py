"""Per-cycle encounter state machine.

Turns noisy, repeated-frame classifier output into exactly one count per
encounter on screen:

    IDLE --trigger--> DETECTED --species--> COUNTED --no species--> IDLE

While COUNTED, the same species text may stay visible for many cycles; it is
only tallied on the DETECTED -> COUNTED edge.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..config import SAVE_THRESHOLD
from ..errors import StateIoError
from ..models import EncounterPhase, EncounterState

logger = logging.getLogger(__name__)


@dataclass
class CycleObservation:
    """Classifier output for one cycle. None means the region was not scanned."""

    wild_trigger: Optional[bool] = None
    species: Optional[List[str]] = None


class EncounterTracker:
    """Applies observations to an ``EncounterState`` and autosaves every few encounters."""

    def __init__(self, store=None, save_threshold: int = SAVE_THRESHOLD):
        self.store = store
        self.save_threshold = save_threshold
        # Debug flag written to disk instead of the in-memory one, None to keep it
        self.saved_debug = None

    @staticmethod
    def needs_trigger_scan(state: EncounterState) -> bool:
        """The bottom region only matters while no encounter is on screen."""
        return state.phase == EncounterPhase.IDLE

    def apply(self, state: EncounterState, observation: CycleObservation) -> bool:
        """Advance ``state`` by one cycle. True only on the cycle that tallies a new encounter."""
        if state.phase == EncounterPhase.IDLE:
            if not observation.wild_trigger:
                return False
            state.phase = EncounterPhase.DETECTED
            logger.debug("Wild encounter detected")

        if observation.species is None:
            return False

        if state.phase == EncounterPhase.DETECTED:
            if not observation.species:
                # Name plates not readable yet
                return False
            self._count(state, observation.species)
            return True

        if not observation.species:
            state.phase = EncounterPhase.IDLE
            state.last_encounter = []
            logger.debug("Encounter ended, back to idle")
        return False

    def _count(self, state: EncounterState, species: List[str]) -> None:
        state.encounters += len(species)
        state.last_encounter = list(species)
        for name in species:
            state.mon_stats[name] = state.mon_stats.get(name, 0) + 1
        state.phase = EncounterPhase.COUNTED
        state.unsaved_encounters += 1

        logger.info(f"Encounter counted: {', '.join(species)} (total {state.encounters})")

        if state.unsaved_encounters >= self.save_threshold:
            self._autosave(state)

    def _autosave(self, state: EncounterState) -> None:
        if self.store is None:
            return

        snapshot = state.model_copy(deep=True)
        snapshot.unsaved_encounters = 0
        if self.saved_debug is not None:
            snapshot.debug = self.saved_debug
        try:
            # The session is still running, so the file keeps the unclean-exit marker
            self.store.save(snapshot, crashed=True)
        except StateIoError as e:
            logger.warning(f"Autosave failed, will retry after the next encounter: {e}")
            return

        state.unsaved_encounters = 0
        logger.debug("Progress saved")
