"""Pydantic models for encounter statistics and the persisted save envelope."""

import logging
from enum import Enum
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, Field, NonNegativeInt, computed_field, model_validator

logger = logging.getLogger(__name__)


class EncounterPhase(str, Enum):
    """Where the debounce logic stands for the encounter currently on screen."""

    IDLE = "idle"  # no encounter on screen
    DETECTED = "detected"  # trigger seen, species not tallied yet
    COUNTED = "counted"  # species tallied, waiting for the battle to end

    @classmethod
    def from_flags(cls, in_encounter: bool, is_not_counted: bool) -> "EncounterPhase":
        """Map the two persisted debounce booleans onto a phase."""
        if in_encounter:
            return cls.DETECTED if is_not_counted else cls.COUNTED
        if not is_not_counted:
            logger.warning("State had is_not_counted=false outside an encounter, treating as idle")
        return cls.IDLE


class EncounterState(BaseModel):
    """Accumulated encounter statistics: totals, per-species tally and debounce phase."""

    encounters: NonNegativeInt = Field(description="Creatures counted across all completed encounters")
    last_encounter: List[str] = Field(description="Species from the encounter currently counted on screen")
    mon_stats: Dict[str, NonNegativeInt] = Field(description="Per-species tally, lower-cased keys")
    debug: bool = Field(description="Write cropped regions to disk for inspection")
    unsaved_encounters: NonNegativeInt = Field(description="Completed encounters since the last save")
    phase: EncounterPhase = Field(exclude=True, description="Debounce phase, persisted as two booleans")

    @model_validator(mode="before")
    @classmethod
    def _phase_from_flags(cls, data: Any) -> Any:
        # Persisted documents carry in_encounter/is_not_counted instead of phase
        if not isinstance(data, dict) or "phase" in data:
            return data

        data = dict(data)
        flags = []
        for key in ("in_encounter", "is_not_counted"):
            if key not in data:
                raise ValueError(f"missing field '{key}'")
            value = data.pop(key)
            if not isinstance(value, bool):
                raise ValueError(f"field '{key}' must be a boolean")
            flags.append(value)

        data["phase"] = EncounterPhase.from_flags(*flags)
        return data

    @computed_field
    @property
    def in_encounter(self) -> bool:
        return self.phase != EncounterPhase.IDLE

    @computed_field
    @property
    def is_not_counted(self) -> bool:
        return self.phase != EncounterPhase.COUNTED

    @property
    def species_total(self) -> int:
        """Sum of the per-species tally."""
        return sum(self.mon_stats.values())

    def top_species(self, limit: int = 8) -> List[Tuple[str, int]]:
        """Most frequent species, count descending then name ascending."""
        ranked = sorted(self.mon_stats.items(), key=lambda item: (-item[1], item[0]))
        return ranked[:limit]

    @classmethod
    def create_empty(cls, debug: bool = False) -> "EncounterState":
        """Fresh state with no encounters recorded."""
        return cls(
            encounters=0,
            last_encounter=[],
            mon_stats={},
            debug=debug,
            unsaved_encounters=0,
            phase=EncounterPhase.IDLE,
        )


class SavedState(BaseModel):
    """Envelope written to disk: the statistics plus an abnormal-exit marker."""

    state: EncounterState = Field(description="Accumulated encounter statistics")
    crashed: bool = Field(description="True when the session that wrote this did not close cleanly")
