"""Shared run-state flag observed by the polling worker and set by the controller."""

import logging
import threading
from enum import Enum
from typing import Dict, FrozenSet

from ..errors import InvalidTransitionError

logger = logging.getLogger(__name__)


class RunState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    PAUSED = "paused"
    QUITTING = "quitting"


_ALLOWED: Dict[RunState, FrozenSet[RunState]] = {
    RunState.IDLE: frozenset({RunState.ACTIVE, RunState.QUITTING}),
    RunState.ACTIVE: frozenset({RunState.PAUSED, RunState.IDLE, RunState.QUITTING}),
    RunState.PAUSED: frozenset({RunState.ACTIVE, RunState.IDLE, RunState.QUITTING}),
    RunState.QUITTING: frozenset(),
}


class RunStateFlag:
    """Thread-safe run state with validated transitions."""

    def __init__(self, initial: RunState = RunState.IDLE):
        self._state = initial
        self._lock = threading.Lock()

    def get(self) -> RunState:
        with self._lock:
            return self._state

    def is_active(self) -> bool:
        return self.get() == RunState.ACTIVE

    def can_transition(self, new_state: RunState) -> bool:
        with self._lock:
            return new_state in _ALLOWED[self._state]

    def transition(self, new_state: RunState) -> RunState:
        """Move to ``new_state`` and return the previous state.

        Raises InvalidTransitionError for transitions that are not allowed,
        including staying in the same state.
        """
        with self._lock:
            previous = self._state
            if new_state not in _ALLOWED[previous]:
                raise InvalidTransitionError(f"Cannot change run state from {previous.value} to {new_state.value}")
            self._state = new_state

        logger.debug(f"Run state {previous.value} -> {new_state.value}")
        return previous

    def __repr__(self) -> str:
        return f"RunStateFlag({self.get().value})"
