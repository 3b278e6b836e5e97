"""Polling orchestrator: drives capture, OCR, classification and counting on a worker thread."""

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import Optional

from ..capture import WindowDetector
from ..config import CounterConfig
from ..errors import CaptureError, InvalidTransitionError, OcrError, StateIoError
from ..models import EncounterPhase, EncounterState
from ..processing import BOTTOM_REGION, TOP_REGION, RegionExtractor, extract_species, has_wild_trigger
from ..utils import DebugUtils
from .encounter_tracker import CycleObservation, EncounterTracker
from .run_state import RunState, RunStateFlag
from .state_store import StateStore

logger = logging.getLogger(__name__)


@dataclass
class StateSnapshot:
    """Copy of the state after a cycle, and whether that cycle counted a new encounter."""

    state: EncounterState
    new_encounter: bool
    generation: int = 0


class EncounterOrchestrator:
    """Owns the shared ``EncounterState`` and the worker that polls the game window.

    The worker is the only mutator while it runs. Each cycle reads the phase
    under the lock, does capture and OCR without it, then takes the lock once
    more to apply the result. ``pause``, ``reset`` and ``quit`` change the
    shared run state, join the worker and only then touch the state.
    """

    def __init__(
        self,
        config: CounterConfig,
        run_state: RunStateFlag,
        store: StateStore,
        engine,
        window_detector: Optional[WindowDetector] = None,
        region_extractor: Optional[RegionExtractor] = None,
        state: Optional[EncounterState] = None,
        snapshot_queue_size: int = 32,
    ):
        self.config = config
        self.run_state = run_state
        self.store = store
        self.engine = engine
        self.window_detector = window_detector or WindowDetector(config.window_titles)
        self.region_extractor = region_extractor or RegionExtractor(DebugUtils(config.debug_dir))
        self.tracker = EncounterTracker(store, config.save_threshold)

        self._lock = threading.Lock()
        self._state = state if state is not None else store.load_or_default()
        # --debug applies to this session only, saves keep the flag the file had
        self._saved_debug = self._state.debug
        if config.force_debug:
            self._state.debug = True
            self.tracker.saved_debug = self._saved_debug

        # Bumped on reset so snapshots of the replaced state can be told apart
        self.generation = 0
        self.join_timeout = 10.0

        self.snapshots: "queue.Queue[StateSnapshot]" = queue.Queue(maxsize=snapshot_queue_size)
        self._worker: Optional[threading.Thread] = None

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    def snapshot(self) -> EncounterState:
        """On-demand copy of the current state."""
        with self._lock:
            return self._state.model_copy(deep=True)

    def _persisted_copy(self) -> EncounterState:
        state = self._state.model_copy(deep=True)
        if self.config.force_debug:
            state.debug = self._saved_debug
        return state

    def save(self, crashed: bool = False) -> bool:
        """Persist the current state. Failures are logged, not raised."""
        with self._lock:
            state = self._persisted_copy()
            state.unsaved_encounters = 0
            try:
                self.store.save(state, crashed=crashed)
            except StateIoError as e:
                logger.error(f"Failed to save state: {e}")
                return False
            self._state.unsaved_encounters = 0
        return True

    def open_session(self) -> bool:
        """Mark the persisted state as belonging to a running session."""
        return self.save(crashed=True)

    def emergency_save(self, crashed: bool = True) -> bool:
        """Best-effort save from a termination path, without waiting long for the worker."""
        acquired = self._lock.acquire(timeout=1.0)
        try:
            state = self._persisted_copy()
        finally:
            if acquired:
                self._lock.release()

        try:
            self.store.save(state, crashed=crashed)
        except StateIoError as e:
            logger.error(f"Emergency save failed: {e}")
            return False
        logger.warning("Saved progress before exit")
        return True

    # ------------------------------------------------------------------
    # Worker control
    # ------------------------------------------------------------------

    @property
    def worker_running(self) -> bool:
        return self._worker is not None and self._worker.is_alive()

    def start(self) -> None:
        """Switch to ACTIVE and start the polling worker."""
        if self.worker_running:
            raise InvalidTransitionError("Previous polling worker is still running, try again shortly")
        self.run_state.transition(RunState.ACTIVE)
        self._join_worker()
        self._worker = threading.Thread(target=self._poll_loop, name="encounter-poller", daemon=True)
        self._worker.start()
        logger.info("Encounter polling started")

    def pause(self) -> None:
        """Stop polling and save."""
        self.run_state.transition(RunState.PAUSED)
        self._join_worker()
        self.save(crashed=False)
        logger.info("Encounter polling paused")

    def reset(self) -> None:
        """Stop polling, replace the state with an empty one and save it."""
        if self.run_state.get() != RunState.IDLE:
            self.run_state.transition(RunState.IDLE)
        self._join_worker()
        with self._lock:
            self._state = EncounterState.create_empty(debug=self.config.force_debug)
            self.generation += 1
            self._saved_debug = False
            if self.config.force_debug:
                self.tracker.saved_debug = False
        self.save(crashed=False)
        logger.info("Encounter statistics reset")

    def quit(self) -> None:
        """Stop polling for good and write a clean save. Safe to call more than once."""
        try:
            self.run_state.transition(RunState.QUITTING)
        except InvalidTransitionError:
            logger.debug("Already quitting")
        self._join_worker()
        self.save(crashed=False)
        logger.info("Encounter counter stopped")

    def _join_worker(self) -> None:
        worker = self._worker
        if worker is None or worker is threading.current_thread():
            return
        worker.join(self.join_timeout)
        if worker.is_alive():
            logger.warning("Polling worker did not stop in time")
        else:
            self._worker = None

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def run_cycle(self, window) -> bool:
        """Capture, classify and apply one cycle. True when a new encounter was counted.

        CaptureError and OcrError propagate without touching the state.
        """
        with self._lock:
            state_ref = self._state
            scan_trigger = self.tracker.needs_trigger_scan(state_ref)
            debug = state_ref.debug

        snapshot = self.region_extractor.capture_snapshot(window)
        observation = CycleObservation()

        if scan_trigger:
            bottom = self.region_extractor.extract_region(snapshot, BOTTOM_REGION, debug)
            observation.wild_trigger = has_wild_trigger(self.engine.recognize_lines(bottom))

        if not scan_trigger or observation.wild_trigger:
            top = self.region_extractor.extract_region(snapshot, TOP_REGION, debug)
            observation.species = extract_species(self.engine.recognize_lines(top))

        with self._lock:
            if self._state is not state_ref:
                logger.debug("State replaced during cycle, discarding observation")
                return False
            new_encounter = self.tracker.apply(self._state, observation)
            state_copy = self._state.model_copy(deep=True)
            generation = self.generation

        self._publish(StateSnapshot(state_copy, new_encounter, generation))
        return new_encounter

    def next_delay(self) -> float:
        """Short delay while looking for the trigger or species, longer once counted."""
        with self._lock:
            phase = self._state.phase
        if phase == EncounterPhase.COUNTED:
            return self.config.poll_counted_delay
        return self.config.poll_idle_delay

    def _poll_loop(self) -> None:
        logger.debug("Worker thread started")
        while self.run_state.is_active():
            window = self.window_detector.find_target_window()
            if window is None:
                time.sleep(self.config.poll_no_window_delay)
                continue

            try:
                self.run_cycle(window)
            except (CaptureError, OcrError) as e:
                logger.warning(f"Skipping cycle: {e}")
            except Exception as e:
                logger.exception(f"Unexpected error in polling cycle: {e}")

            time.sleep(self.next_delay())
        logger.debug("Worker thread exiting")

    def _publish(self, snapshot: StateSnapshot) -> None:
        # Drop the oldest snapshot when the consumer falls behind
        while True:
            try:
                self.snapshots.put_nowait(snapshot)
                return
            except queue.Full:
                try:
                    self.snapshots.get_nowait()
                except queue.Empty:
                    pass
