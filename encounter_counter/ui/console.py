"""Console front end: start/pause/reset/quit commands and a live encounter feed."""

import logging
import queue
import threading
from typing import Callable, Optional

from ..core import EncounterOrchestrator, RunState, StateSnapshot
from ..errors import InvalidTransitionError
from ..models import EncounterState

logger = logging.getLogger(__name__)

TOP_LIMIT = 8

HELP_TEXT = "Commands: [s]tart  [p]ause  [r]eset  [t]otals  [q]uit"


def format_summary(state: EncounterState, run_state: Optional[RunState] = None, limit: int = TOP_LIMIT) -> str:
    """Human-readable totals block with the most frequent species."""
    lines = ["=" * 40, "ENCOUNTER COUNTER", "=" * 40]
    if run_state is not None:
        lines.append(f"App State: {run_state.value.capitalize()}")
    lines.append(f"Total Encounters: {state.encounters}")
    lines.append(f"Last Encounters: {', '.join(state.last_encounter)}")
    lines.append("-" * 40)
    lines.append(f"Top {limit} Encounters")
    top = state.top_species(limit)
    if not top:
        lines.append("  (none yet)")
    for rank, (species, count) in enumerate(top, start=1):
        lines.append(f"{rank}. {species} - {count}")
    return "\n".join(lines)


class ConsoleController:
    """Reads single-letter commands and prints encounters as the worker counts them."""

    def __init__(
        self,
        orchestrator: EncounterOrchestrator,
        input_func: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
    ):
        self.orchestrator = orchestrator
        self.input_func = input_func
        self.output = output

        # Last state known to be good, shown when nothing newer has arrived
        self.last_rendered: EncounterState = orchestrator.snapshot()

        self._render_lock = threading.Lock()
        self._feed_stop = threading.Event()
        self._feed_thread: Optional[threading.Thread] = None

        self.commands = {
            "s": self.start,
            "p": self.pause,
            "r": self.reset,
            "t": self.show_totals,
            "q": self.quit,
        }

    def run(self) -> int:
        """Command loop. Ctrl+C and SIGTERM arrive as KeyboardInterrupt and end it with a clean save."""
        self.output(format_summary(self.last_rendered, self.orchestrator.run_state.get()))
        self.output(HELP_TEXT)
        self._start_feed()

        try:
            while True:
                try:
                    command = self.input_func("> ")
                except EOFError:
                    command = "q"

                if not self.handle(command):
                    return 0
        except KeyboardInterrupt:
            logger.warning("Interrupted, saving and exiting...")
            self.quit()
            return 0
        finally:
            self._stop_feed()

    def handle(self, command: str) -> bool:
        """Run one command. Returns False when the controller should exit."""
        key = command.strip().lower()[:1]
        action = self.commands.get(key)
        if action is None:
            if key:
                self.output(HELP_TEXT)
            return True

        try:
            action()
        except InvalidTransitionError as e:
            self.output(f"[WARNING] {e}")
        return key != "q"

    def start(self) -> None:
        self.orchestrator.start()
        self.output("Counting started")

    def pause(self) -> None:
        self.orchestrator.pause()
        with self._render_lock:
            self.last_rendered = self.orchestrator.snapshot()
        self.output("Paused and saved")

    def reset(self) -> None:
        self.orchestrator.reset()
        with self._render_lock:
            self.last_rendered = self.orchestrator.snapshot()
        self._drain_snapshots()
        self.output("Statistics reset")

    def show_totals(self) -> None:
        self._drain_snapshots()
        self.output(format_summary(self.last_rendered, self.orchestrator.run_state.get()))

    def quit(self) -> None:
        self.orchestrator.quit()
        self.output("Saved. Bye")

    def on_snapshot(self, snapshot: StateSnapshot) -> None:
        with self._render_lock:
            if snapshot.generation != self.orchestrator.generation:
                # Taken before a reset
                return
            self.last_rendered = snapshot.state
        if snapshot.new_encounter:
            species = ", ".join(snapshot.state.last_encounter)
            self.output(f"Encounter #{snapshot.state.encounters}: {species}")

    def _drain_snapshots(self) -> None:
        while True:
            try:
                snapshot = self.orchestrator.snapshots.get_nowait()
            except queue.Empty:
                return
            self.on_snapshot(snapshot)

    def _feed_loop(self) -> None:
        while not self._feed_stop.is_set():
            try:
                snapshot = self.orchestrator.snapshots.get(timeout=0.2)
            except queue.Empty:
                continue
            self.on_snapshot(snapshot)

    def _start_feed(self) -> None:
        self._feed_stop.clear()
        self._feed_thread = threading.Thread(target=self._feed_loop, name="encounter-feed", daemon=True)
        self._feed_thread.start()

    def _stop_feed(self) -> None:
        self._feed_stop.set()
        if self._feed_thread is not None:
            self._feed_thread.join(timeout=1.0)
            self._feed_thread = None
