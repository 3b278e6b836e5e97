"""Durable storage of encounter statistics with legacy-format migration."""

import logging
import os

from pydantic import ValidationError

from ..errors import StateCorruptError, StateIoError
from ..models import EncounterState, SavedState
from ..utils import FileUtils

logger = logging.getLogger(__name__)


class StateStore:
    """Loads and saves ``EncounterState`` wrapped in a ``SavedState`` envelope."""

    def __init__(self, path: str = "state.json"):
        self.path = path

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def load(self) -> EncounterState:
        """Read the persisted state.

        Tries the envelope schema first, then the legacy bare-state schema
        (rewriting the file as an envelope). Raises StateIoError when the file
        cannot be read and StateCorruptError when neither schema parses.
        """
        try:
            raw = FileUtils.read_text(self.path)
        except OSError as e:
            raise StateIoError(f"Failed to read {self.path}: {e}") from e

        try:
            saved = SavedState.model_validate_json(raw)
        except ValidationError:
            saved = None

        if saved is not None:
            if saved.crashed:
                logger.warning("Last session did not exit cleanly. Restoring progress...")
            logger.info(f"Loaded state from {self.path}: {saved.state.encounters} encounters")
            return saved.state

        try:
            legacy = EncounterState.model_validate_json(raw)
        except ValidationError as e:
            raise StateCorruptError(f"Failed to parse {self.path}: {e.error_count()} validation errors") from e

        logger.warning("Detected old state format. Updating to new format...")
        try:
            self.save(legacy, crashed=False)
        except StateIoError as e:
            logger.error(f"Could not rewrite {self.path} in the new format, will retry next load: {e}")
        return legacy

    def load_or_default(self) -> EncounterState:
        """Load the persisted state, or a fresh one if it is missing or corrupt.

        A corrupt file is moved to ``<path>.corrupt`` first so the fresh state
        never overwrites it. Read failures still raise StateIoError.
        """
        if not self.exists():
            logger.info(f"No saved state at {self.path}, starting fresh")
            return EncounterState.create_empty()

        try:
            return self.load()
        except StateCorruptError as e:
            backup = self.path + ".corrupt"
            try:
                os.replace(self.path, backup)
            except OSError as move_error:
                raise StateIoError(f"Could not move corrupt {self.path} aside: {move_error}") from e
            logger.error(f"Could not load saved state, moved it to {backup} and starting fresh: {e}")
            return EncounterState.create_empty()

    def save(self, state: EncounterState, crashed: bool = False) -> None:
        """Atomically overwrite the persisted file. Raises StateIoError."""
        saved = SavedState(state=state, crashed=crashed)
        try:
            FileUtils.write_text_atomic(saved.model_dump_json(indent=2), self.path)
        except OSError as e:
            raise StateIoError(f"Failed to write {self.path}: {e}") from e

        logger.debug(f"Saved state to {self.path} (crashed={crashed})")
