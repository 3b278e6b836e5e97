"""Exception types raised by the encounter counter."""


class EncounterCounterError(Exception):
    """Base class for all encounter counter errors."""


class CaptureError(EncounterCounterError):
    """Window vanished or the OS-level capture failed. The cycle is skipped."""


class OcrError(EncounterCounterError):
    """OCR engine failed as a whole (not a single unreadable line)."""


class StateCorruptError(EncounterCounterError):
    """Persisted state could not be parsed as either known schema."""


class StateIoError(EncounterCounterError):
    """Reading or writing the persisted state failed."""


class InvalidTransitionError(EncounterCounterError):
    """Run-state change that is not allowed from the current state."""
