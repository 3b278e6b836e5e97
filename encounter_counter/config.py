"""Runtime configuration read from the environment (and an optional .env file)."""

import os
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_TITLES = ["pokemmo", "java"]
SAVE_THRESHOLD = 5


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={value!r}, using {default}")
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={value!r}, using {default}")
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    value = os.getenv(name)
    if not value:
        return list(default)
    return [item.strip().lower() for item in value.split(",") if item.strip()]


@dataclass
class CounterConfig:
    """Tunable settings for capture, OCR, polling and persistence.

    The poll delays trade detection latency against CPU use: a lower delay
    picks up the trigger and species text sooner but runs OCR more often.
    """

    state_file: str = "state.json"
    window_titles: List[str] = field(default_factory=lambda: list(DEFAULT_WINDOW_TITLES))
    save_threshold: int = SAVE_THRESHOLD
    poll_idle_delay: float = 0.01  # idle or waiting for species text
    poll_counted_delay: float = 0.1  # encounter already counted, nothing urgent
    poll_no_window_delay: float = 0.05  # game window not found
    ocr_engine: str = "auto"
    ocr_min_confidence: float = 40.0
    tesseract_cmd: Optional[str] = None
    debug_dir: str = "."
    force_debug: bool = False

    @classmethod
    def from_env(cls) -> "CounterConfig":
        """Build configuration from environment variables, falling back to defaults."""
        config = cls(
            state_file=os.getenv("ENCOUNTER_STATE_FILE", "state.json"),
            window_titles=_env_list("ENCOUNTER_WINDOW_TITLES", DEFAULT_WINDOW_TITLES),
            save_threshold=max(1, _env_int("ENCOUNTER_SAVE_THRESHOLD", SAVE_THRESHOLD)),
            poll_idle_delay=_env_int("POLL_IDLE_DELAY_MS", 10) / 1000.0,
            poll_counted_delay=_env_int("POLL_COUNTED_DELAY_MS", 100) / 1000.0,
            poll_no_window_delay=_env_int("POLL_NO_WINDOW_DELAY_MS", 50) / 1000.0,
            ocr_engine=os.getenv("OCR_ENGINE", "auto").strip().lower(),
            ocr_min_confidence=_env_float("OCR_MIN_CONFIDENCE", 40.0),
            tesseract_cmd=os.getenv("TESSERACT_CMD") or None,
            debug_dir=os.getenv("ENCOUNTER_DEBUG_DIR", "."),
            force_debug=_env_bool("ENCOUNTER_DEBUG", False),
        )
        logger.debug(f"Loaded configuration: {config}")
        return config
