#!/usr/bin/env python3
"""Encounter counter entry point."""

import sys
import signal
import argparse
import logging
import threading

from .capture import WindowDetector
from .config import CounterConfig
from .core import EncounterOrchestrator, RunStateFlag, StateStore
from .errors import CaptureError, OcrError, StateIoError
from .ocr import EngineSelector
from .ui import ConsoleController
from .utils import DebugUtils

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False, log_file: str = None) -> None:
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, format=LOG_FORMAT, handlers=handlers)


def setup_args() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Count wild encounters by reading the game window with OCR",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                          # Start the console counter
  %(prog)s --debug                  # Verbose logging and cropped-region dumps
  %(prog)s --list-windows           # Show window titles and save a test capture
  %(prog)s --state-file run2.json   # Keep statistics in another file
        """,
    )

    parser.add_argument("--debug", action="store_true", help="Enable debug logging and save cropped regions")
    parser.add_argument("--state-file", help="Path of the saved statistics (default: ENCOUNTER_STATE_FILE or state.json)")
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("--list-windows", action="store_true", help="List windows and capture the game window")
    parser.add_argument("--info", action="store_true", help="Show configuration and exit")

    return parser


def show_info(config: CounterConfig) -> None:
    print("\n" + "=" * 60)
    print("Encounter Counter")
    print("=" * 60)
    print(f"  State file:      {config.state_file}")
    print(f"  Window titles:   {', '.join(config.window_titles)}")
    print(f"  OCR engine:      {config.ocr_engine}")
    print(f"  Save every:      {config.save_threshold} encounters")
    print(f"  Poll delays:     idle {config.poll_idle_delay:.3f}s, counted {config.poll_counted_delay:.3f}s")
    print("-" * 60)


def list_windows(config: CounterConfig) -> int:
    detector = WindowDetector(config.window_titles)
    for title in detector.list_available_windows():
        print(f"Window: {title}")

    window = detector.find_target_window()
    if window is None:
        print(f"Game window not found. Searched for: {', '.join(config.window_titles)}")
        return 1

    try:
        image = window.capture()
    except CaptureError as e:
        logger.error(f"Capture failed: {e}")
        return 1

    path = DebugUtils(config.debug_dir).save_debug_image(image, "debug_full.png")
    print(f"Captured {window.title}: {path}")
    return 0


def install_shutdown_hooks(orchestrator: EncounterOrchestrator) -> None:
    """Save on Ctrl+C/SIGTERM (clean) and on unhandled exceptions (crashed)."""

    def handle_signal(signum, frame):
        # Only unwind here: the main thread may be holding the state lock, so the
        # save happens in ConsoleController.run once the lock has been released
        logger.warning(f"Received signal {signum}, stopping...")
        raise KeyboardInterrupt(f"signal {signum}")

    signal.signal(signal.SIGINT, handle_signal)
    if hasattr(signal, "SIGTERM"):
        signal.signal(signal.SIGTERM, handle_signal)

    previous_excepthook = sys.excepthook
    previous_thread_hook = threading.excepthook

    def excepthook(exc_type, exc_value, exc_tb):
        logger.error("Unexpected crash", exc_info=(exc_type, exc_value, exc_tb))
        orchestrator.emergency_save(crashed=True)
        previous_excepthook(exc_type, exc_value, exc_tb)

    def thread_excepthook(args):
        logger.error(f"Unexpected crash in thread {args.thread}", exc_info=(args.exc_type, args.exc_value, args.exc_traceback))
        orchestrator.emergency_save(crashed=True)
        previous_thread_hook(args)

    sys.excepthook = excepthook
    threading.excepthook = thread_excepthook


def main(argv=None) -> int:
    parser = setup_args()
    args = parser.parse_args(argv)

    config = CounterConfig.from_env()
    if args.state_file:
        config.state_file = args.state_file
    if args.debug:
        config.force_debug = True

    setup_logging(args.debug, args.log_file)

    if args.info:
        show_info(config)
        return 0

    if args.list_windows:
        return list_windows(config)

    try:
        window_detector = WindowDetector(config.window_titles)
        if window_detector.find_target_window() is None:
            logger.error(f"{config.window_titles[0]} game not found")
            return 1

        engine = EngineSelector(config).select()
        store = StateStore(config.state_file)
        orchestrator = EncounterOrchestrator(
            config, RunStateFlag(), store, engine, window_detector=window_detector
        )
        orchestrator.open_session()
        install_shutdown_hooks(orchestrator)

        return ConsoleController(orchestrator).run()

    except OcrError as e:
        logger.error(f"OCR unavailable: {e}")
        return 1
    except StateIoError as e:
        logger.error(f"Saved statistics unavailable: {e}")
        return 1
    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user. Exiting...")
        return 130  # Standard exit code for Ctrl+C


if __name__ == "__main__":
    sys.exit(main())
