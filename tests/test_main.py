import io
import json
import os
import signal
import sys
import tempfile
import threading
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from encounter_counter import main as cli
from encounter_counter.config import CounterConfig
from encounter_counter.core import EncounterOrchestrator, RunState, RunStateFlag, StateStore
from encounter_counter.errors import OcrError
from encounter_counter.ui import ConsoleController

from tests.fakes import ConstantEngine, FakeDetector, FakeWindow


class TestCli(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        env = mock.patch.dict(os.environ, {"ENCOUNTER_DEBUG_DIR": self.tmp.name}, clear=True)
        env.start()
        self.addCleanup(env.stop)

    def test_parse_args(self):
        args = cli.setup_args().parse_args(["--debug", "--state-file", "run2.json"])
        self.assertTrue(args.debug)
        self.assertEqual(args.state_file, "run2.json")
        self.assertFalse(args.list_windows)

    def test_info(self):
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(cli.main(["--info", "--state-file", "other.json"]), 0)
        self.assertIn("other.json", out.getvalue())

    @mock.patch("encounter_counter.main.WindowDetector")
    def test_missing_window_exits_with_error(self, detector_cls):
        detector_cls.return_value.find_target_window.return_value = None
        self.assertEqual(cli.main([]), 1)

    @mock.patch("encounter_counter.main.EngineSelector")
    @mock.patch("encounter_counter.main.WindowDetector")
    def test_no_ocr_engine(self, detector_cls, selector_cls):
        detector_cls.return_value.find_target_window.return_value = FakeWindow()
        selector_cls.return_value.select.side_effect = OcrError("nothing installed")
        self.assertEqual(cli.main([]), 1)

    @mock.patch("encounter_counter.main.WindowDetector")
    def test_list_windows_saves_capture(self, detector_cls):
        detector_cls.return_value.list_available_windows.return_value = ["PokeMMO (800x600)"]
        detector_cls.return_value.find_target_window.return_value = FakeWindow()
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(cli.main(["--list-windows"]), 0)
        self.assertIn("Window: PokeMMO (800x600)", out.getvalue())
        self.assertTrue(os.path.exists(os.path.join(self.tmp.name, "debug_full.png")))


class TestShutdownHooks(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

        saved_handlers = {signum: signal.getsignal(signum) for signum in (signal.SIGINT, signal.SIGTERM)}
        saved_hooks = (sys.excepthook, threading.excepthook)

        def restore():
            for signum, handler in saved_handlers.items():
                signal.signal(signum, handler)
            sys.excepthook, threading.excepthook = saved_hooks

        self.addCleanup(restore)

        path = os.path.join(self.tmp.name, "state.json")
        config = CounterConfig(state_file=path, debug_dir=self.tmp.name)
        self.store = StateStore(path)
        self.orchestrator = EncounterOrchestrator(
            config, RunStateFlag(), self.store, ConstantEngine(["quiet"]), window_detector=FakeDetector(FakeWindow())
        )
        self.orchestrator.open_session()
        cli.install_shutdown_hooks(self.orchestrator)

    def read_document(self):
        with open(self.store.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def test_signal_while_lock_held_does_not_deadlock(self):
        with self.assertRaises(KeyboardInterrupt):
            with self.orchestrator._lock:
                signal.raise_signal(signal.SIGINT)

        self.assertTrue(self.orchestrator._lock.acquire(timeout=1.0))
        self.orchestrator._lock.release()
        self.orchestrator.quit()
        self.assertFalse(self.read_document()["crashed"])

    def test_sigterm_at_prompt_saves_and_exits(self):
        def prompt(_):
            signal.raise_signal(signal.SIGTERM)
            return "t"

        output = []
        controller = ConsoleController(self.orchestrator, input_func=prompt, output=output.append)
        self.assertEqual(controller.run(), 0)
        self.assertEqual(self.orchestrator.run_state.get(), RunState.QUITTING)
        self.assertFalse(self.read_document()["crashed"])
        self.assertIn("Saved. Bye", output)

    def test_uncaught_exception_marks_crash(self):
        self.orchestrator.save(crashed=False)
        with self.assertLogs("encounter_counter.main", level="ERROR"), redirect_stderr(io.StringIO()):
            sys.excepthook(RuntimeError, RuntimeError("boom"), None)
        self.assertTrue(self.read_document()["crashed"])


if __name__ == "__main__":
    unittest.main()
