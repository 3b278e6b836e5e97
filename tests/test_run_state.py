import threading
import unittest

from encounter_counter.core import RunState, RunStateFlag
from encounter_counter.errors import InvalidTransitionError


class TestRunStateFlag(unittest.TestCase):
    def test_starts_idle(self):
        flag = RunStateFlag()
        self.assertEqual(flag.get(), RunState.IDLE)
        self.assertFalse(flag.is_active())

    def test_valid_transitions(self):
        flag = RunStateFlag()
        self.assertEqual(flag.transition(RunState.ACTIVE), RunState.IDLE)
        self.assertTrue(flag.is_active())
        self.assertEqual(flag.transition(RunState.PAUSED), RunState.ACTIVE)
        self.assertEqual(flag.transition(RunState.ACTIVE), RunState.PAUSED)
        self.assertEqual(flag.transition(RunState.IDLE), RunState.ACTIVE)
        self.assertEqual(flag.transition(RunState.QUITTING), RunState.IDLE)

    def test_rejects_same_state(self):
        flag = RunStateFlag(RunState.ACTIVE)
        with self.assertRaises(InvalidTransitionError):
            flag.transition(RunState.ACTIVE)
        self.assertTrue(flag.is_active())

    def test_rejects_invalid_transitions(self):
        with self.assertRaises(InvalidTransitionError):
            RunStateFlag(RunState.IDLE).transition(RunState.PAUSED)

        quitting = RunStateFlag(RunState.QUITTING)
        for target in RunState:
            self.assertFalse(quitting.can_transition(target))
            with self.assertRaises(InvalidTransitionError):
                quitting.transition(target)

    def test_only_one_concurrent_start_wins(self):
        flag = RunStateFlag()
        results = []
        barrier = threading.Barrier(8)

        def start():
            barrier.wait()
            try:
                flag.transition(RunState.ACTIVE)
                results.append(True)
            except InvalidTransitionError:
                results.append(False)

        threads = [threading.Thread(target=start) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(results.count(True), 1)


if __name__ == "__main__":
    unittest.main()
