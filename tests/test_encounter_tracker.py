import random
import unittest

from encounter_counter.core import CycleObservation, EncounterTracker
from encounter_counter.models import EncounterPhase, EncounterState

from tests.fakes import RecordingStore


def observe(wild=None, species=None):
    return CycleObservation(wild_trigger=wild, species=species)


class TestEncounterTracker(unittest.TestCase):
    def setUp(self):
        self.store = RecordingStore()
        self.tracker = EncounterTracker(self.store, save_threshold=5)
        self.state = EncounterState.create_empty()

    def count_one(self, species=("pidgey",)):
        self.assertTrue(self.tracker.apply(self.state, observe(wild=True, species=list(species))))
        self.assertFalse(self.tracker.apply(self.state, observe(species=[])))

    def test_full_encounter_sequence(self):
        # cycle 1: no trigger
        self.assertFalse(self.tracker.apply(self.state, observe(wild=False)))
        self.assertFalse(self.state.in_encounter)

        # cycle 2: trigger, species not readable yet
        self.assertFalse(self.tracker.apply(self.state, observe(wild=True, species=[])))
        self.assertTrue(self.state.in_encounter)
        self.assertTrue(self.state.is_not_counted)
        self.assertEqual(self.state.encounters, 0)

        # cycle 3: species visible, counted once
        self.assertTrue(self.tracker.apply(self.state, observe(species=["pidgey"])))
        self.assertEqual(self.state.encounters, 1)
        self.assertFalse(self.state.is_not_counted)
        self.assertEqual(self.state.last_encounter, ["pidgey"])
        self.assertEqual(self.state.mon_stats, {"pidgey": 1})
        counted = self.state.model_copy(deep=True)

        # cycle 4: same species still on screen, nothing changes
        self.assertFalse(self.tracker.apply(self.state, observe(species=["pidgey"])))
        self.assertEqual(self.state, counted)

        # cycle 5: species gone, back to idle
        self.assertFalse(self.tracker.apply(self.state, observe(species=[])))
        self.assertFalse(self.state.in_encounter)
        self.assertTrue(self.state.is_not_counted)
        self.assertEqual(self.state.last_encounter, [])
        self.assertEqual(self.state.encounters, 1)

    def test_trigger_and_species_in_same_cycle(self):
        self.assertTrue(self.tracker.apply(self.state, observe(wild=True, species=["oddish"])))
        self.assertEqual(self.state.phase, EncounterPhase.COUNTED)

    def test_species_ignored_without_trigger(self):
        self.assertFalse(self.tracker.apply(self.state, observe(wild=False, species=["pidgey"])))
        self.assertEqual(self.state.encounters, 0)
        self.assertEqual(self.state.phase, EncounterPhase.IDLE)

    def test_unscanned_top_region_keeps_counted_encounter(self):
        self.tracker.apply(self.state, observe(wild=True, species=["pidgey"]))
        self.assertFalse(self.tracker.apply(self.state, observe()))
        self.assertEqual(self.state.phase, EncounterPhase.COUNTED)

    def test_double_battle_counts_each_creature(self):
        self.tracker.apply(self.state, observe(wild=True, species=["zubat", "zubat"]))
        self.assertEqual(self.state.encounters, 2)
        self.assertEqual(self.state.mon_stats, {"zubat": 2})
        self.assertEqual(self.state.unsaved_encounters, 1)

    def test_autosave_after_threshold(self):
        for _ in range(4):
            self.count_one()
        self.assertEqual(self.store.saves, [])
        self.assertEqual(self.state.unsaved_encounters, 4)

        self.count_one()
        self.assertEqual(len(self.store.saves), 1)
        self.assertEqual(self.state.unsaved_encounters, 0)

        saved_state, crashed = self.store.saves[0]
        self.assertEqual(saved_state.encounters, 5)
        self.assertEqual(saved_state.unsaved_encounters, 0)
        self.assertTrue(crashed)

        for _ in range(4):
            self.count_one()
        self.assertEqual(len(self.store.saves), 1)

    def test_failed_autosave_keeps_counter(self):
        tracker = EncounterTracker(RecordingStore(fail=True), save_threshold=2)
        state = EncounterState.create_empty()
        for _ in range(3):
            tracker.apply(state, observe(wild=True, species=["pidgey"]))
            tracker.apply(state, observe(species=[]))
        self.assertEqual(state.unsaved_encounters, 3)
        self.assertEqual(state.encounters, 3)

    def test_tally_matches_counted_tokens(self):
        rng = random.Random(1234)
        choices = [None, [], ["pidgey"], ["rattata", "pidgey"], ["zubat", "zubat"]]
        tokens_counted = 0

        for _ in range(2000):
            observation = observe(wild=rng.random() < 0.3, species=rng.choice(choices))
            species = list(observation.species or [])
            if self.tracker.apply(self.state, observation):
                tokens_counted += len(species)
            self.assertEqual(sum(self.state.mon_stats.values()), tokens_counted)
            if self.state.last_encounter:
                self.assertEqual(self.state.phase, EncounterPhase.COUNTED)

        self.assertEqual(self.state.encounters, tokens_counted)
        self.assertGreater(tokens_counted, 0)


if __name__ == "__main__":
    unittest.main()
