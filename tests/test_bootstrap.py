"""Tests for session snapshots and bootstrap reconciliation."""

import unittest
from dataclasses import replace
from datetime import date, timedelta

from letrix.config.game_settings import get_mode_config
from letrix.core.bootstrap import (
    BootstrapPhase, BootstrapReconciler, reconcile_saved_state, resolve_infinite_bootstrap_state
)
from letrix.core.puzzle import get_solution
from letrix.core.state import (
    build_empty_game_state, build_game_state_snapshot, hydrate_standard_solution_from_state,
    matches_canonical_solution
)
from letrix.models.game import GameMode, parse_round_state

from .support import make_dictionary, make_solution_set


def no_next_round(current):
    raise AssertionError("next round should not be requested")


class TestSnapshots(unittest.TestCase):

    def test_empty_state_has_one_entry_per_board(self):
        solution_set = make_solution_set(["casa", "lago"])
        state = build_empty_game_state(solution_set)
        self.assertEqual([entry.solution for entry in state], ["casa", "lago"])
        self.assertTrue(all(entry.tries == [] and entry.curday == solution_set.day_index for entry in state))

    def test_snapshot_marks_loss_only_for_daily_modes(self):
        solution_set = make_solution_set(["livro"])
        tries = ["carta", "termo", "piano", "mundo", "canto", "sorte"]
        daily = build_game_state_snapshot(solution_set, tries, "", 6, [], False, False, 6)
        unlimited = build_game_state_snapshot(solution_set, tries, "", 6, [], False, True, 6)
        self.assertTrue(daily[0].game_over)
        self.assertFalse(unlimited[0].game_over)

    def test_unlimited_snapshot_never_stores_win(self):
        solution_set = make_solution_set(["livro"])
        state = build_game_state_snapshot(solution_set, ["livro"], "", 1, [], True, True, 8)
        self.assertFalse(state[0].won)

    def test_serialized_snapshot_round_trips(self):
        solution_set = make_solution_set(["casa", "lago"])
        state = build_game_state_snapshot(solution_set, ["casa"], "", 1, ["xxxx"], False, False, 7)
        restored = parse_round_state([entry.to_dict() for entry in state])
        self.assertEqual(restored, state)

    def test_canonical_match_checks_words_and_day(self):
        canonical = make_solution_set(["casa", "lago"])
        state = build_empty_game_state(canonical)
        self.assertTrue(matches_canonical_solution(canonical, state))
        self.assertFalse(matches_canonical_solution(canonical, list(reversed(state))))
        self.assertFalse(matches_canonical_solution(canonical, [replace(state[0], curday=0), state[1]]))
        self.assertFalse(matches_canonical_solution(canonical, state[:1]))

    def test_standard_hydration_rejects_other_days(self):
        canonical = make_solution_set(["casa"])
        state = build_empty_game_state(canonical)
        self.assertEqual(hydrate_standard_solution_from_state(canonical, state, 1, 4).solution, ["casa"])
        self.assertIsNone(hydrate_standard_solution_from_state(canonical, state, 1, 5))
        stale = [replace(state[0], curday=canonical.day_index - 1)]
        self.assertIsNone(hydrate_standard_solution_from_state(canonical, stale, 1, 4))


class TestReconcileSavedState(unittest.TestCase):

    def setUp(self):
        self.duo = get_mode_config(GameMode.DUO)
        self.canonical = make_solution_set(["casa", "lago"])

    def test_no_saved_state_is_fresh(self):
        result = reconcile_saved_state(self.canonical, [], self.duo, no_next_round)
        self.assertEqual(result.outcome, BootstrapPhase.FRESH)
        self.assertTrue(result.show_instructions)
        self.assertEqual(result.tries, [])

    def test_resume_reconstructs_tries_and_flags(self):
        for tries, won in ((["mato"], False), (["casa", "lago"], True)):
            state = build_game_state_snapshot(self.canonical, tries, "", len(tries), [], won, False, 7)
            result = reconcile_saved_state(self.canonical, state, self.duo, no_next_round)
            self.assertEqual(result.outcome, BootstrapPhase.RESUMED)
            self.assertEqual(result.tries, tries)
            self.assertEqual(result.won, state[0].won)
            self.assertEqual(result.game_over, state[0].game_over)

    def test_resume_of_lost_round_is_over(self):
        tries = ["mato", "rede", "lobo", "sapo", "pato", "gato", "bolo"]
        state = build_game_state_snapshot(self.canonical, tries, "", 7, [], False, False, 7)
        result = reconcile_saved_state(self.canonical, state, self.duo, no_next_round)
        self.assertTrue(result.game_over)
        self.assertFalse(result.won)

    def test_mismatched_save_is_discarded(self):
        other_day = make_solution_set(["mato", "rede"], game_date=date(2024, 2, 29))
        state = build_game_state_snapshot(other_day, ["mato"], "", 1, [], False, False, 7)
        result = reconcile_saved_state(self.canonical, state, self.duo, no_next_round)
        self.assertEqual(result.outcome, BootstrapPhase.MISMATCHED)
        self.assertIs(result.solution_set, self.canonical)
        self.assertEqual(result.tries, [])


class TestInfiniteBootstrap(unittest.TestCase):

    def setUp(self):
        self.settings = get_mode_config(GameMode.INFINITE)
        self.today = make_solution_set(["carta"], game_date=date(2024, 3, 10))
        saved_round = make_solution_set(["livro"], game_date=date(2024, 3, 5))
        self.solved_state = build_game_state_snapshot(saved_round, ["livro"], "", 1, [], True, True, 8)

    def load_next(self, current):
        self.requested = current
        return make_solution_set(["pedra"], game_date=current.solution_date + timedelta(days=1))

    def test_solved_round_advances_to_next_day(self):
        result = reconcile_saved_state(self.today, self.solved_state, self.settings, self.load_next)
        self.assertEqual(result.outcome, BootstrapPhase.ADVANCING)
        self.assertEqual(self.requested.solution, ["livro"])
        self.assertEqual(self.requested.solution_date, date(2024, 3, 5))
        self.assertEqual(result.solution_set.day_index, self.requested.day_index + 1)
        self.assertEqual(result.tries, [])
        self.assertEqual([entry.solution for entry in result.state_to_persist], ["pedra"])
        self.assertEqual(result.state_to_persist[0].tries, [])
        self.assertEqual(result.state_to_persist[0].curday, self.requested.day_index + 1)

    def test_unsolved_round_resumes_on_its_own_day(self):
        saved_round = make_solution_set(["livro"], game_date=date(2024, 3, 5))
        state = build_game_state_snapshot(saved_round, ["carta"], "", 1, [], False, True, 8)
        result = reconcile_saved_state(self.today, state, self.settings, no_next_round)
        self.assertEqual(result.outcome, BootstrapPhase.RESUMED)
        self.assertEqual(result.solution_set.solution, ["livro"])
        self.assertEqual(result.solution_set.day_index, saved_round.day_index)
        self.assertEqual(result.tries, ["carta"])

    def test_no_next_word_keeps_solved_round(self):
        def unavailable(current):
            return current.with_entries([], [], [])

        result = reconcile_saved_state(self.today, self.solved_state, self.settings, unavailable)
        self.assertEqual(result.outcome, BootstrapPhase.RESUMED)
        self.assertTrue(result.won)
        self.assertEqual(result.tries, ["livro"])

    def test_infinite_state_summary(self):
        summary = resolve_infinite_bootstrap_state(self.today, self.solved_state)
        self.assertTrue(summary.has_saved_state)
        self.assertTrue(summary.should_advance_to_next_round)
        self.assertEqual(summary.saved_tries, ["livro"])


class TestBootstrapReconciler(unittest.TestCase):

    def setUp(self):
        self.dictionary = make_dictionary(["carta", "livro", "pedra"])
        self.game_date = date(2024, 4, 1)

    def test_fresh_cycle_ends_hydrated(self):
        reconciler = BootstrapReconciler(self.dictionary)
        self.assertEqual(reconciler.phase, BootstrapPhase.UNINITIALIZED)
        result = reconciler.run(self.game_date, GameMode.TERM, 'pt', lambda: [])
        self.assertEqual(result.outcome, BootstrapPhase.FRESH)
        self.assertEqual(reconciler.phase, BootstrapPhase.HYDRATED)

    def test_round_trip_through_saved_state(self):
        reconciler = BootstrapReconciler(self.dictionary)
        canonical = get_solution(self.game_date, GameMode.TERM, 'pt', self.dictionary)
        others = [word for word in ["carta", "livro", "pedra"] if word != canonical.solution[0]]
        state = build_game_state_snapshot(canonical, others, "", 2, [], False, False, 6)
        result = reconciler.run(self.game_date, GameMode.TERM, 'pt', lambda: state)
        self.assertEqual(result.outcome, BootstrapPhase.RESUMED)
        self.assertEqual(result.tries, others)
        self.assertFalse(result.won)

    def test_cancelled_cycle_produces_nothing(self):
        reconciler = BootstrapReconciler(self.dictionary)
        active = {'value': True}

        def load_saved_state():
            active['value'] = False
            return []

        result = reconciler.run(self.game_date, GameMode.TERM, 'pt', load_saved_state,
                                is_active=lambda: active['value'])
        self.assertIsNone(result)
        self.assertEqual(reconciler.phase, BootstrapPhase.CANCELLED)

    def test_unavailable_puzzle_skips_saved_state(self):
        reconciler = BootstrapReconciler(make_dictionary(["livro"]))

        result = reconciler.run(self.game_date, GameMode.DUO, 'pt', no_next_round)
        self.assertEqual(result.outcome, BootstrapPhase.UNAVAILABLE)
        self.assertEqual(reconciler.phase, BootstrapPhase.UNAVAILABLE)


if __name__ == '__main__':
    unittest.main()
