"""Tests for the stats aggregator."""

import unittest

from letrix.core.stats import add_stats_for_completed_game, get_success_rate, normalize_stats
from letrix.models.stats import GameStats

WIN, LOSS = 2, 6


def fold(results, max_attempts=6, is_unlimited_mode=False):
    stats = GameStats()
    for count in results:
        stats = add_stats_for_completed_game(stats, count, max_attempts, is_unlimited_mode)
    return stats


class TestStatsFold(unittest.TestCase):

    def test_counts_do_not_depend_on_order(self):
        loss_then_win = fold([LOSS, WIN])
        win_then_loss = fold([WIN, LOSS])
        for stats in (loss_then_win, win_then_loss):
            self.assertEqual((stats.games, stats.wins, stats.failed), (2, 1, 1))

    def test_streaks_depend_on_order(self):
        self.assertEqual(fold([LOSS, WIN]).curstreak, 1)
        self.assertEqual(fold([WIN, LOSS]).curstreak, 0)
        self.assertEqual(fold([WIN, LOSS]).maxstreak, 1)

    def test_win_increments_histogram_bucket(self):
        stats = fold([0, 2, 2])
        self.assertEqual(stats.histo, [1, 0, 2, 0, 0, 0])
        self.assertEqual(stats.maxstreak, 3)

    def test_loss_does_not_touch_histogram(self):
        stats = fold([LOSS])
        self.assertEqual(stats.histo, [0] * 6)
        self.assertEqual(stats.failed, 1)

    def test_perfect_streaks(self):
        stats = fold([0, 0, 3, 0])
        self.assertEqual(stats.perfect_wins, 3)
        self.assertEqual(stats.current_perfect_streak, 1)
        self.assertEqual(stats.best_perfect_streak, 2)

    def test_loss_resets_perfect_streak(self):
        stats = fold([0, LOSS])
        self.assertEqual(stats.current_perfect_streak, 0)
        self.assertEqual(stats.best_perfect_streak, 1)

    def test_unlimited_rounds_grow_histogram(self):
        stats = fold([11], max_attempts=8, is_unlimited_mode=True)
        self.assertEqual(len(stats.histo), 12)
        self.assertEqual(stats.histo[11], 1)
        self.assertEqual(stats.failed, 0)

    def test_input_stats_are_not_modified(self):
        untouched = GameStats()
        add_stats_for_completed_game(untouched, 0, 6)
        self.assertEqual(untouched.games, 0)


class TestNormalizeStats(unittest.TestCase):

    def test_missing_document_gives_zeroed_stats(self):
        stats = normalize_stats(None, 6)
        self.assertEqual(stats, GameStats())

    def test_histogram_padded_to_attempt_limit(self):
        stats = normalize_stats({'histo': [1, 2], 'games': 3, 'wins': 3}, 9)
        self.assertEqual(stats.histo, [1, 2, 0, 0, 0, 0, 0, 0, 0])
        self.assertEqual(stats.games, 3)

    def test_longer_histogram_is_kept(self):
        stats = normalize_stats({'histo': [0] * 10}, 6)
        self.assertEqual(len(stats.histo), 10)

    def test_garbage_fields_default_to_zero(self):
        stats = normalize_stats({'games': 'many', 'wins': -4, 'perfectWins': True, 'histo': 'x'}, 6)
        self.assertEqual((stats.games, stats.wins, stats.perfect_wins), (0, 0, 0))
        self.assertEqual(stats.histo, [0] * 6)

    def test_reads_persisted_key_names(self):
        stored = fold([0, 0]).to_dict()
        self.assertEqual(normalize_stats(stored, 6), fold([0, 0]))

    def test_success_rate(self):
        self.assertEqual(get_success_rate(GameStats()), 0)
        self.assertEqual(get_success_rate(fold([WIN, WIN, LOSS])), 67)


if __name__ == '__main__':
    unittest.main()
