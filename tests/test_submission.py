"""Tests for guess validation and the submission engine."""

import unittest

from letrix.core.submission import (
    GuessRejection, build_submission_snapshot, find_first_unused_reveal, validate_guess
)


class TestValidateGuess(unittest.TestCase):

    def setUp(self):
        self.lookups = []

    def is_word(self, word):
        self.lookups.append(word)
        return word in {"casa", "lago", "mato"}

    def test_short_guess_skips_dictionary(self):
        self.assertEqual(validate_guess("cas", 4, self.is_word), GuessRejection.TOO_SHORT)
        self.assertEqual(self.lookups, [])

    def test_long_guess_is_too_long(self):
        self.assertEqual(validate_guess("casas", 4, self.is_word), GuessRejection.TOO_LONG)
        self.assertEqual(self.lookups, [])

    def test_unknown_word(self):
        self.assertEqual(validate_guess("xyzw", 4, self.is_word), GuessRejection.NOT_A_WORD)
        self.assertEqual(self.lookups, ["xyzw"])

    def test_accepted_guess(self):
        self.assertIsNone(validate_guess("lago", 4, self.is_word))

    def test_hard_mode_is_not_enforced(self):
        self.assertIsNone(find_first_unused_reveal("mato", ["casa"], ["casa"]))
        self.assertIsNone(validate_guess("mato", 4, self.is_word, hard_mode=True,
                                         tries=["lago"], solutions=["casa"]))


class TestSubmissionSnapshot(unittest.TestCase):

    def test_duo_second_board_completes_round(self):
        snapshot = build_submission_snapshot("lago", 4, ["casa"], ["casa", "lago"], 7, False)
        self.assertTrue(snapshot.won_now)
        self.assertEqual(snapshot.next_tries, ["casa", "lago"])
        self.assertTrue(snapshot.can_bank)
        self.assertFalse(snapshot.reached_limit)

    def test_first_try_win_uses_zero_attempts(self):
        snapshot = build_submission_snapshot("livro", 5, [], ["livro"], 6, False)
        self.assertTrue(snapshot.won_now)
        self.assertEqual(snapshot.attempts_used, 0)

    def test_last_allowed_attempt_reaches_limit(self):
        tries = ["carta", "termo", "piano", "mundo", "canto"]
        snapshot = build_submission_snapshot("sorte", 5, tries, ["livro"], 6, False)
        self.assertFalse(snapshot.won_now)
        self.assertTrue(snapshot.reached_limit)
        self.assertTrue(snapshot.can_bank)
        self.assertEqual(snapshot.attempts_used, 5)

    def test_winning_on_last_attempt_is_not_a_loss(self):
        tries = ["carta", "termo", "piano", "mundo", "canto"]
        snapshot = build_submission_snapshot("livro", 5, tries, ["livro"], 6, False)
        self.assertTrue(snapshot.won_now)
        self.assertFalse(snapshot.reached_limit)

    def test_cannot_bank_after_limit_or_win(self):
        tries = ["carta", "termo", "piano", "mundo", "canto", "sorte"]
        self.assertFalse(build_submission_snapshot("livro", 5, tries, ["livro"], 6, False).can_bank)
        self.assertFalse(build_submission_snapshot("livro", 5, [], ["livro"], 6, True).can_bank)
        self.assertFalse(build_submission_snapshot("liv", 5, [], ["livro"], 6, False).can_bank)

    def test_unlimited_round_has_no_cap(self):
        tries = ["carta"] * 20
        snapshot = build_submission_snapshot("sorte", 5, tries, ["livro"], None, False)
        self.assertTrue(snapshot.can_bank)
        self.assertFalse(snapshot.reached_limit)
        self.assertEqual(snapshot.attempts_used, 20)


if __name__ == '__main__':
    unittest.main()
