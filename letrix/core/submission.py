"""
Submission Engine

Pure computation of what a confirmed guess does to the round, plus the
classification of guesses that must be rejected before submission.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from .words import has_solved_all_boards, unicode_length


class GuessRejection(Enum):
    """Locally recoverable reasons for refusing a guess."""
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    NOT_A_WORD = "not_a_word"
    HARD_MODE_VIOLATION = "hard_mode_violation"
    LOCKED = "locked"


REJECTION_MESSAGES = {
    GuessRejection.TOO_SHORT: "Not enough letters",
    GuessRejection.TOO_LONG: "Too many letters",
    GuessRejection.NOT_A_WORD: "Word not in word list",
    GuessRejection.HARD_MODE_VIOLATION: "Revealed hints must be used",
    GuessRejection.LOCKED: "Round is not accepting guesses",
}


@dataclass(frozen=True)
class SubmissionSnapshot:
    next_tries: List[str]
    won_now: bool
    can_bank: bool
    reached_limit: bool
    attempts_used: int


def find_first_unused_reveal(guess: str, tries: List[str], solutions: List[str]) -> Optional[str]:
    """
    Hard-mode hook: message for the first revealed hint the guess ignores.

    Hard-mode rules are not enforced yet, so no guess is ever reported.
    """
    return None


def validate_guess(guess: str, solution_length: int, is_word: Callable[[str], bool],
                   hard_mode: bool = False, tries: Optional[List[str]] = None,
                   solutions: Optional[List[str]] = None) -> Optional[GuessRejection]:
    """
    Classify a guess before submission.

    ``is_word`` is only consulted when the length is right, so a dictionary
    lookup is never spent on an incomplete row.

    Returns:
        GuessRejection or None when the guess may be submitted
    """
    length = unicode_length(guess)
    if length < solution_length:
        return GuessRejection.TOO_SHORT
    if length > solution_length:
        return GuessRejection.TOO_LONG

    if not is_word(guess):
        return GuessRejection.NOT_A_WORD

    if hard_mode and find_first_unused_reveal(guess, tries or [], solutions or []):
        return GuessRejection.HARD_MODE_VIOLATION

    return None


def build_submission_snapshot(current_guess_word: str, solution_length: int,
                              guesses_words: List[str], solutions: List[str],
                              max_attempts: Optional[int], is_game_won: bool) -> SubmissionSnapshot:
    """
    Next state after confirming ``current_guess_word``.

    ``attempts_used`` counts the tries made before this one, so a win on
    the first try records 0. A ``max_attempts`` of None means the round has
    no attempt cap (unlimited mode), so the limit is never reached.
    """
    next_tries = list(guesses_words) + [current_guess_word]
    won_now = has_solved_all_boards(solutions, next_tries)
    within_limit = max_attempts is None or len(guesses_words) < max_attempts
    can_bank = (
        unicode_length(current_guess_word) == solution_length
        and within_limit
        and not is_game_won
    )
    reached_limit = (
        max_attempts is not None
        and not won_now
        and len(guesses_words) == max_attempts - 1
    )

    return SubmissionSnapshot(
        next_tries=next_tries,
        won_now=won_now,
        can_bank=can_bank,
        reached_limit=reached_limit,
        attempts_used=len(guesses_words),
    )
