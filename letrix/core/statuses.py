"""
Status Engine

Per-tile feedback for one guess against one solution, and the folded
per-key status used to shade the on-screen keyboard.
"""

from typing import Dict, List, Optional

from ..models.game import Status
from .words import unicode_split


def get_guess_statuses(guess_letters: List[str], solution: str) -> List[Status]:
    """
    Classify each guess tile as correct, present or absent.

    Exact matches are claimed first. Remaining tiles then claim the first
    untaken solution position holding the same letter, left to right, so
    a repeated letter is never reported as present more times than it
    occurs unclaimed in the solution.

    Args:
        guess_letters: One entry per tile (already normalized)
        solution: Normalized solution word

    Returns:
        List[Status]: One status per guess tile
    """
    split_solution = unicode_split(solution)
    taken = [False] * len(split_solution)
    statuses: List[Optional[Status]] = [None] * len(guess_letters)

    for i, letter in enumerate(guess_letters):
        if i < len(split_solution) and letter == split_solution[i]:
            statuses[i] = Status.CORRECT
            taken[i] = True

    for i, letter in enumerate(guess_letters):
        if statuses[i] is not None:
            continue

        if letter not in split_solution:
            statuses[i] = Status.ABSENT
            continue

        present_index = next(
            (index for index, ch in enumerate(split_solution) if ch == letter and not taken[index]),
            -1
        )
        if present_index > -1:
            statuses[i] = Status.PRESENT
            taken[present_index] = True
        else:
            statuses[i] = Status.ABSENT

    return statuses  # type: ignore[return-value]


def get_keyboard_statuses(guesses: List[str], solution: str) -> Dict[str, Status]:
    """
    Fold confirmed guesses into one status per letter key.

    A letter that hits its position becomes correct; a letter elsewhere in
    the solution becomes present unless it is already correct; a letter not
    in the solution is absent.
    """
    letter_status: Dict[str, Status] = {}
    split_solution = unicode_split(solution)

    for word in guesses:
        for i, letter in enumerate(unicode_split(word)):
            if letter not in split_solution:
                letter_status[letter] = Status.ABSENT
            elif i < len(split_solution) and letter == split_solution[i]:
                letter_status[letter] = Status.CORRECT
            elif letter_status.get(letter) != Status.CORRECT:
                letter_status[letter] = Status.PRESENT

    return letter_status
