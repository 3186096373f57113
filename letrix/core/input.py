"""
Guess Input Editing

Tile-by-tile editing of the in-progress guess. Both helpers return None
when nothing should change, otherwise the next guess and cursor position.
"""

from dataclasses import replace
from typing import List, Optional, Tuple

from ..models.game import Guess, GuessStatus
from .words import locale_aware_lower_case


def _padded_letters(guess: Guess, length: int) -> List[str]:
    return [guess.letters[i] if i < len(guess.letters) and guess.letters[i] else "" for i in range(length)]


def _clamp(index: int, length: int) -> int:
    return min(max(index, 0), length - 1)


def _row_status(letters: List[str], length: int) -> GuessStatus:
    if length and len(letters) == length and all(letters):
        return GuessStatus.COMPLETE
    return GuessStatus.INITIAL


def compute_typing_update(value: str, solution_length: int, max_attempts: Optional[int],
                          is_game_locked: bool, guesses_length: int, current_guess: Guess,
                          current_row: int, selected_tile_index: int) -> Optional[Tuple[Guess, int]]:
    """
    Write ``value`` into the selected tile.

    The cursor then jumps to the next empty tile to its right, or stays put
    when there is none.
    """
    if is_game_locked or (max_attempts is not None and guesses_length >= max_attempts):
        return None

    if not solution_length:
        return None

    target_index = _clamp(selected_tile_index, solution_length)
    letters = _padded_letters(current_guess, solution_length)
    letters[target_index] = locale_aware_lower_case(value)

    next_empty = next(
        (index for index, letter in enumerate(letters) if index > target_index and not letter),
        None
    )
    next_tile_index = next_empty if next_empty is not None else target_index

    next_guess = replace(
        current_guess, row=current_row, letters=letters, word="".join(letters),
        status=_row_status(letters, solution_length)
    )
    return next_guess, next_tile_index


def compute_delete_update(current_guess: Guess, selected_tile_index: int,
                          max_length: int) -> Optional[Tuple[Guess, int]]:
    """
    Clear the selected tile, or the nearest filled tile to its left.

    With no filled tile to the left, the last filled tile is cleared. An
    empty row is left untouched with the cursor reset to the first tile.
    """
    if not max_length:
        return None

    letters = _padded_letters(current_guess, max_length)

    if not any(letters):
        return current_guess, 0

    target_index = _clamp(selected_tile_index, max_length)
    while target_index > 0 and not letters[target_index]:
        target_index -= 1

    if not letters[target_index]:
        target_index = max(index for index, letter in enumerate(letters) if letter)

    letters[target_index] = ""
    next_guess = replace(current_guess, letters=letters, word="".join(letters), status=GuessStatus.INITIAL)
    return next_guess, target_index


def guess_from_letters(letters: List[str], row: int, solution_length: int = 0) -> Guess:
    """A guess row built from already-split letters."""
    return Guess(
        row=row, word="".join(letters), letters=list(letters),
        status=_row_status(letters, solution_length or len(letters))
    )
