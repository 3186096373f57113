"""
Board Rows

Per-board row rendering state. Whether a board is solved is derived from
the shared try list every time, never stored.
"""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class BoardRowState:
    guessed_index: int
    is_board_solved: bool
    is_guessed_row: bool
    is_current_row: bool
    is_locked_after_solved: bool
    is_interactive_current_row: bool
    row_status: str  # done, blank, guessing, complete


def get_board_guessed_index(guesses_words: List[str], board_solution: str) -> int:
    """Row at which ``board_solution`` was guessed, or -1."""
    if not board_solution:
        return -1
    return next((i for i, word in enumerate(guesses_words) if word == board_solution), -1)


def get_board_row_state(row_index: int, current_row: int, board_solution: str,
                        guess_word_at_row: Optional[str], guesses_words: List[str]) -> BoardRowState:
    guessed_index = get_board_guessed_index(guesses_words, board_solution)
    is_board_solved = guessed_index != -1
    is_guessed_row = bool(board_solution) and guess_word_at_row == board_solution
    is_current_row = current_row == row_index
    is_locked_after_solved = is_board_solved and row_index > guessed_index

    if is_guessed_row:
        row_status = "done"
    elif is_locked_after_solved:
        row_status = "blank"
    elif is_current_row:
        row_status = "guessing"
    elif current_row < row_index:
        row_status = "blank"
    else:
        row_status = "complete"

    return BoardRowState(
        guessed_index=guessed_index,
        is_board_solved=is_board_solved,
        is_guessed_row=is_guessed_row,
        is_current_row=is_current_row,
        is_locked_after_solved=is_locked_after_solved,
        is_interactive_current_row=is_current_row and not is_guessed_row and not is_board_solved,
        row_status=row_status,
    )


def resolve_displayed_row_letters(is_board_solved: bool, row_index: int, guessed_index: int,
                                  is_current_row: bool, current_guess_letters: List[str],
                                  saved_guess_letters: List[str]) -> List[str]:
    if is_board_solved:
        return saved_guess_letters if row_index <= guessed_index else []

    if is_current_row and guessed_index == -1 and not saved_guess_letters:
        return current_guess_letters

    return saved_guess_letters
