"""
Session State Builder

Builds the per-board snapshots that are persisted after every confirmed
submission, and hydrates solution sets back out of saved snapshots.
"""

from dataclasses import replace
from datetime import timedelta
from typing import List, Optional

from ..models.game import RoundSessionState, SolutionSet
from .words import normalize_word, unicode_length


def _display_at(solution_set: SolutionSet, index: int, fallback: str) -> str:
    if index < len(solution_set.display_solution) and solution_set.display_solution[index]:
        return solution_set.display_solution[index]
    return fallback


def _definition_at(solution_set: SolutionSet, index: int) -> Optional[str]:
    if index < len(solution_set.definitions):
        return solution_set.definitions[index]
    return None


def build_empty_game_state(solution_set: SolutionSet) -> List[RoundSessionState]:
    """One zeroed snapshot per board, tagged with the round's day index."""
    return [
        RoundSessionState(
            curday=solution_set.day_index,
            cur_row=0,
            cur_try="",
            tries=[],
            invalids=[],
            solution=solution,
            game_over=False,
            won=False,
            display_solution=_display_at(solution_set, index, solution),
            definition=_definition_at(solution_set, index),
        )
        for index, solution in enumerate(solution_set.solution)
    ]


def build_game_state_snapshot(solution_set: SolutionSet, next_tries: List[str], current_try: str,
                              row: int, invalids: List[str], is_win: bool,
                              is_unlimited_mode: bool, max_attempts: int) -> List[RoundSessionState]:
    """
    Snapshot after a confirmed submission.

    All boards share the same try list. Unlimited mode never marks a round
    over from attempt exhaustion and never stores a win, because a solved
    unlimited round is replaced by the next one.
    """
    should_mark_game_over = not is_unlimited_mode and not is_win and len(next_tries) >= max_attempts

    return [
        RoundSessionState(
            curday=solution_set.day_index,
            cur_row=row,
            cur_try=current_try,
            tries=list(next_tries),
            invalids=list(invalids),
            solution=solution,
            game_over=should_mark_game_over,
            won=not is_unlimited_mode and is_win,
            display_solution=_display_at(solution_set, index, solution),
            definition=_definition_at(solution_set, index),
        )
        for index, solution in enumerate(solution_set.solution)
    ]


def hydrate_infinite_solution_from_state(fallback: SolutionSet,
                                         saved_state: List[RoundSessionState]) -> SolutionSet:
    """
    Rebuild an unlimited-mode solution set from the saved round.

    The saved round can lag behind the calendar, so its day index wins and
    the date is shifted by the same number of days.
    """
    boards = [(index, state, normalize_word(state.solution)) for index, state in enumerate(saved_state)]
    boards = [board for board in boards if board[2]]

    if not boards:
        return fallback

    restored_index = saved_state[0].curday
    restored_date = fallback.solution_date + timedelta(days=restored_index - fallback.day_index)

    return replace(
        fallback,
        solution=[solution for _, _, solution in boards],
        display_solution=[state.display_solution or solution for _, state, solution in boards],
        definitions=[
            state.definition if state.definition is not None else _definition_at(fallback, index)
            for index, state, _ in boards
        ],
        day_index=restored_index,
        solution_date=restored_date,
        next_date=restored_date + timedelta(days=1),
    )


def hydrate_standard_solution_from_state(fallback: SolutionSet, saved_state: List[RoundSessionState],
                                         boards: int, word_length: int) -> Optional[SolutionSet]:
    """
    Rebuild a daily solution set from the saved round.

    Returns:
        SolutionSet or None when the saved round has the wrong board count,
        belongs to another day or holds words of the wrong length
    """
    if not saved_state or len(saved_state) != boards:
        return None

    if not all(state.curday == fallback.day_index for state in saved_state):
        return None

    hydrated = [normalize_word(state.solution) for state in saved_state]
    if any(unicode_length(solution) != word_length for solution in hydrated):
        return None

    return replace(
        fallback,
        solution=hydrated,
        display_solution=[state.display_solution or hydrated[i] for i, state in enumerate(saved_state)],
        definitions=[state.definition for state in saved_state],
    )


def matches_canonical_solution(canonical: SolutionSet, saved_state: List[RoundSessionState]) -> bool:
    """True when the saved boards hold exactly the canonical words for the canonical day."""
    if len(saved_state) != len(canonical.solution):
        return False

    for index, solution in enumerate(canonical.solution):
        state = saved_state[index]
        if normalize_word(state.solution) != solution or state.curday != canonical.day_index:
            return False

    return True
