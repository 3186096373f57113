"""
Bootstrap Reconciler

Decides, at session start, whether saved play state belongs to the
canonical puzzle, should be advanced to the next unlimited-mode round, or
cannot be used.

    UNINITIALIZED -> LOADING -> {FRESH, RESUMED, ADVANCING, MISMATCHED} -> HYDRATED

UNAVAILABLE ends the cycle when no puzzle exists for the date, and
CANCELLED when the caller went away (changed mode/language) mid-load.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Callable, List, Optional

from ..config.game_settings import get_mode_config
from ..models.game import GameMode, ModeConfig, RoundSessionState, SolutionSet
from .puzzle import get_next_round_solution, get_solution
from .state import (
    build_empty_game_state, hydrate_infinite_solution_from_state, matches_canonical_solution
)
from .words import has_solved_all_boards


class BootstrapPhase(Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    FRESH = "fresh"
    RESUMED = "resumed"
    ADVANCING = "advancing"
    MISMATCHED = "mismatched"
    UNAVAILABLE = "unavailable"
    CANCELLED = "cancelled"
    HYDRATED = "hydrated"


@dataclass(frozen=True)
class BootstrapResult:
    """What the session should adopt once bootstrapping finishes."""
    outcome: BootstrapPhase
    solution_set: SolutionSet
    tries: List[str] = field(default_factory=list)
    won: bool = False
    game_over: bool = False
    show_instructions: bool = False
    state_to_persist: Optional[List[RoundSessionState]] = None


@dataclass(frozen=True)
class InfiniteBootstrapState:
    has_saved_state: bool
    restored_solutions: SolutionSet
    saved_tries: List[str]
    should_advance_to_next_round: bool


def resolve_infinite_bootstrap_state(base_solutions: SolutionSet,
                                     saved_state: List[RoundSessionState]) -> InfiniteBootstrapState:
    has_saved_state = len(saved_state) > 0
    restored = hydrate_infinite_solution_from_state(base_solutions, saved_state) if has_saved_state else base_solutions
    saved_tries = list(saved_state[0].tries) if has_saved_state else []

    return InfiniteBootstrapState(
        has_saved_state=has_saved_state,
        restored_solutions=restored,
        saved_tries=saved_tries,
        should_advance_to_next_round=has_saved_state and has_solved_all_boards(restored.solution, saved_tries),
    )


def reconcile_saved_state(canonical: SolutionSet, saved_state: List[RoundSessionState],
                          settings: ModeConfig,
                          load_next_round: Callable[[SolutionSet], SolutionSet]) -> BootstrapResult:
    """
    Pure reconciliation of saved boards against the canonical puzzle.

    Args:
        canonical: Solution set computed for the requested date
        saved_state: Validated snapshots loaded from persistence (may be empty)
        settings: Mode rules
        load_next_round: Resolves the round after a given solution set

    Returns:
        BootstrapResult with outcome FRESH, RESUMED, ADVANCING or MISMATCHED
    """
    if not saved_state:
        return BootstrapResult(BootstrapPhase.FRESH, canonical, show_instructions=True)

    if settings.is_unlimited:
        infinite = resolve_infinite_bootstrap_state(canonical, saved_state)
        restored = infinite.restored_solutions

        if infinite.should_advance_to_next_round:
            next_round = load_next_round(restored)
            if next_round.is_available:
                return BootstrapResult(
                    BootstrapPhase.ADVANCING,
                    next_round,
                    state_to_persist=build_empty_game_state(next_round),
                )
            # No next word yet: keep showing the solved round
            return BootstrapResult(BootstrapPhase.RESUMED, restored, tries=infinite.saved_tries, won=True)

        return BootstrapResult(BootstrapPhase.RESUMED, restored, tries=infinite.saved_tries)

    if not matches_canonical_solution(canonical, saved_state):
        return BootstrapResult(BootstrapPhase.MISMATCHED, canonical)

    saved_tries = list(saved_state[0].tries)
    won = has_solved_all_boards(canonical.solution, saved_tries)
    game_over = len(saved_tries) >= settings.max_attempts and not won

    return BootstrapResult(BootstrapPhase.RESUMED, canonical, tries=saved_tries, won=won, game_over=game_over)


class BootstrapReconciler:
    """
    Runs one bootstrap cycle against the puzzle and persistence collaborators.

    ``phase`` exposes the current state of the cycle; ``is_active`` is
    checked after every collaborator read so that a stale cycle never
    produces a result.
    """

    def __init__(self, dictionary, puzzle_table=None):
        self.dictionary = dictionary
        self.puzzle_table = puzzle_table
        self.phase = BootstrapPhase.UNINITIALIZED

    def run(self, game_date: date, mode: GameMode, language: str,
            load_saved_state: Callable[[], List[RoundSessionState]],
            is_active: Callable[[], bool] = lambda: True) -> Optional[BootstrapResult]:
        """
        Resolve the session for (date, mode, language).

        Returns:
            BootstrapResult, or None if the cycle was cancelled
        """
        settings = get_mode_config(mode)
        self.phase = BootstrapPhase.LOADING

        canonical = get_solution(game_date, settings.mode, language, self.dictionary, self.puzzle_table)
        if not is_active():
            self.phase = BootstrapPhase.CANCELLED
            return None

        if not canonical.is_available:
            self.phase = BootstrapPhase.UNAVAILABLE
            return BootstrapResult(BootstrapPhase.UNAVAILABLE, canonical)

        saved_state = load_saved_state()
        if not is_active():
            self.phase = BootstrapPhase.CANCELLED
            return None

        result = reconcile_saved_state(canonical, saved_state, settings, self._load_next_round(settings))
        if not is_active():
            self.phase = BootstrapPhase.CANCELLED
            return None

        self.phase = BootstrapPhase.HYDRATED
        return result

    def _load_next_round(self, settings: ModeConfig) -> Callable[[SolutionSet], SolutionSet]:
        def load(current: SolutionSet) -> SolutionSet:
            return get_next_round_solution(current, settings.mode, self.dictionary, self.puzzle_table)
        return load
