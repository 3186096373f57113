"""
Session Service

Contains the imperative shell around the puzzle engine: one GameSession per
(player, mode, language) owns the mutable round state, calls the pure
engine functions and writes snapshots through the storage service.
"""

import time
from dataclasses import dataclass
from datetime import date
from string import ascii_lowercase
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..config.game_settings import get_mode_config
from ..core.board_state import get_board_row_state, resolve_displayed_row_letters
from ..core.bootstrap import BootstrapPhase, BootstrapReconciler, BootstrapResult
from ..core.input import compute_delete_update, compute_typing_update, guess_from_letters
from ..core.keyboard import resolve_keyboard_action, resolve_keyboard_letter_state
from ..core.puzzle import empty_solution_set, get_next_round_solution
from ..core.state import build_empty_game_state, build_game_state_snapshot
from ..core.stats import add_stats_for_completed_game, get_success_rate, normalize_stats
from ..core.statuses import get_guess_statuses, get_keyboard_statuses
from ..core.submission import (
    REJECTION_MESSAGES, GuessRejection, build_submission_snapshot, validate_guess
)
from ..core.words import locale_aware_lower_case, normalize_word, unicode_split
from ..models.game import GameMode, Guess, GuessStatus, RoundSessionState, SolutionSet
from ..models.stats import GameStats
from ..utils.game_logger import game_logger
from .storage_service import ScopeKey


@dataclass(frozen=True)
class SubmissionOutcome:
    """Result of confirming the current guess."""
    accepted: bool
    rejection: Optional[GuessRejection] = None
    won_now: bool = False
    game_over: bool = False
    advanced: bool = False

    @property
    def message(self) -> Optional[str]:
        return REJECTION_MESSAGES.get(self.rejection) if self.rejection else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'accepted': self.accepted,
            'rejection': self.rejection.value if self.rejection else None,
            'message': self.message,
            'won_now': self.won_now,
            'game_over': self.game_over,
            'advanced': self.advanced,
        }


class GameSession:
    """
    Mutable round state for one player in one mode and language.

    A generation counter stands in for the liveness flag of a bootstrap:
    starting a new bootstrap, or calling ``cancel``, makes any bootstrap
    still in flight discard its result.
    """

    def __init__(self, player_id: str, mode: GameMode, language: str, dictionary, store,
                 puzzle_table=None, authenticated: bool = False, hard_mode: bool = False,
                 on_state_saved: Optional[Callable[['GameSession'], None]] = None):
        self.player_id = player_id
        self.settings = get_mode_config(mode)
        self.language = language
        self.dictionary = dictionary
        self.store = store
        self.puzzle_table = puzzle_table
        self.authenticated = authenticated
        self.hard_mode = hard_mode
        self.on_state_saved = on_state_saved

        self.reconciler = BootstrapReconciler(dictionary, puzzle_table)
        self.solution_set: Optional[SolutionSet] = None
        self.tries: List[str] = []
        self.current_guess = Guess()
        self.current_row = 0
        self.selected_tile_index = 0
        self.invalids: List[str] = []
        self.won = False
        self.game_over = False
        self.hydrated = False
        self.show_instructions = False
        self.stats = normalize_stats(None, self.settings.max_attempts)
        self.last_active = time.monotonic()
        self._generation = 0

    @property
    def session_key(self) -> str:
        return f"{self.player_id}:{self.settings.name}:{self.language}"

    @property
    def phase(self) -> BootstrapPhase:
        return self.reconciler.phase

    @property
    def attempt_cap(self) -> Optional[int]:
        """Attempt limit, or None in unlimited mode."""
        return None if self.settings.is_unlimited else self.settings.max_attempts

    @property
    def solutions(self) -> List[str]:
        return list(self.solution_set.solution) if self.solution_set else []

    @property
    def is_locked(self) -> bool:
        return (
            not self.hydrated
            or self.solution_set is None
            or not self.solution_set.is_available
            or self.won
            or self.game_over
        )

    def scope_for(self, game_date: date) -> ScopeKey:
        puzzle_date = None if self.settings.is_unlimited else game_date.isoformat()
        return ScopeKey(self.player_id, self.language, self.settings.name, puzzle_date, self.authenticated)

    @property
    def scope(self) -> ScopeKey:
        game_date = self.solution_set.solution_date if self.solution_set else date.today()
        return self.scope_for(game_date)

    def touch(self) -> None:
        self.last_active = time.monotonic()

    # Bootstrap

    def cancel(self) -> None:
        """Invalidate any bootstrap in flight."""
        self._generation += 1

    def bootstrap(self, game_date: Optional[date] = None) -> Optional[BootstrapResult]:
        """
        Load the round for ``game_date`` (today by default) and adopt it.

        Returns:
            BootstrapResult, or None when a newer bootstrap or a cancel
            superseded this one
        """
        self._generation += 1
        generation = self._generation
        game_date = game_date or date.today()
        scope = self.scope_for(game_date)
        self.hydrated = False

        result = self.reconciler.run(
            game_date,
            self.settings.mode,
            self.language,
            lambda: self.store.load_state(scope),
            is_active=lambda: generation == self._generation,
        )
        if result is None:
            return None

        self.stats = normalize_stats(self.store.load_stats(scope), self.settings.max_attempts)
        self._adopt(result)
        return result

    def _adopt(self, result: BootstrapResult) -> None:
        solution_set = result.solution_set

        if result.outcome == BootstrapPhase.UNAVAILABLE:
            game_logger.log_game_event(
                self.session_key, 'puzzle_unavailable', self.player_id,
                puzzle_date=solution_set.solution_date.isoformat(),
            )
        elif result.outcome == BootstrapPhase.MISMATCHED:
            game_logger.log_game_event(
                self.session_key, 'state_mismatch', self.player_id, day_index=solution_set.day_index
            )
        elif result.outcome == BootstrapPhase.ADVANCING:
            game_logger.log_game_event(
                self.session_key, 'round_advanced', self.player_id, day_index=solution_set.day_index
            )

        self.solution_set = solution_set
        self.tries = list(result.tries)
        self.won = result.won
        self.game_over = result.game_over
        self.show_instructions = result.show_instructions
        self.current_row = len(self.tries)
        self.current_guess = Guess(row=self.current_row)
        self.selected_tile_index = 0
        self.invalids = []
        self.hydrated = True

        if result.state_to_persist is not None:
            self._save_state(result.state_to_persist)

    # Input editing

    def type_letter(self, value: str) -> bool:
        letters = unicode_split(value or "")
        if len(letters) != 1 or not letters[0].isalpha():
            return False

        update = compute_typing_update(
            letters[0],
            self.settings.word_length,
            self.attempt_cap,
            self.is_locked,
            len(self.tries),
            self.current_guess,
            self.current_row,
            self.selected_tile_index,
        )
        return self._apply_edit(update)

    def delete_letter(self) -> bool:
        if self.is_locked:
            return False
        update = compute_delete_update(self.current_guess, self.selected_tile_index, self.settings.word_length)
        return self._apply_edit(update)

    def move_cursor(self, index: int) -> bool:
        if self.is_locked:
            return False
        self.selected_tile_index = min(max(int(index), 0), self.settings.word_length - 1)
        return True

    def _apply_edit(self, update: Optional[Tuple[Guess, int]]) -> bool:
        if update is None:
            return False
        self.current_guess, self.selected_tile_index = update
        return True

    def press_key(self, code: str, key: str = "") -> Optional[SubmissionOutcome]:
        """Route a raw key event; only Enter produces a submission outcome."""
        action = resolve_keyboard_action(
            code, key, self.is_locked, self.settings.word_length, self.selected_tile_index
        )
        if action.type == "enter":
            return self.submit()
        if action.type == "delete":
            self.delete_letter()
        elif action.type == "move":
            self.move_cursor(action.next_tile_index)
        elif action.type == "type":
            self.type_letter(action.value)
        return None

    def set_guess_word(self, word: str) -> None:
        """Replace the current row with a whole word."""
        letters = unicode_split(locale_aware_lower_case((word or "").strip()))
        self.current_guess = guess_from_letters(letters, self.current_row, self.settings.word_length)
        self.selected_tile_index = min(len(letters), self.settings.word_length - 1)

    # Submission

    def _reject(self, rejection: GuessRejection, guess_word: str) -> SubmissionOutcome:
        game_logger.log_game_event(
            self.session_key, 'guess_rejected', self.player_id,
            rejection=rejection.value, guess_length=len(unicode_split(guess_word)),
        )
        self.current_guess.status = GuessStatus.FAILED
        return SubmissionOutcome(accepted=False, rejection=rejection)

    def submit(self) -> SubmissionOutcome:
        """Confirm the current guess against every board."""
        guess_word = normalize_word("".join(self.current_guess.letters))

        if self.is_locked:
            return self._reject(GuessRejection.LOCKED, guess_word)

        word_length = self.settings.word_length
        rejection = validate_guess(
            guess_word,
            word_length,
            lambda word: self.dictionary.word_exists(word, self.language, word_length),
            hard_mode=self.hard_mode,
            tries=self.tries,
            solutions=self.solutions,
        )
        if rejection is not None:
            if rejection == GuessRejection.NOT_A_WORD:
                self.invalids.append(guess_word)
            return self._reject(rejection, guess_word)

        snapshot = build_submission_snapshot(
            guess_word, word_length, self.tries, self.solutions, self.attempt_cap, self.won
        )
        if not snapshot.can_bank:
            return self._reject(GuessRejection.LOCKED, guess_word)

        is_unlimited = self.settings.is_unlimited
        self.store.save_state(self.scope, build_game_state_snapshot(
            self.solution_set, snapshot.next_tries, guess_word, self.current_row, self.invalids,
            snapshot.won_now, is_unlimited, self.settings.max_attempts,
        ))

        self.tries = snapshot.next_tries
        self.current_row = len(self.tries)
        self.current_guess = Guess(row=self.current_row)
        self.selected_tile_index = 0
        self.invalids = []

        if snapshot.won_now:
            self.won = True
            self._record_stats(snapshot.attempts_used)
            game_logger.log_game_event(
                self.session_key, 'round_won', self.player_id,
                day_index=self.solution_set.day_index, attempts_used=snapshot.attempts_used,
            )
            advanced = is_unlimited and self._advance_round()
            self._notify_saved()
            return SubmissionOutcome(accepted=True, won_now=True, advanced=advanced)

        if snapshot.reached_limit:
            self.game_over = True
            self._record_stats(snapshot.attempts_used + 1)
            game_logger.log_game_event(
                self.session_key, 'round_lost', self.player_id,
                day_index=self.solution_set.day_index, attempts_used=snapshot.attempts_used,
            )
            self._notify_saved()
            return SubmissionOutcome(accepted=True, game_over=True)

        self._notify_saved()
        return SubmissionOutcome(accepted=True)

    def _advance_round(self) -> bool:
        """Move an unlimited session to the next round, if one can be generated."""
        next_round = get_next_round_solution(
            self.solution_set, self.settings.mode, self.dictionary, self.puzzle_table
        )
        if not next_round.is_available:
            return False

        self.solution_set = next_round
        self.tries = []
        self.current_row = 0
        self.current_guess = Guess()
        self.selected_tile_index = 0
        self.invalids = []
        self.won = False
        self.game_over = False
        self.store.save_state(self.scope, build_empty_game_state(next_round))

        game_logger.log_game_event(
            self.session_key, 'round_advanced', self.player_id, day_index=next_round.day_index
        )
        return True

    def _record_stats(self, count: int) -> None:
        self.stats = add_stats_for_completed_game(
            self.stats, count, self.settings.max_attempts, self.settings.is_unlimited
        )
        self.store.save_stats(self.scope, self.stats)

    def _save_state(self, state: List[RoundSessionState]) -> None:
        self.store.save_state(self.scope, state)
        self._notify_saved()

    def _notify_saved(self) -> None:
        if self.on_state_saved is not None:
            self.on_state_saved(self)

    # Views

    def is_board_solved(self, board_index: int) -> bool:
        solutions = self.solutions
        return board_index < len(solutions) and solutions[board_index] in self.tries

    def definition_for_solved(self, word: str) -> Optional[Dict[str, Optional[str]]]:
        """Definition of a solution the player already found, or None."""
        normalized = normalize_word(word)
        for index, solution in enumerate(self.solutions):
            if solution == normalized and self.is_board_solved(index):
                return {
                    'word': self.solution_set.display_solution[index],
                    'definition': self.solution_set.definitions[index],
                }
        return None

    def keyboard_state(self) -> Dict[str, Dict[str, Any]]:
        solutions = self.solutions
        statuses_by_board = [get_keyboard_statuses(self.tries, solution) for solution in solutions]
        active_statuses = [
            statuses for index, statuses in enumerate(statuses_by_board) if not self.is_board_solved(index)
        ]

        keys = list(ascii_lowercase)
        for word in self.tries:
            keys.extend(letter for letter in unicode_split(word) if letter not in keys)

        return {
            key: resolve_keyboard_letter_state(
                key, statuses_by_board, self.is_locked, self.settings.is_multi_board, active_statuses
            ).to_dict()
            for key in keys
        }

    def board_views(self) -> List[Dict[str, Any]]:
        """Row-by-row rendering state for every board."""
        row_count = len(self.tries) + 1 if self.settings.is_unlimited else self.settings.max_attempts
        boards = []

        for board_index, solution in enumerate(self.solutions):
            rows = []
            for row_index in range(row_count):
                saved_word = self.tries[row_index] if row_index < len(self.tries) else None
                row = get_board_row_state(row_index, self.current_row, solution, saved_word, self.tries)
                saved_letters = unicode_split(saved_word) if saved_word else []
                letters = resolve_displayed_row_letters(
                    row.is_board_solved, row_index, row.guessed_index, row.is_current_row,
                    list(self.current_guess.letters), saved_letters,
                )
                statuses = get_guess_statuses(letters, solution) if saved_word and letters == saved_letters else []
                rows.append({
                    'letters': letters,
                    'statuses': [status.value for status in statuses],
                    'row_status': row.row_status,
                    'interactive': row.is_interactive_current_row and not self.is_locked,
                })
            boards.append({
                'board_index': board_index,
                'solved': self.is_board_solved(board_index),
                'rows': rows,
            })

        return boards

    def to_dict(self) -> Dict[str, Any]:
        solution_set = self.solution_set or empty_solution_set(date.today(), self.language)
        reveal = self.won or self.game_over
        return {
            'mode': self.settings.to_dict(),
            'language': self.language,
            'phase': self.phase.value,
            'hydrated': self.hydrated,
            'puzzle': solution_set.public_dict(reveal=reveal),
            'tries': list(self.tries),
            'current_row': self.current_row,
            'current_guess': self.current_guess.to_dict(),
            'selected_tile_index': self.selected_tile_index,
            'invalids': list(self.invalids),
            'won': self.won,
            'game_over': self.game_over,
            'locked': self.is_locked,
            'show_instructions': self.show_instructions,
            'hard_mode': self.hard_mode,
            'boards': self.board_views(),
            'keyboard': self.keyboard_state(),
            'stats': self.stats.to_dict(),
            'success_rate': get_success_rate(self.stats),
        }


class SessionService:
    """
    Registry of live game sessions.

    Sessions are keyed by (player id, mode, language); switching mode or
    language simply addresses another session.
    """

    def __init__(self, dictionary, store, puzzle_table=None, hard_mode: bool = False):
        self.dictionary = dictionary
        self.store = store
        self.puzzle_table = puzzle_table
        self.hard_mode = hard_mode
        self.sessions: Dict[Tuple[str, GameMode, str], GameSession] = {}
        self.state_listeners: List[Callable[[GameSession], None]] = []

    def _notify(self, session: GameSession) -> None:
        for listener in self.state_listeners:
            listener(session)

    def add_state_listener(self, listener: Callable[[GameSession], None]) -> None:
        self.state_listeners.append(listener)

    def get_session(self, player_id: str, mode: GameMode, language: str) -> Optional[GameSession]:
        session = self.sessions.get((player_id, GameMode(mode), language))
        if session is not None:
            session.touch()
        return session

    def open_session(self, player_id: str, mode: GameMode, language: str,
                     authenticated: bool = False) -> GameSession:
        """Return the player's session for (mode, language), creating it if needed."""
        key = (player_id, GameMode(mode), language)
        session = self.sessions.get(key)
        if session is None or session.authenticated != authenticated:
            session = GameSession(
                player_id, mode, language, self.dictionary, self.store,
                puzzle_table=self.puzzle_table,
                authenticated=authenticated,
                hard_mode=self.hard_mode,
                on_state_saved=self._notify,
            )
            self.sessions[key] = session
        session.touch()
        return session

    def bootstrap(self, player_id: str, mode: GameMode, language: str, authenticated: bool = False,
                  game_date: Optional[date] = None) -> Tuple[GameSession, Optional[BootstrapResult]]:
        session = self.open_session(player_id, mode, language, authenticated)
        return session, session.bootstrap(game_date)

    def load_stats(self, player_id: str, mode: GameMode, language: str,
                   authenticated: bool = False) -> GameStats:
        settings = get_mode_config(mode)
        scope = ScopeKey(player_id, language, settings.name, None, authenticated)
        return normalize_stats(self.store.load_stats(scope), settings.max_attempts)

    def close_session(self, player_id: str, mode: GameMode, language: str) -> None:
        session = self.sessions.pop((player_id, GameMode(mode), language), None)
        if session is not None:
            session.cancel()

    def evict_idle_sessions(self, max_idle_seconds: float, now: Optional[float] = None) -> int:
        """
        Drop sessions nobody has addressed for ``max_idle_seconds``.

        Their rounds are already saved, so the next bootstrap resumes them.

        Returns:
            Number of sessions evicted
        """
        now = time.monotonic() if now is None else now
        idle = [
            key for key, session in list(self.sessions.items())
            if now - session.last_active > max_idle_seconds
        ]
        for key in idle:
            self.close_session(*key)

        if idle:
            game_logger.logger.info(f"Session cleanup: evicted {len(idle)} idle sessions")
        return len(idle)


# Global service instance
_session_service = None


def get_session_service() -> Optional[SessionService]:
    """Get the global session service instance."""
    return _session_service


def initialize_session_service(dictionary, store, puzzle_table=None, hard_mode: bool = False) -> SessionService:
    """Initialize the global session service instance."""
    global _session_service
    _session_service = SessionService(dictionary, store, puzzle_table, hard_mode)
    return _session_service
