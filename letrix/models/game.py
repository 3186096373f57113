"""
Game Data Models

Contains all puzzle and session data structures and enums.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum, IntEnum
from typing import Any, Dict, List, NamedTuple, Optional


class WordEntry(NamedTuple):
    """One dictionary word: canonical form, accented display form and definition."""
    normalized_word: str
    display_word: str
    definition: Optional[str] = None


class StateValidationError(ValueError):
    """Raised when a persisted document does not have the expected shape."""


class Status(Enum):
    """Letter evaluation status for one tile or keyboard key."""
    CORRECT = "correct"
    PRESENT = "present"
    ABSENT = "absent"


class GameMode(IntEnum):
    """Named rulesets. Values are the mode ids used in puzzle identity."""
    TERM = 1
    DUO = 2
    TRIO = 3
    FOUR = 4
    DECA = 5
    INFINITE = 6


class GuessStatus(Enum):
    """Lifecycle tag of the in-progress guess row."""
    INITIAL = "initial"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass(frozen=True)
class ModeConfig:
    """Static rules for one game mode."""
    mode: GameMode
    name: str
    boards: int
    word_length: int
    max_attempts: int

    @property
    def is_unlimited(self) -> bool:
        return self.mode == GameMode.INFINITE

    @property
    def is_multi_board(self) -> bool:
        return self.boards > 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mode': int(self.mode),
            'name': self.name,
            'boards': self.boards,
            'word_length': self.word_length,
            'max_attempts': self.max_attempts,
        }


@dataclass
class Guess:
    """The current, unconfirmed row being typed."""
    row: int = 0
    word: str = ""
    letters: List[str] = field(default_factory=list)
    status: GuessStatus = GuessStatus.INITIAL
    guessed_row: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'row': self.row,
            'word': self.word,
            'letters': list(self.letters),
            'status': self.status.value,
            'guessed_row': self.guessed_row,
        }


@dataclass(frozen=True)
class SolutionSet:
    """
    Canonical answers for one round.

    An empty ``solution`` list means no puzzle could be generated for the
    requested date/mode/language.
    """
    solution: List[str]
    display_solution: List[str]
    definitions: List[Optional[str]]
    solution_date: date
    day_index: int
    next_date: date
    language: str

    @property
    def is_available(self) -> bool:
        return len(self.solution) > 0

    def with_entries(self, solution: List[str], display_solution: List[str],
                     definitions: List[Optional[str]]) -> 'SolutionSet':
        return replace(self, solution=solution, display_solution=display_solution,
                       definitions=definitions)

    def public_dict(self, reveal: bool = False) -> Dict[str, Any]:
        """Puzzle metadata for clients. Words are only included when ``reveal`` is set."""
        data = {
            'solution_date': self.solution_date.isoformat(),
            'day_index': self.day_index,
            'next_date': self.next_date.isoformat(),
            'language': self.language,
            'boards': len(self.solution),
            'available': self.is_available,
        }
        if reveal:
            data['solution'] = list(self.display_solution)
            data['definitions'] = list(self.definitions)
        return data


@dataclass
class RoundSessionState:
    """
    Persisted snapshot of one board in a round.

    Serialized with the key names used by existing saved games
    (``curday``, ``curRow``, ``curTry``, ...), so snapshots written by
    older clients hydrate unchanged.
    """
    curday: int
    cur_row: int
    cur_try: str
    tries: List[str]
    invalids: List[str]
    solution: str
    game_over: bool
    won: bool
    display_solution: Optional[str] = None
    definition: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'curday': self.curday,
            'curRow': self.cur_row,
            'curTry': self.cur_try,
            'tries': list(self.tries),
            'invalids': list(self.invalids),
            'solution': self.solution,
            'displaySolution': self.display_solution,
            'definition': self.definition,
            'gameOver': self.game_over,
            'won': self.won,
        }

    @classmethod
    def from_dict(cls, data: Any) -> 'RoundSessionState':
        """
        Build a snapshot from an untrusted document.

        Raises:
            StateValidationError: If a required field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise StateValidationError(f"State entry must be an object, got {type(data).__name__}")

        curday = data.get('curday')
        if not isinstance(curday, int) or isinstance(curday, bool):
            raise StateValidationError("State entry 'curday' must be an integer")

        solution = data.get('solution')
        if not isinstance(solution, str):
            raise StateValidationError("State entry 'solution' must be a string")

        tries = data.get('tries', [])
        if not isinstance(tries, list) or not all(isinstance(t, str) for t in tries):
            raise StateValidationError("State entry 'tries' must be a list of strings")

        invalids = data.get('invalids', [])
        if not isinstance(invalids, list) or not all(isinstance(t, str) for t in invalids):
            raise StateValidationError("State entry 'invalids' must be a list of strings")

        cur_row = data.get('curRow', 0)
        if not isinstance(cur_row, int) or isinstance(cur_row, bool):
            raise StateValidationError("State entry 'curRow' must be an integer")

        display_solution = data.get('displaySolution')
        definition = data.get('definition')

        return cls(
            curday=curday,
            cur_row=cur_row,
            cur_try=data.get('curTry') if isinstance(data.get('curTry'), str) else "",
            tries=list(tries),
            invalids=list(invalids),
            solution=solution,
            game_over=bool(data.get('gameOver', False)),
            won=bool(data.get('won', False)),
            display_solution=display_solution if isinstance(display_solution, str) else None,
            definition=definition if isinstance(definition, str) else None,
        )


def parse_round_state(documents: Any) -> List[RoundSessionState]:
    """
    Validate a persisted list of board snapshots.

    Raises:
        StateValidationError: If the payload is not a list of valid entries
    """
    if documents is None:
        return []
    if not isinstance(documents, list):
        raise StateValidationError("Saved state must be a list of board snapshots")
    return [RoundSessionState.from_dict(entry) for entry in documents]
