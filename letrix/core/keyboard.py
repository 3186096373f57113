"""
Keyboard State

Aggregates per-board letter statuses into one key state, and maps raw key
events to editing actions.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..models.game import Status

ABSENT_DISABLED_CLASS = "key-absent-disabled"

_PRIORITY = {Status.CORRECT: 3, Status.PRESENT: 2, Status.ABSENT: 1}


@dataclass(frozen=True)
class KeyboardLetterState:
    status: Optional[Status]
    status_segments: Optional[List[Optional[Status]]]
    disabled: bool
    absent_class_name: Optional[str]

    def to_dict(self) -> Dict:
        return {
            'status': self.status.value if self.status else None,
            'status_segments': [s.value if s else None for s in self.status_segments]
            if self.status_segments is not None else None,
            'disabled': self.disabled,
        }


@dataclass(frozen=True)
class KeyboardAction:
    type: str  # noop, enter, delete, move, type
    next_tile_index: Optional[int] = None
    value: Optional[str] = None


def resolve_keyboard_letter_state(key: str, statuses_by_board: List[Dict[str, Status]],
                                  disabled: bool, is_multi_board_mode: bool,
                                  active_statuses_by_board: Optional[List[Dict[str, Status]]] = None
                                  ) -> KeyboardLetterState:
    """
    State of one letter key across all boards.

    In multi-board modes a key is disabled only when the letter is absent on
    every still-unsolved board (``active_statuses_by_board``); in single-board
    mode it is disabled as soon as the letter is absent.
    """
    normalized_key = key.lower()
    segments = [board.get(normalized_key) for board in statuses_by_board]

    relevant = active_statuses_by_board if active_statuses_by_board else statuses_by_board
    active_segments = [board.get(normalized_key) for board in relevant]

    best = None
    for status in segments:
        if status is not None and (best is None or _PRIORITY[status] > _PRIORITY[best]):
            best = status

    all_absent = len(active_segments) > 0 and all(s == Status.ABSENT for s in active_segments)
    should_disable = all_absent if is_multi_board_mode else best == Status.ABSENT

    return KeyboardLetterState(
        status=None if is_multi_board_mode or should_disable else best,
        status_segments=segments if is_multi_board_mode else None,
        disabled=disabled or should_disable,
        absent_class_name=ABSENT_DISABLED_CLASS if should_disable else None,
    )


def resolve_keyboard_action(code: str, key: str, disabled: bool, solution_length: int,
                            selected_tile_index: int) -> KeyboardAction:
    if disabled:
        return KeyboardAction("noop")

    if code == "Enter":
        return KeyboardAction("enter")

    if code == "Backspace":
        return KeyboardAction("delete")

    if code in ("ArrowLeft", "ArrowRight"):
        max_index = max(solution_length - 1, 0)
        step = -1 if code == "ArrowLeft" else 1
        return KeyboardAction("move", next_tile_index=max(min(selected_tile_index + step, max_index), 0))

    normalized_key = (key or "").upper()
    if len(normalized_key) == 1 and "A" <= normalized_key <= "Z":
        return KeyboardAction("type", value=normalized_key)

    return KeyboardAction("noop")
