"""
Puzzle Selector

Deterministic mapping from (date, mode, language) to the round's solution
words. Every player must receive the identical daily puzzle, so nothing in
here may depend on process state, randomness or wall-clock time.

Selection order:
1. A precomputed puzzle table row set for the date, used only when it is
   structurally valid as a whole.
2. Otherwise, a 32-bit FNV-1a hash of "{date}:{language}:{mode}:{board}"
   indexes into the eligible solution words (sorted by normalized form),
   probing forward past offsets already taken by earlier boards.
"""

from datetime import date, timedelta
from typing import Dict, List

from ..config.game_settings import FIRST_GAME_DATE, PERIOD_IN_DAYS, get_mode_config
from ..models.game import GameMode, ModeConfig, SolutionSet, WordEntry
from .words import normalize_word, unicode_length

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619


def fnv1a_32(value: str) -> int:
    """32-bit FNV-1a over the UTF-8 bytes of ``value``."""
    hash_value = FNV_OFFSET_BASIS
    for byte in value.encode('utf-8'):
        hash_value ^= byte
        hash_value = (hash_value * FNV_PRIME) % 2 ** 32
    return hash_value


def get_day_index(game_date: date) -> int:
    """Number of whole periods from the epoch to ``game_date`` (day 0 is the epoch)."""
    days = (game_date - FIRST_GAME_DATE).days
    if days < 0:
        return 0
    return days // PERIOD_IN_DAYS


def get_last_game_date(today: date) -> date:
    days_since_last_game = (today - FIRST_GAME_DATE).days % PERIOD_IN_DAYS
    return today - timedelta(days=days_since_last_game)


def get_next_game_date(today: date) -> date:
    return get_last_game_date(today) + timedelta(days=PERIOD_IN_DAYS)


def is_valid_game_date(game_date: date, today: date) -> bool:
    if game_date < FIRST_GAME_DATE or game_date > today:
        return False
    return (game_date - FIRST_GAME_DATE).days % PERIOD_IN_DAYS == 0


def empty_solution_set(game_date: date, language: str) -> SolutionSet:
    return SolutionSet(
        solution=[],
        display_solution=[],
        definitions=[],
        solution_date=game_date,
        day_index=get_day_index(game_date),
        next_date=get_next_game_date(game_date),
        language=language,
    )


def is_valid_puzzle_table(rows: List[Dict], boards: int, word_length: int) -> bool:
    """
    Check a precomputed puzzle assignment as a whole.

    A table is usable only with exactly one row per board index in
    ``[0, boards)``, every word of the mode's length and no word repeated.
    """
    if len(rows) != boards:
        return False

    seen_indices = set()
    seen_words = set()
    for row in rows:
        if not isinstance(row, dict):
            return False

        board_index = row.get('board_index')
        if not isinstance(board_index, int) or isinstance(board_index, bool):
            return False
        if board_index < 0 or board_index >= boards or board_index in seen_indices:
            return False

        word = row.get('solution_normalized')
        if not isinstance(word, str):
            return False
        normalized = normalize_word(word)
        if unicode_length(normalized) != word_length or normalized in seen_words:
            return False

        display = row.get('solution_display')
        if display is not None and not isinstance(display, str):
            return False

        seen_indices.add(board_index)
        seen_words.add(normalized)

    return True


def hash_puzzle_rows(date_label: str, language: str, mode: GameMode, boards: int,
                     eligible_words: List[WordEntry]) -> List[Dict]:
    """
    Derive board assignments from the hash of the puzzle identity.

    Returns:
        List[Dict]: One row per board, or an empty list when there are not
        enough distinct eligible words
    """
    ordered = sorted(eligible_words, key=lambda entry: entry.normalized_word)
    total_words = len(ordered)

    if total_words < boards or boards <= 0:
        return []

    used_offsets = set()
    rows = []

    for board_index in range(boards):
        offset = fnv1a_32(f"{date_label}:{language}:{int(mode)}:{board_index}") % total_words
        attempts = 0

        while offset in used_offsets and attempts < total_words:
            offset = (offset + 1) % total_words
            attempts += 1

        if offset in used_offsets:
            return []

        used_offsets.add(offset)
        entry = ordered[offset]
        rows.append({
            'board_index': board_index,
            'solution_normalized': entry.normalized_word,
            'solution_display': entry.display_word,
        })

    return rows


def sanitize_solution_set(candidate: SolutionSet, boards: int, word_length: int) -> SolutionSet:
    """Normalize words, drop those of the wrong length and keep at most ``boards`` entries."""
    entries = []
    for index, word in enumerate(candidate.solution):
        normalized = normalize_word(word)
        if unicode_length(normalized) != word_length:
            continue
        display = candidate.display_solution[index] if index < len(candidate.display_solution) else None
        definition = candidate.definitions[index] if index < len(candidate.definitions) else None
        entries.append((normalized, display or word, definition))

    entries = entries[:boards]
    return candidate.with_entries(
        solution=[entry[0] for entry in entries],
        display_solution=[entry[1] for entry in entries],
        definitions=[entry[2] for entry in entries],
    )


def _build_solution_set(rows: List[Dict], game_date: date, language: str,
                        settings: ModeConfig, dictionary) -> SolutionSet:
    sorted_rows = sorted(rows, key=lambda row: row['board_index'])[:settings.boards]
    normalized = [normalize_word(row['solution_normalized']) for row in sorted_rows]

    candidate = SolutionSet(
        solution=normalized,
        display_solution=[row.get('solution_display') or word for row, word in zip(sorted_rows, normalized)],
        definitions=[dictionary.definition_for(word, language) for word in normalized],
        solution_date=game_date,
        day_index=get_day_index(game_date),
        next_date=get_next_game_date(game_date),
        language=language,
    )
    return sanitize_solution_set(candidate, settings.boards, settings.word_length)


def get_solution(game_date: date, mode: GameMode, language: str, dictionary,
                 puzzle_table=None) -> SolutionSet:
    """
    Resolve the solution set for one round.

    Args:
        game_date: Calendar date of the puzzle
        mode: Game mode
        language: Puzzle language
        dictionary: Collaborator with ``eligible_solution_words(language, word_length)``
            and ``definition_for(normalized_word, language)``
        puzzle_table: Optional collaborator with ``puzzle_rows(date, language, mode)``

    Returns:
        SolutionSet: The round's solutions, or an empty set when no puzzle
        can be generated
    """
    settings = get_mode_config(mode)
    date_label = game_date.isoformat()

    rows: List[Dict] = []
    if puzzle_table is not None:
        rows = list(puzzle_table.puzzle_rows(game_date, language, settings.mode) or [])

    if rows and is_valid_puzzle_table(rows, settings.boards, settings.word_length):
        resolved = _build_solution_set(rows, game_date, language, settings, dictionary)
        if len(resolved.solution) == settings.boards:
            return resolved

    eligible = dictionary.eligible_solution_words(language, settings.word_length)
    fallback_rows = hash_puzzle_rows(date_label, language, settings.mode, settings.boards, eligible)

    if not fallback_rows:
        return empty_solution_set(game_date, language)

    resolved = _build_solution_set(fallback_rows, game_date, language, settings, dictionary)
    if len(resolved.solution) != settings.boards:
        return empty_solution_set(game_date, language)
    return resolved


def get_next_round_solution(current: SolutionSet, mode: GameMode, dictionary,
                            puzzle_table=None) -> SolutionSet:
    """Solution set for the round after ``current`` (unlimited mode advances one day at a time)."""
    next_date = current.solution_date + timedelta(days=1)
    return get_solution(next_date, mode, current.language, dictionary, puzzle_table)
