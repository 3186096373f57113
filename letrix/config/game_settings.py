"""
Game Configuration Constants Module

This module defines the static game rules: the mode table, the puzzle
epoch, supported languages and the bundled dictionary snapshot. All game
parameters are centralized here and are read-only after import.
"""

import json
import os
from datetime import date
from typing import Dict, Final, List, Optional, Union

from ..core.words import normalize_word, unicode_length
from ..models.game import GameMode, ModeConfig

# Mode table: board count, word length and attempt limit per mode
MODE_CONFIGS: Final[Dict[GameMode, ModeConfig]] = {
    GameMode.TERM: ModeConfig(GameMode.TERM, "term", boards=1, word_length=5, max_attempts=6),
    GameMode.DUO: ModeConfig(GameMode.DUO, "duo", boards=2, word_length=5, max_attempts=7),
    GameMode.TRIO: ModeConfig(GameMode.TRIO, "trio", boards=3, word_length=5, max_attempts=8),
    GameMode.FOUR: ModeConfig(GameMode.FOUR, "four", boards=4, word_length=5, max_attempts=9),
    GameMode.DECA: ModeConfig(GameMode.DECA, "deca", boards=1, word_length=10, max_attempts=8),
    GameMode.INFINITE: ModeConfig(GameMode.INFINITE, "infinite", boards=1, word_length=5, max_attempts=8),
}

# Puzzle epoch: day 0 is 1 January 2024, one puzzle per period
FIRST_GAME_DATE: Final[date] = date(2024, 1, 1)
PERIOD_IN_DAYS: Final[int] = 1

SUPPORTED_LANGUAGES: Final[List[str]] = ["pt", "en"]
DEFAULT_LANGUAGE: Final[str] = "pt"

# Minimum number of histogram buckets kept in stats
MIN_HISTOGRAM_BUCKETS: Final[int] = 6


def parse_game_mode(value: Union[str, int, None]) -> Optional[GameMode]:
    """
    Resolve a mode id (1-6, as int or string) or a mode name.

    Returns:
        GameMode or None when the value names no known mode
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        text = value.strip().lower()
        for mode, settings in MODE_CONFIGS.items():
            if settings.name == text:
                return mode
        if not text.isdigit():
            return None
        value = int(text)

    try:
        return GameMode(int(value))
    except (TypeError, ValueError):
        return None


def get_mode_config(mode: Union[GameMode, int]) -> ModeConfig:
    return MODE_CONFIGS[GameMode(mode)]


def resolve_language_from_locale(locale: Optional[str], default: str = DEFAULT_LANGUAGE) -> str:
    """A locale starting with a supported language code plays in that language; anything else in ``default``."""
    locale = (locale or "").strip().lower()
    for language in SUPPORTED_LANGUAGES:
        if locale.startswith(language):
            return language
    return default


def is_supported_language(language: Optional[str]) -> bool:
    return language in SUPPORTED_LANGUAGES


# Load dictionary snapshots from JSON files
def _load_word_list(language: str) -> List[Dict]:
    """
    Load the bundled dictionary for one language from words/<language>.json.

    Returns:
        List[Dict]: Entries with normalized, display, length and flag fields

    Raises:
        FileNotFoundError: If the JSON file is not found
        ValueError: If the JSON is malformed or an entry is invalid
    """
    config_dir = os.path.dirname(os.path.abspath(__file__))
    json_file_path = os.path.join(config_dir, 'words', f'{language}.json')

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            raw_entries = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Word list file not found: {json_file_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {language}.json: {e}")

    if not isinstance(raw_entries, list):
        raise ValueError("JSON file must contain an array of word entries")

    if not raw_entries:
        raise ValueError("Word list cannot be empty")

    entries = []
    for raw in raw_entries:
        if not isinstance(raw, dict) or not isinstance(raw.get('word'), str):
            raise ValueError(f"Invalid word entry in {language}.json: {raw!r}")

        display = raw['word'].strip()
        normalized = normalize_word(display)
        if not normalized.isalpha():
            raise ValueError(f"Word '{display}' contains non-alphabetic characters")

        definition = raw.get('definition')
        entries.append({
            'normalized_word': normalized,
            'display_word': display,
            'word_length': unicode_length(normalized),
            'is_solution': bool(raw.get('solution', False)),
            'is_active': bool(raw.get('active', True)),
            'definition': definition.strip() if isinstance(definition, str) and definition.strip() else None,
        })

    return entries


# Bundled dictionary snapshot per language
WORD_LISTS: Final[Dict[str, List[Dict]]] = {
    language: _load_word_list(language) for language in SUPPORTED_LANGUAGES
}


def validate_word_list_integrity() -> bool:
    """
    Validates the integrity of the bundled dictionaries.

    Checks that normalized words are unique per language and that every
    mode has at least as many eligible solutions as it has boards.

    Returns:
        bool: True if all word lists pass validation

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    for language, entries in WORD_LISTS.items():
        seen = set()
        duplicates = []
        for entry in entries:
            key = entry['normalized_word']
            if key in seen:
                duplicates.append(key)
            seen.add(key)
        if duplicates:
            raise ValueError(f"Duplicate words found in {language} word list: {duplicates}")

        for settings in MODE_CONFIGS.values():
            eligible = [
                entry for entry in entries
                if entry['is_solution'] and entry['is_active'] and entry['word_length'] == settings.word_length
            ]
            if len(eligible) < settings.boards:
                raise ValueError(
                    f"Not enough {settings.word_length}-letter solutions in {language} "
                    f"for mode '{settings.name}'"
                )

    return True


def get_word_statistics() -> dict:
    """
    Summarizes the bundled dictionaries.

    Returns:
        dict: Per-language totals of words, solutions and lengths
    """
    stats = {}
    for language, entries in WORD_LISTS.items():
        by_length: Dict[int, int] = {}
        for entry in entries:
            by_length[entry['word_length']] = by_length.get(entry['word_length'], 0) + 1
        stats[language] = {
            'total_words': len(entries),
            'solutions': sum(1 for entry in entries if entry['is_solution'] and entry['is_active']),
            'by_length': by_length,
        }
    return stats


if __name__ == "__main__":

    try:
        validate_word_list_integrity()
        print(" Word list validation passed")

        print(f" Dictionary statistics: {get_word_statistics()}")

        print(" All configuration validation checks passed")
    except ValueError as config_error:
        print(f" Configuration validation failed: {config_error}")
        exit(1)
