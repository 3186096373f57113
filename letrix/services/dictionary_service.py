"""
Dictionary Service

Word validation, solution eligibility and definitions. The bundled JSON
snapshot is always available; a MongoDB ``words`` collection (plus the
optional precomputed ``daily_puzzles`` table) takes over when configured.
"""

from datetime import date
from typing import Dict, List, Optional

from pymongo.errors import PyMongoError

from ..config.game_settings import WORD_LISTS
from ..core.words import normalize_word
from ..models.game import GameMode, WordEntry
from ..utils.game_logger import game_logger


class JsonDictionary:
    """Dictionary backed by the word lists bundled with the package."""

    def __init__(self, word_lists: Dict[str, List[Dict]] = None):
        self.word_lists = word_lists if word_lists is not None else WORD_LISTS
        self._index: Dict[str, Dict[str, Dict]] = {
            language: {entry['normalized_word']: entry for entry in entries}
            for language, entries in self.word_lists.items()
        }

    def _lookup(self, word: str, language: str) -> Optional[Dict]:
        return self._index.get(language, {}).get(normalize_word(word))

    def word_exists(self, word: str, language: str, length: Optional[int] = None) -> bool:
        entry = self._lookup(word, language)
        if entry is None or not entry['is_active']:
            return False
        return length is None or entry['word_length'] == length

    def eligible_solution_words(self, language: str, word_length: int) -> List[WordEntry]:
        entries = [
            WordEntry(entry['normalized_word'], entry['display_word'], entry['definition'])
            for entry in self.word_lists.get(language, [])
            if entry['is_solution'] and entry['is_active'] and entry['word_length'] == word_length
        ]
        return sorted(entries, key=lambda entry: entry.normalized_word)

    def definition_for(self, word: str, language: str) -> Optional[str]:
        entry = self._lookup(word, language)
        return entry['definition'] if entry else None

    def puzzle_rows(self, game_date: date, language: str, mode: GameMode) -> List[Dict]:
        # The bundled snapshot ships no precomputed puzzles
        return []


class MongoDictionary:
    """
    Dictionary and puzzle table backed by MongoDB.

    Collections:
        words: {language, normalized_word, display_word, word_length,
                is_solution, is_active, definition}
        daily_puzzles: {puzzle_date, language, mode, board_index,
                        solution_normalized, solution_display}

    Query failures are logged and read as "nothing found", which sends
    puzzle selection down the deterministic hash path.
    """

    def __init__(self, db):
        self.db = db
        self.words_collection = db.words
        self.puzzles_collection = db.daily_puzzles

        try:
            self.words_collection.create_index([("language", 1), ("normalized_word", 1)], unique=True)
            self.puzzles_collection.create_index(
                [("puzzle_date", 1), ("language", 1), ("mode", 1), ("board_index", 1)]
            )
        except PyMongoError as e:
            game_logger.logger.warning(f"Could not create dictionary indexes: {e}")

    def _find_word(self, word: str, language: str) -> Optional[Dict]:
        try:
            return self.words_collection.find_one(
                {"language": language, "normalized_word": normalize_word(word)}
            )
        except PyMongoError as e:
            game_logger.logger.warning(f"Word lookup failed for '{word}' ({language}): {e}")
            return None

    def word_exists(self, word: str, language: str, length: Optional[int] = None) -> bool:
        entry = self._find_word(word, language)
        if entry is None or not entry.get("is_active", True):
            return False
        return length is None or entry.get("word_length") == length

    def eligible_solution_words(self, language: str, word_length: int) -> List[WordEntry]:
        try:
            cursor = self.words_collection.find(
                {"language": language, "word_length": word_length, "is_solution": True, "is_active": True},
                {"normalized_word": 1, "display_word": 1, "definition": 1},
            ).sort("normalized_word", 1)
            rows = list(cursor)
        except PyMongoError as e:
            game_logger.logger.warning(f"Failed to list solution words for {language}/{word_length}: {e}")
            return []

        entries = [
            WordEntry(row["normalized_word"], row.get("display_word") or row["normalized_word"], row.get("definition"))
            for row in rows
            if isinstance(row.get("normalized_word"), str)
        ]
        return sorted(entries, key=lambda entry: entry.normalized_word)

    def definition_for(self, word: str, language: str) -> Optional[str]:
        entry = self._find_word(word, language)
        return entry.get("definition") if entry else None

    def puzzle_rows(self, game_date: date, language: str, mode: GameMode) -> List[Dict]:
        try:
            return list(self.puzzles_collection.find(
                {"puzzle_date": game_date.isoformat(), "language": language, "mode": int(mode)},
                {"_id": 0, "board_index": 1, "solution_normalized": 1, "solution_display": 1},
            ))
        except PyMongoError as e:
            game_logger.logger.warning(f"Puzzle table lookup failed for {game_date} {language}/{int(mode)}: {e}")
            return []


# Global service instance
_dictionary_service = None


def get_dictionary_service():
    """Get the global dictionary service instance."""
    return _dictionary_service


def initialize_dictionary_service(db=None):
    """Initialize the global dictionary service instance."""
    global _dictionary_service
    _dictionary_service = MongoDictionary(db) if db is not None else JsonDictionary()
    return _dictionary_service
