"""Shared builders for the test suite."""

from datetime import date, timedelta

from letrix.core.puzzle import get_day_index
from letrix.core.words import normalize_word, unicode_length
from letrix.models.game import SolutionSet
from letrix.services.dictionary_service import JsonDictionary


def word_entry(word, solution=True, active=True, definition=None):
    normalized = normalize_word(word)
    return {
        'normalized_word': normalized,
        'display_word': word,
        'word_length': unicode_length(normalized),
        'is_solution': solution,
        'is_active': active,
        'definition': definition,
    }


def make_dictionary(solutions, guess_only=(), language='pt', definitions=None):
    """JsonDictionary over a hand-picked word list."""
    definitions = definitions or {}
    entries = [word_entry(word, definition=definitions.get(word)) for word in solutions]
    entries += [word_entry(word, solution=False) for word in guess_only]
    return JsonDictionary({language: entries})


def make_solution_set(words, game_date=date(2024, 3, 1), language='pt'):
    return SolutionSet(
        solution=[normalize_word(word) for word in words],
        display_solution=list(words),
        definitions=[None] * len(words),
        solution_date=game_date,
        day_index=get_day_index(game_date),
        next_date=game_date + timedelta(days=1),
        language=language,
    )


class FakePuzzleTable:
    """Precomputed puzzle table returning fixed rows for every date."""

    def __init__(self, rows):
        self.rows = rows
        self.calls = []

    def puzzle_rows(self, game_date, language, mode):
        self.calls.append((game_date, language, mode))
        return list(self.rows)
