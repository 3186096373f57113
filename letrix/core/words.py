"""
Word Normalization

Canonical text handling shared by every comparison between guesses and
solutions: case folding, diacritic stripping and grapheme-aware splitting.
"""

import unicodedata
from typing import List

import regex

# Extended grapheme cluster, so "ç" typed as "c" + U+0327 is one tile
_GRAPHEME = regex.compile(r'\X')


def locale_aware_lower_case(text: str) -> str:
    if not text:
        return ""
    return text.lower()


def normalize_word(word: str) -> str:
    """
    Lowercase, decompose and drop combining marks.

    ``normalize_word("AÇÃO") == normalize_word("acao") == "acao"``, and
    applying it twice gives the same result as applying it once.
    """
    decomposed = unicodedata.normalize('NFD', locale_aware_lower_case(word))
    stripped = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
    return unicodedata.normalize('NFC', stripped)


def unicode_split(word: str) -> List[str]:
    """Split a word into user-perceived characters (one per tile)."""
    return _GRAPHEME.findall(locale_aware_lower_case(word))


def unicode_length(word: str) -> int:
    """Canonical word length, counted in graphemes."""
    return len(unicode_split(word))


def is_winning_word(guess: str, solution: str) -> bool:
    return normalize_word(guess) == normalize_word(solution)


def has_solved_all_boards(solutions: List[str], tries: List[str]) -> bool:
    """True when every board's solution appears among the confirmed tries."""
    normalized_tries = {normalize_word(t) for t in tries}
    return all(normalize_word(solution) in normalized_tries for solution in solutions)
