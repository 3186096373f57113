"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import (
    GameMode, Guess, GuessStatus, ModeConfig, RoundSessionState, SolutionSet,
    StateValidationError, Status, WordEntry, parse_round_state
)
from .stats import GameStats

__all__ = [
    'GameMode', 'Guess', 'GuessStatus', 'ModeConfig', 'RoundSessionState',
    'SolutionSet', 'StateValidationError', 'Status', 'WordEntry', 'parse_round_state',
    'GameStats'
]
