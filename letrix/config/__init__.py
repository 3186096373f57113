"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Game rules, puzzle epoch and bundled dictionaries
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    DEFAULT_LANGUAGE, FIRST_GAME_DATE, MODE_CONFIGS, PERIOD_IN_DAYS, SUPPORTED_LANGUAGES,
    WORD_LISTS, get_mode_config, get_word_statistics, parse_game_mode,
    resolve_language_from_locale, validate_word_list_integrity
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'DEFAULT_LANGUAGE', 'FIRST_GAME_DATE', 'MODE_CONFIGS', 'PERIOD_IN_DAYS',
    'SUPPORTED_LANGUAGES', 'WORD_LISTS', 'get_mode_config', 'get_word_statistics',
    'parse_game_mode', 'resolve_language_from_locale', 'validate_word_list_integrity'
]
