"""
Services Package

Contains the puzzle collaborators and the game session shell.
"""

from .dictionary_service import JsonDictionary, MongoDictionary, get_dictionary_service
from .storage_service import (
    FallbackStateStore, LocalStateStore, MongoStateStore, PersistenceError, ScopeKey,
    get_storage_service
)
from .session_service import GameSession, SessionService, SubmissionOutcome, get_session_service

__all__ = [
    'JsonDictionary', 'MongoDictionary', 'get_dictionary_service',
    'FallbackStateStore', 'LocalStateStore', 'MongoStateStore', 'PersistenceError', 'ScopeKey',
    'get_storage_service',
    'GameSession', 'SessionService', 'SubmissionOutcome', 'get_session_service'
]
