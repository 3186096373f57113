"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .decorators import require_player, websocket_player_required
from .helpers import anonymous_player, decode_player_token, get_client_id
from .game_logger import game_logger

__all__ = [
    'require_player', 'websocket_player_required',
    'anonymous_player', 'decode_player_token', 'get_client_id',
    'game_logger'
]
