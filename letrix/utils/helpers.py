"""
Helper Functions

Contains utility functions used throughout the application.
"""

from typing import Any, Dict, Optional

import jwt
from flask import current_app, request

from ..config.game_settings import DEFAULT_LANGUAGE, is_supported_language

CLIENT_ID_HEADER = 'X-Client-Id'
ANONYMOUS_PREFIX = 'anon:'


def get_default_language() -> str:
    """Configured default language, or the built-in one when it is not supported."""
    language = current_app.config.get('DEFAULT_LANGUAGE')
    return language if is_supported_language(language) else DEFAULT_LANGUAGE


def decode_player_token(token: str) -> Dict[str, Any]:
    """
    Verify a player JWT and return its player identity.

    Raises:
        jwt.InvalidTokenError: If the token is invalid, expired or has no usable player id
    """
    secret = current_app.config.get('JWT_SECRET')
    if not secret:
        raise jwt.InvalidTokenError("Token verification is not configured")

    payload = jwt.decode(
        token,
        secret,
        algorithms=[current_app.config.get('JWT_ALGORITHM', 'HS256')],
        audience=current_app.config.get('JWT_AUDIENCE')
    )
    player_id = payload.get('sub') or payload.get('user_id')
    if not player_id:
        raise jwt.InvalidTokenError("Token has no player id")

    player_id = str(player_id)
    # Anonymous ids live in their own namespace
    if player_id.startswith(ANONYMOUS_PREFIX):
        raise jwt.InvalidTokenError("Token player id uses the anonymous namespace")
    return {'id': player_id, 'authenticated': True}


def anonymous_player(client_id: Any) -> Optional[Dict[str, Any]]:
    """Local-only identity for a player without a token."""
    if not isinstance(client_id, str) or not client_id.strip():
        return None
    return {'id': f"{ANONYMOUS_PREFIX}{client_id.strip()}", 'authenticated': False}


def get_bearer_token(request_obj=None) -> Optional[str]:
    if request_obj is None:
        request_obj = request

    auth_header = request_obj.headers.get('Authorization', '')
    if not auth_header.startswith('Bearer '):
        return None
    return auth_header.split(' ', 1)[1].strip() or None


def get_client_id(request_obj=None) -> Optional[str]:
    """Client id from the header, the query string or the JSON body."""
    if request_obj is None:
        request_obj = request

    client_id = request_obj.headers.get(CLIENT_ID_HEADER) or request_obj.args.get('client_id')
    if not client_id:
        data = request_obj.get_json(silent=True) or {}
        client_id = data.get('client_id') if isinstance(data, dict) else None
    return client_id if isinstance(client_id, str) else None
