"""
Player Identity Decorators

Contains decorators resolving the player for HTTP and WebSocket handlers.
A valid Bearer token identifies a signed-in player; without one, a client
id identifies an anonymous, local-only player.
"""

from functools import wraps

import jwt
from flask import request, jsonify
from flask_socketio import emit

from .helpers import anonymous_player, decode_player_token, get_bearer_token, get_client_id


def require_player(f):
    """
    Decorator resolving the player of an HTTP request into ``request.player``.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = get_bearer_token()

        if token:
            try:
                player = decode_player_token(token)
            except jwt.ExpiredSignatureError:
                return jsonify({
                    'success': False,
                    'error': 'Token has expired'
                }), 401
            except jwt.InvalidTokenError:
                return jsonify({
                    'success': False,
                    'error': 'Invalid token'
                }), 401
        else:
            player = anonymous_player(get_client_id())

        if player is None:
            return jsonify({
                'success': False,
                'error': 'Authorization token or client id required'
            }), 400

        request.player = player
        return f(*args, **kwargs)

    return decorated_function


def websocket_player_required(f):
    """Decorator for WebSocket events: resolves ``token`` or ``client_id`` from the payload."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        data = args[0] if args and isinstance(args[0], dict) else {}

        if data.get('token'):
            try:
                player = decode_player_token(data['token'])
            except jwt.InvalidTokenError as e:
                emit('error', {'error': f'Invalid token: {e}'})
                return
        else:
            player = anonymous_player(data.get('client_id'))

        if player is None:
            emit('error', {'error': 'Authorization token or client id required'})
            return

        request.player = player
        kwargs['player'] = player
        return f(*args, **kwargs)

    return decorated_function
