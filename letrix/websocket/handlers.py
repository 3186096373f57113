"""
WebSocket Event Handlers

Handles tile-by-tile play over Socket.IO. Every event carries the player
identity (``token`` or ``client_id``) plus ``mode`` and ``language``; the
reply is the full session state, and every saved snapshot is broadcast to
the player's room so other open devices can refresh.
"""

from flask import request
from flask_socketio import emit, join_room

from ..config.game_settings import is_supported_language, parse_game_mode
from ..services.session_service import get_session_service
from ..utils.decorators import websocket_player_required
from ..utils.game_logger import game_logger
from ..utils.helpers import get_default_language


def player_room(player_id):
    return f"player_{player_id}"


def _emit_outcome(session, outcome):
    if not outcome.accepted:
        emit('guess_rejected', {
            'success': False,
            'outcome': outcome.to_dict(),
            'error': outcome.message
        })
        return

    emit('session_state', {
        'success': True,
        'outcome': outcome.to_dict(),
        'state': session.to_dict()
    })


def _resolve_session(data, player, create=False):
    """Look up (or open) the session addressed by an event; emits 'error' and returns None on failure."""
    session_service = get_session_service()
    if not session_service:
        emit('error', {'error': 'Session service unavailable'})
        return None

    mode = parse_game_mode(data.get('mode'))
    language = data.get('language') or get_default_language()
    if mode is None or not is_supported_language(language):
        emit('error', {'error': 'Valid mode and language are required'})
        return None

    if create:
        return session_service.open_session(player['id'], mode, language, player['authenticated'])

    session = session_service.get_session(player['id'], mode, language)
    if session is None:
        emit('error', {'error': 'Session not found; bootstrap first'})
    return session


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    def broadcast_state(session):
        socketio.emit('state_updated', {
            'mode': session.settings.name,
            'language': session.language,
            'state': session.to_dict()
        }, room=player_room(session.player_id))

    session_service = get_session_service()
    if session_service:
        session_service.add_state_listener(broadcast_state)

    @socketio.on('connect')
    def handle_connect():
        """Handle WebSocket connection."""
        pass

    @socketio.on('bootstrap')
    @websocket_player_required
    def handle_bootstrap(data, player=None):
        """Load the round and join the player's room."""
        try:
            session = _resolve_session(data, player, create=True)
            if session is None:
                return

            join_room(player_room(player['id']))
            game_logger.log_user_action(request, 'ws_bootstrap', session.session_key)

            result = session.bootstrap()
            if result is None:
                return

            emit('session_state', {
                'success': True,
                'outcome': result.outcome.value,
                'state': session.to_dict()
            })

        except Exception as e:
            game_logger.log_error(request, e, 'ws_bootstrap')
            emit('error', {'error': str(e)})

    @socketio.on('type_letter')
    @websocket_player_required
    def handle_type_letter(data, player=None):
        try:
            session = _resolve_session(data, player)
            if session is None:
                return

            if 'index' in data:
                session.move_cursor(int(data['index']))
            session.type_letter(data.get('letter', ''))
            emit('session_state', {'success': True, 'state': session.to_dict()})

        except Exception as e:
            game_logger.log_error(request, e, 'ws_type_letter')
            emit('error', {'error': str(e)})

    @socketio.on('delete_letter')
    @websocket_player_required
    def handle_delete_letter(data, player=None):
        try:
            session = _resolve_session(data, player)
            if session is None:
                return

            session.delete_letter()
            emit('session_state', {'success': True, 'state': session.to_dict()})

        except Exception as e:
            game_logger.log_error(request, e, 'ws_delete_letter')
            emit('error', {'error': str(e)})

    @socketio.on('move_cursor')
    @websocket_player_required
    def handle_move_cursor(data, player=None):
        try:
            session = _resolve_session(data, player)
            if session is None:
                return

            session.move_cursor(int(data.get('index', 0)))
            emit('session_state', {'success': True, 'state': session.to_dict()})

        except (TypeError, ValueError):
            emit('error', {'error': 'Cursor index must be an integer'})
        except Exception as e:
            game_logger.log_error(request, e, 'ws_move_cursor')
            emit('error', {'error': str(e)})

    @socketio.on('submit_guess')
    @websocket_player_required
    def handle_submit_guess(data, player=None):
        """Confirm the current row, or a whole ``guess`` word when one is sent."""
        try:
            session = _resolve_session(data, player)
            if session is None:
                return

            if isinstance(data.get('guess'), str):
                session.set_guess_word(data['guess'])

            game_logger.log_user_action(request, 'ws_submit_guess', session.session_key)
            _emit_outcome(session, session.submit())

        except Exception as e:
            game_logger.log_error(request, e, 'ws_submit_guess')
            emit('error', {'error': str(e)})

    @socketio.on('key_press')
    @websocket_player_required
    def handle_key_press(data, player=None):
        """Raw keyboard event (``code`` and ``key``); Enter submits the current row."""
        try:
            session = _resolve_session(data, player)
            if session is None:
                return

            outcome = session.press_key(str(data.get('code', '')), str(data.get('key', '')))
            if outcome is not None:
                game_logger.log_user_action(request, 'ws_key_submit', session.session_key)
                _emit_outcome(session, outcome)
                return

            emit('session_state', {'success': True, 'state': session.to_dict()})

        except Exception as e:
            game_logger.log_error(request, e, 'ws_key_press')
            emit('error', {'error': str(e)})
