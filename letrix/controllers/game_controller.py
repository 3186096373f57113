"""
Game Controller

Handles all puzzle and session HTTP endpoints.
"""

from datetime import date

from flask import Blueprint, request, jsonify

from ..config.game_settings import (
    MODE_CONFIGS, SUPPORTED_LANGUAGES, is_supported_language, parse_game_mode,
    resolve_language_from_locale
)
from ..core.puzzle import get_solution, is_valid_game_date
from ..core.stats import get_success_rate
from ..services.dictionary_service import get_dictionary_service
from ..services.session_service import get_session_service
from ..utils.decorators import require_player
from ..utils.helpers import get_default_language
from ..utils.game_logger import game_logger

game_bp = Blueprint('game', __name__)


def _error(action, message, status, session_key=None):
    error_response = {
        'success': False,
        'error': message
    }
    game_logger.log_server_response(request, action, False, error_response, session_key)
    return jsonify(error_response), status


def _resolve_round(mode_value, language_value):
    """
    Parse mode and language from request values.

    Returns:
        Tuple of (mode, language, error_message)
    """
    mode = parse_game_mode(mode_value)
    if mode is None:
        return None, None, f"Invalid game mode: {mode_value!r}"

    if not language_value:
        language_value = resolve_language_from_locale(request.accept_languages.best, get_default_language())

    if not is_supported_language(language_value):
        return None, None, f"Unsupported language: {language_value!r}"

    return mode, language_value, None


def _resolve_date(value):
    """Parse an optional ISO puzzle date. Returns (date, error_message)."""
    today = date.today()
    if not value:
        return today, None

    try:
        game_date = date.fromisoformat(value)
    except (TypeError, ValueError):
        return None, f"Invalid date: {value!r}"

    if not is_valid_game_date(game_date, today):
        return None, f"No puzzle exists for {value}"

    return game_date, None


@game_bp.route('/modes', methods=['GET'])
def list_modes():
    """List game modes and supported languages."""
    game_logger.log_user_action(request, 'list_modes')
    response_data = {
        'success': True,
        'modes': [settings.to_dict() for settings in MODE_CONFIGS.values()],
        'languages': list(SUPPORTED_LANGUAGES)
    }
    return jsonify(response_data)


@game_bp.route('/puzzle/<language>/<mode>', methods=['GET'])
def get_puzzle(language, mode):
    """Public metadata for a daily puzzle. Never includes the words."""
    try:
        dictionary = get_dictionary_service()
        if not dictionary:
            return _error('get_puzzle', 'Dictionary service unavailable', 500)

        game_mode, language, error = _resolve_round(mode, language)
        if error:
            return _error('get_puzzle', error, 400)

        game_date, error = _resolve_date(request.args.get('date'))
        if error:
            return _error('get_puzzle', error, 400)

        game_logger.log_user_action(request, 'get_puzzle', mode=int(game_mode), language=language)

        session_service = get_session_service()
        puzzle_table = session_service.puzzle_table if session_service else None
        solution_set = get_solution(game_date, game_mode, language, dictionary, puzzle_table)

        response_data = {
            'success': True,
            'mode': MODE_CONFIGS[game_mode].to_dict(),
            'puzzle': solution_set.public_dict(reveal=False)
        }
        game_logger.log_server_response(request, 'get_puzzle', True, response_data)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'get_puzzle')
        return _error('get_puzzle', str(e), 500)


@game_bp.route('/session/bootstrap', methods=['POST'])
@require_player
def bootstrap_session():
    """Load (or resume) the player's round for a mode and language."""
    try:
        session_service = get_session_service()
        if not session_service:
            return _error('bootstrap', 'Session service unavailable', 500)

        data = request.get_json(silent=True) or {}
        game_mode, language, error = _resolve_round(data.get('mode'), data.get('language'))
        if error:
            return _error('bootstrap', error, 400)

        game_date, error = _resolve_date(data.get('date'))
        if error:
            return _error('bootstrap', error, 400)

        player = request.player
        game_logger.log_user_action(request, 'bootstrap', mode=int(game_mode), language=language)

        session, result = session_service.bootstrap(
            player['id'], game_mode, language, player['authenticated'], game_date
        )
        if result is None:
            return _error('bootstrap', 'Bootstrap was superseded', 409, session.session_key)

        response_data = {
            'success': True,
            'outcome': result.outcome.value,
            'state': session.to_dict()
        }
        game_logger.log_server_response(
            request, 'bootstrap', True, response_data, session.session_key, outcome=result.outcome.value
        )
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'bootstrap')
        return _error('bootstrap', str(e), 500)


@game_bp.route('/session/state', methods=['GET'])
@require_player
def get_session_state():
    """Current state of a bootstrapped session."""
    try:
        session_service = get_session_service()
        if not session_service:
            return _error('get_state', 'Session service unavailable', 500)

        game_mode, language, error = _resolve_round(request.args.get('mode'), request.args.get('language'))
        if error:
            return _error('get_state', error, 400)

        session = session_service.get_session(request.player['id'], game_mode, language)
        if session is None:
            return _error('get_state', 'Session not found', 404)

        game_logger.log_user_action(request, 'get_state', session.session_key)

        response_data = {
            'success': True,
            'state': session.to_dict()
        }
        game_logger.log_server_response(request, 'get_state', True, response_data, session.session_key)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'get_state')
        return _error('get_state', str(e), 500)


@game_bp.route('/session/guess', methods=['POST'])
@require_player
def submit_guess():
    """Submit a whole word as the current row."""
    try:
        session_service = get_session_service()
        if not session_service:
            return _error('submit_guess', 'Session service unavailable', 500)

        data = request.get_json(silent=True) or {}
        if not isinstance(data.get('guess'), str):
            return _error('submit_guess', 'Guess is required', 400)

        game_mode, language, error = _resolve_round(data.get('mode'), data.get('language'))
        if error:
            return _error('submit_guess', error, 400)

        session = session_service.get_session(request.player['id'], game_mode, language)
        if session is None:
            return _error('submit_guess', 'Session not found', 404)

        guess = data['guess']
        game_logger.log_user_action(request, 'submit_guess', session.session_key, guess_length=len(guess))

        session.set_guess_word(guess)
        outcome = session.submit()

        response_data = {
            'success': outcome.accepted,
            'outcome': outcome.to_dict(),
            'state': session.to_dict()
        }
        if not outcome.accepted:
            response_data['error'] = outcome.message
            game_logger.log_server_response(
                request, 'submit_guess', False, response_data, session.session_key,
                rejection=outcome.rejection.value
            )
            return jsonify(response_data), 400

        game_logger.log_server_response(
            request, 'submit_guess', True, response_data, session.session_key,
            won_now=outcome.won_now, game_over=outcome.game_over
        )
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'submit_guess')
        return _error('submit_guess', str(e), 500)


@game_bp.route('/stats/<language>/<mode>', methods=['GET'])
@require_player
def get_stats(language, mode):
    """Cumulative stats of the player for one mode and language."""
    try:
        session_service = get_session_service()
        if not session_service:
            return _error('get_stats', 'Session service unavailable', 500)

        game_mode, language, error = _resolve_round(mode, language)
        if error:
            return _error('get_stats', error, 400)

        game_logger.log_user_action(request, 'get_stats', mode=int(game_mode), language=language)

        player = request.player
        stats = session_service.load_stats(player['id'], game_mode, language, player['authenticated'])
        response_data = {
            'success': True,
            'stats': stats.to_dict(),
            'success_rate': get_success_rate(stats)
        }
        game_logger.log_server_response(request, 'get_stats', True, response_data)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'get_stats')
        return _error('get_stats', str(e), 500)


@game_bp.route('/definitions/<language>/<word>', methods=['GET'])
@require_player
def get_definition(language, word):
    """Definition of a word the player has already solved in one of their sessions."""
    try:
        session_service = get_session_service()
        if not session_service:
            return _error('get_definition', 'Session service unavailable', 500)

        if not is_supported_language(language):
            return _error('get_definition', f"Unsupported language: {language!r}", 400)

        game_logger.log_user_action(request, 'get_definition', language=language)

        player_id = request.player['id']
        for (session_player, _, session_language), session in list(session_service.sessions.items()):
            if session_player != player_id or session_language != language:
                continue
            found = session.definition_for_solved(word)
            if found is not None:
                response_data = {'success': True, **found}
                game_logger.log_server_response(request, 'get_definition', True, response_data)
                return jsonify(response_data)

        return _error('get_definition', 'Word not solved', 404)

    except Exception as e:
        game_logger.log_error(request, e, 'get_definition')
        return _error('get_definition', str(e), 500)


@game_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    try:
        session_service = get_session_service()
        dictionary = get_dictionary_service()

        game_logger.log_user_action(request, 'health_check')

        response_data = {
            'status': 'healthy',
            'active_sessions': len(session_service.sessions) if session_service else 0,
            'dictionary': type(dictionary).__name__ if dictionary else None,
            'cloud_storage': bool(session_service and session_service.store.cloud is not None),
            'log_stats': game_logger.get_log_stats()
        }
        game_logger.log_server_response(request, 'health_check', True, response_data)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'health_check')
        error_response = {
            'status': 'error',
            'error': str(e)
        }
        game_logger.log_server_response(request, 'health_check', False, error_response)
        return jsonify(error_response), 500
