"""
Letrix Puzzle Server Application Package

Daily word puzzles with one to four simultaneous boards, several languages
and deterministic puzzle selection, served over HTTP and Socket.IO.
"""

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from pymongo.errors import PyMongoError

from .config import Config
from .services.dictionary_service import initialize_dictionary_service
from .services.session_service import initialize_session_service
from .services.storage_service import create_mongo_database, initialize_storage_service
from .utils.game_logger import game_logger


def initialize_services(config_class=Config):
    """
    Initialize the dictionary, storage and session services.

    Without a reachable MongoDB the bundled dictionary and local-only
    storage are used.

    Returns:
        SessionService instance
    """
    db = None
    if config_class.MONGO_URI:
        try:
            db = create_mongo_database(config_class.MONGO_URI, config_class.MONGO_DB_NAME)
        except PyMongoError as e:
            game_logger.logger.warning(f"MongoDB unavailable, using bundled dictionary and local storage: {e}")

    dictionary = initialize_dictionary_service(db)
    store = initialize_storage_service(
        config_class.DATA_DIR or None, db, config_class.LOCAL_STATE_MAX_ENTRIES
    )
    puzzle_table = dictionary if db is not None else None

    return initialize_session_service(dictionary, store, puzzle_table, config_class.HARD_MODE)


def create_app(config_class=Config):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use

    Returns:
        Tuple of (Flask application, SocketIO instance)
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    initialize_services(config_class)

    # Initialize extensions
    CORS(app)
    socketio = SocketIO(app, cors_allowed_origins="*", logger=False, engineio_logger=False)

    # Register blueprints
    from .controllers.game_controller import game_bp

    app.register_blueprint(game_bp, url_prefix='/api')

    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers
    register_websocket_handlers(socketio)

    # Store socketio instance for use in other modules
    app.socketio = socketio

    return app, socketio
