"""
Letrix Puzzle Server - Main Entry Point

This is the main entry point for the Letrix puzzle server.
It initializes all services and starts the Flask-SocketIO application.
"""

import threading
import time

from letrix import create_app
from letrix.config import Config, validate_word_list_integrity
from letrix.services.dictionary_service import get_dictionary_service
from letrix.services.session_service import get_session_service
from letrix.services.storage_service import get_storage_service
from letrix.utils.game_logger import game_logger


def session_cleanup_worker(app, idle_timeout, interval):
    """
    Background worker that periodically drops idle game sessions from memory.
    Their rounds are already saved, so players resume them on the next bootstrap.
    """
    while True:
        try:
            with app.app_context():
                session_service = get_session_service()
                if session_service:
                    session_service.evict_idle_sessions(idle_timeout)
        except Exception as e:
            game_logger.logger.error(f"Error in session cleanup worker: {e}")

        time.sleep(interval)


def main():
    """Main function to initialize services and start the server."""
    try:
        print("Validating bundled dictionaries...")
        validate_word_list_integrity()
        print("✓ Word lists valid")

        # Create Flask app (initializes dictionary, storage and session services)
        print("Creating Flask application...")
        app, socketio = create_app(Config)
        print("✓ Flask application created successfully")

        # Start session cleanup worker in background thread
        cleanup_thread = threading.Thread(
            target=session_cleanup_worker,
            args=(app, Config.SESSION_IDLE_TIMEOUT, Config.SESSION_SWEEP_INTERVAL),
            daemon=True
        )
        cleanup_thread.start()
        print(f"✓ Session cleanup worker started - checking every {Config.SESSION_SWEEP_INTERVAL} seconds")

        dictionary = get_dictionary_service()
        storage = get_storage_service()
        cloud_available = storage is not None and storage.cloud is not None

        game_logger.logger.info("Letrix Server Starting")

        print(f"\nStarting Letrix Server on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print(f"Dictionary: {type(dictionary).__name__}")
        print(f"Cloud storage available: {cloud_available}")
        print("=" * 50)

        # Start the server
        socketio.run(app, host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Letrix Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
