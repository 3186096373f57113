"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load environment variables from config.env
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))


class Config:
    """Base configuration class with all settings."""

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    TESTING = False

    # Server Settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 5000))

    # Database Settings
    MONGO_URI = os.getenv('MONGO_URI')
    MONGO_DB_NAME = os.getenv('MONGO_DB_NAME', 'letrix')

    # Authentication Settings (tokens are issued by the external auth provider)
    JWT_SECRET = os.getenv('JWT_SECRET')
    JWT_ALGORITHM = os.getenv('JWT_ALGORITHM', 'HS256')
    JWT_AUDIENCE = os.getenv('JWT_AUDIENCE')

    # Game Settings
    DEFAULT_LANGUAGE = os.getenv('DEFAULT_LANGUAGE', 'pt')
    HARD_MODE = os.getenv('HARD_MODE', 'False').lower() == 'true'

    # Local state files for anonymous players; empty keeps them in memory
    DATA_DIR = os.getenv('DATA_DIR', '')
    LOCAL_STATE_MAX_ENTRIES = int(os.getenv('LOCAL_STATE_MAX_ENTRIES', 10000))

    # Idle game sessions are dropped from memory; saved rounds stay in storage
    SESSION_IDLE_TIMEOUT = int(os.getenv('SESSION_IDLE_TIMEOUT', 3600))
    SESSION_SWEEP_INTERVAL = int(os.getenv('SESSION_SWEEP_INTERVAL', 60))

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    MONGO_URI = None
    JWT_SECRET = 'testing-jwt-secret-with-at-least-32-bytes'
    DATA_DIR = ''


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
