"""Flask application configuration."""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Base configuration."""

    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        'sqlite:///locale.db'
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }

    # Locale caches, one directory per application
    FRONTEND_CACHE_PATH = os.environ.get(
        'FRONTEND_CACHE_PATH',
        str(BASE_DIR / 'cache' / 'frontend')
    )
    BACKEND_CACHE_PATH = os.environ.get(
        'BACKEND_CACHE_PATH',
        str(BASE_DIR / 'cache' / 'backend')
    )

    # Languages
    SITE_DEFAULT_LANGUAGE = os.environ.get('SITE_DEFAULT_LANGUAGE', 'en')
    LOCALE_FALLBACK_LANGUAGE = 'en'

    # Bearer token for the cache rebuild endpoint; unset disables it
    LOCALE_ADMIN_TOKEN = os.environ.get('LOCALE_ADMIN_TOKEN')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {}


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
