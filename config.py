"""Configuration module for Flask application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_DEBUG', '1') == '1'
    ENV = os.getenv('FLASK_ENV', 'development')
    TESTING = False

    # Session Configuration (Production-safe defaults)
    SESSION_COOKIE_SECURE = os.getenv('SESSION_COOKIE_SECURE', 'false').lower() == 'true'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.getenv('SESSION_COOKIE_SAMESITE', 'Lax')
    PERMANENT_SESSION_LIFETIME = 43200  # 12 hours (one shift)

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    # Back-office REST API (inventory, customers, accounts, sales)
    BACKOFFICE_API_URL = os.getenv('BACKOFFICE_API_URL', 'http://localhost:5000/api/v1').rstrip('/')
    BACKOFFICE_API_TOKEN = os.getenv('BACKOFFICE_API_TOKEN')
    BACKOFFICE_TIMEOUT = float(os.getenv('BACKOFFICE_TIMEOUT', '10'))

    # Point of Sale
    # Sales created from this console are booked against a single branch
    POS_BRANCH_ID = int(os.getenv('POS_BRANCH_ID', '1'))
    # Open terminals kept in memory (one per browser session)
    POS_MAX_TERMINALS = int(os.getenv('POS_MAX_TERMINALS', '500'))
    CURRENCY_SYMBOL = os.getenv('CURRENCY_SYMBOL', '৳')

    # Error tracking (only initialised in production)
    SENTRY_DSN = os.getenv('SENTRY_DSN')


class TestingConfig(Config):
    """Configuration used by the test suite."""

    TESTING = True
    DEBUG = False
    ENV = 'testing'
    SECRET_KEY = 'test-secret-key'
    BACKOFFICE_API_URL = 'http://backoffice.test/api/v1'
    BACKOFFICE_API_TOKEN = 'test-token'
    SENTRY_DSN = None
