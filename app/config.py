"""Application configuration module.

Loads configuration from environment variables with sensible defaults
for development.
"""
import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Base configuration class.

    Reads configuration from environment variables. All sensitive values
    should be set via environment variables, never hardcoded.
    """

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.environ.get('DEBUG', 'false').lower() in ('true', '1', 'yes')

    # Database settings
    # Default to SQLite for local development, PostgreSQL for production
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        'sqlite:///csr_tracker.db'
    )

    # Handle Railway's postgres:// vs postgresql:// URL scheme
    if SQLALCHEMY_DATABASE_URI.startswith('postgres://'):
        SQLALCHEMY_DATABASE_URI = SQLALCHEMY_DATABASE_URI.replace(
            'postgres://', 'postgresql://', 1
        )

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Data store backend: 'sqlalchemy' (database) or 'memory' (in-process)
    DATA_STORE = os.environ.get('DATA_STORE', 'sqlalchemy').lower()

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL')

    # Application settings
    APP_NAME = 'CSR Project Tracker'
    DEFAULT_PAGE_SIZE = int(os.environ.get('DEFAULT_PAGE_SIZE', '10'))
    UPCOMING_TASK_DAYS = int(os.environ.get('UPCOMING_TASK_DAYS', '7'))
    UPCOMING_EVENT_DAYS = int(os.environ.get('UPCOMING_EVENT_DAYS', '30'))
