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
    PERMANENT_SESSION_LIFETIME = 43200  # 12 hours, one shift

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Database - Priority: DATABASE_URL > DB_* > POSTGRES_*
    DATABASE_URL = os.getenv('DATABASE_URL')

    if not DATABASE_URL:
        DB_HOST = os.getenv('DB_HOST') or os.getenv('POSTGRES_HOST', 'localhost')
        DB_PORT = os.getenv('DB_PORT') or os.getenv('POSTGRES_PORT', '5432')
        DB_NAME = os.getenv('DB_NAME') or os.getenv('POSTGRES_DB', 'pharmapos')
        DB_USER = os.getenv('DB_USER') or os.getenv('POSTGRES_USER', 'pharmapos')
        DB_PASSWORD = os.getenv('DB_PASSWORD') or os.getenv('POSTGRES_PASSWORD', 'pharmapos')

        DATABASE_URL = (
            f"postgresql://{DB_USER}:{DB_PASSWORD}"
            f"@{DB_HOST}:{DB_PORT}/{DB_NAME}"
        )

    # SQLAlchemy
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_ECHO = os.getenv('SQLALCHEMY_ECHO', 'false').lower() == 'true'
    DB_POOL_TIMEOUT = int(os.getenv('DB_POOL_TIMEOUT', '5'))  # seconds waiting for a connection

    # Finalize must never hang on a locked stock row
    FINALIZE_LOCK_TIMEOUT_MS = int(os.getenv('FINALIZE_LOCK_TIMEOUT_MS', '3000'))
    DB_STATEMENT_TIMEOUT_MS = int(os.getenv('DB_STATEMENT_TIMEOUT_MS', '10000'))

    # Organization header for receipts and ledger exports
    ORGANIZATION_NAME = os.getenv('ORGANIZATION_NAME', 'My Pharmacy')
    ORGANIZATION_ADDRESS = os.getenv('ORGANIZATION_ADDRESS', '')
    ORGANIZATION_PHONE = os.getenv('ORGANIZATION_PHONE', '')
    CURRENCY_LABEL = os.getenv('CURRENCY_LABEL', 'Rs.')
    EXPORT_DELIMITER = os.getenv('EXPORT_DELIMITER', ',')

    INVOICE_LIST_LIMIT = int(os.getenv('INVOICE_LIST_LIMIT', '100'))
    MEDICINE_SEARCH_LIMIT = int(os.getenv('MEDICINE_SEARCH_LIMIT', '50'))


class TestConfig(Config):
    """Configuration used by the pytest suite (in-memory SQLite)."""

    TESTING = True
    DEBUG = False
    ENV = 'testing'
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ECHO = False
    ORGANIZATION_NAME = 'Test Pharmacy'
    ORGANIZATION_ADDRESS = '1 Main Street'
    ORGANIZATION_PHONE = '555-0100'
