"""
Application configuration.
This module defines the configuration settings for the Flask application, including database connection, secret key,
session lifetime and password hashing cost. It uses environment variables for sensitive information and defaults for
development. In production, make sure to set the appropriate environment variables and secure the secret key.
"""

import os
from datetime import timedelta
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _engine_options(database_uri: str, timeout: float) -> dict:
    """Bound every store operation by `timeout` seconds."""
    if database_uri.startswith("sqlite"):
        # SQLite busy timeout; connections may be used from the hashing/async threads
        return {"connect_args": {"timeout": timeout, "check_same_thread": False}}
    return {"pool_timeout": timeout, "pool_pre_ping": True}


class Config:
    """Base configuration shared by all environments."""

    # IMPORTANT: change this in production
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-change-me-please")

    # Database: SQLite for development (simple file in project folder)
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        f"sqlite:///{BASE_DIR / 'tasktracker.db'}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    STORE_TIMEOUT_SECONDS = float(os.environ.get("STORE_TIMEOUT_SECONDS", "5"))
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options(SQLALCHEMY_DATABASE_URI, STORE_TIMEOUT_SECONDS)

    # CSRF protection for forms
    WTF_CSRF_ENABLED = True

    # Login sessions: fixed lifetime measured from login
    SESSION_TTL_HOURS = int(os.environ.get("SESSION_TTL_HOURS", "24"))
    AUTH_SESSION_TTL = timedelta(hours=SESSION_TTL_HOURS)
    PERMANENT_SESSION_LIFETIME = AUTH_SESSION_TTL

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = _env_bool("SESSION_COOKIE_SECURE")

    # Password hashing (Werkzeug method string carries the cost factor,
    # e.g. "pbkdf2:sha256:600000" or "scrypt:32768:8:1")
    PASSWORD_HASH_METHOD = os.environ.get("PASSWORD_HASH_METHOD", "scrypt")
    PASSWORD_SALT_LENGTH = int(os.environ.get("PASSWORD_SALT_LENGTH", "16"))
    PASSWORD_HASH_WORKERS = int(os.environ.get("PASSWORD_HASH_WORKERS", "4"))

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_DIR = os.environ.get("LOG_DIR")

    # App UI name (used in templates)
    APP_NAME = "Task Tracker"


class TestConfig(Config):
    """Settings for the test suite. The fixture supplies SQLALCHEMY_DATABASE_URI."""

    TESTING = True
    WTF_CSRF_ENABLED = False
    SECRET_KEY = "test-secret"

    # Cheap but still salted, so the suite stays fast
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    PASSWORD_HASH_WORKERS = 2

    LOG_LEVEL = "DEBUG"
    LOG_DIR = None
