"""
Configuration classes for the todo client.

The client is a thin Backend-for-Frontend: it serves server-rendered HTML
and delegates authentication and task operations to the remote Task API
over HTTP. Values are read from environment variables with local defaults.
"""

from __future__ import annotations

import os


class Config:
    """Base configuration for all environments."""

    SECRET_KEY: str = os.environ.get(
        "SECRET_KEY", "todo-client-dev-secret-change-in-production"
    )

    TODO_API_URL: str = os.environ.get("TODO_API_URL", "http://localhost:3001/api")
    TODO_API_TIMEOUT: int = int(os.environ.get("TODO_API_TIMEOUT", "5"))
    TOKEN_EXPIRY_LEEWAY_SECONDS: int = int(
        os.environ.get("TOKEN_EXPIRY_LEEWAY_SECONDS", "30")
    )

    # The session cookie is not marked permanent, so the browser drops it
    # when the tab session ends.
    SESSION_COOKIE_HTTPONLY: bool = True
    SESSION_COOKIE_SAMESITE: str = os.environ.get("SESSION_COOKIE_SAMESITE", "Lax")
    SESSION_COOKIE_SECURE: bool = (
        os.environ.get("SESSION_COOKIE_SECURE", "false").strip().lower() == "true"
    )


class DevelopmentConfig(Config):
    """Configuration for local development."""

    DEBUG: bool = True
    TESTING: bool = False


class TestingConfig(Config):
    """Configuration for automated tests."""

    DEBUG: bool = True
    TESTING: bool = True

    TODO_API_URL: str = os.environ.get("TEST_TODO_API_URL", "http://todo-api.test/api")
    TODO_API_TIMEOUT: int = int(os.environ.get("TEST_TODO_API_TIMEOUT", "1"))


class ProductionConfig(Config):
    """Configuration for production deployments."""

    DEBUG: bool = False
    TESTING: bool = False
    SESSION_COOKIE_SECURE: bool = (
        os.environ.get("SESSION_COOKIE_SECURE", "true").strip().lower() == "true"
    )


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Look up and return the configuration class for the given environment.

    Args:
        env: Environment name. When None, falls back to FLASK_ENV.

    Returns:
        The selected configuration class.
    """
    if env is None:
        env = os.environ.get("FLASK_ENV", "development")
    return config.get(env, config["default"])
