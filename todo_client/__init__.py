"""
Todo client Flask application factory.

Provides the ``create_app`` factory that assembles the todo client. The
client is a stateless Backend-for-Frontend (BFF): it renders HTML pages
via Jinja templates and calls the remote Task API on behalf of the
browser. The session (bearer token + user) lives in Flask's signed
session cookie; the task list itself is always re-read from the API.

Key Concepts Demonstrated:
- Application factory pattern (``create_app``)
- Backend-for-Frontend (BFF) architecture
- Cookie-backed, tab-scoped session storage
- Blueprint-based route registration
"""

from __future__ import annotations

import logging

from flask import Flask

from .config import get_config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(config_name: str | None = None) -> Flask:
    """
    Create and configure the todo client application.

    Args:
        config_name: Optional configuration environment name
            (``"development"``, ``"testing"``, ``"production"``). When
            *None*, the value is read from the ``FLASK_ENV`` environment
            variable, defaulting to ``"development"``.

    Returns:
        A configured :class:`~flask.Flask` application instance.
    """
    app = Flask(__name__, instance_relative_config=True)
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    logger.info("Creating todo client app with config: %s", config_class.__name__)
    logger.info("Remote Task API at %s", app.config["TODO_API_URL"])

    # Import inside the factory to avoid circular imports -- the blueprint
    # module references helpers from this package, which must exist first.
    from .routes.views import views_bp

    app.register_blueprint(views_bp)
    return app
