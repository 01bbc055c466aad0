"""WSGI entry point for the todo client."""

import os

from todo_client import create_app

app = create_app(os.getenv("FLASK_ENV", "production"))
