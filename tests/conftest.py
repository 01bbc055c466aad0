"""
Shared pytest fixtures for the todo client test suite.

Provides the Flask app and test client, an in-memory fake of the remote
Task API patched over ``requests.request``, a controller wired to a
dictionary-backed session store, and Faker-generated user data.

Key SDET Concepts Demonstrated:
- Fixture scoping (session vs. function) for performance and isolation
- Environment variable overrides set before the app is imported
- Monkeypatching the single HTTP seam instead of the network
- Test data factories with Faker
"""

from __future__ import annotations

import json
import os

import pytest
from faker import Faker

os.environ["FLASK_ENV"] = "testing"
os.environ["TEST_TODO_API_URL"] = "http://todo-api.test/api"

from tests.fakes import FakeTodoApi
from todo_client import create_app
from todo_client.api import TaskApiClient
from todo_client.controller import SessionController
from todo_client.store import MemoryStore

API_BASE_URL = "http://todo-api.test/api"

fake = Faker()


# -----------------------------------------------------------------------------
# Application Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(scope="session")
def app():
    """
    Provide the Flask application instance for the entire test session.

    Creates the app once with the 'testing' config and reuses it
    across all tests to avoid repeated startup overhead.
    """
    application = create_app("testing")
    yield application


@pytest.fixture(scope="function")
def client(app):
    """
    Provide a Flask test client scoped to a single test function.

    Opens a new test-client context for every test so that cookies and
    session state never leak between tests.
    """
    with app.test_client() as test_client:
        yield test_client


# -----------------------------------------------------------------------------
# Remote API Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def fake_api(monkeypatch):
    """Patch ``requests.request`` with an in-memory Todo API."""
    api = FakeTodoApi(API_BASE_URL)
    monkeypatch.setattr("todo_client.api.requests.request", api)
    return api


@pytest.fixture
def user_data() -> dict[str, str]:
    """Generate unique registration credentials."""
    return {
        "name": fake.name(),
        "email": fake.unique.email(),
        "password": fake.password(length=12),
    }


@pytest.fixture
def registered_user(fake_api, user_data) -> dict:
    """Seed the fake API with a user and return its credentials plus id."""
    user = fake_api.add_user(user_data["name"], user_data["email"], user_data["password"])
    return {**user_data, "id": user["id"]}


# -----------------------------------------------------------------------------
# Controller Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def controller(store) -> SessionController:
    """An unauthenticated controller over a fresh in-memory store."""
    return SessionController(TaskApiClient(API_BASE_URL, timeout=1), store)


@pytest.fixture
def logged_in(controller, fake_api, registered_user) -> SessionController:
    """A controller that has logged in as ``registered_user``."""
    controller.authenticate(
        "login",
        {"email": registered_user["email"], "password": registered_user["password"]},
    )
    fake_api.calls.clear()
    return controller


@pytest.fixture
def login_session(client, fake_api, registered_user):
    """
    Put a valid stored session into the test client's cookie.

    Returns the bearer token so tests can assert on outgoing headers.
    """
    token = fake_api.login_token(registered_user["email"])
    user = {key: registered_user[key] for key in ("id", "name", "email")}
    with client.session_transaction() as sess:
        sess["token"] = token
        sess["user"] = json.dumps(user)
    return token
