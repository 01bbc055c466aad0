"""
HTTP client for the remote Task API.

Centralises every call the todo client makes to the server so that each
request gets the same treatment: the configured base URL, a per-call
timeout, the ``Bearer`` authorization header for task endpoints, and a
uniform translation of transport failures and non-success statuses into
the client's error taxonomy.

Key Concepts Demonstrated:
- A single ``requests.request`` seam that tests can monkeypatch
- Timeout and ``RequestException`` handling at the edge, never deeper
- Server-provided ``error`` messages preferred over generic fallbacks
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import requests

from .errors import (
    AUTH_FAILED_MESSAGE,
    CONNECTION_ERROR_MESSAGE,
    INVALID_AUTH_RESPONSE_MESSAGE,
    AuthError,
    TaskOperationError,
)
from .models import AuthMode, Session, Task, User

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5


def _is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


def _todo_path(task_id: Any) -> str:
    """Path of a single task; the id is encoded as one opaque segment."""
    return f"/todos/{quote(str(task_id), safe='')}"


def _response_error_message(response: requests.Response, default: str) -> str:
    """
    Extract an error message from a JSON API response if possible.

    Falls back to *default* when the body is not JSON, is not an object,
    or carries a missing/blank ``error`` field.

    Args:
        response: The :class:`requests.Response` from the API.
        default: Fallback message returned when extraction fails.

    Returns:
        The extracted error string, or *default*.
    """
    try:
        payload = response.json()
    except ValueError:
        return default
    if not isinstance(payload, dict):
        return default
    message = payload.get("error")
    if isinstance(message, str) and message.strip():
        return message
    return default


class TaskApiClient:
    """
    Thin wrapper around the remote Task API endpoints.

    Args:
        base_url: Root of the API, e.g. ``"http://localhost:3001/api"``.
        timeout: Seconds to wait for each request before giving up.
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> TaskApiClient:
        """Build a client from a Flask-style configuration mapping."""
        return cls(
            config["TODO_API_URL"],
            timeout=config.get("TODO_API_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
        )

    def url(self, path: str) -> str:
        """Join the base URL with *path* without doubling slashes."""
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(
        self, method: str, path: str, token: str | None = None, **kwargs
    ) -> requests.Response:
        """
        Send one request to the API.

        Raises:
            requests.Timeout: If the API does not answer within ``timeout``.
            requests.RequestException: For network-level failures.
        """
        headers = dict(kwargs.pop("headers", {}))
        if "json" in kwargs:
            headers.setdefault("Content-Type", "application/json")
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return requests.request(
            method=method,
            url=self.url(path),
            headers=headers,
            timeout=self.timeout,
            **kwargs,
        )

    # -----------------------------------------------------------------
    # Authentication
    # -----------------------------------------------------------------

    def authenticate(self, mode: AuthMode, credentials: Mapping[str, str]) -> Session:
        """
        Log in or register and return the server-issued session.

        Only the fields *mode* expects are sent.

        Raises:
            AuthError: With the server's ``error`` text, a generic
                failure message, or the connection-error message when the
                request could not be sent or its body could not be parsed.
        """
        body = {name: credentials.get(name, "") for name in mode.credential_fields}
        try:
            response = self._request("POST", mode.endpoint, json=body)
        except requests.RequestException as exc:
            logger.warning("Auth request to %s failed: %s", mode.endpoint, exc)
            raise AuthError(CONNECTION_ERROR_MESSAGE) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning(
                "Auth response from %s was not JSON (status %s)",
                mode.endpoint,
                response.status_code,
            )
            raise AuthError(CONNECTION_ERROR_MESSAGE, status_code=502) from exc

        if not _is_success(response):
            raise AuthError(
                _response_error_message(response, AUTH_FAILED_MESSAGE),
                status_code=response.status_code,
            )

        if not isinstance(payload, dict):
            raise AuthError(INVALID_AUTH_RESPONSE_MESSAGE, status_code=502)
        token = payload.get("token")
        if not isinstance(token, str) or not token.strip():
            raise AuthError(INVALID_AUTH_RESPONSE_MESSAGE, status_code=502)
        try:
            user = User.from_payload(payload.get("user"))
        except ValueError as exc:
            raise AuthError(INVALID_AUTH_RESPONSE_MESSAGE, status_code=502) from exc
        return Session(token=token, user=user)

    # -----------------------------------------------------------------
    # Tasks
    # -----------------------------------------------------------------

    def _task_call(
        self, method: str, path: str, token: str, default_error: str, **kwargs
    ) -> requests.Response:
        """
        Send an authenticated task request and insist on a success status.

        Raises:
            TaskOperationError: For transport failures, 401 responses and
                any other non-success status.
        """
        try:
            response = self._request(method, path, token=token, **kwargs)
        except requests.Timeout as exc:
            raise TaskOperationError(
                "Task API timed out. Please try again.", TaskOperationError.TRANSPORT
            ) from exc
        except requests.RequestException as exc:
            raise TaskOperationError(
                "Task API unavailable. Please try again later.",
                TaskOperationError.TRANSPORT,
            ) from exc

        if response.status_code == 401:
            raise TaskOperationError(
                "Session expired. Please log in again.",
                TaskOperationError.UNAUTHORIZED,
                status_code=401,
            )
        if not _is_success(response):
            raise TaskOperationError(
                _response_error_message(response, default_error),
                TaskOperationError.STATUS,
                status_code=response.status_code,
            )
        return response

    def _json(self, response: requests.Response, default_error: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise TaskOperationError(
                default_error,
                TaskOperationError.INVALID_RESPONSE,
                status_code=response.status_code,
            ) from exc

    def list_tasks(self, token: str) -> list[Task]:
        """``GET /todos`` -- the user's tasks in server order."""
        message = "Error loading tasks."
        response = self._task_call("GET", "/todos", token, message)
        payload = self._json(response, message)
        if not isinstance(payload, list):
            raise TaskOperationError(
                message, TaskOperationError.INVALID_RESPONSE, response.status_code
            )
        try:
            return [Task.from_payload(item) for item in payload]
        except ValueError as exc:
            raise TaskOperationError(
                message, TaskOperationError.INVALID_RESPONSE, response.status_code
            ) from exc

    def create_task(self, token: str, title: str) -> Task:
        """``POST /todos`` -- returns the server-assigned record."""
        message = "Error creating task."
        response = self._task_call("POST", "/todos", token, message, json={"title": title})
        try:
            return Task.from_payload(self._json(response, message))
        except ValueError as exc:
            raise TaskOperationError(
                message, TaskOperationError.INVALID_RESPONSE, response.status_code
            ) from exc

    def set_completed(self, token: str, task_id: Any, completed: bool) -> None:
        """``PUT /todos/:id`` -- the response body is ignored."""
        self._task_call(
            "PUT",
            _todo_path(task_id),
            token,
            "Error updating task.",
            json={"completed": completed},
        )

    def delete_task(self, token: str, task_id: Any) -> None:
        """``DELETE /todos/:id``."""
        self._task_call("DELETE", _todo_path(task_id), token, "Error deleting task.")
