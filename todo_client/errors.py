"""
Error taxonomy for the todo client.

Two families of failure exist and they are treated differently:

* :class:`AuthError` -- login or registration failed. Always surfaced to
  the user as text, either the server's own ``error`` message or a
  generic connectivity message.
* :class:`TaskOperationError` -- a fetch, create, toggle or delete did not
  succeed. The controller never raises it; it is logged and returned inside
  an ``OperationResult`` so the caller decides whether to show it.
"""

from __future__ import annotations

CONNECTION_ERROR_MESSAGE = "Connection error. Make sure the backend is running."
AUTH_FAILED_MESSAGE = "Authentication failed"
INVALID_AUTH_RESPONSE_MESSAGE = "Invalid authentication response received."


class TodoClientError(Exception):
    """Base class for every error raised by the todo client."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthError(TodoClientError):
    """
    Authentication against the remote API failed.

    Attributes:
        status_code: HTTP status the web layer should answer with, or
            ``None`` when the API could not be reached at all.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TaskOperationError(TodoClientError):
    """
    A task operation did not complete on the server.

    Attributes:
        reason: One of ``not_authenticated`` (no token, nothing sent),
            ``unauthorized`` (server answered 401), ``transport`` (the
            request could not be sent or timed out), ``status`` (any
            other non-success status) or ``invalid_response`` (success
            status with an unusable body).
        status_code: HTTP status code when a response was received.
    """

    NOT_AUTHENTICATED = "not_authenticated"
    UNAUTHORIZED = "unauthorized"
    TRANSPORT = "transport"
    STATUS = "status"
    INVALID_RESPONSE = "invalid_response"

    def __init__(self, message: str, reason: str, status_code: int | None = None):
        super().__init__(message)
        self.reason = reason
        self.status_code = status_code

    @property
    def session_rejected(self) -> bool:
        """True when the server refused the bearer token."""
        return self.reason == self.UNAUTHORIZED
