"""
Data models for the todo client.

Mirrors the remote Task API's data contract with small, immutable
dataclasses. The API is the source of truth for every field; these types
only parse its JSON payloads and serialise them back for the session store.

``AuthMode`` inherits from ``str`` as well as ``Enum`` so that form values
and URL query parameters compare directly against its members.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Generic, TypeVar

from .errors import TaskOperationError

T = TypeVar("T")


class AuthMode(str, Enum):
    """
    Authentication flows offered by the remote API.

    Attributes:
        LOGIN: Existing account, credentials ``email`` and ``password``.
        REGISTER: New account, credentials ``name``, ``email`` and ``password``.
    """

    LOGIN = "login"
    REGISTER = "register"

    @property
    def endpoint(self) -> str:
        """Return the API path that handles this mode."""
        return f"/auth/{self.value}"

    @property
    def credential_fields(self) -> tuple[str, ...]:
        """Return the credential fields the API expects for this mode."""
        if self is AuthMode.REGISTER:
            return ("name", "email", "password")
        return ("email", "password")


def same_id(left: Any, right: Any) -> bool:
    """Compare two opaque ids, tolerating ``7`` versus ``"7"``."""
    return str(left) == str(right)


@dataclass(frozen=True)
class User:
    """Authenticated identity as issued by the server."""

    id: Any
    name: str
    email: str

    @classmethod
    def from_payload(cls, data: Any) -> User:
        """
        Build a user from an API or session-store payload.

        Raises:
            ValueError: If *data* is not an object or lacks an ``id``.
        """
        if not isinstance(data, dict) or data.get("id") is None:
            raise ValueError("User payload must be an object with an id")
        return cls(
            id=data["id"],
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass(frozen=True)
class Task:
    """A single to-do item owned by the authenticated user."""

    id: Any
    title: str
    completed: bool = False

    @classmethod
    def from_payload(cls, data: Any) -> Task:
        """
        Build a task from an API payload.

        Raises:
            ValueError: If *data* is not an object, lacks an ``id``, or
                carries a ``completed`` value that is not a boolean.
        """
        if not isinstance(data, dict) or data.get("id") is None:
            raise ValueError("Task payload must be an object with an id")
        completed = data.get("completed", False)
        if not isinstance(completed, bool):
            raise ValueError("Task completed flag must be a boolean")
        return cls(
            id=data["id"],
            title=str(data.get("title") or ""),
            completed=completed,
        )

    def with_completed(self, completed: bool) -> Task:
        return replace(self, completed=completed)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "completed": self.completed}


@dataclass(frozen=True)
class Session:
    """Bearer token and user, always held together."""

    token: str
    user: User


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """
    Outcome of a controller operation.

    Exactly one of three shapes:

    * success -- ``value`` holds the operation's result (may be ``None``
      for operations without one, such as a delete);
    * failure -- ``error`` holds the :class:`TaskOperationError`;
    * no-op -- ``skipped`` is true and nothing was sent to the server.
    """

    value: T | None = None
    error: TaskOperationError | None = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> OperationResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: TaskOperationError) -> OperationResult[T]:
        return cls(error=error)

    @classmethod
    def noop(cls) -> OperationResult[T]:
        return cls(skipped=True)
