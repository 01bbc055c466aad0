"""
Session and task-list controller.

Owns the current authentication state and the in-memory, ordered task
collection. Every network call goes through the :class:`TaskApiClient`,
and the local collection is only patched after the server confirms the
change:

* fetch   -- full overwrite with the server's list
* create  -- append the server-returned record
* toggle  -- flip that one task's ``completed`` flag
* remove  -- drop the task with the matching id

Task operations never raise. Each returns an :class:`OperationResult`
carrying either the value or a :class:`TaskOperationError`, and failures
are logged so that a caller which ignores the result still leaves a trace.
A 401 from the server on any task call ends the session.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .api import TaskApiClient
from .auth import token_is_expired
from .errors import AuthError, TaskOperationError
from .models import AuthMode, OperationResult, Session, Task, User, same_id
from .store import SessionStore

logger = logging.getLogger(__name__)


class SessionController:
    """
    Mediates between the user, the session store and the remote API.

    Args:
        api: Client for the remote Task API.
        store: Tab-scoped key/value store holding ``token`` and ``user``.
        expiry_leeway: Seconds of clock skew tolerated when checking a
            restored JWT's ``exp`` claim.
    """

    def __init__(self, api: TaskApiClient, store: SessionStore, expiry_leeway: int = 0):
        self.api = api
        self.store = store
        self.expiry_leeway = expiry_leeway
        self._session: Session | None = None
        self._tasks: list[Task] = []
        self.last_fetch: OperationResult[list[Task]] | None = None

    # -----------------------------------------------------------------
    # State
    # -----------------------------------------------------------------

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def user(self) -> User | None:
        return self._session.user if self._session else None

    @property
    def token(self) -> str | None:
        return self._session.token if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def tasks(self) -> list[Task]:
        """A copy of the local collection, in display order."""
        return list(self._tasks)

    def _begin(self, session: Session) -> None:
        self._session = session
        self._tasks = []

    def _end(self) -> None:
        self.store.clear_session()
        self._session = None
        self._tasks = []

    # -----------------------------------------------------------------
    # Session lifecycle
    # -----------------------------------------------------------------

    def authenticate(
        self, mode: AuthMode | str, credentials: Mapping[str, str]
    ) -> Session:
        """
        Log in or register, persist the session and load the task list.

        Args:
            mode: ``"login"`` or ``"register"``.
            credentials: ``email`` and ``password``, plus ``name`` when
                registering. Only presence is checked here.

        Returns:
            The new :class:`Session`.

        Raises:
            AuthError: When a field is missing or the server refuses. The
                controller stays unauthenticated.
        """
        try:
            mode = AuthMode(mode)
        except ValueError as exc:
            raise AuthError(f"Unknown authentication mode: {mode}", status_code=400) from exc

        missing = [name for name in mode.credential_fields if not credentials.get(name)]
        if missing:
            raise AuthError(
                f"Missing required fields: {', '.join(missing)}.", status_code=400
            )

        session = self.api.authenticate(mode, credentials)
        self.store.save_session(session)
        self._begin(session)
        logger.info("User %s authenticated via %s", session.user.id, mode.value)

        self.fetch_all()
        return session

    def resume(self) -> Session | None:
        """
        Adopt the stored session without contacting the server.

        A session with either entry missing, or whose JWT ``exp`` has
        passed, is discarded. Used directly by callers that are about to
        issue their own request, which will surface a rejected token.
        """
        stored = self.store.load_session()
        if stored is None:
            return None

        if token_is_expired(stored.token, leeway=self.expiry_leeway):
            logger.info("Stored token for user %s has expired", stored.user.id)
            self._end()
            return None

        self._begin(stored)
        return stored

    def restore_session(self) -> Session | None:
        """
        Resume a session saved in the store, validating it first.

        Incomplete or plainly expired sessions are discarded without any
        request. Otherwise exactly one fetch is issued; a 401 answer ends
        the session, any other failure keeps it with an empty list.

        Returns:
            The restored :class:`Session`, or ``None``.
        """
        stored = self.resume()
        if stored is None:
            return None

        result = self.fetch_all()
        if result.error is not None and result.error.session_rejected:
            return None
        return stored

    def logout(self) -> None:
        """Forget the session locally. The token is not revoked server-side."""
        if self._session is not None:
            logger.info("User %s logged out", self._session.user.id)
        self._end()

    # -----------------------------------------------------------------
    # Task operations
    # -----------------------------------------------------------------

    def _failed(self, action: str, error: TaskOperationError) -> OperationResult[Any]:
        logger.warning(
            "Task %s failed (%s, status=%s): %s",
            action,
            error.reason,
            error.status_code,
            error.message,
        )
        if error.session_rejected:
            logger.info("Server rejected the session token; logging out")
            self._end()
        return OperationResult.failure(error)

    def _not_authenticated(self, action: str) -> OperationResult[Any]:
        return self._failed(
            action,
            TaskOperationError(
                "You must be logged in.", TaskOperationError.NOT_AUTHENTICATED
            ),
        )

    def fetch_all(self) -> OperationResult[list[Task]]:
        """
        Replace the local collection with the server's list.

        The outcome is also kept on ``last_fetch`` so callers of
        :meth:`restore_session` can tell a rejected token from a failed load.
        """
        self.last_fetch = self._fetch()
        return self.last_fetch

    def _fetch(self) -> OperationResult[list[Task]]:
        token = self.token
        if token is None:
            return self._not_authenticated("fetch")

        try:
            tasks = self.api.list_tasks(token)
        except TaskOperationError as error:
            return self._failed("fetch", error)

        self._tasks = list(tasks)
        return OperationResult.success(self.tasks)

    def create(self, title: str) -> OperationResult[Task]:
        """Create a task from *title*; blank titles are a no-op."""
        title = (title or "").strip()
        if not title:
            return OperationResult.noop()

        token = self.token
        if token is None:
            return self._not_authenticated("create")

        try:
            task = self.api.create_task(token, title)
        except TaskOperationError as error:
            return self._failed("create", error)

        self._tasks.append(task)
        return OperationResult.success(task)

    def toggle(self, task_id: Any, previous_completed: bool) -> OperationResult[Task]:
        """
        Set ``completed`` to ``not previous_completed`` on the server.

        On success only the local flag is flipped; the server's response
        body is not adopted. The result's value is the updated local task,
        or ``None`` if no local task carries *task_id*.
        """
        token = self.token
        if token is None:
            return self._not_authenticated("toggle")

        completed = not previous_completed
        try:
            self.api.set_completed(token, task_id, completed)
        except TaskOperationError as error:
            return self._failed("toggle", error)

        updated: Task | None = None
        for index, task in enumerate(self._tasks):
            if same_id(task.id, task_id):
                updated = task.with_completed(completed)
                self._tasks[index] = updated
        return OperationResult.success(updated)

    def remove(self, task_id: Any) -> OperationResult[None]:
        """Delete a task on the server, then drop it locally."""
        token = self.token
        if token is None:
            return self._not_authenticated("remove")

        try:
            self.api.delete_task(token, task_id)
        except TaskOperationError as error:
            return self._failed("remove", error)

        # The collection may have been cleared while the request was in
        # flight; removing from an empty list is harmless.
        self._tasks = [task for task in self._tasks if not same_id(task.id, task_id)]
        return OperationResult.success()
