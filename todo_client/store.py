"""
Tab-scoped key/value storage for the session.

The session lives under two fixed string keys: ``token`` (the raw bearer
token) and ``user`` (the user object, JSON-encoded). Both entries are
written together and removed together.

Two backends are provided:

* :class:`MemoryStore` -- a plain dictionary, used by tests and by callers
  that drive the controller outside a web request.
* :class:`FlaskSessionStore` -- backed by Flask's signed session cookie.
  The cookie is not marked permanent, so it is discarded when the
  browser session ends.
"""

from __future__ import annotations

import json
import logging
from collections.abc import MutableMapping

from flask import session as flask_session

from .models import Session, User

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class SessionStore:
    """Base class: string key/value access plus session helpers."""

    def get(self, key: str) -> str | None:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def save_session(self, session: Session) -> None:
        """Persist both session entries."""
        self.set(TOKEN_KEY, session.token)
        self.set(USER_KEY, json.dumps(session.user.to_dict()))

    def load_session(self) -> Session | None:
        """
        Read the stored session back.

        Returns ``None`` when either entry is missing or the user entry
        cannot be decoded. In that case any leftover entry is removed, so
        the store never holds a token without a user or the reverse.
        """
        token = self.get(TOKEN_KEY)
        raw_user = self.get(USER_KEY)
        if not token or not raw_user:
            if token or raw_user:
                logger.info("Discarding incomplete stored session")
                self.clear_session()
            return None

        try:
            user = User.from_payload(json.loads(raw_user))
        except ValueError:
            logger.warning("Discarding stored session with unreadable user entry")
            self.clear_session()
            return None
        return Session(token=token, user=user)

    def clear_session(self) -> None:
        self.remove(TOKEN_KEY)
        self.remove(USER_KEY)


class MemoryStore(SessionStore):
    """Dictionary-backed store."""

    def __init__(self, data: MutableMapping[str, str] | None = None):
        self.data: MutableMapping[str, str] = {} if data is None else data

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class FlaskSessionStore(SessionStore):
    """Store backed by the current request's Flask session cookie."""

    def get(self, key: str) -> str | None:
        value = flask_session.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        flask_session[key] = value

    def remove(self, key: str) -> None:
        flask_session.pop(key, None)
