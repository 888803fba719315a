"""
The authenticated user session of the canvas client.

The token is persisted in the user's data directory so a restart keeps the
user logged in. The Session is created once in main.py and handed to every
component that needs it.
"""

import logging
import os
from typing import Callable, List, Optional

from appdirs import user_data_dir

from annotate_canvas.logger_config import APP_NAME
from annotate_canvas.utils import read_json, write_json

logger = logging.getLogger(__name__)


class TokenStorage:
    """JSON file holding the bearer token and the username."""

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path or os.path.join(user_data_dir(APP_NAME), "session.json")

    def read(self) -> dict:
        if not os.path.isfile(self.path):
            return {}
        try:
            data = read_json(self.path)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def write(self, token: str, username: Optional[str]) -> None:
        write_json(self.path, {"token": token, "username": username})

    def clear(self) -> None:
        if os.path.isfile(self.path):
            os.remove(self.path)


class Session:
    def __init__(self, storage: Optional[TokenStorage] = None) -> None:
        self._storage = storage or TokenStorage()
        self._token: Optional[str] = None
        self._username: Optional[str] = None
        # Bumped whenever the user changes; replies from an older epoch are dropped.
        self._epoch = 0
        self._listeners: List[Callable[["Session"], None]] = []

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def username(self) -> Optional[str]:
        return self._username

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def add_listener(self, callback: Callable[["Session"], None]) -> None:
        self._listeners.append(callback)

    def load(self) -> bool:
        """Restore a persisted token. Returns True when one was found."""
        data = self._storage.read()
        token = data.get("token")
        if not token:
            return False
        # No validation endpoint: a stale token surfaces as a 401 later.
        self._token = token
        self._username = data.get("username")
        self._epoch += 1
        logger.info("Restored session for %s", self._username or "unknown user")
        self._notify()
        return True

    def set(self, token: str, username: Optional[str] = None) -> None:
        self._token = token
        self._username = username
        self._epoch += 1
        self._storage.write(token, username)
        logger.info("Session started for %s", username or "unknown user")
        self._notify()

    def clear(self) -> None:
        if self._token is None and self._username is None:
            return
        self._token = None
        self._username = None
        self._epoch += 1
        self._storage.clear()
        logger.info("Session cleared")
        self._notify()

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self)
