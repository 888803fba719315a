import logging
from typing import Callable

logger = logging.getLogger(__name__)


def _call_now(fn: Callable[[], None]) -> None:
    fn()


class ReloginState:
    """
    Keeps at most one login prompt scheduled or open.

    Several requests can fail with 401 at once; each one asks for a re-login,
    but only the first schedules the prompt. Requests arriving while the
    prompt is open (the modal dialog runs a nested event loop) are ignored.
    """

    def __init__(
        self,
        prompt: Callable[[], bool],
        is_authenticated: Callable[[], bool],
        on_success: Callable[[], None],
        on_abandon: Callable[[], None],
        schedule: Callable[[Callable[[], None]], None] = _call_now,
    ) -> None:
        self._prompt = prompt
        self._is_authenticated = is_authenticated
        self._on_success = on_success
        self._on_abandon = on_abandon
        self._schedule = schedule
        self._scheduled = False
        self._open = False

    @property
    def busy(self) -> bool:
        return self._scheduled or self._open

    def request(self) -> bool:
        """Schedule a login prompt. Returns False if one is already pending."""
        if self.busy:
            logger.debug("Login prompt already pending")
            return False
        self._scheduled = True
        self._schedule(self.run)
        return True

    def run(self) -> None:
        self._scheduled = False
        if self._open:
            return
        self._open = True
        try:
            accepted = self._prompt()
        finally:
            self._open = False
        if accepted:
            self._on_success()
        elif not self._is_authenticated():
            self._on_abandon()
