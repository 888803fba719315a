from unittest.mock import MagicMock

import pytest

from annotate_canvas.frontend.states.relogin_state import ReloginState


@pytest.fixture
def scheduled():
    return []


@pytest.fixture
def callbacks():
    return {
        "prompt": MagicMock(return_value=True),
        "is_authenticated": MagicMock(return_value=False),
        "on_success": MagicMock(),
        "on_abandon": MagicMock(),
    }


@pytest.fixture
def relogin(callbacks, scheduled):
    return ReloginState(schedule=scheduled.append, **callbacks)


class TestReloginState:
    def test_second_request_while_scheduled_is_ignored(self, relogin, scheduled):
        assert relogin.request() is True
        assert relogin.request() is False

        assert len(scheduled) == 1
        assert relogin.busy

    def test_accepted_prompt_reloads_once(self, relogin, callbacks, scheduled):
        relogin.request()
        relogin.request()

        scheduled[0]()

        callbacks["prompt"].assert_called_once_with()
        callbacks["on_success"].assert_called_once_with()
        callbacks["on_abandon"].assert_not_called()
        assert not relogin.busy

    def test_declined_prompt_without_session_abandons(self, relogin, callbacks, scheduled):
        callbacks["prompt"].return_value = False

        relogin.request()
        scheduled[0]()

        callbacks["on_success"].assert_not_called()
        callbacks["on_abandon"].assert_called_once_with()

    def test_declined_prompt_with_session_keeps_window(self, relogin, callbacks, scheduled):
        callbacks["prompt"].return_value = False
        callbacks["is_authenticated"].return_value = True

        relogin.request()
        scheduled[0]()

        callbacks["on_abandon"].assert_not_called()

    def test_requests_while_prompt_is_open_are_ignored(self, relogin, callbacks, scheduled):
        # A later 401 is delivered while the modal dialog runs its own loop.
        nested = []
        callbacks["prompt"].side_effect = lambda: nested.append(relogin.request()) or True

        relogin.request()
        scheduled[0]()

        assert nested == [False]
        assert len(scheduled) == 1
        callbacks["prompt"].assert_called_once_with()
        callbacks["on_abandon"].assert_not_called()
        assert not relogin.busy

    def test_busy_cleared_when_prompt_raises(self, relogin, callbacks, scheduled):
        callbacks["prompt"].side_effect = RuntimeError("dialog failed")
        relogin.request()

        with pytest.raises(RuntimeError):
            scheduled[0]()

        assert not relogin.busy
        assert relogin.request() is True

    def test_runs_immediately_by_default(self, callbacks):
        relogin = ReloginState(**callbacks)

        assert relogin.request() is True

        callbacks["on_success"].assert_called_once_with()
        assert not relogin.busy
