from concurrent.futures import Executor, Future

import pytest
from fastapi.testclient import TestClient

from annotate_canvas.models.annotation import Annotation
from annotate_canvas.server.app import create_app
from annotate_canvas.server.config import Settings
from annotate_canvas.services.session import Session, TokenStorage


class ImmediateExecutor(Executor):
    """Runs submitted calls synchronously."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


class DeferredExecutor(Executor):
    """Holds submitted calls until ``run_next``/``run_all`` is called."""

    def __init__(self):
        self.queue = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.queue.append((future, fn, args, kwargs))
        return future

    def run_next(self):
        future, fn, args, kwargs = self.queue.pop(0)
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def run_all(self):
        while self.queue:
            self.run_next()


@pytest.fixture
def immediate_executor():
    return ImmediateExecutor()


@pytest.fixture
def deferred_executor():
    return DeferredExecutor()


@pytest.fixture
def make_annotation():
    def _make(**overrides):
        data = {
            "id": "rect-1",
            "x": 10.0,
            "y": 20.0,
            "width": 100.0,
            "height": 50.0,
            "fill": "#6366f155",
            "stroke": "#6366f1",
            "name": "Rect 1",
        }
        data.update(overrides)
        return Annotation(**data)

    return _make


@pytest.fixture
def session(tmp_path):
    return Session(TokenStorage(str(tmp_path / "session.json")))


@pytest.fixture
def server_settings():
    return Settings(jwt_secret="test-secret", jwt_expire_hours=1)


@pytest.fixture
def server_app(server_settings):
    return create_app(server_settings)


@pytest.fixture
def test_client(server_app):
    with TestClient(server_app) as client:
        yield client


@pytest.fixture
def register_user(test_client):
    """Register a user on the test server and return its token."""

    def _register(username="alice", password="secret"):
        response = test_client.post(
            "/api/auth/register", json={"username": username, "password": password}
        )
        assert response.status_code == 200, response.text
        return response.json()["token"]

    return _register
