from unittest.mock import MagicMock

import pytest

from annotate_canvas.services.session import Session, TokenStorage


@pytest.fixture
def storage(tmp_path):
    return TokenStorage(str(tmp_path / "nested" / "session.json"))


class TestTokenStorage:
    def test_read_missing_file_is_empty(self, storage):
        assert storage.read() == {}

    def test_write_then_read(self, storage):
        storage.write("tok", "alice")
        assert storage.read() == {"token": "tok", "username": "alice"}

    def test_unreadable_file_is_ignored(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json")
        assert TokenStorage(str(path)).read() == {}

    def test_clear_removes_file(self, storage):
        storage.write("tok", "alice")
        storage.clear()
        assert storage.read() == {}


class TestSession:
    def test_starts_unauthenticated(self, storage):
        session = Session(storage)
        assert not session.is_authenticated
        assert session.token is None

    def test_set_persists_and_notifies(self, storage):
        session = Session(storage)
        listener = MagicMock()
        session.add_listener(listener)

        session.set("tok", "alice")

        assert session.is_authenticated
        assert session.username == "alice"
        assert storage.read()["token"] == "tok"
        listener.assert_called_once_with(session)

    def test_load_restores_persisted_token(self, storage):
        storage.write("tok", "alice")
        session = Session(storage)

        assert session.load() is True
        assert session.token == "tok"
        assert session.username == "alice"

    def test_load_without_token(self, storage):
        assert Session(storage).load() is False

    def test_epoch_changes_with_the_user(self, storage):
        session = Session(storage)
        start = session.epoch

        session.set("tok", "alice")
        after_login = session.epoch
        session.clear()

        assert start < after_login < session.epoch

    def test_clear_forgets_token(self, storage):
        session = Session(storage)
        session.set("tok", "alice")
        listener = MagicMock()
        session.add_listener(listener)

        session.clear()
        session.clear()

        assert not session.is_authenticated
        assert storage.read() == {}
        listener.assert_called_once_with(session)
