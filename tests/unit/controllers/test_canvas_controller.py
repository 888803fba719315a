from unittest.mock import MagicMock

import pytest

from annotate_canvas.controllers.canvas_controller import CanvasController
from annotate_canvas.frontend.exceptions import ModeUnavailableError
from annotate_canvas.frontend.states.interaction_state import InteractionMode
from annotate_canvas.frontend.utils.draw_gesture import DrawGestureHandler
from annotate_canvas.services.annotation_store import AnnotationStore
from annotate_canvas.services.api_client import AnnotationApiClient
from annotate_canvas.services.exceptions import InternalException
from annotate_canvas.services.sync_service import SyncService

API_BASE = "http://testserver/api"


class TestCanvasController:
    @pytest.fixture
    def store(self):
        return AnnotationStore()

    @pytest.fixture
    def mock_sync_service(self, store):
        """Sync service mock that applies the local phase to the store."""
        sync = MagicMock(spec=SyncService)
        sync.create.side_effect = store.append
        sync.update.side_effect = store.replace
        sync.delete.side_effect = store.remove
        return sync

    @pytest.fixture
    def controller(self, store, mock_sync_service, session):
        return CanvasController(
            store,
            mock_sync_service,
            session,
            draw_handler=DrawGestureHandler(store, id_factory=lambda: "rect-new"),
        )

    def _draw(self, controller, start, end):
        controller.pointer_down(*start)
        controller.pointer_move(*end)
        controller.pointer_up(*end)

    def test_draw_creates_through_sync(self, controller, mock_sync_service):
        self._draw(controller, (100, 100), (250, 180))

        mock_sync_service.create.assert_called_once()
        created = mock_sync_service.create.call_args.args[0]
        assert (created.x, created.y, created.width, created.height) == (100, 100, 150, 80)
        assert controller.preview is None

    def test_small_draw_is_not_created(self, controller, mock_sync_service):
        self._draw(controller, (100, 100), (105, 105))
        mock_sync_service.create.assert_not_called()

    def test_draw_starting_on_a_shape_is_ignored(self, controller, mock_sync_service):
        self._draw(controller, (100, 100), (250, 180))
        mock_sync_service.reset_mock()

        self._draw(controller, (120, 120), (300, 300))

        mock_sync_service.create.assert_not_called()

    def test_preview_follows_pointer(self, controller):
        controller.pointer_down(10, 10)
        controller.pointer_move(60, 40)
        assert (controller.preview.width, controller.preview.height) == (50, 30)

    def test_select_mode_unavailable_when_empty(self, controller):
        with pytest.raises(ModeUnavailableError):
            controller.set_mode(InteractionMode.SELECT)

    def test_drag_in_select_mode_updates(self, controller, mock_sync_service, store):
        self._draw(controller, (100, 100), (250, 180))
        controller.set_mode(InteractionMode.SELECT)

        controller.pointer_down(110, 110)
        controller.pointer_move(130, 100)
        controller.pointer_up(130, 100)

        moved = mock_sync_service.update.call_args.args[0]
        assert (moved.x, moved.y) == (120, 90)
        assert store.get("rect-new").x == 120
        assert controller.selected.id == "rect-new"

    def test_click_without_move_does_not_update(self, controller, mock_sync_service):
        self._draw(controller, (100, 100), (250, 180))
        controller.set_mode(InteractionMode.SELECT)

        controller.pointer_down(110, 110)
        controller.pointer_up(110, 110)

        mock_sync_service.update.assert_not_called()
        assert controller.selected.id == "rect-new"

    def test_background_click_clears_selection(self, controller):
        self._draw(controller, (100, 100), (250, 180))
        controller.set_mode(InteractionMode.SELECT)
        controller.pointer_down(110, 110)
        controller.pointer_up(110, 110)

        controller.pointer_down(800, 500)

        assert controller.selected is None

    def test_resize_from_anchor(self, controller, mock_sync_service):
        self._draw(controller, (100, 100), (250, 180))
        controller.set_mode(InteractionMode.SELECT)
        controller.pointer_down(110, 110)
        controller.pointer_up(110, 110)

        controller.pointer_down(250, 180)
        controller.pointer_move(300, 200)
        controller.pointer_up(300, 200)

        resized = mock_sync_service.update.call_args.args[0]
        assert resized.width == pytest.approx(200)
        assert resized.height == pytest.approx(100)

    def test_mode_switch_cancels_gesture(self, controller, store):
        self._draw(controller, (100, 100), (250, 180))
        controller.set_mode(InteractionMode.SELECT)
        controller.pointer_down(110, 110)
        controller.pointer_move(400, 400)

        controller.set_mode(InteractionMode.DRAW)

        handle = store.handle_for("rect-new")
        assert (handle.x, handle.y) == (100, 100)
        assert controller.selection_handler.gesture is None

    def test_recolor_selected(self, controller, mock_sync_service):
        self._draw(controller, (100, 100), (250, 180))
        controller.set_mode(InteractionMode.SELECT)
        controller.pointer_down(110, 110)
        controller.pointer_up(110, 110)

        updated = controller.recolor_selected("#ff0000")

        assert updated.fill == "#ff000055"
        mock_sync_service.update.assert_called_once_with(updated)

    def test_delete_selected(self, controller, mock_sync_service, store):
        self._draw(controller, (100, 100), (250, 180))
        controller.set_mode(InteractionMode.SELECT)
        controller.pointer_down(110, 110)
        controller.pointer_up(110, 110)

        assert controller.delete_selected() == "rect-new"
        mock_sync_service.delete.assert_called_once_with("rect-new")
        assert controller.mode is InteractionMode.DRAW
        assert controller.delete_selected() is None

    def test_logout_resets_everything(self, controller, store, session):
        session.set("tok", "alice")
        self._draw(controller, (100, 100), (250, 180))

        controller.logout()

        assert len(store) == 0
        assert not session.is_authenticated
        assert controller.mode is InteractionMode.DRAW

    def test_unexpected_errors_become_internal(self, controller, mock_sync_service):
        mock_sync_service.create.side_effect = RuntimeError("bug")
        with pytest.raises(InternalException):
            self._draw(controller, (100, 100), (250, 180))


class TestCanvasAgainstService:
    """Full round trip: gestures, optimistic sync and the FastAPI service."""

    @pytest.fixture
    def setup(self, test_client, register_user, session, immediate_executor):
        session.set(register_user(), "alice")
        store = AnnotationStore()
        api = AnnotationApiClient(session, base_url=API_BASE, http=test_client)
        sync = SyncService(store, api, session, executor=immediate_executor)
        controller = CanvasController(store, sync, session)
        return controller, store, api

    def test_draw_move_recolor_delete(self, setup):
        controller, store, api = setup

        controller.pointer_down(100, 100)
        controller.pointer_move(250, 180)
        controller.pointer_up(250, 180)

        [created] = store.annotations
        assert (created.width, created.height) == (150, 80)
        assert created.server_id is not None
        assert created.name == "Rect 1"

        controller.set_mode(InteractionMode.SELECT)
        controller.pointer_down(110, 110)
        controller.pointer_move(130, 100)
        controller.pointer_up(130, 100)

        [remote] = api.list_annotations()
        assert (remote.x, remote.y) == (120, 90)

        controller.recolor_selected("#ff0000")
        [remote] = api.list_annotations()
        assert remote.stroke == "#ff0000"
        assert remote.fill == "#ff000055"

        controller.delete_selected()
        assert len(store) == 0
        assert api.list_annotations() == []

    def test_reload_restores_annotations(self, setup, session, test_client, immediate_executor):
        controller, store, api = setup
        controller.pointer_down(10, 10)
        controller.pointer_move(60, 60)
        controller.pointer_up(60, 60)

        fresh_store = AnnotationStore()
        fresh = CanvasController(
            fresh_store,
            SyncService(fresh_store, api, session, executor=immediate_executor),
            session,
        )
        fresh.load_annotations()

        assert [a.width for a in fresh_store] == [50]
