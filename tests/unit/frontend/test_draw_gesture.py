import pytest

from annotate_canvas.frontend.utils.draw_gesture import (
    DrawGestureHandler,
    new_annotation_id,
)
from annotate_canvas.services.annotation_store import AnnotationStore


@pytest.fixture
def store():
    return AnnotationStore()


@pytest.fixture
def handler(store):
    return DrawGestureHandler(store, id_factory=lambda: "rect-new")


class TestDrawGestureHandler:
    def test_new_ids_are_unique(self):
        assert new_annotation_id() != new_annotation_id()
        assert new_annotation_id().startswith("rect-")

    def test_start_creates_preview(self, handler):
        preview = handler.start(100, 100)

        assert handler.active
        assert preview.id == "rect-new"
        assert preview.name == "Rect 1"
        assert (preview.x, preview.y, preview.width, preview.height) == (100, 100, 1, 1)
        assert preview.stroke == "#6366f1"
        assert preview.fill == "#6366f155"

    def test_name_counts_existing_annotations(self, handler, store, make_annotation):
        store.append(make_annotation(id="a"))
        store.append(make_annotation(id="b"))
        assert handler.start(0, 0).name == "Rect 3"

    def test_drag_down_right(self, handler):
        handler.start(100, 100)
        handler.update(250, 180)

        annotation = handler.release()

        assert (annotation.x, annotation.y) == (100, 100)
        assert (annotation.width, annotation.height) == (150, 80)
        assert not handler.active
        assert handler.preview is None

    def test_drag_up_left_is_normalised(self, handler):
        handler.start(250, 180)
        handler.update(100, 100)

        preview = handler.preview

        assert (preview.x, preview.y, preview.width, preview.height) == (100, 100, 150, 80)

    @pytest.mark.parametrize("end", [(110, 200), (200, 110), (105, 105)])
    def test_small_gestures_are_discarded(self, handler, store, end):
        handler.start(100, 100)
        handler.update(*end)

        assert handler.release() is None
        assert len(store) == 0

    def test_exact_minimum_is_kept(self, handler):
        handler.start(0, 0)
        handler.update(20, 20)
        assert handler.release() is not None

    def test_update_without_start_is_ignored(self, handler):
        assert handler.update(10, 10) is None
        assert handler.release() is None

    def test_cancel(self, handler):
        handler.start(0, 0)
        handler.cancel()
        assert not handler.active
        assert handler.release() is None

    def test_release_does_not_touch_store(self, handler, store):
        handler.start(0, 0)
        handler.update(100, 100)
        handler.release()
        assert len(store) == 0
