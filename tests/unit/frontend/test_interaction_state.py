from unittest.mock import MagicMock

import pytest

from annotate_canvas.frontend.exceptions import ModeUnavailableError
from annotate_canvas.frontend.states.interaction_state import (
    InteractionMode,
    InteractionState,
)
from annotate_canvas.services.annotation_store import AnnotationStore


@pytest.fixture
def store():
    return AnnotationStore()


@pytest.fixture
def state(store):
    return InteractionState(store)


class TestInteractionState:
    def test_starts_in_draw_without_selection(self, state):
        assert state.mode is InteractionMode.DRAW
        assert state.selected_id is None
        assert not state.can_select

    def test_select_mode_needs_annotations(self, state):
        with pytest.raises(ModeUnavailableError):
            state.set_mode(InteractionMode.SELECT)
        assert state.mode is InteractionMode.DRAW

    def test_switch_to_select(self, state, store, make_annotation):
        store.append(make_annotation())
        state.set_mode(InteractionMode.SELECT)
        assert state.mode is InteractionMode.SELECT

    def test_select_only_in_select_mode(self, state, store, make_annotation):
        store.append(make_annotation())
        state.select("rect-1")
        assert state.selected_id is None

        state.set_mode(InteractionMode.SELECT)
        state.select("rect-1")
        assert state.selected_id == "rect-1"

    def test_select_unknown_id_is_ignored(self, state, store, make_annotation):
        store.append(make_annotation())
        state.set_mode(InteractionMode.SELECT)
        state.select("ghost")
        assert state.selected_id is None

    def test_selected_returns_the_current_record(self, state, store, make_annotation):
        store.append(make_annotation(stroke="#ff0000"))
        state.set_mode(InteractionMode.SELECT)
        assert state.selected is None

        state.select("rect-1")

        assert state.selected.stroke == "#ff0000"

    def test_entering_draw_clears_selection(self, state, store, make_annotation):
        store.append(make_annotation())
        state.set_mode(InteractionMode.SELECT)
        state.select("rect-1")

        state.set_mode(InteractionMode.DRAW)

        assert state.selected_id is None

    def test_removed_selection_is_cleared(self, state, store, make_annotation):
        store.append(make_annotation(id="a"))
        store.append(make_annotation(id="b"))
        state.set_mode(InteractionMode.SELECT)
        state.select("a")

        store.remove("a")

        assert state.selected_id is None
        assert state.mode is InteractionMode.SELECT

    def test_empty_store_falls_back_to_draw(self, state, store, make_annotation):
        store.append(make_annotation())
        state.set_mode(InteractionMode.SELECT)

        store.remove("rect-1")

        assert state.mode is InteractionMode.DRAW

    def test_listeners_only_on_change(self, state, store, make_annotation):
        store.append(make_annotation())
        listener = MagicMock()
        state.add_listener(listener)

        state.set_mode(InteractionMode.DRAW)
        listener.assert_not_called()

        state.set_mode(InteractionMode.SELECT)
        state.select("rect-1")
        state.select("rect-1")
        assert listener.call_count == 2
