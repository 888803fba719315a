"""
Controller between the canvas widget and the annotation services.

Pointer events arrive here in canvas coordinates. Depending on the
interaction mode they go to the draw gesture or to the selection handler;
every finished gesture is written through the sync service.
"""

import logging
from concurrent.futures import Future
from typing import Optional

from annotate_canvas.frontend.states.interaction_state import (
    InteractionMode,
    InteractionState,
)
from annotate_canvas.frontend.utils.draw_gesture import DrawGestureHandler
from annotate_canvas.frontend.utils.selection import SelectionHandler
from annotate_canvas.models.annotation import Annotation
from annotate_canvas.services.annotation_store import AnnotationStore
from annotate_canvas.services.session import Session
from annotate_canvas.services.sync_service import SyncService

from .error_handler_middleware import error_handler

logger = logging.getLogger(__name__)


class CanvasController:
    def __init__(
        self,
        store: AnnotationStore,
        sync_service: SyncService,
        session: Session,
        state: Optional[InteractionState] = None,
        draw_handler: Optional[DrawGestureHandler] = None,
        selection_handler: Optional[SelectionHandler] = None,
    ) -> None:
        self.store = store
        self.sync_service = sync_service
        self.session = session
        self.state = state or InteractionState(store)
        self.draw_handler = draw_handler or DrawGestureHandler(store)
        self.selection_handler = selection_handler or SelectionHandler(self.state, store)

    @property
    def mode(self) -> InteractionMode:
        return self.state.mode

    @property
    def preview(self) -> Optional[Annotation]:
        return self.draw_handler.preview

    @property
    def selected(self) -> Optional[Annotation]:
        return self.selection_handler.selected()

    @error_handler
    def load_annotations(self) -> Future:
        return self.sync_service.load()

    @error_handler
    def set_mode(self, mode: InteractionMode) -> None:
        self.state.set_mode(mode)
        # Gestures never survive a mode switch.
        self.draw_handler.cancel()
        self.selection_handler.cancel()

    # Pointer events

    @error_handler
    def pointer_down(self, x: float, y: float) -> None:
        if self.state.mode is InteractionMode.DRAW:
            # Only the empty background starts a rectangle.
            if self.store.hit_test(x, y) is None:
                self.draw_handler.start(x, y)
            return

        anchor = self.selection_handler.anchor_at(x, y)
        if anchor is not None:
            self.selection_handler.begin_resize(anchor, x, y)
            return

        target = self.store.hit_test(x, y)
        if target is None:
            self.state.clear_selection()
            return
        self.selection_handler.begin_drag(target, x, y)

    @error_handler
    def pointer_move(self, x: float, y: float) -> None:
        if self.state.mode is InteractionMode.DRAW:
            self.draw_handler.update(x, y)
        elif self.selection_handler.gesture == "drag":
            self.selection_handler.drag_to(x, y)
        elif self.selection_handler.gesture == "resize":
            self.selection_handler.resize_to(x, y)

    @error_handler
    def pointer_up(self, x: float, y: float) -> None:
        if self.state.mode is InteractionMode.DRAW:
            if not self.draw_handler.active:
                return
            self.draw_handler.update(x, y)
            annotation = self.draw_handler.release()
            if annotation is not None:
                self.sync_service.create(annotation)
            return

        gesture = self.selection_handler.gesture
        if gesture == "drag":
            self.selection_handler.drag_to(x, y)
            updated = self.selection_handler.end_drag()
        elif gesture == "resize":
            self.selection_handler.resize_to(x, y)
            updated = self.selection_handler.end_resize()
        else:
            return
        if updated is not None:
            self.sync_service.update(updated)

    # Toolbar actions

    @error_handler
    def recolor_selected(self, color: str) -> Optional[Annotation]:
        updated = self.selection_handler.recolor(color)
        if updated is not None:
            self.sync_service.update(updated)
        return updated

    @error_handler
    def delete_selected(self) -> Optional[str]:
        selected_id = self.state.selected_id
        if selected_id is None:
            return None
        self.selection_handler.cancel()
        self.state.clear_selection()
        self.sync_service.delete(selected_id)
        return selected_id

    @error_handler
    def logout(self) -> None:
        self.draw_handler.cancel()
        self.selection_handler.cancel()
        self.state.set_mode(InteractionMode.DRAW)
        self.store.reset([])
        self.session.clear()
