from enum import Enum
from typing import Callable, List, Optional

from annotate_canvas.frontend.exceptions import ModeUnavailableError
from annotate_canvas.models.annotation import Annotation
from annotate_canvas.services.annotation_store import AnnotationStore


class InteractionMode(Enum):
    DRAW = "draw"  # Pointer input creates new rectangles
    SELECT = "select"  # Pointer input selects and transforms existing ones


class InteractionState:
    """
    Mode state machine of the canvas plus the current selection.

    Starts in DRAW. SELECT is only reachable while the store holds at least
    one annotation. Entering DRAW clears the selection.
    """

    def __init__(self, store: AnnotationStore) -> None:
        self._store = store
        self._mode: InteractionMode = InteractionMode.DRAW
        self._selected_id: Optional[str] = None
        self._listeners: List[Callable[[], None]] = []
        store.add_listener(self._on_store_changed)

    @property
    def mode(self) -> InteractionMode:
        return self._mode

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def selected(self) -> Optional[Annotation]:
        if self._selected_id is None:
            return None
        return self._store.get(self._selected_id)

    @property
    def can_select(self) -> bool:
        return len(self._store) > 0

    def add_listener(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    def set_mode(self, mode: InteractionMode) -> None:
        if mode is InteractionMode.SELECT and not self.can_select:
            raise ModeUnavailableError("Draw an annotation before switching to select.")
        changed = mode is not self._mode
        self._mode = mode
        if mode is InteractionMode.DRAW and self._selected_id is not None:
            self._selected_id = None
            changed = True
        if changed:
            self._notify()

    def select(self, annotation_id: Optional[str]) -> None:
        if annotation_id is not None and (
            self._mode is not InteractionMode.SELECT or annotation_id not in self._store
        ):
            return
        if annotation_id != self._selected_id:
            self._selected_id = annotation_id
            self._notify()

    def clear_selection(self) -> None:
        self.select(None)

    def _on_store_changed(self) -> None:
        changed = False
        if self._selected_id is not None and self._selected_id not in self._store:
            self._selected_id = None
            changed = True
        if self._mode is InteractionMode.SELECT and not self.can_select:
            self._mode = InteractionMode.DRAW
            changed = True
        if changed:
            self._notify()

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback()
