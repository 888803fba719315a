"""Selection, drag and resize of existing annotations."""

import logging
from dataclasses import dataclass
from typing import Optional

from annotate_canvas.frontend.exceptions import NoSelectionError
from annotate_canvas.frontend.states.interaction_state import InteractionState
from annotate_canvas.frontend.utils.colors import normalize_hex, translucent_fill
from annotate_canvas.frontend.utils.settings_store import get_min_transform_size
from annotate_canvas.models.annotation import Annotation
from annotate_canvas.services.annotation_store import AnnotationStore, ShapeHandle

logger = logging.getLogger(__name__)

ANCHORS = (
    "top-left",
    "top-center",
    "top-right",
    "middle-right",
    "bottom-right",
    "bottom-center",
    "bottom-left",
    "middle-left",
)


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    width: float
    height: float


class BoundingBoxManipulator:
    """
    Resize handles around the selected shape.

    Rotation is not supported. Every proposed box goes through ``bound_box``,
    which keeps the previous box when the proposal is below the minimum size.
    """

    rotate_enabled = False

    def __init__(
        self,
        min_width: Optional[float] = None,
        min_height: Optional[float] = None,
        anchor_size: float = 10.0,
    ) -> None:
        self.min_width = get_min_transform_size() if min_width is None else min_width
        self.min_height = get_min_transform_size() if min_height is None else min_height
        self.anchor_size = anchor_size

    def bound_box(self, old_box: Box, new_box: Box) -> Box:
        if new_box.width < self.min_width or new_box.height < self.min_height:
            return old_box
        return new_box

    def anchor_points(self, box: Box) -> dict[str, tuple[float, float]]:
        left, top = box.x, box.y
        right, bottom = box.x + box.width, box.y + box.height
        mid_x, mid_y = left + box.width / 2, top + box.height / 2
        return {
            "top-left": (left, top),
            "top-center": (mid_x, top),
            "top-right": (right, top),
            "middle-right": (right, mid_y),
            "bottom-right": (right, bottom),
            "bottom-center": (mid_x, bottom),
            "bottom-left": (left, bottom),
            "middle-left": (left, mid_y),
        }

    def anchor_at(self, box: Box, x: float, y: float) -> Optional[str]:
        half = self.anchor_size / 2
        for name, (ax, ay) in self.anchor_points(box).items():
            if abs(x - ax) <= half and abs(y - ay) <= half:
                return name
        return None

    @staticmethod
    def propose(box: Box, anchor: str, dx: float, dy: float) -> Box:
        """Box obtained by dragging ``anchor`` of ``box`` by (dx, dy)."""
        if anchor not in ANCHORS:
            raise ValueError(f"Unknown anchor '{anchor}'")
        left, top = box.x, box.y
        right, bottom = box.x + box.width, box.y + box.height
        if anchor.endswith("left"):
            left += dx
        elif anchor.endswith("right"):
            right += dx
        if anchor.startswith("top"):
            top += dy
        elif anchor.startswith("bottom"):
            bottom += dy
        # A flipped box has a negative extent and is refused by bound_box.
        return Box(left, top, right - left, bottom - top)


class SelectionHandler:
    def __init__(
        self,
        state: InteractionState,
        store: AnnotationStore,
        manipulator: Optional[BoundingBoxManipulator] = None,
    ) -> None:
        self._state = state
        self._store = store
        self.manipulator = manipulator or BoundingBoxManipulator()

        self._gesture: Optional[str] = None  # "drag" | "resize"
        self._press: Optional[tuple[float, float]] = None
        self._orig: Optional[Annotation] = None
        self._anchor: Optional[str] = None
        self._box: Optional[Box] = None

    @property
    def gesture(self) -> Optional[str]:
        return self._gesture

    def selected(self) -> Optional[Annotation]:
        selected_id = self._state.selected_id
        return None if selected_id is None else self._store.get(selected_id)

    def selection_box(self) -> Optional[Box]:
        """Displayed box of the selection, including an ongoing transform."""
        selected_id = self._state.selected_id
        handle = None if selected_id is None else self._store.handle_for(selected_id)
        if handle is None:
            return None
        return Box(*handle.bounds())

    def anchor_at(self, x: float, y: float) -> Optional[str]:
        box = self.selection_box()
        return None if box is None else self.manipulator.anchor_at(box, x, y)

    # Drag

    def begin_drag(self, annotation_id: str, x: float, y: float) -> None:
        self._state.select(annotation_id)
        annotation = self._store.get(annotation_id)
        if annotation is None or self._state.selected_id != annotation_id:
            return
        self._start("drag", annotation, x, y)

    def drag_to(self, x: float, y: float) -> None:
        handle = self._active_handle("drag")
        if handle is None:
            return
        dx, dy = x - self._press[0], y - self._press[1]
        handle.x = self._orig.x + dx
        handle.y = self._orig.y + dy

    def end_drag(self) -> Optional[Annotation]:
        """Finish a drag. Returns the moved annotation, or None if it did not move."""
        handle = self._active_handle("drag")
        orig = self._orig
        self._reset_gesture()
        if handle is None:
            return None
        current = self._store.get(orig.id)
        if current is None:
            return None
        if handle.x == current.x and handle.y == current.y:
            return None
        return current.model_copy(update={"x": handle.x, "y": handle.y})

    # Resize

    def begin_resize(self, anchor: str, x: float, y: float) -> None:
        annotation = self.selected()
        if annotation is None:
            raise NoSelectionError("Select an annotation before resizing it.")
        self._start("resize", annotation, x, y)
        self._anchor = anchor
        self._box = Box(annotation.x, annotation.y, annotation.width, annotation.height)

    def resize_to(self, x: float, y: float) -> None:
        handle = self._active_handle("resize")
        if handle is None:
            return
        orig = self._orig
        proposed = self.manipulator.propose(
            Box(orig.x, orig.y, orig.width, orig.height),
            self._anchor,
            x - self._press[0],
            y - self._press[1],
        )
        self._box = self.manipulator.bound_box(self._box, proposed)
        handle.x, handle.y = self._box.x, self._box.y
        handle.scale_x = self._box.width / orig.width if orig.width else 1.0
        handle.scale_y = self._box.height / orig.height if orig.height else 1.0

    def end_resize(self) -> Optional[Annotation]:
        """
        Finish a resize. The handle's scale is folded into width/height and
        reset to 1 so consecutive resizes do not compound.
        """
        handle = self._active_handle("resize")
        orig = self._orig
        self._reset_gesture()
        if handle is None:
            return None
        scale_x, scale_y = handle.scale_x, handle.scale_y
        handle.reset_scale()
        current = self._store.get(orig.id)
        if current is None:
            return None
        if (scale_x, scale_y) == (1.0, 1.0) and (handle.x, handle.y) == (current.x, current.y):
            return None
        updated = current.model_copy(
            update={
                "x": handle.x,
                "y": handle.y,
                "width": max(self.manipulator.min_width, orig.width * scale_x),
                "height": max(self.manipulator.min_height, orig.height * scale_y),
            }
        )
        handle.width, handle.height = updated.width, updated.height
        return updated

    # Colour

    def recolor(self, color: str) -> Optional[Annotation]:
        """Selected annotation with the new stroke and matching fill, or None."""
        annotation = self.selected()
        if annotation is None:
            return None
        return annotation.model_copy(
            update={"stroke": normalize_hex(color), "fill": translucent_fill(color)}
        )

    def cancel(self) -> None:
        """Abort an ongoing drag/resize and snap the handle back to its record."""
        if self._gesture is not None and self._orig is not None:
            handle = self._store.handle_for(self._orig.id)
            current = self._store.get(self._orig.id)
            if handle is not None and current is not None:
                handle.sync_to(current)
        self._reset_gesture()

    def _start(self, gesture: str, annotation: Annotation, x: float, y: float) -> None:
        self._gesture = gesture
        self._press = (x, y)
        self._orig = annotation

    def _active_handle(self, gesture: str) -> Optional[ShapeHandle]:
        if self._gesture != gesture or self._orig is None:
            return None
        return self._store.handle_for(self._orig.id)

    def _reset_gesture(self) -> None:
        self._gesture = None
        self._press = None
        self._orig = None
        self._anchor = None
        self._box = None
