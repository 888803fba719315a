"""
In-memory annotation store for the current canvas session.

The store is the single source of truth for rendering. Next to the ordered
records it keeps one ShapeHandle per annotation id: the renderable node the
canvas draws and the gesture handlers move/scale during a gesture.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional

from annotate_canvas.models.annotation import Annotation

from .exceptions import InvalidAnnotationError

logger = logging.getLogger(__name__)


@dataclass
class ShapeHandle:
    """Renderable node for one annotation (canvas coordinates)."""

    annotation_id: str
    x: float
    y: float
    width: float
    height: float
    scale_x: float = 1.0
    scale_y: float = 1.0

    @classmethod
    def for_annotation(cls, annotation: Annotation) -> "ShapeHandle":
        return cls(
            annotation_id=annotation.id,
            x=annotation.x,
            y=annotation.y,
            width=annotation.width,
            height=annotation.height,
        )

    def sync_to(self, annotation: Annotation) -> None:
        self.x = annotation.x
        self.y = annotation.y
        self.width = annotation.width
        self.height = annotation.height
        self.reset_scale()

    def reset_scale(self) -> None:
        self.scale_x = 1.0
        self.scale_y = 1.0

    def bounds(self) -> tuple[float, float, float, float]:
        """Displayed (x, y, width, height), scale applied."""
        return (self.x, self.y, self.width * self.scale_x, self.height * self.scale_y)

    def contains(self, px: float, py: float) -> bool:
        x, y, w, h = self.bounds()
        return x <= px <= x + w and y <= py <= y + h


class AnnotationStore:
    def __init__(self, annotations: Optional[Iterable[Annotation]] = None) -> None:
        self._annotations: List[Annotation] = []
        self._handles: dict[str, ShapeHandle] = {}
        self._listeners: List[Callable[[], None]] = []
        if annotations:
            self.reset(annotations)

    def __len__(self) -> int:
        return len(self._annotations)

    def __iter__(self) -> Iterator[Annotation]:
        return iter(list(self._annotations))

    def __contains__(self, annotation_id: str) -> bool:
        return annotation_id in self._handles

    @property
    def annotations(self) -> List[Annotation]:
        return list(self._annotations)

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register a callback run after every mutation."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def get(self, annotation_id: str) -> Optional[Annotation]:
        index = self._index_of(annotation_id)
        return None if index is None else self._annotations[index]

    def handle_for(self, annotation_id: str) -> Optional[ShapeHandle]:
        return self._handles.get(annotation_id)

    def hit_test(self, x: float, y: float) -> Optional[str]:
        """Id of the top-most annotation under (x, y), or None for the background."""
        for annotation in reversed(self._annotations):
            if self._handles[annotation.id].contains(x, y):
                return annotation.id
        return None

    def append(self, annotation: Annotation) -> None:
        if annotation.id in self._handles:
            raise InvalidAnnotationError(
                f"Annotation id {annotation.id} is already in the store."
            )
        self._annotations.append(annotation)
        self._handles[annotation.id] = ShapeHandle.for_annotation(annotation)
        self._notify()

    def replace(self, annotation: Annotation) -> bool:
        """Replace the record with the same id. Returns False if it is gone."""
        index = self._index_of(annotation.id)
        if index is None:
            return False
        self._annotations[index] = annotation
        self._handles[annotation.id].sync_to(annotation)
        self._notify()
        return True

    def remove(self, annotation_id: str) -> Optional[Annotation]:
        index = self._index_of(annotation_id)
        if index is None:
            return None
        removed = self._annotations.pop(index)
        del self._handles[annotation_id]
        self._notify()
        return removed

    def reset(self, annotations: Iterable[Annotation]) -> None:
        """Replace the whole content, e.g. after listing from the server."""
        self._annotations = []
        self._handles = {}
        for annotation in annotations:
            if annotation.id in self._handles:
                logger.warning("Skipping duplicate annotation id %s", annotation.id)
                continue
            self._annotations.append(annotation)
            self._handles[annotation.id] = ShapeHandle.for_annotation(annotation)
        self._notify()

    def _index_of(self, annotation_id: str) -> Optional[int]:
        for index, annotation in enumerate(self._annotations):
            if annotation.id == annotation_id:
                return index
        return None

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback()
