"""Press-move-release gesture that draws a new rectangle."""

import logging
import uuid
from typing import Callable, Optional

from annotate_canvas.frontend.utils.colors import translucent_fill
from annotate_canvas.frontend.utils.settings_store import (
    get_default_stroke,
    get_min_shape_size,
)
from annotate_canvas.models.annotation import Annotation
from annotate_canvas.services.annotation_store import AnnotationStore

logger = logging.getLogger(__name__)


def new_annotation_id() -> str:
    return f"rect-{uuid.uuid4().hex}"


class DrawGestureHandler:
    """
    Holds the single in-progress annotation (the preview).

    The preview never enters the store here; ``release`` hands the validated
    annotation back to the caller, which commits it through the sync layer.
    """

    def __init__(
        self,
        store: AnnotationStore,
        id_factory: Callable[[], str] = new_annotation_id,
        min_size: Optional[float] = None,
    ) -> None:
        self._store = store
        self._id_factory = id_factory
        self._min_size = min_size
        self._anchor: Optional[tuple[float, float]] = None
        self._preview: Optional[Annotation] = None

    @property
    def active(self) -> bool:
        return self._anchor is not None

    @property
    def preview(self) -> Optional[Annotation]:
        return self._preview

    @property
    def min_size(self) -> float:
        return get_min_shape_size() if self._min_size is None else self._min_size

    def start(self, x: float, y: float) -> Annotation:
        stroke = get_default_stroke()
        self._anchor = (x, y)
        self._preview = Annotation(
            id=self._id_factory(),
            name=f"Rect {len(self._store) + 1}",
            x=x,
            y=y,
            width=1,
            height=1,
            stroke=stroke,
            fill=translucent_fill(stroke),
        )
        return self._preview

    def update(self, x: float, y: float) -> Optional[Annotation]:
        if self._anchor is None or self._preview is None:
            return None
        ax, ay = self._anchor
        self._preview = self._preview.model_copy(
            update={
                "x": min(ax, x),
                "y": min(ay, y),
                "width": abs(x - ax),
                "height": abs(y - ay),
            }
        )
        return self._preview

    def release(self) -> Optional[Annotation]:
        """End the gesture. Returns the annotation to commit, or None if discarded."""
        preview = self._preview
        self.cancel()
        if preview is None:
            return None
        if preview.width < self.min_size or preview.height < self.min_size:
            logger.debug(
                "Discarding %.1fx%.1f gesture below %.1f px",
                preview.width,
                preview.height,
                self.min_size,
            )
            return None
        return preview

    def cancel(self) -> None:
        self._anchor = None
        self._preview = None
