# frontend/widgets/canvas_view.py
from typing import Optional

from PyQt6.QtCore import QPointF, QRectF, Qt, pyqtSignal
from PyQt6.QtGui import QBrush, QColor, QKeyEvent, QMouseEvent, QPainter, QPen
from PyQt6.QtWidgets import QWidget

from annotate_canvas.controllers.canvas_controller import CanvasController
from annotate_canvas.frontend.states.interaction_state import InteractionMode
from annotate_canvas.frontend.utils.colors import to_rgba
from annotate_canvas.frontend.utils.selection import Box
from annotate_canvas.frontend.utils.settings_store import (
    get_canvas_size,
    get_selected_stroke,
)


def _qcolor(color: str) -> QColor:
    rgba = to_rgba(color)
    if rgba is None:
        return QColor(color)  # Named colours such as "red"
    return QColor(*rgba)


class CanvasView(QWidget):
    """
    Fixed size drawing surface.

    The widget only forwards pointer events in canvas coordinates to the
    CanvasController and paints what the store, the preview and the
    selection describe. It holds no annotation state of its own.
    """

    deletePressed = pyqtSignal()

    def __init__(self, controller: CanvasController, parent=None):
        super().__init__(parent)
        self.controller = controller
        width, height = get_canvas_size()
        self.setFixedSize(width, height)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMouseTracking(True)

        self._pen_preview = QPen(QColor(99, 102, 241), 2)
        self._pen_preview.setStyle(Qt.PenStyle.DashLine)
        self._pen_anchor = QPen(QColor(30, 30, 30))
        self._brush_anchor = QBrush(QColor(255, 255, 255))
        self._pen_selection = QPen(QColor(59, 130, 246), 1)

        controller.store.add_listener(self.update)
        controller.state.add_listener(self.update)

    # Events

    def mousePressEvent(self, ev: QMouseEvent):
        self.setFocus()
        if ev.button() != Qt.MouseButton.LeftButton:
            return super().mousePressEvent(ev)
        pos = ev.position()
        self.controller.pointer_down(pos.x(), pos.y())
        self.update()
        ev.accept()

    def mouseMoveEvent(self, ev: QMouseEvent):
        pos = ev.position()
        if ev.buttons() & Qt.MouseButton.LeftButton:
            self.controller.pointer_move(pos.x(), pos.y())
            self.update()
        else:
            self._update_cursor(pos)
        ev.accept()

    def mouseReleaseEvent(self, ev: QMouseEvent):
        if ev.button() != Qt.MouseButton.LeftButton:
            return super().mouseReleaseEvent(ev)
        pos = ev.position()
        self.controller.pointer_up(pos.x(), pos.y())
        self.update()
        ev.accept()

    def keyPressEvent(self, ev: QKeyEvent):
        if ev.key() in (Qt.Key.Key_Delete, Qt.Key.Key_Backspace):
            self.deletePressed.emit()
            ev.accept()
            return
        super().keyPressEvent(ev)

    def _update_cursor(self, pos: QPointF) -> None:
        if self.controller.mode is InteractionMode.DRAW:
            self.setCursor(Qt.CursorShape.CrossCursor)
            return
        anchor = self.controller.selection_handler.anchor_at(pos.x(), pos.y())
        if anchor in ("top-left", "bottom-right"):
            self.setCursor(Qt.CursorShape.SizeFDiagCursor)
        elif anchor in ("top-right", "bottom-left"):
            self.setCursor(Qt.CursorShape.SizeBDiagCursor)
        elif anchor in ("top-center", "bottom-center"):
            self.setCursor(Qt.CursorShape.SizeVerCursor)
        elif anchor in ("middle-left", "middle-right"):
            self.setCursor(Qt.CursorShape.SizeHorCursor)
        elif self.controller.store.hit_test(pos.x(), pos.y()) is not None:
            self.setCursor(Qt.CursorShape.SizeAllCursor)
        else:
            self.unsetCursor()

    # Painting

    def paintEvent(self, _):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        painter.fillRect(self.rect(), QColor(255, 255, 255))

        store = self.controller.store
        selected_id = self.controller.state.selected_id
        for annotation in store:
            handle = store.handle_for(annotation.id)
            if handle is None:
                continue
            is_selected = annotation.id == selected_id
            self._draw_shape(
                painter,
                QRectF(*handle.bounds()),
                fill=annotation.fill,
                stroke=get_selected_stroke() if is_selected else annotation.stroke,
                stroke_width=2.5 if is_selected else 2.0,
                name=annotation.name,
            )

        preview = self.controller.preview
        if preview is not None:
            painter.setPen(self._pen_preview)
            painter.setBrush(_qcolor(preview.fill))
            painter.drawRect(QRectF(preview.x, preview.y, preview.width, preview.height))

        box = self.controller.selection_handler.selection_box()
        if box is not None:
            self._draw_manipulator(painter, box)
        painter.end()

    def _draw_shape(
        self,
        painter: QPainter,
        rect: QRectF,
        fill: str,
        stroke: str,
        stroke_width: float,
        name: Optional[str],
    ) -> None:
        pen = QPen(_qcolor(stroke))
        pen.setWidthF(stroke_width)
        painter.setPen(pen)
        painter.setBrush(_qcolor(fill))
        painter.drawRoundedRect(rect, 4, 4)

        if not name:
            return
        # Name label in the top-left corner.
        label_width = max(70, len(name) * 7 + 14)
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QColor(255, 255, 255))
        painter.drawRoundedRect(QRectF(rect.x() + 2, rect.y() + 2, label_width, 18), 3, 3)
        font = painter.font()
        font.setPixelSize(11)
        painter.setFont(font)
        painter.setPen(QColor(17, 24, 39))
        painter.drawText(
            QRectF(rect.x() + 6, rect.y() + 3, label_width - 4, 16),
            Qt.AlignmentFlag.AlignVCenter | Qt.AlignmentFlag.AlignLeft,
            name,
        )

    def _draw_manipulator(self, painter: QPainter, box: Box) -> None:
        manipulator = self.controller.selection_handler.manipulator
        painter.setPen(self._pen_selection)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawRect(QRectF(box.x, box.y, box.width, box.height))

        size = manipulator.anchor_size
        half = size / 2.0
        painter.setPen(self._pen_anchor)
        painter.setBrush(self._brush_anchor)
        for ax, ay in manipulator.anchor_points(box).values():
            painter.drawRect(QRectF(ax - half, ay - half, size, size))
