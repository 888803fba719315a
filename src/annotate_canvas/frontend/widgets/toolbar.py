from PyQt6.QtCore import pyqtSignal
from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import (
    QColorDialog,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QWidget,
)

from annotate_canvas.frontend.states.interaction_state import (
    InteractionMode,
    InteractionState,
)
from annotate_canvas.frontend.utils.colors import picker_color


class CanvasToolbar(QWidget):

    draw_clicked = pyqtSignal()
    select_clicked = pyqtSignal()
    color_chosen = pyqtSignal(str)
    delete_clicked = pyqtSignal()
    logout_clicked = pyqtSignal()

    def __init__(self, state: InteractionState, parent=None):
        super().__init__(parent)
        self.state = state

        self.btn_draw = QPushButton("Add Rectangle")
        self.btn_draw.setCheckable(True)
        self.btn_draw.setToolTip("Drag on the empty canvas to draw a rectangle")
        self.btn_select = QPushButton("Select")
        self.btn_select.setCheckable(True)
        self.btn_select.setToolTip("Select, move and resize rectangles")
        self.btn_color = QPushButton("Color")
        self.btn_color.setToolTip("Change the colour of the selected rectangle")
        self.btn_delete = QPushButton("Delete")
        self.btn_delete.setToolTip("Delete the selected rectangle")
        self.btn_logout = QPushButton("Logout")
        self.user_label = QLabel("")

        self.btn_draw.clicked.connect(self.draw_clicked.emit)
        self.btn_select.clicked.connect(self.select_clicked.emit)
        self.btn_color.clicked.connect(self._pick_color)
        self.btn_delete.clicked.connect(self.delete_clicked.emit)
        self.btn_logout.clicked.connect(self.logout_clicked.emit)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(6)
        layout.addWidget(self.btn_draw)
        layout.addWidget(self.btn_select)
        layout.addWidget(self.btn_color)
        layout.addWidget(self.btn_delete)
        layout.addStretch(1)
        layout.addWidget(self.user_label)
        layout.addWidget(self.btn_logout)

        state.add_listener(self.refresh)
        self.refresh()

    def set_username(self, username):
        self.user_label.setText(f"Signed in as {username}" if username else "")

    def refresh(self):
        """Sync button visibility with the mode and the selection."""
        mode = self.state.mode
        has_selection = self.state.selected_id is not None
        self.btn_draw.setChecked(mode is InteractionMode.DRAW)
        self.btn_select.setChecked(mode is InteractionMode.SELECT)
        self.btn_select.setVisible(self.state.can_select)
        self.btn_color.setVisible(has_selection)
        self.btn_delete.setVisible(has_selection)

    def _pick_color(self):
        initial = QColor(picker_color(self.state.selected))
        color = QColorDialog.getColor(initial, self, "Annotation colour")
        if color.isValid():
            self.color_chosen.emit(color.name())
