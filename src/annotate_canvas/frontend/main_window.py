# main_window.py
import logging

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtWidgets import QDialog, QMainWindow, QVBoxLayout, QWidget

from annotate_canvas.controllers.auth_controller import AuthController
from annotate_canvas.controllers.canvas_controller import CanvasController
from annotate_canvas.frontend.states.interaction_state import InteractionMode
from annotate_canvas.frontend.states.relogin_state import ReloginState
from annotate_canvas.frontend.widgets.canvas_view import CanvasView
from annotate_canvas.frontend.widgets.login_dialog import LoginDialog
from annotate_canvas.frontend.widgets.toolbar import CanvasToolbar
from annotate_canvas.services.session import Session
from annotate_canvas.services.sync_service import SyncService

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(
        self,
        canvas_controller: CanvasController,
        auth_controller: AuthController,
        sync_service: SyncService,
        session: Session,
    ):
        super().__init__()
        self.setWindowTitle("Annotate Canvas")

        # Controllers
        self.canvas_controller = canvas_controller
        self.auth_controller = auth_controller
        self.sync_service = sync_service
        self.session = session
        self.relogin = ReloginState(
            prompt=self.prompt_login,
            is_authenticated=lambda: self.session.is_authenticated,
            on_success=self.canvas_controller.load_annotations,
            on_abandon=self.close,
            # Leave the sync completion before opening a modal dialog.
            schedule=lambda fn: QTimer.singleShot(0, fn),
        )

        # Widgets
        self.toolbar = CanvasToolbar(canvas_controller.state)
        self.canvas = CanvasView(canvas_controller)

        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(12, 0, 12, 12)
        layout.addWidget(self.toolbar)
        layout.addWidget(self.canvas, alignment=Qt.AlignmentFlag.AlignCenter)
        self.setCentralWidget(container)

        # Wiring
        self.toolbar.draw_clicked.connect(lambda: self.set_mode(InteractionMode.DRAW))
        self.toolbar.select_clicked.connect(lambda: self.set_mode(InteractionMode.SELECT))
        self.toolbar.color_chosen.connect(self.canvas_controller.recolor_selected)
        self.toolbar.delete_clicked.connect(self.delete_selected)
        self.toolbar.logout_clicked.connect(self.logout)
        self.canvas.deletePressed.connect(self.delete_selected)

        canvas_controller.state.add_listener(self.update_status)
        canvas_controller.store.add_listener(self.toolbar.refresh)
        session.add_listener(lambda s: self.toolbar.set_username(s.username))
        sync_service.on_unauthorized(self.on_unauthorized)

        self.toolbar.set_username(session.username)
        self.update_status()

    def set_mode(self, mode: InteractionMode):
        try:
            self.canvas_controller.set_mode(mode)
        finally:
            # Keep the checkable buttons in line with the real mode.
            self.toolbar.refresh()

    def delete_selected(self):
        self.canvas_controller.delete_selected()

    def update_status(self):
        state = self.canvas_controller.state
        message = f"Mode: {state.mode.value}"
        selected = self.canvas_controller.selected
        if selected is not None:
            message += f"  |  Selected: {selected.name or selected.id}"
        self.statusBar().showMessage(message)

    def start(self):
        """Show the window, ask for credentials if needed, then load annotations."""
        self.show()
        if not self.session.is_authenticated and not self.prompt_login():
            return False
        self.canvas_controller.load_annotations()
        return True

    def prompt_login(self) -> bool:
        dialog = LoginDialog(self.auth_controller, self)
        return dialog.exec() == QDialog.DialogCode.Accepted

    def logout(self):
        self.canvas_controller.logout()
        self.relogin.request()

    def on_unauthorized(self):
        if self.relogin.busy:
            return
        logger.info("Session expired or rejected, asking for credentials again")
        self.canvas_controller.logout()
        self.relogin.request()

    def closeEvent(self, event):
        self.sync_service.shutdown()
        super().closeEvent(event)
