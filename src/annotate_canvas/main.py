import sys

from PyQt6.QtWidgets import QApplication

from annotate_canvas.controllers.auth_controller import AuthController
from annotate_canvas.controllers.canvas_controller import CanvasController
from annotate_canvas.frontend.main_window import MainWindow
from annotate_canvas.frontend.utils.dispatcher import QtDispatcher
from annotate_canvas.frontend.utils.settings_store import get_api_base_url, get_request_timeout
from annotate_canvas.global_exception_handler import exception_hook
from annotate_canvas.logger_config import setup_logger
from annotate_canvas.services.annotation_store import AnnotationStore
from annotate_canvas.services.api_client import AnnotationApiClient, AuthApiClient
from annotate_canvas.services.session import Session
from annotate_canvas.services.sync_service import SyncService


def main():
    setup_logger()  # Set up logging configuration

    app = QApplication(sys.argv)

    # Centralized state
    session = Session()
    session.load()
    store = AnnotationStore()

    # Initialize services
    dispatcher = QtDispatcher()
    base_url, timeout = get_api_base_url(), get_request_timeout()
    annotation_client = AnnotationApiClient(session, base_url=base_url, timeout=timeout)
    auth_client = AuthApiClient(base_url=base_url, timeout=timeout)
    sync_service = SyncService(store, annotation_client, session, dispatch=dispatcher)

    # Initialize controllers
    canvas_controller = CanvasController(store, sync_service, session)
    auth_controller = AuthController(auth_client, session)

    sys.excepthook = exception_hook

    window = MainWindow(
        canvas_controller=canvas_controller,
        auth_controller=auth_controller,
        sync_service=sync_service,
        session=session,
    )
    if not window.start():
        sync_service.shutdown()
        return 0
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
