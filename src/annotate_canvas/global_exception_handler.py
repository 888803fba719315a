import logging
import sys
import traceback

from PyQt6.QtCore import QTimer
from PyQt6.QtWidgets import QMessageBox

from .frontend.exceptions import FrontendDevException, FrontendException
from .services.exceptions import AuthorizationError, DomainException, InternalException

logger = logging.getLogger(__name__)


def show_error_box(message: str, title: str = "Error"):
    """Display a critical error dialog safely."""
    QMessageBox.critical(None, title, message)


def exception_hook(exc_type, exc_value, exc_tb):
    """Global Qt exception hook for error handling."""

    # The main window opens the login dialog for these.
    if issubclass(exc_type, AuthorizationError):
        logger.info("Session rejected: %s", exc_value)
        return

    # Recoverable domain-level errors
    if issubclass(exc_type, DomainException):
        QTimer.singleShot(0, lambda: show_error_box(str(exc_value), "Warning"))
        return

    # Internal / unrecoverable errors
    elif issubclass(exc_type, InternalException):
        QTimer.singleShot(0, lambda: show_error_box(str(exc_value), "Critical Error"))
        sys.__excepthook__(exc_type, exc_value, exc_tb)
        return

    # Programming errors raised from the widgets
    elif issubclass(exc_type, FrontendDevException):
        err_msg = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
        logger.error("Frontend developer error: %s", err_msg)
        QTimer.singleShot(0, lambda: show_error_box(str(exc_value), "Critical Error"))
        return

    # Recoverable frontend errors
    elif issubclass(exc_type, FrontendException):
        QTimer.singleShot(0, lambda: show_error_box(str(exc_value), "Warning"))
        return

    # Any other unhandled exceptions
    else:
        err_msg = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
        logger.error("Unhandled exception: %s", err_msg)
        QTimer.singleShot(
            0,
            lambda: show_error_box(
                "An unexpected error occurred.\nPlease contact support.\nDetails logged.",
                "Unexpected Error",
            ),
        )
        sys.__excepthook__(exc_type, exc_value, exc_tb)
