import os
from appdirs import user_log_dir
import logging
from logging.handlers import RotatingFileHandler
from logging import StreamHandler

APP_NAME = "AnnotateCanvas"

LOG_DIR = user_log_dir(APP_NAME)
LOG_FILE = os.path.join(LOG_DIR, "annotate_canvas.log")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(level: int = logging.INFO) -> None:
    """Set up logging configuration for the client and the server."""
    os.makedirs(LOG_DIR, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    # File handler
    file_handler = RotatingFileHandler(LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3)
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    # Console handler
    stream_handler = StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
