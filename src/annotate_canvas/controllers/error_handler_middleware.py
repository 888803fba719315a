from ..services.exceptions import DomainException, InternalException
from ..frontend.exceptions import FrontendException
import logging
import functools

logger = logging.getLogger(__name__)


def error_handler(func):
    """
    Middleware to handle errors in controllers.

    Domain and frontend errors are logged and re-raised for the UI to show.
    Anything else is logged with its traceback and converted to an
    InternalException.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (DomainException, FrontendException) as e:
            logger.warning(
                "%s in %s: %s (%s)",
                type(e).__name__,
                func.__qualname__,
                e,
                e.log_message or "no extra info",
            )
            raise
        except Exception as e:
            logger.error(
                "Unexpected error of type %s in %s: %s",
                type(e).__name__,
                func.__qualname__,
                e,
                exc_info=True,
            )
            raise InternalException(
                "An unexpected error occurred.\nPlease contact support.\nDetails logged."
            ) from e

    return wrapper
