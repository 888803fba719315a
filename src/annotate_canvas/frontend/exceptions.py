from typing import Optional


class FrontendException(Exception):
    """Base class for all frontend exceptions."""

    def __init__(self, message: str, log_message: Optional[str] = None):
        super().__init__(message)
        self.log_message = log_message  # In case devs want to include extra log info.


class FrontendDevException(Exception):
    """Base class for all frontend exceptions that are not user related"""

    def __init__(self, message: str):
        super().__init__(message)


class ModeUnavailableError(FrontendException):
    """Raised when select mode is requested on an empty canvas."""

    pass


class NoSelectionError(FrontendException):
    """Raised when an action needs a selected annotation and none is selected."""

    pass


class InvalidColorError(FrontendException):
    """Raised when a colour string can not be parsed."""

    pass


class InvalidSettingError(FrontendDevException):
    """Raised when a settings value is out of range."""

    pass
