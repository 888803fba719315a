import pytest

from annotate_canvas.controllers.error_handler_middleware import error_handler
from annotate_canvas.frontend.exceptions import NoSelectionError
from annotate_canvas.services.exceptions import (
    AnnotationNotFoundError,
    InternalException,
)


class TestErrorHandler:
    def test_returns_value(self):
        @error_handler
        def ok(value):
            return value * 2

        assert ok(21) == 42

    @pytest.mark.parametrize(
        "error", [AnnotationNotFoundError("gone", "id=1"), NoSelectionError("nothing")]
    )
    def test_known_errors_are_reraised(self, error):
        @error_handler
        def fails():
            raise error

        with pytest.raises(type(error)):
            fails()

    def test_unexpected_errors_are_wrapped(self, caplog):
        @error_handler
        def fails():
            raise KeyError("x")

        with pytest.raises(InternalException) as info:
            fails()

        assert isinstance(info.value.__cause__, KeyError)
        assert "Unexpected error of type KeyError" in caplog.text
