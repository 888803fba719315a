# annotate_canvas/frontend/utils/settings_store.py
from __future__ import annotations

import os

from annotate_canvas.frontend.exceptions import InvalidSettingError

_DEFAULT_API_URL = "http://localhost:5000/api"
_api_base_url: str = os.environ.get("ANNOTATE_CANVAS_API_URL", _DEFAULT_API_URL)
_request_timeout: float = 10.0

_canvas_size: tuple[int, int] = (1100, 650)

# Gestures smaller than this are treated as accidental clicks.
_min_shape_size: float = 20.0
# The resize manipulator refuses boxes below this.
_min_transform_size: float = 20.0

_default_stroke: str = "#6366f1"
_fill_alpha_suffix: str = "55"
_selected_stroke: str = "#ef4444"


def get_api_base_url() -> str:
    return _api_base_url


def set_api_base_url(url: str) -> None:
    global _api_base_url
    url = str(url).strip()
    if not url.startswith(("http://", "https://")):
        raise InvalidSettingError(f"API url '{url}' must start with http:// or https://")
    _api_base_url = url.rstrip("/")


def get_request_timeout() -> float:
    return float(_request_timeout)


def set_request_timeout(seconds: float) -> None:
    global _request_timeout
    seconds = float(seconds)
    if seconds <= 0:
        raise InvalidSettingError("Request timeout must be > 0.")
    _request_timeout = seconds


def get_canvas_size() -> tuple[int, int]:
    return tuple(_canvas_size)


def get_min_shape_size() -> float:
    return float(_min_shape_size)


def set_min_shape_size(value: float) -> None:
    global _min_shape_size
    value = float(value)
    if value < 0:
        raise InvalidSettingError("Minimum shape size must be >= 0.")
    _min_shape_size = value


def get_min_transform_size() -> float:
    return float(_min_transform_size)


def set_min_transform_size(value: float) -> None:
    global _min_transform_size
    value = float(value)
    if value < 0:
        raise InvalidSettingError("Minimum transform size must be >= 0.")
    _min_transform_size = value


def get_default_stroke() -> str:
    return _default_stroke


def get_fill_alpha_suffix() -> str:
    return _fill_alpha_suffix


def get_selected_stroke() -> str:
    return _selected_stroke
