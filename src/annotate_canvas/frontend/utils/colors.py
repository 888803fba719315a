"""Colour helpers for strokes and their translucent fills."""

import re
from typing import Optional

from annotate_canvas.frontend.exceptions import InvalidColorError
from annotate_canvas.frontend.utils.settings_store import get_default_stroke, get_fill_alpha_suffix
from annotate_canvas.models.annotation import Annotation

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_RGBA_RE = re.compile(
    r"^rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*(?:,\s*([0-9.]+)\s*)?\)$"
)


def normalize_hex(color: str) -> str:
    """Return ``color`` as lowercase ``#rrggbb``. Alpha digits are dropped."""
    match = _HEX_RE.match(str(color).strip())
    if not match:
        raise InvalidColorError(f"'{color}' is not a hex colour.")
    digits = match.group(1).lower()
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return "#" + digits[:6]


def translucent_fill(color: str) -> str:
    """Fill colour derived from a stroke: same hue, fixed alpha."""
    return normalize_hex(color) + get_fill_alpha_suffix()


def picker_color(selected: Optional[Annotation]) -> str:
    """Colour the picker opens with: the selected stroke, else the default."""
    if selected is None:
        return get_default_stroke()
    return selected.stroke


def to_rgba(color: str) -> Optional[tuple[int, int, int, int]]:
    """
    Parse CSS style ``#rgb``, ``#rrggbb``, ``#rrggbbaa``, ``rgb()`` and
    ``rgba()`` strings. Returns None for anything else (named colours).
    """
    text = str(color).strip()
    if text == "transparent":
        return (0, 0, 0, 0)

    match = _HEX_RE.match(text)
    if match and text.startswith("#"):
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        alpha = int(digits[6:8], 16) if len(digits) == 8 else 255
        return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16), alpha)

    match = _RGBA_RE.match(text)
    if match:
        r, g, b = (min(255, int(v)) for v in match.group(1, 2, 3))
        alpha = match.group(4)
        a = 255 if alpha is None else round(max(0.0, min(1.0, float(alpha))) * 255)
        return (r, g, b, a)
    return None
