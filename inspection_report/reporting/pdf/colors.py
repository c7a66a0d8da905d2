"""
Color Resolver.

Parses the color notations produced by rich-text editors (hex, rgb()/rgba(),
a few names) into 8-bit RGB triples. Unparseable input never raises: the
resolve_* helpers substitute a fallback so rendering always proceeds.
"""
import re
from typing import Optional, Tuple

from reportlab.lib.colors import Color

RGB = Tuple[int, int, int]

NAMED_COLORS = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "green": (0, 128, 0),
    "blue": (0, 0, 255),
    "yellow": (255, 255, 0),
    "orange": (255, 165, 0),
    "purple": (128, 0, 128),
    "pink": (255, 192, 203),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
}

TEXT_FALLBACK: RGB = (20, 20, 20)
DRAW_FALLBACK: RGB = (20, 20, 20)
FILL_FALLBACK: RGB = (255, 242, 0)

_HEX_RE = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6})$")
_RGB_RE = re.compile(r"^rgba?\(\s*([^)]*)\)$")


def _channel(token: str) -> Optional[int]:
    token = token.strip()
    try:
        if token.endswith("%"):
            value = float(token[:-1]) * 255.0 / 100.0
        else:
            value = float(token)
    except ValueError:
        return None
    return int(round(min(255.0, max(0.0, value))))


def parse_color(value: Optional[str]) -> Optional[RGB]:
    """Parse a CSS-like color into an RGB triple, or None if unsupported."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip().lower()

    match = _HEX_RE.match(text)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        return tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))

    match = _RGB_RE.match(text)
    if match:
        parts = [p for p in re.split(r"[\s,/]+", match.group(1)) if p]
        if len(parts) not in (3, 4):
            return None
        channels = [_channel(p) for p in parts[:3]]
        if any(c is None for c in channels):
            return None
        return tuple(channels)

    return NAMED_COLORS.get(text)


def resolve_text_color(value: Optional[str]) -> RGB:
    return parse_color(value) or TEXT_FALLBACK


def resolve_fill_color(value: Optional[str]) -> RGB:
    return parse_color(value) or FILL_FALLBACK


def resolve_draw_color(value: Optional[str]) -> RGB:
    return parse_color(value) or DRAW_FALLBACK


def to_reportlab(rgb: RGB) -> Color:
    """Convert an 8-bit RGB triple to a ReportLab color."""
    r, g, b = rgb
    return Color(r / 255.0, g / 255.0, b / 255.0)
