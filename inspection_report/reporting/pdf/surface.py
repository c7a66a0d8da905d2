"""
Drawing surface and text measurement.

Thin wrapper around a ReportLab canvas that works in millimetres with the
origin at the top-left corner (ReportLab itself uses points from the
bottom-left). Text measurement is exposed as plain functions so layout
code can predict heights without a canvas.
"""
from contextlib import contextmanager
from io import BytesIO
from typing import List, Optional

from reportlab.lib.colors import Color
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen.canvas import Canvas

from .styles import (
    COLORS, FONT_FAMILY, FONT_SIZE_BODY, LINE_HEIGHT_FACTOR, LayoutConfig, pt_to_mm,
)


# ============================================================================
# TEXT MEASUREMENT
# ============================================================================

def line_height(size: float, factor: float = LINE_HEIGHT_FACTOR) -> float:
    """Baseline-to-baseline distance in mm for a font size in points."""
    return pt_to_mm(size * factor)


def measure_text_width(text: str, font: str = FONT_FAMILY, size: float = FONT_SIZE_BODY) -> float:
    return stringWidth(text or "", font, size) / mm


def split_long_word(word: str, max_width: float, font: str = FONT_FAMILY,
                    size: float = FONT_SIZE_BODY) -> List[str]:
    """Cut a word wider than `max_width` mm into character chunks."""
    chunks, current = [], ""
    for ch in word:
        if current and measure_text_width(current + ch, font, size) > max_width:
            chunks.append(current)
            current = ch
        else:
            current += ch
    if current:
        chunks.append(current)
    return chunks


def _break_wide_line(line: str, max_width: float, font: str, size: float) -> List[str]:
    # simpleSplit leaves a single word wider than the box on its own line
    if measure_text_width(line, font, size) <= max_width:
        return [line]
    out, current = [], ""
    for word in line.split(" "):
        pieces = [word]
        if measure_text_width(word, font, size) > max_width:
            pieces = split_long_word(word, max_width, font, size)
        for n, piece in enumerate(pieces):
            candidate = f"{current} {piece}" if current and n == 0 else piece
            if current and (n > 0 or measure_text_width(candidate, font, size) > max_width):
                out.append(current)
                current = piece
            else:
                current = candidate
    if current:
        out.append(current)
    return out or [""]


def wrap_text(text: str, max_width: float, font: str = FONT_FAMILY,
              size: float = FONT_SIZE_BODY) -> List[str]:
    """Greedy word wrap at `max_width` mm. Explicit newlines are kept and
    words wider than the box are cut between characters."""
    if not text:
        return []
    lines = []
    for paragraph in text.split("\n"):
        for line in simpleSplit(paragraph, font, size, max_width * mm) or [""]:
            lines.extend(_break_wide_line(line, max_width, font, size))
    return lines


def measure_block_height(text: str, font: str = FONT_FAMILY, size: float = FONT_SIZE_BODY,
                         max_width: Optional[float] = None) -> float:
    """Rendered height in mm of a (possibly multi-line) string.

    Empty text still occupies one line.
    """
    if max_width is None:
        lines = (text or "").split("\n")
    else:
        lines = wrap_text(text, max_width, font, size)
    return max(1, len(lines)) * line_height(size)


# ============================================================================
# CANVAS SURFACE
# ============================================================================

class CanvasSurface:
    """Primitive drawing operations in top-down millimetre coordinates."""

    def __init__(self, config: Optional[LayoutConfig] = None, title: str = "", author: str = ""):
        self.config = config or LayoutConfig()
        self.buffer = BytesIO()
        self.canvas = Canvas(
            self.buffer,
            pagesize=(self.config.page_width * mm, self.config.page_height * mm),
        )
        if title:
            self.canvas.setTitle(title)
        if author:
            self.canvas.setAuthor(author)

    # --- Coordinates ---

    def _y(self, y: float) -> float:
        return (self.config.page_height - y) * mm

    @property
    def page_number(self) -> int:
        return self.canvas.getPageNumber()

    def new_page(self) -> None:
        self.canvas.showPage()

    # --- Measurement ---

    def wrap_text(self, text, max_width, font=FONT_FAMILY, size=FONT_SIZE_BODY):
        return wrap_text(text, max_width, font, size)

    def text_width(self, text, font=FONT_FAMILY, size=FONT_SIZE_BODY):
        return measure_text_width(text, font, size)

    def block_height(self, text, font=FONT_FAMILY, size=FONT_SIZE_BODY, max_width=None):
        return measure_block_height(text, font, size, max_width)

    # --- Shapes ---

    def _paint(self, fill: Optional[Color], stroke: Optional[Color], line_width: float):
        if fill is not None:
            self.canvas.setFillColor(fill)
        if stroke is not None:
            self.canvas.setStrokeColor(stroke)
            self.canvas.setLineWidth(line_width * mm)
        return int(stroke is not None), int(fill is not None)

    def rect(self, x: float, y: float, w: float, h: float, fill: Optional[Color] = None,
             stroke: Optional[Color] = None, line_width: float = 0.3) -> None:
        stroke_flag, fill_flag = self._paint(fill, stroke, line_width)
        if not (stroke_flag or fill_flag):
            return
        self.canvas.rect(x * mm, self._y(y + h), w * mm, h * mm, stroke=stroke_flag, fill=fill_flag)

    def rounded_rect(self, x: float, y: float, w: float, h: float, radius: float,
                     fill: Optional[Color] = None, stroke: Optional[Color] = None,
                     line_width: float = 0.3) -> None:
        stroke_flag, fill_flag = self._paint(fill, stroke, line_width)
        if not (stroke_flag or fill_flag):
            return
        self.canvas.roundRect(x * mm, self._y(y + h), w * mm, h * mm, radius * mm,
                              stroke=stroke_flag, fill=fill_flag)

    def line(self, x1: float, y1: float, x2: float, y2: float,
             color: Color = COLORS["black"], line_width: float = 0.3) -> None:
        self.canvas.setStrokeColor(color)
        self.canvas.setLineWidth(line_width * mm)
        self.canvas.line(x1 * mm, self._y(y1), x2 * mm, self._y(y2))

    def image(self, image, x: float, y: float, w: float, h: float) -> None:
        """Draw an image fitted (aspect preserved) and centered in the box."""
        self.canvas.drawImage(image, x * mm, self._y(y + h), w * mm, h * mm,
                              preserveAspectRatio=True, anchor="c", mask="auto")

    # --- Text ---

    def text(self, text: str, x: float, y: float, font: str = FONT_FAMILY,
             size: float = FONT_SIZE_BODY, color: Color = COLORS["text"],
             align: str = "left") -> None:
        """Draw one line of text with its baseline at `y`."""
        self.canvas.setFont(font, size)
        self.canvas.setFillColor(color)
        if align == "center":
            self.canvas.drawCentredString(x * mm, self._y(y), text)
        elif align == "right":
            self.canvas.drawRightString(x * mm, self._y(y), text)
        else:
            self.canvas.drawString(x * mm, self._y(y), text)

    @contextmanager
    def opacity(self, alpha: float):
        self.canvas.saveState()
        try:
            self.canvas.setFillAlpha(alpha)
            self.canvas.setStrokeAlpha(alpha)
            yield self
        finally:
            self.canvas.restoreState()

    def finish(self) -> bytes:
        self.canvas.save()
        return self.buffer.getvalue()
