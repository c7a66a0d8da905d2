"""
Page Decorator.

Draws what repeats on every page (watermark, header band with logo and
Code/Version labels) and the title block shown on the first page only.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from .render_report import Decoration, RenderReport
from .styles import (
    COLORS, EMPTY_VALUE, FONT_FAMILY, FONT_FAMILY_BOLD, FONT_SIZE_BODY, FONT_SIZE_TITLE,
    LayoutConfig,
)
from .surface import CanvasSurface, line_height

logger = logging.getLogger(__name__)

LOGO_BOX = (11.0, 22.0, 10.0)  # y, width, height
LABEL_MAX_WIDTH = 70.0
TITLE_BOX_Y = 26.5
TITLE_BOX_HEIGHT = 8.0
TITLE_BASELINE_Y = 31.5
CLIENT_ROW_Y = 42.0


@dataclass
class PageHeader:
    """Values printed in the page decoration."""
    code: str = ""
    version: str = ""
    title: str = ""
    client: str = ""
    dates: str = ""


class PageDecorator:
    def __init__(self, surface: CanvasSurface, header: PageHeader,
                 logo=None, watermark=None, config: Optional[LayoutConfig] = None,
                 report: Optional[RenderReport] = None):
        self.surface = surface
        self.header = header
        self.logo = logo
        self.watermark = watermark
        self.config = config or surface.config
        self.report = report if report is not None else RenderReport()

    def _fit(self, text: str, width: float, font: str, size: float) -> str:
        lines = self.surface.wrap_text(text, width, font, size)
        return lines[0] if lines else ""

    def draw_watermark(self) -> bool:
        """Low-opacity background image. Never fatal."""
        if self.watermark is None:
            return False
        cfg = self.config
        try:
            iw, ih = self.watermark.getSize()
            w = cfg.content_width
            h = w * ih / iw
            x = (cfg.page_width - w) / 2
            y = (cfg.page_height - h) / 2
            with self.surface.opacity(cfg.watermark_opacity):
                self.surface.image(self.watermark, x, y, w, h)
            return True
        except Exception as e:
            logger.debug(f"Watermark not drawn: {e}")
            return False

    def draw_header_band(self) -> None:
        cfg = self.config
        s = self.surface
        s.line(cfg.content_left, cfg.header_top_y, cfg.content_right, cfg.header_top_y,
               color=COLORS["gold"], line_width=1.2)
        s.line(cfg.content_left, cfg.header_bottom_y, cfg.content_right, cfg.header_bottom_y,
               color=COLORS["gold"], line_width=1.2)

        if self.logo is not None:
            logo_y, logo_w, logo_h = LOGO_BOX
            try:
                s.image(self.logo, cfg.content_left, logo_y, logo_w, logo_h)
            except Exception as e:
                logger.warning(f"Logo not drawn: {e}")
                self.report.warnings.append("Logo non affiché.")
                self.logo = None

        code = self._fit(f"Code : {self.header.code or EMPTY_VALUE}",
                         LABEL_MAX_WIDTH, FONT_FAMILY_BOLD, FONT_SIZE_BODY)
        version = self._fit(f"Version : {self.header.version or EMPTY_VALUE}",
                            LABEL_MAX_WIDTH, FONT_FAMILY_BOLD, FONT_SIZE_BODY)
        s.text(code, cfg.content_right, 14.0, FONT_FAMILY_BOLD, FONT_SIZE_BODY,
               COLORS["black"], align="right")
        s.text(version, cfg.content_right, 19.0, FONT_FAMILY_BOLD, FONT_SIZE_BODY,
               COLORS["black"], align="right")

    def draw_title_block(self) -> None:
        cfg = self.config
        s = self.surface
        s.rect(cfg.content_left, TITLE_BOX_Y, cfg.content_width, TITLE_BOX_HEIGHT,
               stroke=COLORS["black"], line_width=0.3)
        title = self._fit(self.header.title or EMPTY_VALUE, cfg.content_width - 4,
                          FONT_FAMILY_BOLD, FONT_SIZE_TITLE)
        s.text(title, cfg.page_width / 2, TITLE_BASELINE_Y, FONT_FAMILY_BOLD, FONT_SIZE_TITLE,
               COLORS["black"], align="center")

        half = cfg.page_width / 2
        s.text("Client :", cfg.content_left, CLIENT_ROW_Y, FONT_FAMILY_BOLD, FONT_SIZE_BODY, COLORS["black"])
        s.text("Date :", half + 10, CLIENT_ROW_Y, FONT_FAMILY_BOLD, FONT_SIZE_BODY, COLORS["black"])

        step = line_height(FONT_SIZE_BODY)
        client_lines = s.wrap_text(self.header.client or EMPTY_VALUE,
                                   half - cfg.margin_left - 20, FONT_FAMILY, FONT_SIZE_BODY)
        for i, text in enumerate(client_lines[:2]):
            s.text(text, cfg.content_left + 18, CLIENT_ROW_Y + i * step, FONT_FAMILY,
                   FONT_SIZE_BODY, COLORS["black"])
        date_lines = s.wrap_text(self.header.dates or EMPTY_VALUE,
                                 half - cfg.margin_right - 22, FONT_FAMILY, FONT_SIZE_BODY)
        for i, text in enumerate(date_lines[:2]):
            s.text(text, half + 22, CLIENT_ROW_Y + i * step, FONT_FAMILY,
                   FONT_SIZE_BODY, COLORS["black"])

    def decorate(self, page_number: int) -> None:
        """Decorate a freshly opened page: watermark under the header band,
        title block on page 1 only."""
        sequence = []
        watermark = self.draw_watermark()
        if watermark:
            sequence.append("watermark")
        self.draw_header_band()
        sequence.append("header_band")
        first = page_number == 1
        if first:
            self.draw_title_block()
            sequence.append("title_block")
        self.report.decorations.append(
            Decoration(page=page_number, watermark=watermark, header_band=True, title_block=first,
                       sequence=tuple(sequence))
        )
        self.report.pages = max(self.report.pages, page_number)
