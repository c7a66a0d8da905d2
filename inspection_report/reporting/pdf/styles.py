"""
PDF Styles Module.

Defines page geometry, typography and colors for the inspection report.
All layout distances are expressed in millimetres, measured from the top
of the page.
"""
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.colors import HexColor, black, white
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
import os
from dataclasses import dataclass
from typing import Tuple

from ...config import Config


# ============================================================================
# PAGE CONFIGURATION
# ============================================================================

PAGE_SIZE = A4
PAGE_WIDTH, PAGE_HEIGHT = PAGE_SIZE
PAGE_WIDTH_MM = round(PAGE_WIDTH / mm, 3)
PAGE_HEIGHT_MM = round(PAGE_HEIGHT / mm, 3)
PT_TO_MM = 25.4 / 72.0


# ============================================================================
# COLOR PALETTE
# ============================================================================

COLORS = {
    "gold": HexColor("#D4A017"),
    "section_fill": HexColor("#FFF7E1"),
    "subtitle_fill": HexColor("#FFFBF0"),
    "table_head": HexColor("#EBEBEB"),
    "table_alt_row": HexColor("#F8F8F8"),
    "grid": HexColor("#B4B4B4"),
    "text": HexColor("#141414"),
    "text_light": HexColor("#646464"),
    "white": white,
    "black": black,
}


# ============================================================================
# TYPOGRAPHY (French characters & UTF-8 Support)
# ============================================================================

# NOTE: the standard Times fonts only cover WinAnsi. DejaVu Serif (shipped
# with matplotlib) is preferred when available.

def register_fonts():
    """Register the serif TrueType family used for the whole document."""
    try:
        import matplotlib
        font_dir = os.path.join(matplotlib.get_data_path(), "fonts", "ttf")

        pdfmetrics.registerFont(TTFont("DejaVuSerif", os.path.join(font_dir, "DejaVuSerif.ttf")))
        pdfmetrics.registerFont(TTFont("DejaVuSerif-Bold", os.path.join(font_dir, "DejaVuSerif-Bold.ttf")))
        pdfmetrics.registerFont(TTFont("DejaVuSerif-Italic", os.path.join(font_dir, "DejaVuSerif-Italic.ttf")))
        pdfmetrics.registerFont(TTFont("DejaVuSerif-BoldItalic", os.path.join(font_dir, "DejaVuSerif-BoldItalic.ttf")))

        return "DejaVuSerif", "DejaVuSerif-Bold", "DejaVuSerif-Italic", "DejaVuSerif-BoldItalic"
    except Exception:
        # Fallback to standard fonts if registration fails
        return "Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"

FONT_FAMILY, FONT_FAMILY_BOLD, FONT_FAMILY_ITALIC, FONT_FAMILY_BOLD_ITALIC = register_fonts()

FONT_SIZE_BODY = 10
FONT_SIZE_CAPTION = 9
FONT_SIZE_TABLE_HEAD = 11
FONT_SIZE_SIGNATURE = 11
FONT_SIZE_BANNER = 12
FONT_SIZE_TITLE = 13

# Baseline-to-baseline distance as a multiple of the font size
LINE_HEIGHT_FACTOR = 1.25
RICH_LINE_FACTOR = 1.5


def font_for(bold: bool = False, italic: bool = False) -> str:
    """Pick the font face for a bold/italic combination."""
    if bold and italic:
        return FONT_FAMILY_BOLD_ITALIC
    if bold:
        return FONT_FAMILY_BOLD
    if italic:
        return FONT_FAMILY_ITALIC
    return FONT_FAMILY


def pt_to_mm(value: float) -> float:
    return value * PT_TO_MM


# ============================================================================
# SECTION LABELS
# ============================================================================

SECTION_POINTS = "1. Points de contrôle"
SECTION_FINDINGS = "2. Constatations générales"
SECTION_RECOMMENDATIONS = "3. Recommandations globales"
SECTION_SIGNATURE = "4. Signature"

TABLE_HEADERS = (
    "Point vérifié",
    "Non-conformité",
    "Preuves / Observations / Photos",
    "Action immédiate",
)

EMPTY_VALUE = "—"
SIGNATURE_PLACEHOLDER = "." * 63


@dataclass
class LayoutConfig:
    """Geometry of the report page (millimetres, y grows downwards)."""
    page_width: float = PAGE_WIDTH_MM
    page_height: float = PAGE_HEIGHT_MM
    margin_left: float = 15.0
    margin_right: float = 15.0
    margin_top: float = 18.0
    margin_bottom: float = 18.0

    # Header band / first page title block
    header_top_y: float = 10.0
    header_bottom_y: float = 24.0
    content_start_y: float = 50.0

    # Banners
    banner_height: float = 8.0
    banner_radius: float = 1.2
    banner_gap: float = 3.0
    subtitle_height: float = 7.0
    block_gap: float = 6.0
    min_block_reservation: float = Config.MIN_BLOCK_RESERVATION_MM

    # Inspection point table
    column_ratios: Tuple[float, float, float, float] = (0.20, 0.20, 0.44, 0.16)
    cell_padding: float = 2.0
    repeat_table_header: bool = Config.REPEAT_TABLE_HEADER

    # Evidence photos
    proof_image_width: float = 48.0
    proof_image_height: float = 30.0
    proof_caption_gap: float = 1.5
    proof_item_gap: float = 3.0
    proof_text_gap: float = 3.0

    # Rich text
    indent_step: float = 6.0
    bullet_width: float = 6.0

    # Signature
    signature_label_offset: float = 8.0
    signature_value_x: float = 36.0

    watermark_opacity: float = Config.WATERMARK_OPACITY

    @property
    def content_left(self) -> float:
        return self.margin_left

    @property
    def content_width(self) -> float:
        return self.page_width - self.margin_left - self.margin_right

    @property
    def content_right(self) -> float:
        return self.page_width - self.margin_right

    @property
    def usable_height(self) -> float:
        return self.page_height - self.margin_bottom

    @property
    def page_capacity(self) -> float:
        """Vertical space available for content on one page."""
        return self.usable_height - self.content_start_y

