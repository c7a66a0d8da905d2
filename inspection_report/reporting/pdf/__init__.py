"""
PDF Generator Module for inspection reports.

Renders a Report into a paginated A4 PDF with ReportLab's canvas.

Module Structure:
- styles.py: Page geometry, typography, colors
- colors.py: Color parsing with fallbacks
- richtext.py: Editor HTML → styled lines
- surface.py: Drawing surface and text measurement
- decorator.py: Watermark, header band, first-page title block
- cursor.py: Pagination cursor
- layout.py: Section, table, rich-text and signature blocks
- builder.py: Document assembly

Usage:
    from inspection_report.reporting.pdf import build_report_pdf

    result = build_report_pdf(report, output_path)
"""
from .styles import LayoutConfig, COLORS, PAGE_SIZE
from .builder import build_report_pdf, generate_report_pdf, RenderResult
from .render_report import RenderReport, ImageStatus


__all__ = [
    # Main API
    "build_report_pdf",
    "generate_report_pdf",
    "RenderResult",
    "RenderReport",
    "ImageStatus",
    # Configuration
    "LayoutConfig",
    # Styles (for advanced usage)
    "COLORS",
    "PAGE_SIZE",
]
