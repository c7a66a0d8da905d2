"""
Reporting Module.

PDF generation for inspection reports.
"""
from .pdf import build_report_pdf, generate_report_pdf, LayoutConfig

__all__ = [
    "build_report_pdf",
    "generate_report_pdf",
    "LayoutConfig",
]
