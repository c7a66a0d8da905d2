"""
Report data: model, dates, JSON I/O and image assets.
"""
from .model import Report, Site, Point, Proof, normalize_proof, dedupe_proofs
from .dates import format_fr, range_label
from .report_io import (
    export_report,
    import_report,
    report_filename,
    sanitize_filename_part,
    save_report_json,
    load_report_json,
)

__all__ = [
    # Model
    "Report",
    "Site",
    "Point",
    "Proof",
    "normalize_proof",
    "dedupe_proofs",
    # Dates
    "format_fr",
    "range_label",
    # I/O
    "export_report",
    "import_report",
    "report_filename",
    "sanitize_filename_part",
    "save_report_json",
    "load_report_json",
]
