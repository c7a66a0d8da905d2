"""
Report I/O: JSON export/import and output file naming.
"""
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Union

from ..errors import InvalidReportFile, ReportStructureError
from .dates import range_label, EMPTY_LABEL
from .model import Report

logger = logging.getLogger(__name__)

_UNSAFE_RUN = re.compile(r"[^\w\d-]+", re.ASCII)


def sanitize_filename_part(value: str, fallback: str) -> str:
    """Replace every run of characters outside [A-Za-z0-9_-] with '_'."""
    return _UNSAFE_RUN.sub("_", value or fallback)


def report_filename(report: Report, extension: str = "pdf") -> str:
    """Rapport_<client>_<dates>.<extension>"""
    dates = range_label(report.dates_controle)
    safe_client = sanitize_filename_part(report.client, "Client")
    safe_dates = sanitize_filename_part("" if dates == EMPTY_LABEL else dates, "Date")
    return f"Rapport_{safe_client}_{safe_dates}.{extension}"


def report_to_json_dict(report: Report) -> Dict[str, Any]:
    return report.to_dict()


def export_report(report: Report) -> str:
    """Serialize a report to the persisted JSON format."""
    return json.dumps(report_to_json_dict(report), indent=2, ensure_ascii=False)


def import_report(payload: Union[str, bytes]) -> Report:
    """Parse an exported report.

    Returns a new Report; nothing existing is modified, so callers replace
    their state only when this succeeds.

    Raises:
        InvalidReportFile: if the payload is not a readable report.
    """
    try:
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8-sig")
        data = json.loads(payload)
        return Report.from_dict(data)
    except (UnicodeDecodeError, json.JSONDecodeError, ReportStructureError) as e:
        logger.warning(f"Report import rejected: {e}")
        raise InvalidReportFile() from e


def save_report_json(report: Report, file_path: Union[str, Path]) -> Path:
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_report(report), encoding="utf-8")
    logger.info(f"Report JSON saved to: {path}")
    return path


def load_report_json(file_path: Union[str, Path]) -> Report:
    with open(file_path, "rb") as f:
        return import_report(f.read())
