"""
PDF Builder Module.

Orchestrates the construction of a complete inspection report PDF.

Sections:
1. Points de contrôle (one subtitle + table per site)
2. Constatations générales
3. Recommandations globales
4. Signature

No layout decisions here - only document assembly.
"""
from dataclasses import dataclass
from pathlib import Path
import logging
from typing import Any, Dict, Optional, Union

from ...errors import ReportStructureError
from ...report.assets import RenderAssets, resolve_assets
from ...report.dates import range_label
from ...report.model import Point, Proof, Report, Site
from ...report.report_io import report_filename
from .cursor import Paginator
from .decorator import PageDecorator, PageHeader
from .layout import LayoutEngine
from .render_report import RenderReport
from .surface import CanvasSurface
from .styles import (
    LayoutConfig,
    SECTION_FINDINGS,
    SECTION_POINTS,
    SECTION_RECOMMENDATIONS,
    SECTION_SIGNATURE,
)


# Setup logger
logger = logging.getLogger("InspectionReport.PDFBuilder")


@dataclass
class RenderResult:
    pdf_bytes: bytes
    report: RenderReport
    filename: str
    output_path: Optional[Path] = None


def _check_structure(report: Report) -> None:
    """Fail fast on data that is not shaped as a Report."""
    if not isinstance(report.sites, list):
        raise ReportStructureError("sites must be a list")
    for i, site in enumerate(report.sites):
        if not isinstance(site, Site):
            raise ReportStructureError(f"sites[{i}] is {type(site).__name__}, expected Site")
        if not isinstance(site.points, list):
            raise ReportStructureError(f"sites[{i}].points must be a list")
        for j, point in enumerate(site.points):
            if not isinstance(point, Point):
                raise ReportStructureError(f"sites[{i}].points[{j}] is {type(point).__name__}, expected Point")
            if not all(isinstance(p, Proof) for p in point.proofs):
                raise ReportStructureError(f"sites[{i}].points[{j}] has proofs that are not Proof")
    for name in ("constatations", "recommandations", "controleur", "client"):
        if not isinstance(getattr(report, name), str):
            raise ReportStructureError(f"{name} must be a string")


def snapshot_report(report_data: Union[Report, Dict[str, Any]]) -> Report:
    """Read-only copy of the report for one render."""
    if isinstance(report_data, Report):
        report = report_data.snapshot()
    elif isinstance(report_data, dict):
        report = Report.from_dict(report_data)
    else:
        raise ReportStructureError(f"Cannot render {type(report_data).__name__}")
    _check_structure(report)
    return report


def build_report_pdf(
    report_data: Union[Report, Dict[str, Any]],
    output_path: Optional[Union[str, Path]] = None,
    config: Optional[LayoutConfig] = None,
    assets: Optional[RenderAssets] = None,
) -> RenderResult:
    """Build the complete inspection report PDF.

    Args:
        report_data: Report (or its persisted dict form)
        output_path: Optional file or directory to save the PDF to
        config: Page geometry
        assets: Pre-decoded logo/watermark; resolved from config if omitted

    Returns:
        RenderResult with the PDF bytes and the render report

    Raises:
        ReportStructureError: if the data is not shaped as a report
    """
    config = config or LayoutConfig()
    report = snapshot_report(report_data)
    assets = assets if assets is not None else resolve_assets(report.logo_data_url)

    render = RenderReport(warnings=list(assets.warnings))
    surface_title = report.header_title or "Rapport"
    surface = CanvasSurface(config, title=surface_title, author=report.controleur)

    header = PageHeader(
        code=report.header_code,
        version=report.header_version,
        title=report.header_title,
        client=report.client,
        dates=range_label(report.dates_controle),
    )
    decorator = PageDecorator(surface, header, logo=assets.logo, watermark=assets.watermark,
                              config=config, report=render)

    def open_page(page_number: int) -> None:
        if page_number > 1:
            surface.new_page()
        decorator.decorate(page_number)

    paginator = Paginator(config, on_new_page=open_page)
    engine = LayoutEngine(surface, paginator, config, render)

    # === PAGE 1 ===
    cursor = paginator.start()

    # === 1. Points de contrôle ===
    cursor = engine.section_banner(cursor, SECTION_POINTS)
    for index, site in enumerate(report.sites):
        cursor = engine.site_section(cursor, site, index)

    # === 2. / 3. Narrative sections ===
    cursor = engine.rich_text_block(cursor, SECTION_FINDINGS, report.constatations)
    cursor = engine.rich_text_block(cursor, SECTION_RECOMMENDATIONS, report.recommandations)

    # === 4. Signature (last element) ===
    engine.signature_block(cursor, report.controleur, SECTION_SIGNATURE)

    pdf_bytes = surface.finish()
    filename = report_filename(report)

    if render.failed_images:
        logger.warning(f"{len(render.failed_images)} of {len(render.images)} photos not rendered")

    saved = None
    if output_path:
        saved = Path(output_path)
        if saved.is_dir():
            saved = saved / filename
        saved.parent.mkdir(parents=True, exist_ok=True)
        with open(saved, 'wb') as f:
            f.write(pdf_bytes)
        logger.info(f"PDF saved to: {saved}")

    return RenderResult(pdf_bytes=pdf_bytes, report=render, filename=filename, output_path=saved)


# Alias
generate_report_pdf = build_report_pdf
