"""
PDF Layout Module.

Section and table layout engine for the inspection report. Each block type
has its own method that takes the current Cursor, asks the Paginator for
room using the block's predicted height, draws, and returns the advanced
Cursor.

Blocks:
- section banner
- site subtitle banner
- inspection point table (rows sized from text, photos and captions)
- rich-text narrative block
- signature block
"""
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ...errors import ImageDecodeError
from ...report.assets import decode_image
from ...report.model import Point, Proof, Site
from .colors import resolve_fill_color, resolve_text_color, to_reportlab
from .cursor import Cursor, Paginator
from .render_report import ImageOutcome, ImageStatus, RenderReport
from .richtext import Line, SpanStyle, parse_rich_text
from .styles import (
    COLORS, EMPTY_VALUE, FONT_FAMILY, FONT_FAMILY_BOLD, FONT_FAMILY_ITALIC,
    FONT_SIZE_BANNER, FONT_SIZE_BODY, FONT_SIZE_CAPTION, FONT_SIZE_SIGNATURE,
    FONT_SIZE_TABLE_HEAD, RICH_LINE_FACTOR, SIGNATURE_PLACEHOLDER, TABLE_HEADERS,
    LayoutConfig, font_for, pt_to_mm,
)
from .surface import CanvasSurface, line_height, measure_text_width, split_long_word, wrap_text

logger = logging.getLogger(__name__)

# Baseline position inside a line box, as a fraction of the font size
BASELINE_RATIO = 0.925
_TOKEN_RE = re.compile(r"\S+|\s+")


def _baseline(line_top: float, size: float) -> float:
    return line_top + pt_to_mm(size) * BASELINE_RATIO


def _or_dash(value: str) -> str:
    value = (value or "").strip()
    return value if value else EMPTY_VALUE


# ============================================================================
# TABLE GEOMETRY (pure)
# ============================================================================

def column_widths(total: float, ratios: Sequence[float]) -> List[float]:
    """Floor every column but the last, which absorbs the residue."""
    widths = [float(math.floor(total * r + 1e-9)) for r in ratios[:-1]]
    widths.append(total - sum(widths))
    return widths


def caption_lines(caption: str, width: float) -> List[str]:
    return wrap_text((caption or "").strip(), width, FONT_FAMILY_ITALIC, FONT_SIZE_CAPTION)


def caption_height(caption: str, width: float) -> float:
    return len(caption_lines(caption, width)) * line_height(FONT_SIZE_CAPTION)


@dataclass(frozen=True)
class ProofPlacement:
    """Offsets relative to the top of the photo stack."""
    index: int
    image_y: float
    caption_y: Optional[float]
    caption_height: float
    height: float


@dataclass(frozen=True)
class ProofStack:
    placements: Tuple[ProofPlacement, ...]
    height: float


def layout_proof_stack(proofs: Sequence[Proof], caption_width: float,
                       config: LayoutConfig) -> ProofStack:
    """Stack captions and images vertically.

    Used by both the measure pass and the draw pass so the two can never
    disagree on where a photo goes.
    """
    y = 0.0
    placements = []
    for i, proof in enumerate(proofs):
        if i > 0:
            y += config.proof_item_gap
        start = y
        cap_h = caption_height(proof.caption, caption_width)
        cap_y = None
        if cap_h and proof.pos == "before":
            cap_y = y
            y += cap_h + config.proof_caption_gap
        image_y = y
        y += config.proof_image_height
        if cap_h and proof.pos == "after":
            y += config.proof_caption_gap
            cap_y = y
            y += cap_h
        placements.append(ProofPlacement(i, image_y, cap_y, cap_h, y - start))
    return ProofStack(tuple(placements), y)


def proofs_offset(text_height: float, has_proofs: bool, config: LayoutConfig) -> float:
    """Distance from the top of the cell to the top of the photo stack."""
    return config.cell_padding + text_height + (config.proof_text_gap if has_proofs else 0.0)


def predict_proof_block_height(proofs: Sequence[Proof], text_height: float,
                               caption_width: float, config: LayoutConfig) -> float:
    """Height of an evidence cell: padding, text, photo stack, padding."""
    stack = layout_proof_stack(proofs, caption_width, config)
    return proofs_offset(text_height, bool(proofs), config) + stack.height + config.cell_padding


def text_cell_height(lines: Sequence[str], size: float, config: LayoutConfig) -> float:
    return max(1, len(lines)) * line_height(size) + 2 * config.cell_padding


# ============================================================================
# RICH TEXT GEOMETRY (pure)
# ============================================================================

@dataclass
class Fragment:
    text: str
    style: SpanStyle
    x: float
    width: float


@dataclass
class VisualRow:
    """One printed row of a rich-text Line after wrapping."""
    bullet: Optional[str]
    bullet_x: float
    text_x: float
    fragments: List[Fragment] = field(default_factory=list)


def _style_font(style: SpanStyle) -> str:
    return font_for(style.bold, style.italic)


def _trim_row(fragments: List[Fragment]) -> List[Fragment]:
    while fragments and not fragments[-1].text.strip():
        fragments.pop()
    return fragments


def layout_rich_lines(lines: Sequence[Line], width: float, config: LayoutConfig,
                      size: float = FONT_SIZE_BODY) -> List[VisualRow]:
    """Wrap styled Lines into rows that fit `width` mm.

    Continuation rows of a list item keep the item's hanging indent.
    """
    rows = []
    for line in lines:
        bullet_x = line.indent * config.indent_step
        text_x = bullet_x + (config.bullet_width if line.bullet else 0.0)
        available = max(width - text_x, config.bullet_width)

        row = VisualRow(line.bullet, bullet_x, text_x)
        x = 0.0
        for span in line.spans:
            font = _style_font(span.style)
            for token in _TOKEN_RE.findall(span.text):
                if token.isspace():
                    if not row.fragments:
                        continue
                    pieces = [" "]
                else:
                    pieces = [token]
                    if measure_text_width(token, font, size) > available:
                        pieces = split_long_word(token, available, font, size)
                for piece in pieces:
                    w = measure_text_width(piece, font, size)
                    if not piece.isspace() and row.fragments and x + w > available:
                        row.fragments = _trim_row(row.fragments)
                        rows.append(row)
                        row = VisualRow(None, bullet_x, text_x)
                        x = 0.0
                    last = row.fragments[-1] if row.fragments else None
                    if last is not None and last.style == span.style:
                        last.text += piece
                        last.width += w
                    else:
                        row.fragments.append(Fragment(piece, span.style, x, w))
                    x += w
        row.fragments = _trim_row(row.fragments)
        rows.append(row)
    return rows


def rich_row_height(size: float = FONT_SIZE_BODY) -> float:
    return line_height(size, RICH_LINE_FACTOR)


def predict_rich_text_height(lines: Sequence[Line], width: float, config: LayoutConfig,
                             size: float = FONT_SIZE_BODY) -> float:
    """Rows after wrapping × fixed row advance."""
    return len(layout_rich_lines(lines, width, config, size)) * rich_row_height(size)


# ============================================================================
# MEASURED ROWS
# ============================================================================

@dataclass
class DecodedProof:
    index: int
    proof: Proof
    image: object


@dataclass
class RowSegment:
    """Part of a table row drawn on one page: a slice of every text column,
    then the photos that fit below the evidence text."""
    first: bool
    cells: List[List[str]]
    evidence_lines: List[str]
    proofs: List[DecodedProof]
    height: float

    @property
    def evidence_height(self) -> float:
        return len(self.evidence_lines) * line_height(FONT_SIZE_BODY)


@dataclass
class MeasuredRow:
    site_index: int
    point_index: int
    cells: List[List[str]]
    evidence_lines: List[str]
    segments: List[RowSegment]

    @property
    def height(self) -> float:
        return sum(s.height for s in self.segments)

    @property
    def split(self) -> bool:
        return len(self.segments) > 1


# ============================================================================
# LAYOUT ENGINE
# ============================================================================

class LayoutEngine:
    def __init__(self, surface: CanvasSurface, paginator: Paginator,
                 config: Optional[LayoutConfig] = None,
                 report: Optional[RenderReport] = None,
                 image_loader: Callable[[str], object] = decode_image):
        self.surface = surface
        self.paginator = paginator
        self.config = config or paginator.config
        self.report = report if report is not None else RenderReport()
        self.image_loader = image_loader
        self._images: Dict[str, object] = {}
        self._image_errors: Dict[str, str] = {}

    # --- helpers ---

    @property
    def left(self) -> float:
        return self.config.content_left

    @property
    def width(self) -> float:
        return self.config.content_width

    def _place(self, kind: str, cursor: Cursor, height: float, label: str = "") -> None:
        self.report.place(kind, cursor.page, cursor.y, height, label)
        if cursor.y + height > self.config.usable_height:
            message = f"{kind} '{label}' overflows page {cursor.page} by {cursor.y + height - self.config.usable_height:.1f} mm"
            logger.warning(message)
            self.report.overflows.append(message)

    def _load_image(self, src: str):
        if src in self._images:
            return self._images[src]
        if src in self._image_errors:
            raise ImageDecodeError(self._image_errors[src])
        try:
            image = self.image_loader(src)
        except ImageDecodeError as e:
            self._image_errors[src] = str(e)
            raise
        self._images[src] = image
        return image

    def _banner(self, cursor: Cursor, title: str, height: float, fill, size: float) -> None:
        self.surface.rounded_rect(self.left, cursor.y, self.width, height, self.config.banner_radius,
                                  fill=fill, stroke=COLORS["black"], line_width=0.3)
        text = wrap_text(title, self.width - 8, FONT_FAMILY_BOLD, size)
        baseline = cursor.y + height / 2 + pt_to_mm(size) * 0.35
        self.surface.text(text[0] if text else "", self.left + 4, baseline, FONT_FAMILY_BOLD, size,
                          COLORS["black"])

    # --- 1. section banner ---

    def section_banner(self, cursor: Cursor, title: str, reserve: Optional[float] = None) -> Cursor:
        """Cream banner with a bold title. Reserves at least banner + 5 mm."""
        cfg = self.config
        needed = max(cfg.banner_height + 5.0, reserve or 0.0)
        cursor = self.paginator.ensure_space(cursor, min(needed, cfg.page_capacity))
        self._banner(cursor, title, cfg.banner_height, COLORS["section_fill"], FONT_SIZE_BANNER)
        self._place("section_banner", cursor, cfg.banner_height, title)
        return self.paginator.advance(cursor, cfg.banner_height + cfg.banner_gap)

    # --- 2. site subtitle ---

    def site_subtitle(self, cursor: Cursor, name: str, reserve: Optional[float] = None) -> Cursor:
        """'Site : name' banner, kept on the same page as what follows it."""
        cfg = self.config
        reserve = cfg.min_block_reservation if reserve is None else reserve
        cursor = self.paginator.ensure_space(cursor, min(max(reserve, cfg.subtitle_height), cfg.page_capacity))
        label = f"Site : {_or_dash(name)}"
        self._banner(cursor, label, cfg.subtitle_height, COLORS["subtitle_fill"], FONT_SIZE_TABLE_HEAD)
        self._place("site_subtitle", cursor, cfg.subtitle_height, label)
        return self.paginator.advance(cursor, cfg.subtitle_height + cfg.banner_gap)

    def site_section(self, cursor: Cursor, site: Site, site_index: int) -> Cursor:
        """Subtitle plus the site's point table."""
        cfg = self.config
        widths = self.column_widths()
        header_h = self.header_height(widths)
        rows = self.measure_rows(site.points, widths, site_index)

        first_h = rows[0].segments[0].height
        reserve = max(cfg.min_block_reservation,
                      cfg.subtitle_height + cfg.banner_gap + header_h + first_h)
        cursor = self.site_subtitle(cursor, site.name, reserve=reserve)
        cursor = self.points_table(cursor, rows, widths, header_h)
        return self.paginator.advance(cursor, cfg.block_gap)

    # --- 3. inspection point table ---

    def column_widths(self) -> List[float]:
        return column_widths(self.width, self.config.column_ratios)

    def header_height(self, widths: Sequence[float]) -> float:
        pad = self.config.cell_padding
        return max(
            text_cell_height(wrap_text(h, w - 2 * pad, FONT_FAMILY_BOLD, FONT_SIZE_TABLE_HEAD),
                             FONT_SIZE_TABLE_HEAD, self.config)
            for h, w in zip(TABLE_HEADERS, widths)
        )

    def _decode_proofs(self, point: Point, site_index: int, point_index: int) -> List[DecodedProof]:
        decoded = []
        for k, proof in enumerate(point.proofs):
            try:
                image = self._load_image(proof.src)
            except ImageDecodeError as e:
                logger.warning(f"Photo {k + 1} of point {point_index + 1} skipped: {e}")
                self.report.images.append(
                    ImageOutcome(site_index, point_index, k, ImageStatus.DECODE_FAILED, str(e))
                )
                continue
            decoded.append(DecodedProof(k, proof, image))
        return decoded

    def measure_row(self, point: Point, widths: Sequence[float],
                    site_index: int = 0, point_index: int = 0) -> MeasuredRow:
        """First pass: wrap every column and size the row.

        A row taller than a page is cut into segments. Text lines are sliced
        to what one page holds, and photos follow once the evidence text is
        exhausted.
        """
        cfg = self.config
        pad = cfg.cell_padding
        lh = line_height(FONT_SIZE_BODY)
        values = (point.point, point.non_conformite, None, point.action)
        cells = [
            wrap_text(_or_dash(v), w - 2 * pad, FONT_FAMILY, FONT_SIZE_BODY) if v is not None else []
            for v, w in zip(values, widths)
        ]

        proofs = self._decode_proofs(point, site_index, point_index)
        inner = widths[2] - 2 * pad
        evidence = (point.preuves_text or "").strip()
        if not evidence and not proofs:
            evidence = EMPTY_VALUE
        evidence_lines = wrap_text(evidence, inner, FONT_FAMILY, FONT_SIZE_BODY)

        def evidence_height(subset, text_h):
            return predict_proof_block_height([d.proof for d in subset], text_h, inner, cfg)

        # The first segment may share its page with the site subtitle
        capacity = cfg.page_capacity - self.header_height(widths)
        first_capacity = capacity - cfg.subtitle_height - cfg.banner_gap
        segments: List[RowSegment] = []
        taken = [0] * len(cells)
        evidence_taken = 0
        remaining = list(proofs)
        while not segments or remaining or evidence_taken < len(evidence_lines) \
                or any(taken[i] < len(c) for i, c in enumerate(cells)):
            limit = capacity if segments else first_capacity
            max_lines = max(1, int((limit - 2 * pad + 1e-9) // lh))

            seg_cells = [c[taken[i]:taken[i] + max_lines] for i, c in enumerate(cells)]
            taken = [t + len(s) for t, s in zip(taken, seg_cells)]
            seg_evidence = evidence_lines[evidence_taken:evidence_taken + max_lines]
            evidence_taken += len(seg_evidence)
            text_h = len(seg_evidence) * lh

            subset: List[DecodedProof] = []
            if evidence_taken >= len(evidence_lines):
                while remaining:
                    crowded = subset or seg_evidence or any(seg_cells)
                    if crowded and evidence_height(subset + remaining[:1], text_h) > limit:
                        break
                    subset.append(remaining.pop(0))

            height = max([2 * pad + len(c) * lh for i, c in enumerate(seg_cells) if i != 2]
                         + [evidence_height(subset, text_h)])
            segments.append(RowSegment(not segments, seg_cells, seg_evidence, subset, height))

        return MeasuredRow(site_index, point_index, cells, evidence_lines, segments)

    def measure_rows(self, points: Sequence[Point], widths: Sequence[float],
                     site_index: int = 0) -> List[MeasuredRow]:
        points = list(points) or [Point()]
        return [self.measure_row(p, widths, site_index, i) for i, p in enumerate(points)]

    def _draw_header(self, cursor: Cursor, widths: Sequence[float], header_h: float) -> Cursor:
        cursor = self.paginator.ensure_space(cursor, header_h)
        pad = self.config.cell_padding
        x = self.left
        for title, w in zip(TABLE_HEADERS, widths):
            self.surface.rect(x, cursor.y, w, header_h, fill=COLORS["table_head"],
                              stroke=COLORS["grid"], line_width=0.1)
            lines = wrap_text(title, w - 2 * pad, FONT_FAMILY_BOLD, FONT_SIZE_TABLE_HEAD)
            self._draw_centered_lines(lines, x, w, cursor.y, header_h,
                                      FONT_FAMILY_BOLD, FONT_SIZE_TABLE_HEAD, COLORS["text"])
            x += w
        self._place("table_header", cursor, header_h)
        return self.paginator.advance(cursor, header_h)

    def _draw_centered_lines(self, lines, x, w, top, height, font, size, color,
                             valign: str = "middle") -> None:
        lh = line_height(size)
        block = len(lines) * lh
        y = top + (height - block) / 2 if valign == "middle" else top
        for i, text in enumerate(lines):
            self.surface.text(text, x + w / 2, _baseline(y + i * lh, size), font, size, color,
                              align="center")

    def _draw_segment(self, cursor: Cursor, row: MeasuredRow, segment: RowSegment,
                      widths: Sequence[float], shaded: bool) -> Cursor:
        cfg = self.config
        pad = cfg.cell_padding
        h = segment.height
        fill = COLORS["table_alt_row"] if shaded else None
        # Split rows read top-down across pages
        valign = "top" if row.split else "middle"
        top = cursor.y + pad if row.split else cursor.y
        x = self.left
        for col, w in enumerate(widths):
            self.surface.rect(x, cursor.y, w, h, fill=fill, stroke=COLORS["grid"], line_width=0.1)
            if col != 2 and segment.cells[col]:
                self._draw_centered_lines(segment.cells[col], x, w, top, h,
                                          FONT_FAMILY, FONT_SIZE_BODY, COLORS["text"], valign=valign)
            x += w
        self._place("table_row", cursor, h, f"site {row.site_index + 1} / point {row.point_index + 1}")

        evidence_x = self.left + widths[0] + widths[1]
        text_h = segment.evidence_height
        if segment.evidence_lines:
            self._draw_centered_lines(segment.evidence_lines, evidence_x, widths[2], cursor.y + pad,
                                      text_h, FONT_FAMILY, FONT_SIZE_BODY, COLORS["text"], valign="top")
        self._draw_proofs(cursor, segment.proofs, row, evidence_x, widths[2], text_h)
        return self.paginator.advance(cursor, h)

    def _draw_proofs(self, cursor: Cursor, proofs: List[DecodedProof], row: MeasuredRow,
                     cell_x: float, cell_w: float, text_h: float) -> None:
        """Second pass: paint photos and captions at the measured offsets."""
        cfg = self.config
        inner = cell_w - 2 * cfg.cell_padding
        stack = layout_proof_stack([d.proof for d in proofs], inner, cfg)
        top = cursor.y + proofs_offset(text_h, bool(proofs), cfg)
        img_w = min(cfg.proof_image_width, inner)
        img_x = cell_x + (cell_w - img_w) / 2

        for decoded, placement in zip(proofs, stack.placements):
            if placement.caption_y is not None:
                lines = caption_lines(decoded.proof.caption, inner)
                cap_top = top + placement.caption_y
                self._draw_centered_lines(lines, cell_x, cell_w, cap_top, placement.caption_height,
                                          FONT_FAMILY_ITALIC, FONT_SIZE_CAPTION, COLORS["text_light"],
                                          valign="top")
                self._place("caption", Cursor(cursor.page, cap_top), placement.caption_height,
                            decoded.proof.caption)

            image_top = top + placement.image_y
            try:
                self.surface.image(decoded.image, img_x, image_top, img_w, cfg.proof_image_height)
            except Exception as e:
                logger.warning(f"Photo {decoded.index + 1} of point {row.point_index + 1} not drawn: {e}")
                self.report.images.append(ImageOutcome(row.site_index, row.point_index, decoded.index,
                                                       ImageStatus.DRAW_FAILED, str(e)))
                continue
            self._place("image", Cursor(cursor.page, image_top), cfg.proof_image_height)
            self.report.images.append(ImageOutcome(row.site_index, row.point_index, decoded.index,
                                                   ImageStatus.RENDERED))

    def points_table(self, cursor: Cursor, rows: List[MeasuredRow], widths: Sequence[float],
                     header_h: float) -> Cursor:
        """Header row then every measured row; rows that do not fit move to
        the next page, where the header is repeated if configured."""
        first_h = rows[0].segments[0].height if rows else 0.0
        cursor = self.paginator.ensure_space(cursor, header_h + first_h)
        cursor = self._draw_header(cursor, widths, header_h)

        for n, row in enumerate(rows):
            for segment in row.segments:
                nxt = self.paginator.ensure_space(cursor, segment.height)
                if nxt.page != cursor.page and self.config.repeat_table_header:
                    nxt = self._draw_header(nxt, widths, header_h)
                cursor = self._draw_segment(nxt, row, segment, widths, shaded=n % 2 == 1)
        return cursor

    # --- 4. rich text block ---

    def _draw_rich_row(self, cursor: Cursor, row: VisualRow, size: float) -> None:
        s = self.surface
        size_mm = pt_to_mm(size)
        baseline = cursor.y + (rich_row_height(size) - size_mm) / 2 + size_mm * 0.8
        right = self.left + self.width

        if row.bullet:
            s.text(row.bullet, self.left + row.bullet_x, baseline, FONT_FAMILY, size, COLORS["text"])

        for frag in row.fragments:
            font = _style_font(frag.style)
            x = self.left + row.text_x + frag.x
            core = frag.text.strip()
            lead = measure_text_width(frag.text[:len(frag.text) - len(frag.text.lstrip())], font, size)
            core_w = measure_text_width(core, font, size)
            color = to_reportlab(resolve_text_color(frag.style.color)) if frag.style.color else COLORS["text"]

            if frag.style.background and core:
                x0 = x + lead
                x1 = min(x0 + core_w, right)
                if x1 > x0:
                    s.rect(x0, baseline - size_mm * 0.8, x1 - x0, size_mm * 1.05,
                           fill=to_reportlab(resolve_fill_color(frag.style.background)))

            s.text(frag.text, x, baseline, font, size, color)

            if frag.style.underline and core:
                x0 = x + lead
                x1 = min(x0 + core_w, right)
                s.line(x0, baseline + 0.6, x1, baseline + 0.6, color=color, line_width=0.2)

    def rich_text_block(self, cursor: Cursor, title: str, markup: str,
                        size: float = FONT_SIZE_BODY) -> Cursor:
        """Banner followed by the narrative text.

        The banner is kept with the first text row; later rows break onto new
        pages one at a time. Empty markup prints a dash.
        """
        cfg = self.config
        lines = parse_rich_text(markup)
        rows = layout_rich_lines(lines, self.width, cfg, size)
        if not rows:
            rows = [VisualRow(None, 0.0, 0.0, [Fragment(EMPTY_VALUE, SpanStyle(), 0.0,
                                                        measure_text_width(EMPTY_VALUE, FONT_FAMILY, size))])]
        row_h = rich_row_height(size)

        cursor = self.section_banner(cursor, title,
                                     reserve=cfg.banner_height + cfg.banner_gap + row_h)
        for row in rows:
            cursor = self.paginator.ensure_space(cursor, row_h)
            self._draw_rich_row(cursor, row, size)
            self._place("rich_text_row", cursor, row_h, title)
            cursor = self.paginator.advance(cursor, row_h)
        return self.paginator.advance(cursor, cfg.block_gap)

    # --- 5. signature block ---

    def signature_height(self, controller: str) -> Tuple[float, List[str]]:
        cfg = self.config
        value_width = self.width - cfg.signature_value_x - 4
        if controller and controller.strip():
            lines = wrap_text(controller.strip(), value_width, FONT_FAMILY, FONT_SIZE_SIGNATURE)
        else:
            lines = [SIGNATURE_PLACEHOLDER]
        height = (cfg.banner_height + cfg.signature_label_offset
                  + (len(lines) - 1) * line_height(FONT_SIZE_SIGNATURE)
                  + pt_to_mm(FONT_SIZE_SIGNATURE) * 0.3)
        return height, lines

    def signature_block(self, cursor: Cursor, controller: str, title: str) -> Cursor:
        """Banner, 'Contrôleur :' label and name. Never split across pages."""
        cfg = self.config
        height, lines = self.signature_height(controller)
        cursor = self.paginator.ensure_space(cursor, height)

        self._banner(cursor, title, cfg.banner_height, COLORS["section_fill"], FONT_SIZE_BANNER)
        baseline = cursor.y + cfg.banner_height + cfg.signature_label_offset
        self.surface.text("Contrôleur :", self.left + 4, baseline, FONT_FAMILY_BOLD,
                          FONT_SIZE_SIGNATURE, COLORS["black"])
        for i, text in enumerate(lines):
            self.surface.text(text, self.left + cfg.signature_value_x,
                              baseline + i * line_height(FONT_SIZE_SIGNATURE),
                              FONT_FAMILY, FONT_SIZE_SIGNATURE, COLORS["black"])
        self._place("signature", cursor, height, title)
        return self.paginator.advance(cursor, height)
