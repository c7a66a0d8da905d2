"""Tests for the section/table layout engine."""
import pytest

from inspection_report.report.assets import decode_image
from inspection_report.report.model import Point, Proof, Site
from inspection_report.reporting.pdf.cursor import Cursor, Paginator
from inspection_report.reporting.pdf.layout import (
    LayoutEngine,
    caption_height,
    column_widths,
    layout_proof_stack,
    layout_rich_lines,
    predict_rich_text_height,
    rich_row_height,
)
from inspection_report.reporting.pdf.render_report import ImageStatus, RenderReport
from inspection_report.reporting.pdf.richtext import parse_rich_text
from inspection_report.reporting.pdf.styles import FONT_SIZE_BODY, SIGNATURE_PLACEHOLDER, LayoutConfig
from inspection_report.reporting.pdf.surface import CanvasSurface, line_height, measure_text_width

from conftest import BROKEN_DATA_URL, make_png_data_url

EPS = 1e-6


@pytest.fixture
def config():
    return LayoutConfig(repeat_table_header=True, min_block_reservation=28.0)


@pytest.fixture
def engine(config):
    surface = CanvasSurface(config)

    def open_page(page):
        if page > 1:
            surface.new_page()

    return LayoutEngine(surface, Paginator(config, on_new_page=open_page), config, RenderReport())


def assert_blocks_within_pages(render, config):
    for block in render.blocks:
        assert block.y >= config.content_start_y - EPS, block
        assert block.bottom <= config.usable_height + EPS, block


# =========================================================================
# 1. GEOMETRY
# =========================================================================


class TestGeometry:

    def test_column_widths_floor_and_residue(self):
        assert column_widths(180.0, (0.20, 0.20, 0.44, 0.16)) == [36.0, 36.0, 79.0, 29.0]

    def test_engine_columns_fill_content_width(self, engine, config):
        widths = engine.column_widths()
        assert sum(widths) == pytest.approx(config.content_width)
        assert widths[:3] == [36.0, 36.0, 79.0]

    def test_proof_stack_offsets(self, config):
        proofs = [Proof("a", "Légende avant", "before"), Proof("b"), Proof("c", "Légende après", "after")]
        stack = layout_proof_stack(proofs, 75.0, config)
        first, second, third = stack.placements
        cap_h = caption_height("Légende avant", 75.0)

        assert first.caption_y == 0.0
        assert first.image_y == pytest.approx(cap_h + config.proof_caption_gap)
        assert second.caption_y is None
        assert second.height == pytest.approx(config.proof_image_height)
        assert third.caption_y == pytest.approx(third.image_y + config.proof_image_height + config.proof_caption_gap)
        assert stack.height == pytest.approx(
            sum(p.height for p in stack.placements) + 2 * config.proof_item_gap
        )

    def test_blank_caption_takes_no_room(self, config):
        stack = layout_proof_stack([Proof("a", "   ", "before")], 75.0, config)
        assert stack.placements[0].caption_y is None
        assert stack.height == pytest.approx(config.proof_image_height)


# =========================================================================
# 2. POINT TABLE
# =========================================================================


class TestPointTable:

    def test_drawn_content_stays_inside_predicted_rows(self, engine, config, photo_urls):
        site = Site(name="Atelier", points=[
            Point(point="Porte coupe-feu", preuves_text="Ferme-porte défaillant",
                  proofs=[Proof(photo_urls[0], "Vue générale", "before"), Proof(photo_urls[1], "Détail")]),
            Point(point="Éclairage", proofs=[Proof(photo_urls[2]), Proof(photo_urls[3], "Bloc autonome", "after")]),
            Point(point="Sans photo", non_conformite="Aucune"),
        ])
        engine.site_section(Cursor(1, config.content_start_y), site, 0)

        row = None
        for block in engine.report.blocks:
            if block.kind == "table_row":
                row = block
            elif block.kind in ("image", "caption"):
                assert row is not None and block.page == row.page
                assert block.y >= row.y - EPS
                assert block.bottom <= row.bottom - config.cell_padding + EPS
        assert engine.report.rendered_images == 4
        assert_blocks_within_pages(engine.report, config)

    def test_subtitle_kept_with_table(self, engine, config, photo_urls):
        site = Site(name="Chaufferie", points=[Point(proofs=[Proof(photo_urls[0])])])
        engine.site_section(Cursor(1, 240.0), site, 0)

        subtitle = engine.report.blocks_of("site_subtitle")[0]
        header = engine.report.blocks_of("table_header")[0]
        first_row = engine.report.blocks_of("table_row")[0]
        assert subtitle.page == header.page == first_row.page == 2

    def test_undecodable_photo_skipped(self, engine, config, photo_urls):
        site = Site(points=[Point(proofs=[Proof(photo_urls[0]), Proof(BROKEN_DATA_URL), Proof(photo_urls[1])])])
        engine.site_section(Cursor(1, config.content_start_y), site, 0)

        statuses = [o.status for o in engine.report.images]
        assert statuses.count(ImageStatus.DECODE_FAILED) == 1
        assert engine.report.rendered_images == 2
        assert len(engine.report.blocks_of("image")) == 2

    def test_images_decoded_once(self, config, photo_urls):
        calls = []

        def loader(src):
            calls.append(src)
            return decode_image(src)

        surface = CanvasSurface(config)
        engine = LayoutEngine(surface, Paginator(config), config, RenderReport(), image_loader=loader)
        site = Site(points=[Point(proofs=[Proof(photo_urls[0]), Proof(BROKEN_DATA_URL)]),
                            Point(proofs=[Proof(photo_urls[0]), Proof(BROKEN_DATA_URL)])])
        engine.site_section(Cursor(1, config.content_start_y), site, 0)
        assert sorted(calls) == sorted([photo_urls[0], BROKEN_DATA_URL])
        assert len(engine.report.failed_images) == 2

    def test_tall_row_split_between_photos(self, engine, config):
        urls = [make_png_data_url((20 * i, 100, 150)) for i in range(9)]
        site = Site(points=[Point(point="Toiture", proofs=[Proof(u, f"Photo {i}") for i, u in enumerate(urls)])])
        widths = engine.column_widths()
        header_h = engine.header_height(widths)

        measured = engine.measure_row(site.points[0], widths)
        assert len(measured.segments) > 1
        assert measured.segments[0].first and not measured.segments[1].first
        assert all(s.height <= config.page_capacity - header_h + EPS for s in measured.segments)

        engine.site_section(Cursor(1, config.content_start_y), site, 0)
        render = engine.report
        assert render.rendered_images == 9
        assert_blocks_within_pages(render, config)

    def test_tall_text_split_across_segments(self, engine, config, photo_urls):
        evidence = " ".join(f"observation{i}" for i in range(900))
        point = Point(point="Local technique " * 80, preuves_text=evidence,
                      proofs=[Proof(photo_urls[0], "Vue"), Proof(photo_urls[1])])
        widths = engine.column_widths()
        header_h = engine.header_height(widths)
        capacity = config.page_capacity - header_h

        measured = engine.measure_row(point, widths)
        segments = measured.segments
        assert len(segments) > 2
        assert segments[0].height <= capacity - config.subtitle_height - config.banner_gap + EPS
        assert all(s.height <= capacity + EPS for s in segments)
        assert sum((s.cells[0] for s in segments), []) == measured.cells[0]
        assert sum((s.evidence_lines for s in segments), []) == measured.evidence_lines
        # Photos come after the last evidence line
        with_photos = [i for i, s in enumerate(segments) if s.proofs]
        last_text = max(i for i, s in enumerate(segments) if s.evidence_lines)
        assert min(with_photos) >= last_text
        assert sum(len(s.proofs) for s in segments) == 2

    def test_tall_text_row_drawn_inside_pages(self, engine, config):
        evidence = " ".join(f"observation{i}" for i in range(900))
        site = Site(name="Sous-sol", points=[Point(point="Local technique " * 80, preuves_text=evidence)])
        engine.site_section(Cursor(1, config.content_start_y), site, 0)

        render = engine.report
        rows = render.blocks_of("table_row")
        assert len(rows) > 2
        subtitle = render.blocks_of("site_subtitle")[0]
        assert subtitle.page == render.blocks_of("table_header")[0].page == rows[0].page
        assert render.overflows == []
        assert_blocks_within_pages(render, config)

    def test_long_url_wrapped_inside_cell(self, engine):
        url = "https://example.com/" + "a" * 120
        widths = engine.column_widths()
        measured = engine.measure_row(Point(point=url, action=url), widths)
        inner = widths[0] - 2 * engine.config.cell_padding
        assert len(measured.cells[0]) > 1
        assert all(measure_text_width(line) <= inner + EPS for line in measured.cells[0])
        assert "".join(measured.cells[3]) == url

    def test_short_row_single_segment(self, engine):
        measured = engine.measure_row(Point(point="Porte", preuves_text="RAS"), engine.column_widths())
        assert not measured.split
        assert measured.segments[0].cells[0] == ["Porte"]
        assert measured.segments[0].evidence_height == pytest.approx(line_height(FONT_SIZE_BODY))

    def test_header_repeated_on_continuation_pages(self, engine, config):
        urls = [make_png_data_url((20 * i, 100, 150)) for i in range(9)]
        points = [Point(point=f"Point {i}", proofs=[Proof(u)]) for i, u in enumerate(urls)]
        engine.site_section(Cursor(1, config.content_start_y), Site(points=points), 0)

        render = engine.report
        row_pages = {b.page for b in render.blocks_of("table_row")}
        assert len(row_pages) > 1
        for page in row_pages:
            on_page = render.blocks_on(page)
            kinds = [b.kind for b in on_page if b.kind in ("table_header", "table_row")]
            assert kinds[0] == "table_header"

    def test_header_not_repeated_when_disabled(self, photo_urls):
        config = LayoutConfig(repeat_table_header=False)
        engine = LayoutEngine(CanvasSurface(config), Paginator(config), config, RenderReport())
        urls = [make_png_data_url((20 * i, 100, 150)) for i in range(9)]
        points = [Point(proofs=[Proof(u)]) for u in urls]
        engine.site_section(Cursor(1, config.content_start_y), Site(points=points), 0)
        assert len(engine.report.blocks_of("table_header")) == 1

    def test_empty_site_renders_placeholder_row(self, engine, config):
        engine.site_section(Cursor(1, config.content_start_y), Site(name="Vide", points=[]), 0)
        assert len(engine.report.blocks_of("table_row")) == 1


# =========================================================================
# 3. DRAW FAILURES
# =========================================================================


class RefusingSurface(CanvasSurface):
    """Canvas whose image() raises for the images `refuse` picks out."""

    def __init__(self, config, refuse):
        super().__init__(config)
        self.refuse = refuse

    def image(self, image, x, y, w, h):
        if self.refuse(image):
            raise OSError("cannot paint image")
        super().image(image, x, y, w, h)


class TestDrawFailures:

    def test_photo_that_fails_to_draw_is_recorded(self, config, photo_urls):
        decoded = {}

        def loader(src):
            decoded[src] = decode_image(src)
            return decoded[src]

        surface = RefusingSurface(config, lambda image: image is decoded.get(photo_urls[1]))
        engine = LayoutEngine(surface, Paginator(config), config, RenderReport(), image_loader=loader)
        site = Site(points=[Point(proofs=[Proof(photo_urls[0]), Proof(photo_urls[1], "Détail"),
                                          Proof(photo_urls[2])])])
        engine.site_section(Cursor(1, config.content_start_y), site, 0)

        render = engine.report
        statuses = [o.status for o in render.images]
        assert statuses == [ImageStatus.RENDERED, ImageStatus.DRAW_FAILED, ImageStatus.RENDERED]
        assert render.rendered_images == 2
        assert [o.proof_index for o in render.failed_images] == [1]
        assert "cannot paint image" in render.failed_images[0].error
        assert len(render.blocks_of("image")) == 2

    def test_every_photo_failing_still_lays_out(self, config, photo_urls):
        surface = RefusingSurface(config, lambda image: True)
        engine = LayoutEngine(surface, Paginator(config), config, RenderReport())
        site = Site(points=[Point(point="Façade", proofs=[Proof(u) for u in photo_urls])])
        engine.site_section(Cursor(1, config.content_start_y), site, 0)

        render = engine.report
        assert render.rendered_images == 0
        assert [o.status for o in render.images] == [ImageStatus.DRAW_FAILED] * 4
        assert len(render.blocks_of("table_row")) == 1


# =========================================================================
# 4. RICH TEXT AND SIGNATURE
# =========================================================================


class TestRichTextBlock:

    def test_rows_match_prediction(self, engine, config):
        markup = "<ul>" + "".join(f"<li>Élément numéro {i} avec un texte assez long pour passer à la ligne "
                                  f"dans la largeur de la page</li>" for i in range(40)) + "</ul>"
        engine.rich_text_block(Cursor(1, config.content_start_y), "2. Constatations générales", markup)

        lines = parse_rich_text(markup)
        rows = engine.report.blocks_of("rich_text_row")
        assert len(rows) == len(layout_rich_lines(lines, config.content_width, config))
        assert len(rows) * rich_row_height() == pytest.approx(
            predict_rich_text_height(lines, config.content_width, config)
        )
        assert len({b.page for b in rows}) > 1
        assert_blocks_within_pages(engine.report, config)

    def test_empty_markup_prints_dash(self, engine, config):
        engine.rich_text_block(Cursor(1, config.content_start_y), "3. Recommandations globales", "<p></p>")
        assert len(engine.report.blocks_of("rich_text_row")) == 1

    def test_banner_kept_with_first_row(self, engine, config):
        # Room for the banner alone, not for the banner plus one text row
        y = config.usable_height - (config.banner_height + 5.5)
        engine.rich_text_block(Cursor(1, y), "2. Constatations générales", "<p>texte</p>")
        banner = engine.report.blocks_of("section_banner")[0]
        first_row = engine.report.blocks_of("rich_text_row")[0]
        assert banner.page == first_row.page == 2

    def test_hanging_indent(self, config):
        lines = parse_rich_text("<ul><li>" + "mot " * 80 + "</li></ul>")
        rows = layout_rich_lines(lines, 100.0, config)
        assert len(rows) > 1
        assert rows[0].bullet is not None
        assert all(r.bullet is None for r in rows[1:])
        assert len({r.text_x for r in rows}) == 1

    def test_long_word_split(self, config):
        rows = layout_rich_lines(parse_rich_text("x" * 400), 50.0, config)
        assert len(rows) > 1


class TestSignature:

    def test_placeholder_when_no_controller(self, engine):
        _, lines = engine.signature_height("   ")
        assert lines == [SIGNATURE_PLACEHOLDER]

    def test_signature_never_split(self, engine, config):
        height, _ = engine.signature_height("Jean Dupont")
        cursor = engine.signature_block(Cursor(1, config.usable_height - height + 1.0), "Jean Dupont", "4. Signature")
        block = engine.report.last_block
        assert block.kind == "signature"
        assert block.page == 2
        assert block.bottom <= config.usable_height
        assert cursor.page == 2
