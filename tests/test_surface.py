"""Tests for text measurement and wrapping."""
import pytest

from inspection_report.reporting.pdf.styles import FONT_FAMILY, FONT_FAMILY_ITALIC, FONT_SIZE_BODY
from inspection_report.reporting.pdf.surface import (
    measure_block_height,
    measure_text_width,
    split_long_word,
    wrap_text,
)

EPS = 1e-6
URL = "https://example.com/" + "a" * 120


# =========================================================================
# 1. WRAPPING
# =========================================================================


class TestWrapText:

    def test_empty_text_has_no_lines(self):
        assert wrap_text("", 50.0) == []

    def test_newlines_kept(self):
        assert wrap_text("un\n\ndeux", 50.0) == ["un", "", "deux"]

    def test_long_word_cut_to_width(self):
        lines = wrap_text(URL, 32.0)
        assert len(lines) > 1
        assert all(measure_text_width(line) <= 32.0 + EPS for line in lines)
        assert "".join(lines) == URL

    def test_long_word_between_short_words(self):
        lines = wrap_text(f"voir {URL} pour le détail", 40.0)
        assert lines[0] == "voir"
        assert lines[-1].endswith("pour le détail")
        assert all(measure_text_width(line) <= 40.0 + EPS for line in lines)

    @pytest.mark.parametrize("font", [FONT_FAMILY, FONT_FAMILY_ITALIC])
    def test_every_line_fits(self, font):
        text = "Contrôle " * 30 + URL
        lines = wrap_text(text, 45.0, font, FONT_SIZE_BODY)
        assert all(measure_text_width(line, font) <= 45.0 + EPS for line in lines)

    def test_short_text_untouched(self):
        assert wrap_text("Porte coupe-feu", 80.0) == ["Porte coupe-feu"]


class TestMeasurement:

    def test_split_long_word_chunks_fit(self):
        chunks = split_long_word("x" * 300, 20.0)
        assert "".join(chunks) == "x" * 300
        assert all(measure_text_width(c) <= 20.0 + EPS for c in chunks)

    def test_block_height_counts_wrapped_lines(self):
        one = measure_block_height("a")
        assert measure_block_height(URL, max_width=32.0) == pytest.approx(len(wrap_text(URL, 32.0)) * one)

    def test_empty_block_takes_one_line(self):
        assert measure_block_height("") == pytest.approx(measure_block_height("a"))
