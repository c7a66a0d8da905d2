"""Tests for the report data model."""
from itertools import permutations

import pytest

from inspection_report.errors import ReportStructureError
from inspection_report.report.model import (
    Point,
    Proof,
    Report,
    Site,
    dedupe_proofs,
    normalize_proof,
)


# =========================================================================
# 1. PROOFS
# =========================================================================


class TestNormalizeProof:

    def test_bare_string(self):
        assert normalize_proof("data:x") == Proof("data:x", "", "after")

    def test_record(self):
        assert normalize_proof({"src": "a", "caption": "c", "pos": "before"}) == Proof("a", "c", "before")

    def test_unknown_position_defaults_to_after(self):
        assert normalize_proof({"src": "a", "pos": "middle"}).pos == "after"

    @pytest.mark.parametrize("item", [None, 3, {}, {"caption": "x"}, {"src": ""}, ""])
    def test_invalid_items(self, item):
        assert normalize_proof(item) is None


class TestDedupe:

    ITEMS = ["a", {"src": "a", "caption": "dup"}, Proof("b", "B"), {"src": "c", "pos": "before"}, "b"]

    def test_first_occurrence_wins(self):
        result = dedupe_proofs(self.ITEMS)
        assert [p.src for p in result] == ["a", "b", "c"]
        assert result[0].caption == ""
        assert result[1].caption == "B"

    def test_unique_for_any_order(self):
        for order in permutations(self.ITEMS):
            result = dedupe_proofs(order)
            srcs = [p.src for p in result]
            assert len(srcs) == len(set(srcs))
            assert set(srcs) == {"a", "b", "c"}

    def test_add_proofs_skips_attached_images(self):
        point = Point(proofs=[Proof("a")])
        point.add_proofs(["a", "b", {"src": "b"}])
        assert [p.src for p in point.proofs] == ["a", "b"]

    def test_remove_proof(self):
        point = Point(proofs=[Proof("a"), Proof("b")])
        point.remove_proof(0)
        assert [p.src for p in point.proofs] == ["b"]


# =========================================================================
# 2. REPORT
# =========================================================================


class TestReport:

    def test_dates_sorted_and_unique(self):
        report = Report(dates_controle=["2025-10-08", "2025-10-07", "2025-10-08", ""])
        assert report.dates_controle == ["2025-10-07", "2025-10-08"]

    def test_add_and_remove_date(self):
        report = Report()
        report.add_date("2025-10-08")
        report.add_date("2025-10-07")
        report.add_date("2025-10-07")
        assert report.dates_controle == ["2025-10-07", "2025-10-08"]
        report.remove_date("2025-10-07")
        assert report.dates_controle == ["2025-10-08"]

    def test_add_site_starts_with_one_point(self):
        report = Report()
        site = report.add_site("Atelier")
        assert site.name == "Atelier"
        assert len(site.points) == 1

    def test_site_point_editing(self):
        site = Site()
        site.add_point()
        site.add_point(Point(point="x"))
        site.remove_point(0)
        assert [p.point for p in site.points] == ["x"]

    def test_snapshot_is_independent(self):
        report = Report(sites=[Site(name="A", points=[Point(point="p")])])
        snap = report.snapshot()
        report.sites[0].points[0].point = "changed"
        assert snap.sites[0].points[0].point == "p"


class TestFromDict:

    def test_legacy_points_lifted_into_unnamed_site(self):
        report = Report.from_dict({"points": [{"point": "p", "preuvesImages": ["a", "a"]}],
                                   "dateControle": "2025-10-07"})
        assert len(report.sites) == 1
        assert report.sites[0].name == ""
        assert report.sites[0].points[0].point == "p"
        assert [p.src for p in report.sites[0].points[0].proofs] == ["a"]
        assert report.dates_controle == ["2025-10-07"]

    def test_missing_fields_default(self):
        report = Report.from_dict({})
        assert report == Report()

    @pytest.mark.parametrize("data", [
        [],
        {"sites": "x"},
        {"sites": [1]},
        {"sites": [{"points": "x"}]},
        {"points": "x"},
        {"datesControle": "2025-10-07"},
        {"sites": [{"points": [{"preuvesImages": "a"}]}]},
    ])
    def test_malformed_shapes(self, data):
        with pytest.raises(ReportStructureError):
            Report.from_dict(data)
