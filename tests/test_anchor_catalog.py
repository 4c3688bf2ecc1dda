"""Tests for anchor name parsing, candidate search and occupancy."""

from __future__ import annotations

import pytest

from anchorwall.core.anchor_catalog import AnchorCatalog, anchor_orientation, anchor_tag
from anchorwall.core.errors import ContractViolation
from anchorwall.models.anchor import Anchor, Orientation

from helpers import SCENARIO_ANCHORS, anchors


class TestNameParsing:
    def test_tag_before_first_underscore(self):
        assert anchor_tag("beach_horizontal_2") == "beach"

    def test_tag_whole_name_without_underscore(self):
        assert anchor_tag("lighthouse") == "lighthouse"

    def test_leading_underscore_keeps_whole_name(self):
        assert anchor_tag("_beach") == "_beach"

    def test_orientation_keyword(self):
        assert anchor_orientation("beach_vertical") == Orientation.PORTRAIT
        assert anchor_orientation("Beach_VERTICAL") == Orientation.PORTRAIT
        assert anchor_orientation("beach_horizontal") == Orientation.LANDSCAPE
        assert anchor_orientation("beach") == Orientation.LANDSCAPE

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_unresolvable_name_is_contract_violation(self, name):
        with pytest.raises(ContractViolation):
            anchor_tag(name)
        with pytest.raises(ContractViolation):
            anchor_orientation(name)


class TestFindCandidates:
    def test_orientation_filter(self):
        catalog = AnchorCatalog(lambda: anchors(*SCENARIO_ANCHORS))
        found = catalog.find_candidates("beach", Orientation.LANDSCAPE)
        assert [a.name for a in found] == ["beach_horizontal"]
        found = catalog.find_candidates("beach", Orientation.PORTRAIT)
        assert [a.name for a in found] == ["beach_vertical"]

    def test_substring_case_insensitive(self):
        catalog = AnchorCatalog(lambda: anchors("BeachSide_horizontal", "forest_horizontal"))
        found = catalog.find_candidates("beach", Orientation.LANDSCAPE)
        assert [a.name for a in found] == ["BeachSide_horizontal"]

    def test_excluding(self):
        catalog = AnchorCatalog(lambda: anchors("beach_a", "beach_b"))
        found = catalog.find_candidates("beach", Orientation.LANDSCAPE, {"a0"})
        assert [a.id for a in found] == ["a1"]

    def test_enumeration_order_is_kept(self):
        catalog = AnchorCatalog(lambda: anchors("lake_3", "lake_1", "lake_2"))
        found = catalog.find_candidates("lake", Orientation.LANDSCAPE)
        assert [a.name for a in found] == ["lake_3", "lake_1", "lake_2"]

    def test_preview_filtered_by_structural_flag(self):
        items = [
            Anchor(id="p", name="beach_horizontal", is_top_level=False),
            Anchor(id="t", name="beach_horizontal"),
        ]
        catalog = AnchorCatalog(lambda: items)
        found = catalog.find_candidates("beach", Orientation.LANDSCAPE)
        assert [a.id for a in found] == ["t"]

    def test_nameless_anchor_skipped(self):
        items = [Anchor(id="x", name=None), Anchor(id="y", name="beach_1")]
        catalog = AnchorCatalog(lambda: items)
        assert [a.id for a in catalog.find_candidates("beach", Orientation.LANDSCAPE)] == ["y"]


class TestOccupancy:
    def test_free_to_bound_once(self):
        catalog = AnchorCatalog(lambda: anchors("beach_1"))
        assert catalog.mark_bound("a0") is True
        assert catalog.mark_bound("a0") is False
        assert catalog.is_bound("a0")

    def test_snapshot_resets(self):
        catalog = AnchorCatalog(lambda: anchors("beach_1"))
        catalog.mark_bound("a0")
        catalog.snapshot()
        assert catalog.bound_ids() == set()

    def test_refresh_keeps_occupancy_of_remaining_anchors(self):
        current = anchors("beach_1", "lake_1")
        catalog = AnchorCatalog(lambda: current)
        catalog.mark_bound("a0")
        catalog.mark_bound("a1")
        current.pop()
        catalog.refresh()
        assert catalog.bound_ids() == {"a0"}

    def test_snapshot_is_stable_until_next_snapshot(self):
        current = anchors("beach_1")
        catalog = AnchorCatalog(lambda: current)
        current.append(Anchor(id="new", name="beach_2"))
        assert [a.id for a in catalog.anchors()] == ["a0"]
        catalog.snapshot()
        assert [a.id for a in catalog.anchors()] == ["a0", "new"]
