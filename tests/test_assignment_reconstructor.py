"""Tests for inferring already-placed content."""

from __future__ import annotations

from anchorwall.models.anchor import Anchor

from helpers import Wiring, photo


class BrokenRenderer:
    def surface_for(self, anchor):
        raise RuntimeError("scene not loaded")


class TestLedgerLookup:
    def test_ledger_entry_for_known_content(self, wiring: Wiring):
        wiring.ledger.record("a0", "1")
        content = [photo("1", "beach")]
        assert wiring.reconstructor.currently_assigned_ids(wiring.anchor_list, content) == {"1"}

    def test_ledger_entry_for_unknown_content_ignored(self, wiring: Wiring):
        wiring.ledger.record("a0", "gone")
        content = [photo("1", "beach")]
        assert wiring.reconstructor.currently_assigned_ids(wiring.anchor_list, content) == set()

    def test_preview_anchor_ignored(self, wiring: Wiring):
        wiring.ledger.record("p", "1")
        preview = Anchor(id="p", name="beach_horizontal", is_top_level=False)
        assigned = wiring.reconstructor.currently_assigned_ids([preview], [photo("1", "beach")])
        assert assigned == set()


class TestDisplayHeuristic:
    def test_displayed_asset_correlated_by_cached_name(self, wiring: Wiring):
        wiring.cache_image("7_sunset.jpg")
        item = photo("7", "sunset", name="7_sunset.jpg")
        wiring.renderer.surface_for(wiring.anchor_list[0]).set_image(b"x", "7_sunset.jpg")
        assert wiring.reconstructor.currently_assigned_ids(wiring.anchor_list, [item]) == {"7"}

    def test_displayed_asset_with_decorated_path(self, wiring: Wiring):
        wiring.cache_image("7_sunset.jpg")
        item = photo("7", "sunset", name="7_sunset.jpg")
        surface = wiring.renderer.surface_for(wiring.anchor_list[0])
        surface.set_image(b"x", "cache/7_sunset.jpg")
        assert wiring.reconstructor.currently_assigned_ids(wiring.anchor_list, [item]) == {"7"}

    def test_uncached_item_not_recognized(self, wiring: Wiring):
        item = photo("7", "sunset", name="7_sunset.jpg")
        wiring.renderer.surface_for(wiring.anchor_list[0]).set_image(b"x", "7_sunset.jpg")
        assert wiring.reconstructor.currently_assigned_ids(wiring.anchor_list, [item]) == set()

    def test_cached_name_without_id_not_recognized(self, wiring: Wiring):
        wiring.cache_image("sunset.jpg")
        item = photo("7", "sunset", name="sunset.jpg")
        wiring.renderer.surface_for(wiring.anchor_list[0]).set_image(b"x", "sunset.jpg")
        assert wiring.reconstructor.currently_assigned_ids(wiring.anchor_list, [item]) == set()

    def test_empty_display_contributes_nothing(self, wiring: Wiring):
        wiring.cache_image("1.jpg")
        assert wiring.reconstructor.currently_assigned_ids(wiring.anchor_list, [photo("1", "beach")]) == set()

    def test_renderer_error_is_tolerated(self, wiring: Wiring):
        from anchorwall.core.assignment_reconstructor import AssignmentReconstructor

        reconstructor = AssignmentReconstructor(BrokenRenderer(), wiring.asset_cache)
        assert reconstructor.currently_assigned_ids(wiring.anchor_list, [photo("1", "beach")]) == set()

    def test_after_pass_with_images(self, wiring: Wiring, scenario_content):
        for item in scenario_content:
            wiring.cache_image(item.name)
        wiring.engine.run_pass(scenario_content, [])
        wiring.ledger.clear()
        assigned = wiring.reconstructor.currently_assigned_ids(wiring.anchor_list, scenario_content)
        assert assigned == {"1", "3"}
