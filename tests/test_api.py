"""API tests with an isolated AppState."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from anchorwall.api.app import app
from anchorwall.api.state import AppState, get_state
from anchorwall.models.content import ContentItem

from helpers import FakeSource, photo


@pytest.fixture
def state(tmp_path: Path) -> AppState:
    (tmp_path / "assets").mkdir()
    source = FakeSource([photo("1", "beach"), photo("2", "beach"), photo("3", "forest")])
    return AppState(
        anchors_path=tmp_path / "anchors.json",
        bindings_path=tmp_path / "bindings.json",
        asset_dir=tmp_path / "assets",
        source=source,
        auto_match=True,
    )


@pytest.fixture
def client(state: AppState):
    app.dependency_overrides[get_state] = lambda: state
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestMatchingRoutes:
    def test_run_before_content_not_ready(self, client: TestClient):
        body = client.post("/api/matching/run").json()
        assert body["ready"] is False
        assert body["hits"] == 0

    def test_run_pass(self, client: TestClient, state: AppState):
        for name in ("beach_horizontal", "beach_vertical", "forest_horizontal"):
            state.anchor_store.create(name)
        assert client.post("/api/content/refresh").json()["count"] == 3
        body = client.post("/api/matching/run").json()
        assert body["ready"] is True
        assert body["hits"] == 2
        assert body["misses"] == 1
        assert {b["content_id"] for b in body["bindings"]} == {"1", "3"}
        bindings = client.get("/api/matching/bindings").json()
        assert {b["content_id"] for b in bindings} == {"1", "3"}
        display = client.get("/api/matching/display").json()
        assert sorted(d["label"] for d in display.values() if d["label"]) == ["beach", "forest"]

    def test_match_unknown_anchor(self, client: TestClient):
        assert client.post("/api/matching/anchors/nope").status_code == 404

    def test_match_anchor_again_keeps_content(self, client: TestClient, state: AppState):
        anchor_id = client.post("/api/anchors/", json={"name": "beach_horizontal"}).json()["anchor"]["id"]
        for _ in range(2):
            body = client.post(f"/api/matching/anchors/{anchor_id}").json()
            assert body["outcome"] == "already_bound"
            assert body["content_id"] == "1"
        assert state.ledger.content_for(anchor_id) == "1"


class TestContentRoutes:
    def test_refresh_failure(self, client: TestClient, state: AppState):
        state.match_service.source.fail = True
        assert client.post("/api/content/refresh").status_code == 502

    def test_list_and_session(self, client: TestClient, state: AppState):
        client.post("/api/content/refresh")
        state.match_service.source.items.append(photo("4", "lake, pier"))
        assert client.post("/api/content/refresh").json()["new_ids"] == ["4"]
        items = client.get("/api/content/").json()
        assert [i["key"] for i in items] == ["beach", "beach", "forest", "lake"]
        session = client.get("/api/content/session").json()
        assert session["baseline_count"] == 4
        assert [e["content_id"] for e in session["new_this_session"]] == ["4"]

    def test_list_with_non_string_tags(self, client: TestClient, state: AppState):
        state.match_service.source.items.append(ContentItem(id="5", name="5.jpg", tags=["lake"]))
        client.post("/api/content/refresh")
        resp = client.get("/api/content/")
        assert resp.status_code == 200
        assert resp.json()[-1]["key"] is None


class TestAnchorRoutes:
    def test_place_auto_matches(self, client: TestClient):
        body = client.post("/api/anchors/", json={"name": "forest_horizontal"}).json()
        assert body["anchor"]["tag"] == "forest"
        assert body["anchor"]["orientation"] == "landscape"
        assert body["match"]["outcome"] == "bound"
        assert body["match"]["binding"]["content_id"] == "3"

    def test_place_without_match(self, client: TestClient):
        body = client.post("/api/anchors/", json={"name": "desert_vertical"}).json()
        assert body["match"]["outcome"] == "no_candidate"

    def test_place_requires_name(self, client: TestClient):
        assert client.post("/api/anchors/", json={"name": "  "}).status_code == 400

    def test_preview_listed(self, client: TestClient):
        client.post("/api/anchors/preview", json={"name": "beach_horizontal"})
        listed = client.get("/api/anchors/").json()
        assert [a["is_top_level"] for a in listed] == [False]

    def test_delete(self, client: TestClient, state: AppState):
        anchor_id = client.post("/api/anchors/", json={"name": "forest_horizontal"}).json()["anchor"]["id"]
        assert state.ledger.content_for(anchor_id) == "3"
        assert client.delete(f"/api/anchors/{anchor_id}").status_code == 204
        assert state.ledger.content_for(anchor_id) is None
        assert anchor_id not in client.get("/api/matching/display").json()
        assert client.delete(f"/api/anchors/{anchor_id}").status_code == 404

    def test_delete_last_and_clear(self, client: TestClient):
        client.post("/api/anchors/", json={"name": "a_1"})
        client.post("/api/anchors/", json={"name": "b_1"})
        assert client.delete("/api/anchors/last").json()["name"] == "b_1"
        assert client.delete("/api/anchors/").json() == {"removed": 1}
        assert client.delete("/api/anchors/last").status_code == 404
