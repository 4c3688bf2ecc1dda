"""Builders and fakes shared by the test modules."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from anchorwall.core.anchor_catalog import AnchorCatalog
from anchorwall.core.asset_cache import AssetCache
from anchorwall.core.assignment_engine import AssignmentEngine
from anchorwall.core.assignment_reconstructor import AssignmentReconstructor
from anchorwall.core.binding_ledger import BindingLedger
from anchorwall.core.errors import ContentFetchError
from anchorwall.core.renderer import SceneRenderer
from anchorwall.models.anchor import Anchor
from anchorwall.models.content import ContentItem


def photo(
    content_id: Optional[str],
    tags: Optional[str],
    vertical: bool = False,
    name: str = "",
    plaque_id: Optional[str] = None,
) -> ContentItem:
    return ContentItem(
        id=content_id,
        name=name or (f"{content_id}.jpg" if content_id else ""),
        tags=tags,
        vertical=vertical,
        plaque_id=plaque_id,
    )


def anchors(*names: str, prefab_index: int = 0) -> List[Anchor]:
    return [Anchor(id=f"a{i}", name=n, prefab_index=prefab_index) for i, n in enumerate(names)]


class FakeSource:
    """Stands in for the HTTP feed."""

    def __init__(self, items: Optional[List[ContentItem]] = None) -> None:
        self.items = list(items or [])
        self.fail = False
        self.calls = 0

    def fetch_all(self) -> List[ContentItem]:
        self.calls += 1
        if self.fail:
            raise ContentFetchError("feed offline")
        return list(self.items)


class Wiring:
    """Engine plus collaborators over a mutable anchor list."""

    def __init__(self, tmp_path: Path, anchor_list: List[Anchor]) -> None:
        self.anchor_list = list(anchor_list)
        self.asset_dir = tmp_path / "assets"
        self.asset_dir.mkdir(exist_ok=True)
        self.renderer = SceneRenderer()
        self.asset_cache = AssetCache(self.asset_dir)
        self.ledger = BindingLedger(tmp_path / "bindings.json")
        self.catalog = AnchorCatalog(lambda: self.anchor_list)
        self.reconstructor = AssignmentReconstructor(self.renderer, self.asset_cache, self.ledger)
        self.engine = AssignmentEngine(
            self.catalog,
            self.renderer,
            self.asset_cache,
            reconstructor=self.reconstructor,
            ledger=self.ledger,
        )

    def cache_image(self, file_name: str, data: bytes = b"img") -> Path:
        p = self.asset_dir / file_name
        p.write_bytes(data)
        return p

    def cache_plaque(self, plaque_id: str, data: bytes = b"plaque") -> Path:
        folder = self.asset_dir / "plaques"
        folder.mkdir(exist_ok=True)
        p = folder / f"plaque_{plaque_id}.png"
        p.write_bytes(data)
        return p


SCENARIO_ANCHORS = ("beach_horizontal", "beach_vertical", "forest_horizontal")
