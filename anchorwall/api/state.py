"""Shared application state (injected into routes)."""
from pathlib import Path
from typing import Dict, Optional

from anchorwall.config import (
    ANCHORS_PATH,
    ASSET_DIR,
    AUTO_MATCH_NEW_ANCHORS,
    BINDINGS_PATH,
)
from anchorwall.core.anchor_catalog import AnchorCatalog
from anchorwall.core.anchor_store import AnchorStore
from anchorwall.core.asset_cache import AssetCache
from anchorwall.core.assignment_engine import AssignmentEngine
from anchorwall.core.assignment_reconstructor import AssignmentReconstructor
from anchorwall.core.binding_ledger import BindingLedger
from anchorwall.core.content_source import ContentSource
from anchorwall.core.match_service import MatchService
from anchorwall.core.renderer import SceneRenderer
from anchorwall.models.anchor import Anchor
from anchorwall.models.binding import SingleAnchorResult


class AppState:
    def __init__(
        self,
        anchors_path: Path = ANCHORS_PATH,
        bindings_path: Path = BINDINGS_PATH,
        asset_dir: Path = ASSET_DIR,
        source: Optional[ContentSource] = None,
        auto_match: bool = AUTO_MATCH_NEW_ANCHORS,
    ) -> None:
        self.anchor_store = AnchorStore(anchors_path)
        self.renderer = SceneRenderer()
        self.asset_cache = AssetCache(asset_dir)
        self.ledger = BindingLedger(bindings_path)
        self.catalog = AnchorCatalog(self.anchor_store.list_anchors)
        self.engine = AssignmentEngine(
            self.catalog,
            self.renderer,
            self.asset_cache,
            reconstructor=AssignmentReconstructor(self.renderer, self.asset_cache, self.ledger),
            ledger=self.ledger,
        )
        self.match_service = MatchService(
            self.engine,
            source or ContentSource(),
            self.asset_cache,
            ledger=self.ledger,
            renderer=self.renderer,
        )
        # Latest auto-match result per new anchor id
        self.auto_matches: Dict[str, SingleAnchorResult] = {}
        self.anchor_store.add_removed_listener(self._on_anchor_removed)
        if auto_match:
            self.anchor_store.add_created_listener(self._on_anchor_created)

    def _on_anchor_created(self, anchor: Anchor) -> None:
        self.auto_matches[anchor.id] = self.match_service.on_anchor_created(anchor)

    def _on_anchor_removed(self, anchor: Anchor) -> None:
        self.auto_matches.pop(anchor.id, None)
        self.match_service.on_anchor_removed(anchor)


_state: Optional[AppState] = None


def get_state() -> AppState:
    global _state
    if _state is None:
        _state = AppState()
    return _state
