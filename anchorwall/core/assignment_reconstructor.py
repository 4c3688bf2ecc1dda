"""Infer which content is already on display.

The ledger is consulted first; anchors with no ledger entry (placed before the
ledger existed, or bound by another process) fall back to correlating the
displayed image name with cached asset file names. This is best effort: an
anchor can show content we fail to recognize.
"""
import logging
from pathlib import PurePath
from typing import Dict, Optional, Sequence, Set

from anchorwall.core.asset_cache import AssetCache
from anchorwall.core.binding_ledger import BindingLedger
from anchorwall.core.renderer import Renderer
from anchorwall.models.anchor import Anchor
from anchorwall.models.content import ContentItem

logger = logging.getLogger(__name__)


class AssignmentReconstructor:
    def __init__(
        self,
        renderer: Renderer,
        asset_cache: AssetCache,
        ledger: Optional[BindingLedger] = None,
    ) -> None:
        self._renderer = renderer
        self._asset_cache = asset_cache
        self._ledger = ledger

    def currently_assigned_ids(
        self,
        anchors: Sequence[Anchor],
        content: Sequence[ContentItem],
    ) -> Set[str]:
        """Content ids that top-level anchors appear to be showing."""
        known = {item.id: item for item in content if item.id}
        cached_names = self._cached_names(known)
        assigned: Set[str] = set()
        for anchor in anchors:
            if not anchor.is_top_level:
                continue
            content_id = self._lookup(anchor, known, cached_names)
            if content_id is not None:
                assigned.add(content_id)
        logger.debug("Reconstructor: %d content id(s) already placed", len(assigned))
        return assigned

    def assigned_to(self, anchor: Anchor, content: Sequence[ContentItem]) -> Optional[str]:
        """Content id the anchor appears to be showing, or None."""
        if not anchor.is_top_level:
            return None
        known = {item.id: item for item in content if item.id}
        return self._lookup(anchor, known, self._cached_names(known))

    def _lookup(
        self,
        anchor: Anchor,
        known: Dict[str, ContentItem],
        cached_names: Dict[str, str],
    ) -> Optional[str]:
        content_id = self._from_ledger(anchor, known)
        if content_id is None:
            content_id = self._from_display(anchor, cached_names)
        return content_id

    def _from_ledger(self, anchor: Anchor, known: Dict[str, ContentItem]) -> Optional[str]:
        if self._ledger is None:
            return None
        content_id = self._ledger.content_for(anchor.id)
        if content_id in known:
            return content_id
        return None

    def _cached_names(self, known: Dict[str, ContentItem]) -> Dict[str, str]:
        """content id -> cached file name, for items whose file name carries the id."""
        out = {}
        for content_id, item in known.items():
            path = self._asset_cache.local_path_for(item)
            if path is not None and content_id in path.name:
                out[content_id] = path.name
        return out

    def _from_display(self, anchor: Anchor, cached_names: Dict[str, str]) -> Optional[str]:
        try:
            displayed = self._renderer.surface_for(anchor).displayed_asset()
        except Exception as e:
            logger.warning("Reconstructor: cannot inspect anchor %s: %s", anchor.id, e)
            return None
        if not displayed:
            return None
        displayed_name = PurePath(displayed).name
        for content_id, file_name in cached_names.items():
            if file_name == displayed_name:
                return content_id
        return None
