"""Anchor enumeration, name-derived tag/orientation, and per-pass occupancy."""
import logging
from typing import AbstractSet, Callable, List, Optional, Sequence, Set

from anchorwall.config import PORTRAIT_KEYWORDS
from anchorwall.core.errors import ContractViolation
from anchorwall.models.anchor import Anchor, Orientation

logger = logging.getLogger(__name__)


def _require_name(anchor_name: Optional[str]) -> str:
    if not anchor_name or not anchor_name.strip():
        raise ContractViolation("anchor has no resolvable name")
    return anchor_name


def anchor_tag(anchor_name: Optional[str]) -> str:
    """Everything before the first underscore; whole name if none (or leading)."""
    name = _require_name(anchor_name)
    idx = name.find("_")
    if idx > 0:
        return name[:idx]
    return name


def anchor_orientation(anchor_name: Optional[str]) -> Orientation:
    """PORTRAIT if the name contains a portrait keyword, else LANDSCAPE."""
    lowered = _require_name(anchor_name).lower()
    if any(k in lowered for k in PORTRAIT_KEYWORDS):
        return Orientation.PORTRAIT
    return Orientation.LANDSCAPE


class AnchorCatalog:
    """Snapshot of known anchors plus free/bound occupancy for the current pass.

    list_anchors is the placement collaborator's enumeration; its order is the
    catalog order. Not thread-safe: one pass at a time (see MatchService).
    """

    def __init__(self, list_anchors: Callable[[], Sequence[Anchor]]) -> None:
        self._list_anchors = list_anchors
        self._anchors: List[Anchor] = []
        self._bound: Set[str] = set()
        self.snapshot()

    def snapshot(self) -> List[Anchor]:
        """Freeze the current enumeration and reset every anchor to free."""
        self._anchors = list(self._list_anchors())
        self.reset_occupancy()
        return list(self._anchors)

    def refresh(self) -> List[Anchor]:
        """Re-read the enumeration but keep occupancy of anchors that still exist."""
        self._anchors = list(self._list_anchors())
        present = {a.id for a in self._anchors}
        self._bound &= present
        return list(self._anchors)

    def reset_occupancy(self) -> None:
        self._bound = set()

    def anchors(self) -> List[Anchor]:
        return list(self._anchors)

    def top_level(self) -> List[Anchor]:
        return [a for a in self._anchors if a.is_top_level]

    def get(self, anchor_id: str) -> Optional[Anchor]:
        for a in self._anchors:
            if a.id == anchor_id:
                return a
        return None

    def find_candidates(
        self,
        key: str,
        orientation: Orientation,
        excluding: AbstractSet[str] = frozenset(),
    ) -> List[Anchor]:
        """Top-level anchors whose tag contains key (case-insensitive), same orientation, not excluded."""
        needle = key.lower()
        out = []
        for a in self.top_level():
            if a.id in excluding:
                continue
            try:
                tag = anchor_tag(a.name)
                a_orientation = anchor_orientation(a.name)
            except ContractViolation:
                logger.warning("Catalog: anchor %s has no usable name, skipping", a.id)
                continue
            if needle in tag.lower() and a_orientation == orientation:
                out.append(a)
        logger.debug(
            "Catalog: %d candidate(s) for key=%r orientation=%s",
            len(out),
            key,
            orientation.value,
        )
        return out

    def mark_bound(self, anchor_id: str) -> bool:
        """Transition anchor free -> bound. Returns False if it was already bound."""
        if anchor_id in self._bound:
            return False
        self._bound.add(anchor_id)
        return True

    def is_bound(self, anchor_id: str) -> bool:
        return anchor_id in self._bound

    def bound_ids(self) -> Set[str]:
        return set(self._bound)
