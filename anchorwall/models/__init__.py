"""Data models for content, anchors, and bindings."""
from anchorwall.models.anchor import Anchor, Orientation
from anchorwall.models.binding import (
    Binding,
    CommitReport,
    ItemOutcome,
    MatchOutcome,
    PassResult,
    SingleAnchorResult,
)
from anchorwall.models.content import ContentItem, SessionEvent

__all__ = [
    "Anchor",
    "Binding",
    "CommitReport",
    "ContentItem",
    "ItemOutcome",
    "MatchOutcome",
    "Orientation",
    "PassResult",
    "SessionEvent",
    "SingleAnchorResult",
]
