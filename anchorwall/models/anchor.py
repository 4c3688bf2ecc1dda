"""Placed anchors and orientation."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


@dataclass(frozen=True)
class Anchor:
    """A named placeholder in the room.

    Tag and orientation are not stored; they are derived from the name by
    anchorwall.core.anchor_catalog. Preview objects carry is_top_level=False
    and are never match targets.
    """
    id: str
    name: Optional[str]
    is_top_level: bool = True
    prefab_index: int = 0
    created_at: str = ""
