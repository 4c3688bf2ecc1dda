"""Content items from the photo feed and session bookkeeping."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from anchorwall.models.anchor import Orientation


@dataclass(frozen=True)
class ContentItem:
    """One photo from the feed. Replaced wholesale on every fetch."""
    id: Optional[str]
    name: str
    tags: Optional[str]
    vertical: bool = False
    plaque_id: Optional[str] = None
    likes: int = 0
    url: str = ""
    user_id: str = ""

    @property
    def orientation(self) -> Orientation:
        return Orientation.PORTRAIT if self.vertical else Orientation.LANDSCAPE


@dataclass(frozen=True)
class SessionEvent:
    """First sighting of a content id during the live session."""
    content_id: str
    first_seen: datetime
