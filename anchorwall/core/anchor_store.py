"""Placed anchors: persistence (JSON), preview object, and create/remove events."""
import json
import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

from anchorwall.models.anchor import Anchor

logger = logging.getLogger(__name__)

AnchorListener = Callable[[Anchor], None]


def load_anchors(path: Path) -> List[Anchor]:
    """Load placed anchors from disk, in placement order."""
    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        logger.warning("Anchors: %s unreadable, starting empty", path)
        return []
    out = []
    for item in data.get("anchors", []):
        try:
            out.append(
                Anchor(
                    id=item["uuid"],
                    name=item["name"],
                    is_top_level=True,
                    prefab_index=int(item.get("prefab_index", 0)),
                    created_at=item.get("created_at", ""),
                )
            )
        except (KeyError, TypeError, ValueError):
            continue
    return out


def save_anchors(path: Path, anchors: List[Anchor]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "anchors": [
            {
                "uuid": a.id,
                "name": a.name,
                "prefab_index": a.prefab_index,
                "created_at": a.created_at,
            }
            for a in anchors
        ]
    }
    path.write_text(json.dumps(data, indent=2))


class AnchorStore:
    """Placed anchors plus the (non-placed) preview that follows the controller."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._anchors: List[Anchor] = load_anchors(self.path)
        self._preview: Optional[Anchor] = None
        self._lock = threading.Lock()
        self._on_created: List[AnchorListener] = []
        self._on_removed: List[AnchorListener] = []

    def add_created_listener(self, fn: AnchorListener) -> None:
        self._on_created.append(fn)

    def add_removed_listener(self, fn: AnchorListener) -> None:
        self._on_removed.append(fn)

    def list_anchors(self) -> List[Anchor]:
        """Placed anchors in placement order, then the preview if any."""
        with self._lock:
            out = list(self._anchors)
            if self._preview is not None:
                out.append(self._preview)
        return out

    def get(self, anchor_id: str) -> Optional[Anchor]:
        with self._lock:
            for a in self._anchors:
                if a.id == anchor_id:
                    return a
        return None

    def set_preview(self, name: str, prefab_index: int = 0) -> Anchor:
        """Replace the preview object. Previews are never match targets."""
        preview = Anchor(
            id=f"preview-{uuid.uuid4()}",
            name=name,
            is_top_level=False,
            prefab_index=prefab_index,
        )
        with self._lock:
            self._preview = preview
        return preview

    def clear_preview(self) -> None:
        with self._lock:
            self._preview = None

    def create(self, name: str, prefab_index: int = 0) -> Anchor:
        """Place a new anchor, save, and notify created listeners."""
        anchor = Anchor(
            id=str(uuid.uuid4()),
            name=name,
            is_top_level=True,
            prefab_index=prefab_index,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            self._anchors.append(anchor)
            save_anchors(self.path, self._anchors)
        logger.info("Anchors: placed %s (%s)", anchor.name, anchor.id)
        self._notify(self._on_created, anchor)
        return anchor

    def remove(self, anchor_id: str) -> bool:
        """Remove anchor by id; save. Returns True if found and removed."""
        with self._lock:
            for i, a in enumerate(self._anchors):
                if a.id == anchor_id:
                    removed = self._anchors.pop(i)
                    save_anchors(self.path, self._anchors)
                    break
            else:
                return False
        self._notify(self._on_removed, removed)
        return True

    def delete_last(self) -> Optional[Anchor]:
        with self._lock:
            if not self._anchors:
                return None
            last = self._anchors[-1]
        self.remove(last.id)
        return last

    def clear(self) -> int:
        with self._lock:
            removed = list(self._anchors)
            self._anchors = []
            save_anchors(self.path, self._anchors)
        for a in removed:
            self._notify(self._on_removed, a)
        return len(removed)

    def _notify(self, listeners: List[AnchorListener], anchor: Anchor) -> None:
        for fn in listeners:
            try:
                fn(anchor)
            except Exception as e:
                logger.warning("Anchors: listener failed for %s: %s", anchor.id, e)
