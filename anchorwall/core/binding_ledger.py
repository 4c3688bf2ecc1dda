"""Persist and load anchor -> content bindings (JSON)."""
import json
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class LedgerEntry:
    anchor_id: str
    content_id: str
    bound_at: str


def load_entries(path: Path) -> List[LedgerEntry]:
    """Load all ledger entries from disk. Missing or corrupt files load as empty."""
    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        logger.warning("Ledger: %s unreadable, starting empty", path)
        return []
    out = []
    for item in data.get("bindings", []):
        try:
            out.append(
                LedgerEntry(
                    anchor_id=item["anchor_id"],
                    content_id=item["content_id"],
                    bound_at=item["bound_at"],
                )
            )
        except (KeyError, TypeError):
            continue
    return out


def save_entries(path: Path, entries: List[LedgerEntry]) -> None:
    """Save all ledger entries to disk."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "bindings": [
            {
                "anchor_id": e.anchor_id,
                "content_id": e.content_id,
                "bound_at": e.bound_at,
            }
            for e in entries
        ]
    }
    path.write_text(json.dumps(data, indent=2))


class BindingLedger:
    """Which content each anchor currently shows; one entry per anchor. Thread-safe."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._entries: Dict[str, LedgerEntry] = {}
        self._lock = threading.Lock()
        self.load()

    def load(self) -> None:
        entries = {e.anchor_id: e for e in load_entries(self.path)}
        with self._lock:
            self._entries = entries

    def save(self) -> None:
        with self._lock:
            self._save()

    def _save(self) -> None:
        save_entries(self.path, list(self._entries.values()))

    def record(self, anchor_id: str, content_id: str) -> LedgerEntry:
        """Record (or replace) the binding for anchor_id and save."""
        entry = LedgerEntry(
            anchor_id=anchor_id,
            content_id=content_id,
            bound_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            self._entries[anchor_id] = entry
            self._save()
        return entry

    def forget_anchor(self, anchor_id: str) -> bool:
        """Remove binding for anchor_id; save. Returns True if found and removed."""
        with self._lock:
            if self._entries.pop(anchor_id, None) is None:
                return False
            self._save()
        return True

    def clear(self) -> None:
        with self._lock:
            self._entries = {}
            self._save()

    def content_for(self, anchor_id: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(anchor_id)
        return entry.content_id if entry else None

    def all(self) -> List[LedgerEntry]:
        with self._lock:
            return list(self._entries.values())
