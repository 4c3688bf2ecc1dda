"""Which content ids are new during this live session (drives priority ordering)."""
import logging
import threading
from datetime import datetime, timezone
from typing import FrozenSet, List, Sequence, Set, Tuple

from anchorwall.models.content import ContentItem, SessionEvent

logger = logging.getLogger(__name__)


class SessionTracker:
    """Append-only log of first sightings.

    The first observe() only records the baseline; nothing on the first fetch
    is treated as new. Later observe() calls append unseen ids to the log.
    The log is never pruned. Safe to call from several threads.
    """

    def __init__(self) -> None:
        self._seen: Set[str] = set()
        self._events: List[SessionEvent] = []
        self._initialized = False
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def baseline(self) -> FrozenSet[str]:
        with self._lock:
            return frozenset(self._seen)

    @property
    def new_this_session(self) -> List[str]:
        with self._lock:
            return [e.content_id for e in self._events]

    @property
    def events(self) -> Tuple[SessionEvent, ...]:
        with self._lock:
            return tuple(self._events)

    def observe(self, all_content: Sequence[ContentItem]) -> List[str]:
        """Record a fetch; return ids first seen by this call, in content order."""
        new_ids: List[str] = []
        with self._lock:
            first = not self._initialized
            for item in all_content:
                if not item.id:
                    logger.warning("Session: content %r has no id, ignoring", item.name)
                    continue
                if item.id in self._seen:
                    continue
                self._seen.add(item.id)
                if first:
                    continue
                self._events.append(SessionEvent(item.id, datetime.now(timezone.utc)))
                new_ids.append(item.id)
            self._initialized = True
            baseline_size = len(self._seen)
        if first:
            logger.info("Session: baseline of %d content ids", baseline_size)
        elif new_ids:
            logger.info("Session: %d new content id(s): %s", len(new_ids), ", ".join(new_ids))
        return new_ids
