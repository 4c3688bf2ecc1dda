"""Ties feed, session tracking and the engine together; one pass at a time.

All matching goes through a single lock, so timer, API refresh, new-anchor
events and anchor removal never overlap. Content is fetched outside the lock and only the last
good snapshot is handed to a pass.
"""
import logging
import threading
from typing import List, Optional, Tuple

from anchorwall.config import POLL_INTERVAL_SEC, READY_CHECK_INTERVAL_SEC
from anchorwall.core.asset_cache import AssetCache
from anchorwall.core.assignment_engine import AssignmentEngine
from anchorwall.core.binding_ledger import BindingLedger
from anchorwall.core.content_source import ContentSource
from anchorwall.core.errors import ContentFetchError
from anchorwall.core.renderer import SceneRenderer
from anchorwall.core.session_tracker import SessionTracker
from anchorwall.models.anchor import Anchor
from anchorwall.models.binding import MatchOutcome, PassResult, SingleAnchorResult
from anchorwall.models.content import ContentItem

logger = logging.getLogger(__name__)


class MatchService:
    def __init__(
        self,
        engine: AssignmentEngine,
        source: ContentSource,
        asset_cache: AssetCache,
        tracker: Optional[SessionTracker] = None,
        ledger: Optional[BindingLedger] = None,
        poll_interval_sec: float = POLL_INTERVAL_SEC,
        renderer: Optional[SceneRenderer] = None,
    ) -> None:
        self.engine = engine
        self.source = source
        self.asset_cache = asset_cache
        self.tracker = tracker or SessionTracker()
        self.ledger = ledger
        self.renderer = renderer
        self.poll_interval_sec = poll_interval_sec
        self._content: List[ContentItem] = []
        self._fetched = False
        self._content_lock = threading.Lock()
        self._pass_lock = threading.Lock()
        self._loop_thread: Optional[threading.Thread] = None
        self._stop = threading.Event()
        self.last_result: Optional[PassResult] = None

    # -- content -------------------------------------------------------------

    def content(self) -> List[ContentItem]:
        with self._content_lock:
            return list(self._content)

    def _snapshot(self) -> Tuple[List[ContentItem], List[str]]:
        with self._content_lock:
            return list(self._content), self.tracker.new_this_session

    def refresh(self) -> Optional[List[str]]:
        """Fetch the feed and record new ids. None if the fetch failed (previous snapshot kept)."""
        try:
            items = self.source.fetch_all()
        except ContentFetchError as e:
            logger.warning("Refresh: %s (keeping previous content)", e)
            return None
        with self._content_lock:
            self._content = list(items)
            self._fetched = True
            return self.tracker.observe(items)

    def not_ready_reason(self) -> Optional[str]:
        with self._content_lock:
            fetched, count = self._fetched, len(self._content)
        if not fetched:
            return "content not fetched"
        if count == 0:
            return "no content"
        if not self.asset_cache.is_ready():
            return "asset cache unavailable"
        return None

    def is_ready(self) -> bool:
        return self.not_ready_reason() is None

    # -- matching ------------------------------------------------------------

    def run_pass(self) -> PassResult:
        """Batch pass over the current snapshot, session-new content first."""
        reason = self.not_ready_reason()
        if reason is not None:
            logger.info("Pass skipped: %s", reason)
            return PassResult.not_ready(reason)
        content, new_ids = self._snapshot()
        with self._pass_lock:
            result = self.engine.run_pass(content, new_ids)
        self.last_result = result
        return result

    def match_anchor(self, anchor: Anchor) -> SingleAnchorResult:
        """Bind one new anchor against the current snapshot."""
        reason = self.not_ready_reason()
        if reason is not None:
            return SingleAnchorResult(MatchOutcome.NOT_READY, detail=reason)
        content, new_ids = self._snapshot()
        with self._pass_lock:
            return self.engine.match_single_anchor(anchor, content, new_ids)

    # -- anchor events -------------------------------------------------------

    def on_anchor_created(self, anchor: Anchor) -> SingleAnchorResult:
        """Refresh the feed, then try to fill the new anchor."""
        logger.info("Attempting to auto-match new anchor: %s", anchor.name)
        self.refresh()
        result = self.match_anchor(anchor)
        if result.outcome in (MatchOutcome.BOUND, MatchOutcome.ALREADY_BOUND):
            logger.info("Anchor %s shows photo %s", anchor.name, result.content_id)
        else:
            logger.info("No match for new anchor %s (%s)", anchor.name, result.detail or result.outcome.value)
        return result

    def on_anchor_removed(self, anchor: Anchor) -> None:
        """Drop the anchor's surface and ledger entry once any running pass has finished."""
        with self._pass_lock:
            if self.renderer is not None:
                self.renderer.drop(anchor.id)
            if self.ledger is not None:
                self.ledger.forget_anchor(anchor.id)

    # -- background loop -----------------------------------------------------

    def _wait_until_ready(self) -> bool:
        logger.info("Waiting for content and asset cache...")
        while not self._stop.is_set():
            if self.refresh() is not None and self.is_ready():
                return True
            if self._stop.wait(timeout=READY_CHECK_INTERVAL_SEC):
                break
        return False

    def _loop(self) -> None:
        if not self._wait_until_ready():
            return
        logger.info("Content and assets ready, starting initial match")
        try:
            self.run_pass()
        except Exception as e:
            logger.warning("Initial match: %s", e)
        while not self._stop.wait(timeout=self.poll_interval_sec):
            try:
                new_ids = self.refresh()
                if new_ids:
                    logger.info("Live: %d new photo(s), re-matching with priority", len(new_ids))
                    self.run_pass()
            except Exception as e:
                logger.warning("Live match: %s", e)

    def start(self) -> None:
        """Start background loop: initial match when ready, then poll for new content."""
        if self._loop_thread is not None:
            return
        self._stop.clear()
        self._loop_thread = threading.Thread(target=self._loop, daemon=True)
        self._loop_thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._loop_thread:
            self._loop_thread.join(timeout=5.0)
            self._loop_thread = None
