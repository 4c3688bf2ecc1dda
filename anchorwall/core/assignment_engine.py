"""Content-to-anchor assignment: greedy batch pass and single new-anchor matching.

Batch pass: priority items first, then the rest, each taking the first free
anchor whose tag contains the item's first tag and whose orientation matches.
Anchors are never reused within a pass; nothing is remembered between passes
unless the caller supplies it.

Single anchor: the anchor is fixed and content is searched, so the tag must be
equal (case-insensitive) rather than contained. Content that already appears
to be on display is never picked, and an anchor that already shows known
content is left as it is.
"""
import logging
from typing import AbstractSet, Callable, Iterable, List, Optional, Sequence, Set, Tuple

from anchorwall.core.anchor_catalog import AnchorCatalog, anchor_orientation, anchor_tag
from anchorwall.core.asset_cache import AssetCache
from anchorwall.core.assignment_reconstructor import AssignmentReconstructor
from anchorwall.core.binding_ledger import BindingLedger
from anchorwall.core.errors import ContractViolation
from anchorwall.core.renderer import Renderer
from anchorwall.core.tag_extractor import extract_key
from anchorwall.models.anchor import Anchor
from anchorwall.models.binding import (
    Binding,
    CommitReport,
    ItemOutcome,
    MatchOutcome,
    PassResult,
    SingleAnchorResult,
)
from anchorwall.models.content import ContentItem

logger = logging.getLogger(__name__)

Selector = Callable[[List[Anchor]], Optional[Anchor]]


def first_candidate(candidates: List[Anchor]) -> Optional[Anchor]:
    """Default selector: first in catalog order wins."""
    return candidates[0] if candidates else None


def _require_id(item: ContentItem) -> str:
    if not item.id:
        raise ContractViolation(f"content {item.name!r} has no id")
    return item.id


def order_for_pass(
    all_content: Sequence[ContentItem],
    priority_ids: Iterable[str],
) -> List[ContentItem]:
    """Priority items then regular items.

    An ordered priority sequence (list/tuple) sets the priority order; an
    unordered set keeps content list order. Regular items keep list order.
    """
    if isinstance(priority_ids, (set, frozenset)):
        wanted: AbstractSet[str] = priority_ids
        priority = [i for i in all_content if i.id in wanted]
    else:
        rank = {}
        for pos, content_id in enumerate(priority_ids):
            rank.setdefault(content_id, pos)
        wanted = rank.keys()
        priority = sorted((i for i in all_content if i.id in rank), key=lambda i: rank[i.id])
    regular = [i for i in all_content if i.id not in wanted]
    return priority + regular


class AssignmentEngine:
    """Decides which content goes on which anchor and commits it through the renderer.

    Single writer: callers must not run two passes at once (MatchService
    serializes them).
    """

    def __init__(
        self,
        catalog: AnchorCatalog,
        renderer: Renderer,
        asset_cache: AssetCache,
        reconstructor: Optional[AssignmentReconstructor] = None,
        ledger: Optional[BindingLedger] = None,
        selector: Selector = first_candidate,
    ) -> None:
        self.catalog = catalog
        self._renderer = renderer
        self._asset_cache = asset_cache
        self._reconstructor = reconstructor
        self._ledger = ledger
        self._selector = selector

    # -- primitive -----------------------------------------------------------

    def match_one(self, item: ContentItem, used: AbstractSet[str]) -> Optional[Anchor]:
        """Anchor for item among anchors not in used, or None. Raises ContractViolation for an id-less item."""
        _require_id(item)
        key = extract_key(item.tags)
        if key is None:
            return None
        candidates = self.catalog.find_candidates(key, item.orientation, used)
        return self._selector(candidates)

    # -- batch ---------------------------------------------------------------

    def run_pass(
        self,
        all_content: Sequence[ContentItem],
        priority_ids: Iterable[str] = (),
    ) -> PassResult:
        """Match every content item once; priority items first."""
        self.catalog.snapshot()
        ordered = order_for_pass(all_content, priority_ids)
        result = PassResult()
        used: Set[str] = set()
        processed: Set[str] = set()

        for item in ordered:
            if item.id and item.id in processed:
                logger.debug("Pass: duplicate content id %s, skipping", item.id)
                continue
            if item.id:
                processed.add(item.id)
            try:
                outcome, binding = self._process(item, used)
            except Exception as e:
                logger.exception("Pass: photo %s could not be matched", item.id)
                outcome, binding = ItemOutcome(item.id, MatchOutcome.INVALID, detail=str(e)), None
            result.outcomes.append(outcome)
            if binding is not None:
                result.bindings.append(binding)

        logger.info(
            "Pass complete: %d bound, %d missed, %d render failure(s), %d invalid (of %d)",
            result.hits,
            result.misses,
            result.render_failures,
            result.errors,
            len(result.outcomes),
        )
        return result

    def _process(
        self,
        item: ContentItem,
        used: Set[str],
    ) -> Tuple[ItemOutcome, Optional[Binding]]:
        try:
            content_id = _require_id(item)
        except ContractViolation as e:
            logger.error("Pass: %s", e)
            return ItemOutcome(None, MatchOutcome.INVALID, detail=str(e)), None

        key = extract_key(item.tags)
        if key is None:
            logger.warning("Pass: photo %s (%s) has no valid tags, skipping", content_id, item.name)
            return ItemOutcome(content_id, MatchOutcome.NO_KEY), None

        anchor = self.match_one(item, used)
        if anchor is None:
            logger.warning("Pass: no free anchor for tag %r (photo %s)", key, content_id)
            return ItemOutcome(content_id, MatchOutcome.NO_CANDIDATE, detail=key), None

        binding = self._commit(anchor, item, key)
        if binding is None:
            return (
                ItemOutcome(content_id, MatchOutcome.RENDER_FAILED, anchor.id, "all render steps failed"),
                None,
            )
        used.add(anchor.id)
        self.catalog.mark_bound(anchor.id)
        logger.info("Pass: matched photo %s (tag %r) to anchor %s", content_id, key, anchor.name)
        return ItemOutcome(content_id, MatchOutcome.BOUND, anchor.id), binding

    # -- incremental ---------------------------------------------------------

    def content_candidates(
        self,
        anchor: Anchor,
        all_content: Sequence[ContentItem],
        session_new_ids: Iterable[str],
        assigned: AbstractSet[str],
    ) -> List[ContentItem]:
        """Content whose key equals the anchor tag, same orientation, not assigned; session-new first."""
        tag = anchor_tag(anchor.name).lower()
        orientation = anchor_orientation(anchor.name)
        out: List[ContentItem] = []
        seen: Set[str] = set()
        for item in all_content:
            if not item.id:
                logger.warning("Single: content %r has no id, skipping", item.name)
                continue
            if item.id in seen or item.id in assigned:
                continue
            key = extract_key(item.tags)
            if key is None or key.lower() != tag or item.orientation != orientation:
                continue
            seen.add(item.id)
            out.append(item)
        new_ids = set(session_new_ids)
        out.sort(key=lambda i: 0 if i.id in new_ids else 1)
        return out

    def match_single_anchor(
        self,
        anchor: Anchor,
        all_content: Sequence[ContentItem],
        session_new_ids: Iterable[str] = (),
    ) -> SingleAnchorResult:
        """Bind one newly placed anchor without touching the others."""
        if not anchor.is_top_level:
            return SingleAnchorResult(MatchOutcome.INVALID, detail="preview objects are not match targets")
        try:
            self.catalog.refresh()
            known = self.catalog.anchors()
            if all(a.id != anchor.id for a in known):
                known.append(anchor)
            assigned: Set[str] = set()
            current: Optional[str] = None
            if self._reconstructor is not None:
                current = self._reconstructor.assigned_to(anchor, all_content)
                assigned = self._reconstructor.currently_assigned_ids(known, all_content)
            candidates = self.content_candidates(anchor, all_content, session_new_ids, assigned)
        except ContractViolation as e:
            logger.error("Single: anchor %s: %s", anchor.id, e)
            return SingleAnchorResult(MatchOutcome.INVALID, detail=str(e))

        if current is not None:
            logger.info("Single: anchor %s already shows photo %s", anchor.name, current)
            return SingleAnchorResult(
                MatchOutcome.ALREADY_BOUND, detail="anchor already shows content", content_id=current
            )

        if not candidates:
            logger.info("Single: no suitable content for anchor %s", anchor.name)
            return SingleAnchorResult(MatchOutcome.NO_CANDIDATE, detail="no suitable content")

        item = candidates[0]
        binding = self._commit(anchor, item, extract_key(item.tags))
        if binding is None:
            return SingleAnchorResult(MatchOutcome.RENDER_FAILED, detail="all render steps failed")
        self.catalog.mark_bound(anchor.id)
        logger.info("Single: matched anchor %s with photo %s", anchor.name, item.id)
        return SingleAnchorResult(MatchOutcome.BOUND, binding=binding, content_id=item.id)

    # -- commit --------------------------------------------------------------

    def _commit(self, anchor: Anchor, item: ContentItem, key: str) -> Optional[Binding]:
        """Label, photo, plaque. Binding if at least one step succeeded."""
        surface = self._renderer.surface_for(anchor)
        report = CommitReport()

        report.label_ok = self._step(report, "label", lambda: surface.set_label(key))

        image_path = self._asset_cache.local_path_for(item)
        image = self._asset_cache.read_bytes(image_path) if image_path is not None else None
        if image is None:
            report.failures.append(("image", "not cached"))
        else:
            report.image_ok = self._step(
                report, "image", lambda: surface.set_image(image, image_path.name)
            )

        plaque_path = self._asset_cache.local_path_for_plaque(item.plaque_id)
        plaque = self._asset_cache.read_bytes(plaque_path) if plaque_path is not None else None
        if plaque is None:
            report.failures.append(("plaque", "no plaque" if not item.plaque_id else "not cached"))
        else:
            report.plaque_ok = self._step(
                report, "plaque", lambda: surface.set_plaque(plaque, plaque_path.name)
            )

        for step, reason in report.failures:
            logger.debug("Commit: %s on anchor %s failed (%s)", step, anchor.name, reason)
        if not report.any_ok:
            logger.warning("Commit: every render step failed for photo %s on anchor %s", item.id, anchor.name)
            return None

        if self._ledger is not None:
            try:
                self._ledger.record(anchor.id, item.id)
            except OSError as e:
                logger.warning("Commit: could not record binding for %s: %s", anchor.id, e)
        return Binding(anchor_id=anchor.id, anchor_name=anchor.name, content_id=item.id, commit=report)

    def _step(self, report: CommitReport, step: str, fn: Callable[[], bool]) -> bool:
        try:
            ok = bool(fn())
        except Exception as e:
            logger.warning("Commit: %s raised: %s", step, e)
            report.failures.append((step, str(e)))
            return False
        if not ok:
            report.failures.append((step, "rejected"))
        return ok
