"""Bindings and matching results."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class MatchOutcome(str, Enum):
    BOUND = "bound"
    NO_KEY = "no_key"
    NO_CANDIDATE = "no_candidate"
    # Matched an anchor but every render step failed; the anchor stays free
    RENDER_FAILED = "render_failed"
    INVALID = "invalid"
    NOT_READY = "not_ready"
    # Single-anchor only: the anchor already shows known content, left as is
    ALREADY_BOUND = "already_bound"


@dataclass
class CommitReport:
    """Result of the three independent render steps for one binding."""
    label_ok: bool = False
    image_ok: bool = False
    plaque_ok: bool = False
    failures: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def any_ok(self) -> bool:
        return self.label_ok or self.image_ok or self.plaque_ok


@dataclass
class Binding:
    anchor_id: str
    anchor_name: str
    content_id: str
    commit: CommitReport


@dataclass
class ItemOutcome:
    content_id: Optional[str]
    outcome: MatchOutcome
    anchor_id: Optional[str] = None
    detail: str = ""


@dataclass
class PassResult:
    """Outcome of one batch pass. Misses count NO_KEY and NO_CANDIDATE only."""
    ready: bool = True
    bindings: List[Binding] = field(default_factory=list)
    outcomes: List[ItemOutcome] = field(default_factory=list)
    reason: str = ""

    @classmethod
    def not_ready(cls, reason: str) -> "PassResult":
        return cls(ready=False, reason=reason)

    def _count(self, *kinds: MatchOutcome) -> int:
        return sum(1 for o in self.outcomes if o.outcome in kinds)

    @property
    def hits(self) -> int:
        return len(self.bindings)

    @property
    def misses(self) -> int:
        return self._count(MatchOutcome.NO_KEY, MatchOutcome.NO_CANDIDATE)

    @property
    def render_failures(self) -> int:
        return self._count(MatchOutcome.RENDER_FAILED)

    @property
    def errors(self) -> int:
        return self._count(MatchOutcome.INVALID)

    def pairs(self) -> List[Tuple[str, str]]:
        """(anchor_name, content_id) for each binding, in commit order."""
        return [(b.anchor_name, b.content_id) for b in self.bindings]


@dataclass
class SingleAnchorResult:
    outcome: MatchOutcome
    binding: Optional[Binding] = None
    detail: str = ""
    # Content now on the anchor (BOUND or ALREADY_BOUND)
    content_id: Optional[str] = None
