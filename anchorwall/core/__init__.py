"""Core services: tag extraction, anchor catalog, assignment engine, session tracking."""
from anchorwall.core.anchor_catalog import AnchorCatalog
from anchorwall.core.assignment_engine import AssignmentEngine
from anchorwall.core.assignment_reconstructor import AssignmentReconstructor
from anchorwall.core.match_service import MatchService
from anchorwall.core.session_tracker import SessionTracker
from anchorwall.core.tag_extractor import extract_key

__all__ = [
    "AnchorCatalog",
    "AssignmentEngine",
    "AssignmentReconstructor",
    "MatchService",
    "SessionTracker",
    "extract_key",
]
