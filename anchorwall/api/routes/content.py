"""Photo feed snapshot, manual refresh, and session (new photo) state."""
from fastapi import APIRouter, Depends, HTTPException

from anchorwall.api.state import AppState, get_state
from anchorwall.core.tag_extractor import extract_key
from anchorwall.models.content import ContentItem

router = APIRouter()


def _item_to_dict(item: ContentItem) -> dict:
    return {
        "id": item.id,
        "name": item.name,
        "tags": item.tags,
        "key": extract_key(item.tags),
        "orientation": item.orientation.value,
        "plaque_id": item.plaque_id,
        "likes": item.likes,
        "url": item.url,
    }


@router.get("/")
def list_content(state: AppState = Depends(get_state)):
    """Photos from the last successful fetch."""
    return [_item_to_dict(i) for i in state.match_service.content()]


@router.post("/refresh")
def refresh_content(state: AppState = Depends(get_state)):
    """Fetch the feed now. New photos are queued as priority for the next pass."""
    new_ids = state.match_service.refresh()
    if new_ids is None:
        raise HTTPException(status_code=502, detail="Content feed unavailable")
    return {"ok": True, "new_ids": new_ids, "count": len(state.match_service.content())}


@router.get("/session")
def get_session(state: AppState = Depends(get_state)):
    """Baseline size and photos first seen during this session."""
    tracker = state.match_service.tracker
    return {
        "initialized": tracker.initialized,
        "baseline_count": len(tracker.baseline),
        "new_this_session": [
            {"content_id": e.content_id, "first_seen": e.first_seen.isoformat()}
            for e in tracker.events
        ],
    }
