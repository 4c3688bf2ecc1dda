"""Anchor placement: list, place (auto-matches), preview, delete."""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from anchorwall.api.routes.matching import single_result_to_dict
from anchorwall.api.state import AppState, get_state
from anchorwall.core.anchor_catalog import anchor_orientation, anchor_tag
from anchorwall.core.errors import ContractViolation
from anchorwall.models.anchor import Anchor

router = APIRouter()


class PlaceAnchorBody(BaseModel):
    name: str
    prefab_index: int = 0


def _anchor_to_dict(a: Anchor) -> dict:
    try:
        tag, orientation = anchor_tag(a.name), anchor_orientation(a.name).value
    except ContractViolation:
        tag, orientation = None, None
    return {
        "id": a.id,
        "name": a.name,
        "tag": tag,
        "orientation": orientation,
        "is_top_level": a.is_top_level,
        "prefab_index": a.prefab_index,
        "created_at": a.created_at,
    }


@router.get("/")
def list_anchors(state: AppState = Depends(get_state)):
    """Placed anchors (and the preview, flagged is_top_level=false)."""
    return [_anchor_to_dict(a) for a in state.anchor_store.list_anchors()]


@router.post("/")
def place_anchor(body: PlaceAnchorBody, state: AppState = Depends(get_state)):
    """Place an anchor. When auto-match is on, it is filled with matching content right away."""
    if not body.name.strip():
        raise HTTPException(status_code=400, detail="Anchor name is required")
    anchor = state.anchor_store.create(body.name.strip(), body.prefab_index)
    match = state.auto_matches.get(anchor.id)
    return {
        "anchor": _anchor_to_dict(anchor),
        "match": single_result_to_dict(match) if match else None,
    }


@router.post("/preview")
def set_preview(body: PlaceAnchorBody, state: AppState = Depends(get_state)):
    """Show a preview object (never matched) for the prefab about to be placed."""
    preview = state.anchor_store.set_preview(body.name, body.prefab_index)
    return _anchor_to_dict(preview)


@router.delete("/last")
def delete_last_anchor(state: AppState = Depends(get_state)):
    """Remove the most recently placed anchor."""
    removed = state.anchor_store.delete_last()
    if removed is None:
        raise HTTPException(status_code=404, detail="No anchors placed")
    return _anchor_to_dict(removed)


@router.delete("/{anchor_id}", status_code=204)
def delete_anchor(anchor_id: str, state: AppState = Depends(get_state)):
    """Remove one anchor and its binding."""
    if not state.anchor_store.remove(anchor_id):
        raise HTTPException(status_code=404, detail="Anchor not found")


@router.delete("/")
def clear_anchors(state: AppState = Depends(get_state)):
    """Remove every placed anchor."""
    return {"removed": state.anchor_store.clear()}
