"""Run matching passes and inspect bindings and what anchors display."""
from fastapi import APIRouter, Depends, HTTPException

from anchorwall.api.state import AppState, get_state
from anchorwall.models.binding import Binding, PassResult, SingleAnchorResult

router = APIRouter()


def binding_to_dict(b: Binding) -> dict:
    return {
        "anchor_id": b.anchor_id,
        "anchor_name": b.anchor_name,
        "content_id": b.content_id,
        "label_ok": b.commit.label_ok,
        "image_ok": b.commit.image_ok,
        "plaque_ok": b.commit.plaque_ok,
        "failures": [{"step": s, "reason": r} for s, r in b.commit.failures],
    }


def single_result_to_dict(r: SingleAnchorResult) -> dict:
    return {
        "outcome": r.outcome.value,
        "binding": binding_to_dict(r.binding) if r.binding else None,
        "content_id": r.content_id,
        "detail": r.detail,
    }


def pass_result_to_dict(r: PassResult) -> dict:
    return {
        "ready": r.ready,
        "reason": r.reason,
        "hits": r.hits,
        "misses": r.misses,
        "render_failures": r.render_failures,
        "errors": r.errors,
        "bindings": [binding_to_dict(b) for b in r.bindings],
        "outcomes": [
            {
                "content_id": o.content_id,
                "outcome": o.outcome.value,
                "anchor_id": o.anchor_id,
                "detail": o.detail,
            }
            for o in r.outcomes
        ],
    }


@router.post("/run")
def run_pass(state: AppState = Depends(get_state)):
    """Run a batch pass over current content; session-new photos go first."""
    return pass_result_to_dict(state.match_service.run_pass())


@router.get("/last")
def last_pass(state: AppState = Depends(get_state)):
    """Result of the most recent batch pass, if any."""
    r = state.match_service.last_result
    return pass_result_to_dict(r) if r is not None else None


@router.post("/anchors/{anchor_id}")
def match_anchor(anchor_id: str, state: AppState = Depends(get_state)):
    """Try to fill one placed anchor without disturbing the others."""
    anchor = state.anchor_store.get(anchor_id)
    if anchor is None:
        raise HTTPException(status_code=404, detail="Anchor not found")
    return single_result_to_dict(state.match_service.match_anchor(anchor))


@router.get("/bindings")
def list_bindings(state: AppState = Depends(get_state)):
    """Persisted anchor -> content bindings."""
    return [
        {"anchor_id": e.anchor_id, "content_id": e.content_id, "bound_at": e.bound_at}
        for e in state.ledger.all()
    ]


@router.get("/display")
def get_display(state: AppState = Depends(get_state)):
    """What each anchor currently shows."""
    return {
        anchor_id: {
            "label": d.label,
            "image_asset": d.image_asset,
            "image_size": d.image_size,
            "plaque_asset": d.plaque_asset,
        }
        for anchor_id, d in state.renderer.display().items()
    }
