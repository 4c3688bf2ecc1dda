"""FastAPI app, CORS, and route registration."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Configure logging in the worker process (so match loop INFO logs are visible with uvicorn --reload)
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from anchorwall.api.state import AppState, get_state
from anchorwall.config import ensure_data_dir

# Import routes after state to avoid circular imports
from anchorwall.api.routes import anchors, content, matching

__all__ = ["app", "AppState", "get_state"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_data_dir()
    state = get_state()
    state.match_service.start()
    logging.getLogger(__name__).info(
        "Match loop started (interval %.1fs)", state.match_service.poll_interval_sec
    )

    yield

    state.match_service.stop()


app = FastAPI(
    title="Anchorwall API",
    description="Local REST API for placing anchors and matching photos to them",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(anchors.router, prefix="/api/anchors", tags=["anchors"])
app.include_router(content.router, prefix="/api/content", tags=["content"])
app.include_router(matching.router, prefix="/api/matching", tags=["matching"])
