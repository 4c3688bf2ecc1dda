"""Configuration: env, data paths, content endpoint, matching intervals."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of anchorwall package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so ANCHORWALL_CONTENT_ENDPOINT etc. are set
load_dotenv(BASE_DIR / ".env")

DATA_DIR = Path(os.getenv("ANCHORWALL_DATA_DIR", str(BASE_DIR / "data")))
ANCHORS_PATH = Path(os.getenv("ANCHORWALL_ANCHORS_PATH", str(DATA_DIR / "anchors.json")))
BINDINGS_PATH = Path(os.getenv("ANCHORWALL_BINDINGS_PATH", str(DATA_DIR / "bindings.json")))
ASSET_DIR = Path(os.getenv("ANCHORWALL_ASSET_DIR", str(DATA_DIR / "assets")))

# API
API_HOST = os.getenv("ANCHORWALL_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("ANCHORWALL_API_PORT", "8000"))

# Content feed (JSON: {"photos": [...]})
CONTENT_ENDPOINT = os.getenv("ANCHORWALL_CONTENT_ENDPOINT", "http://localhost:8001/photos")
FETCH_TIMEOUT_SEC = float(os.getenv("ANCHORWALL_FETCH_TIMEOUT_SEC", "10"))

# Live matching loop
POLL_INTERVAL_SEC = float(os.getenv("ANCHORWALL_POLL_INTERVAL_SEC", "5.0"))
READY_CHECK_INTERVAL_SEC = 0.5
AUTO_MATCH_NEW_ANCHORS = os.getenv("ANCHORWALL_AUTO_MATCH_NEW_ANCHORS", "1").lower() in ("1", "true", "yes")

# Anchor names containing one of these (case-insensitive) are portrait slots
PORTRAIT_KEYWORDS = tuple(
    k.strip().lower()
    for k in os.getenv("ANCHORWALL_PORTRAIT_KEYWORDS", "vertical,portrait").split(",")
    if k.strip()
)

# Prefab index -> which display regions the placed anchor has (label, image, plaque)
PREFAB_REGIONS = {
    0: ("label", "image", "plaque"),
    1: ("label", "image"),
    2: ("label",),
}


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
