"""Local image cache lookup. Files are placed by the downloader; we only find and read them."""
import logging
from pathlib import Path
from typing import Optional

from anchorwall.models.content import ContentItem

logger = logging.getLogger(__name__)

PLAQUE_SUBDIR = "plaques"


class AssetCache:
    """Finds cached photo and plaque files under root."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def is_ready(self) -> bool:
        return self.root.is_dir()

    def local_path_for(self, item: ContentItem) -> Optional[Path]:
        """Return cached file for item (by filename, then by id prefix) or None."""
        if not self.is_ready() or not isinstance(item.id, str) or not item.id:
            return None
        if isinstance(item.name, str) and item.name:
            direct = self.root / Path(item.name).name
            if direct.is_file():
                return direct
        for p in sorted(self.root.iterdir()):
            if p.is_file() and p.name.startswith(item.id):
                return p
        return None

    def local_path_for_plaque(self, plaque_id: Optional[str]) -> Optional[Path]:
        """Return cached plaque image (plaques/plaque_<id>.* or plaques/<id>.*) or None."""
        if not plaque_id:
            return None
        folder = self.root / PLAQUE_SUBDIR
        if not folder.is_dir():
            return None
        for prefix in (f"plaque_{plaque_id}", plaque_id):
            for p in sorted(folder.iterdir()):
                if p.is_file() and p.stem == prefix:
                    return p
        return None

    def read_bytes(self, path: Path) -> Optional[bytes]:
        try:
            return path.read_bytes()
        except OSError as e:
            logger.warning("Asset cache: cannot read %s (%s)", path, e)
            return None
