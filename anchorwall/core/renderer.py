"""Render targets for anchors: label, photo, and plaque regions."""
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Protocol

from anchorwall.config import PREFAB_REGIONS
from anchorwall.models.anchor import Anchor


class AnchorSurface(Protocol):
    """Per-anchor commit target. Methods return False (never raise) when a region is missing."""

    def set_label(self, text: str) -> bool: ...

    def set_image(self, data: bytes, asset_name: str) -> bool: ...

    def set_plaque(self, data: bytes, asset_name: str) -> bool: ...

    def displayed_asset(self) -> Optional[str]: ...


class Renderer(Protocol):
    def surface_for(self, anchor: Anchor) -> AnchorSurface: ...


@dataclass
class DisplayState:
    label: Optional[str] = None
    image_asset: Optional[str] = None
    image_size: int = 0
    plaque_asset: Optional[str] = None


class SceneSurface:
    """In-memory surface; regions come from the anchor's prefab."""

    def __init__(self, regions: Iterable[str], lock: threading.Lock) -> None:
        self.regions = frozenset(regions)
        self.state = DisplayState()
        self._lock = lock

    def set_label(self, text: str) -> bool:
        if "label" not in self.regions:
            return False
        with self._lock:
            self.state.label = text
        return True

    def set_image(self, data: bytes, asset_name: str) -> bool:
        if "image" not in self.regions or not data:
            return False
        with self._lock:
            self.state.image_asset = asset_name
            self.state.image_size = len(data)
        return True

    def set_plaque(self, data: bytes, asset_name: str) -> bool:
        if "plaque" not in self.regions or not data:
            return False
        with self._lock:
            self.state.plaque_asset = asset_name
        return True

    def displayed_asset(self) -> Optional[str]:
        with self._lock:
            return self.state.image_asset


class SceneRenderer:
    """Keeps one SceneSurface per anchor id. Used when no headset is attached and in tests.

    One lock guards the surface map and every surface's state.
    """

    def __init__(self, prefab_regions: Optional[Dict[int, Iterable[str]]] = None) -> None:
        self._prefab_regions = prefab_regions if prefab_regions is not None else PREFAB_REGIONS
        self._surfaces: Dict[str, SceneSurface] = {}
        self._lock = threading.Lock()

    def surface_for(self, anchor: Anchor) -> SceneSurface:
        with self._lock:
            surface = self._surfaces.get(anchor.id)
            if surface is None:
                regions = self._prefab_regions.get(anchor.prefab_index, ())
                surface = SceneSurface(regions, self._lock)
                self._surfaces[anchor.id] = surface
        return surface

    def drop(self, anchor_id: str) -> None:
        with self._lock:
            self._surfaces.pop(anchor_id, None)

    def display(self) -> Dict[str, DisplayState]:
        with self._lock:
            return {
                anchor_id: DisplayState(**vars(s.state))
                for anchor_id, s in self._surfaces.items()
            }
