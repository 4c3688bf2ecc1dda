"""Photo feed client via httpx; parses {"photos": [...]} into ContentItems."""
import logging
from typing import Any, List, Optional

import httpx

from anchorwall.config import CONTENT_ENDPOINT, FETCH_TIMEOUT_SEC
from anchorwall.core.errors import ContentFetchError
from anchorwall.models.content import ContentItem

logger = logging.getLogger(__name__)


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _text(value: Any) -> Optional[str]:
    """Value if it is a string, else None (feeds sometimes send lists or numbers)."""
    return value if isinstance(value, str) else None


_TRUE = {"true", "1", "yes"}


def _flag(value: Any) -> bool:
    if isinstance(value, (bool, int)):
        return bool(value)
    if isinstance(value, str):
        return value.strip().lower() in _TRUE
    return False


def parse_photo(item: dict) -> Optional[ContentItem]:
    """Map one feed entry to a ContentItem, or None if it is malformed.

    Non-string tags, filename and url are dropped rather than carried into the
    core; "vertical" is only true for a bool, a non-zero int or "true"/"1"/"yes".
    """
    try:
        content_id = _opt_str(item["id"])
        if content_id is None:
            return None
        return ContentItem(
            id=content_id,
            name=_text(item.get("filename")) or "",
            tags=_text(item.get("tags")),
            vertical=_flag(item.get("vertical", False)),
            plaque_id=_opt_str(item.get("plaque_id")),
            likes=int(item.get("likes") or 0),
            url=_text(item.get("url")) or "",
            user_id=str(item.get("user_id") or ""),
        )
    except (KeyError, TypeError, ValueError, AttributeError):
        return None


def parse_photos(data: Any) -> List[ContentItem]:
    """Parse the feed body. Malformed entries are skipped."""
    if not isinstance(data, dict):
        raise ContentFetchError("feed body is not an object")
    photos = data.get("photos")
    if photos is None:
        return []
    if not isinstance(photos, list):
        raise ContentFetchError("'photos' is not a list")
    out = []
    for raw in photos:
        item = parse_photo(raw) if isinstance(raw, dict) else None
        if item is None:
            logger.warning("Content: skipping malformed entry %r", raw)
            continue
        out.append(item)
    return out


class ContentSource:
    """Fetches the full photo list from the feed endpoint."""

    def __init__(
        self,
        endpoint: str = CONTENT_ENDPOINT,
        timeout: float = FETCH_TIMEOUT_SEC,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self._client = client or httpx.Client()

    def fetch_all(self) -> List[ContentItem]:
        """Return every photo in the feed. Raises ContentFetchError on network or parse failure."""
        try:
            resp = self._client.get(self.endpoint, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise ContentFetchError(f"fetch failed: {e}") from e
        except ValueError as e:
            raise ContentFetchError(f"invalid JSON: {e}") from e
        items = parse_photos(data)
        logger.info("Content: loaded %d photos", len(items))
        return items
