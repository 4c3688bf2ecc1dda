"""First-tag match key from a raw tag string."""
import re
from typing import Optional

_DELIMITERS = re.compile(r"[,;| ]")


def extract_key(raw_tags: Optional[str]) -> Optional[str]:
    """Return the first non-empty tag token (trimmed, case preserved) or None.

    Tags are split on comma, semicolon, pipe and space. "sunset, lake" -> "sunset",
    "  lake|bridge" -> "lake", ",; |" -> None.
    Anything that is not a string yields None.
    """
    if not isinstance(raw_tags, str) or not raw_tags:
        return None
    for token in _DELIMITERS.split(raw_tags):
        token = token.strip()
        if token:
            return token
    return None
