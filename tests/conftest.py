"""Shared fixtures: scenario content and a wired engine over tmp_path."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from anchorwall.models.content import ContentItem

from helpers import SCENARIO_ANCHORS, Wiring, anchors, photo


@pytest.fixture
def scenario_content() -> List[ContentItem]:
    return [photo("1", "beach"), photo("2", "beach"), photo("3", "forest")]


@pytest.fixture
def wiring(tmp_path: Path) -> Wiring:
    return Wiring(tmp_path, anchors(*SCENARIO_ANCHORS))
