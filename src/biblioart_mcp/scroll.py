"""Scroll progress tracking and active-scene selection.

Progress for a scene runs from 0 (its top edge is at the bottom of the
viewport) to 1 (its bottom edge has left through the top). A scene becomes
active when one of its samples lands inside ``ACTIVE_BAND``.

Sampling can jump over the band on fast scrolls. ``settle()`` is the
scroll-stop correction: it snaps to the visible scene closest to the band
centre so the active index is never left stale once scrolling ends.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

logger = logging.getLogger(__name__)

ACTIVE_BAND = (0.4, 0.6)


def scene_progress(top: float, height: float, viewport_height: float) -> float:
    """Progress of a scene whose top edge sits *top* px below the viewport top."""
    span = height + viewport_height
    if span <= 0:
        return 0.0
    return min(max((viewport_height - top) / span, 0.0), 1.0)


def in_active_band(progress: float) -> bool:
    low, high = ACTIVE_BAND
    return low < progress < high


class ScrollTracker:
    """Best-effort observer of scroll samples; owns only the active index.

    Never raises: bad samples are dropped and the previous state stands.
    """

    def __init__(self, scene_count: int) -> None:
        self.scene_count = scene_count
        self.active_index = 0
        self.progress: dict[int, float] = {}

    def observe(self, index: int, progress: float) -> bool:
        """Record one scene's progress. Returns True if it became active."""
        if not 0 <= index < self.scene_count or not math.isfinite(progress):
            logger.debug("Ignoring scroll sample index=%s progress=%s", index, progress)
            return False
        self.progress[index] = progress
        if in_active_band(progress):
            self.active_index = index
            return True
        return False

    def sample(self, scroll_y: float, viewport_height: float, heights: Sequence[float],
               offset: float = 0.0) -> int:
        """Measure every scene for a scroll position and return the active index.

        Args:
            scroll_y: Current scroll offset of the page.
            viewport_height: Visible height.
            heights: Scene heights in document order.
            offset: Page position of the first scene (height of the hero).
        """
        if not (math.isfinite(scroll_y) and math.isfinite(viewport_height)) or viewport_height <= 0:
            logger.debug("Ignoring scroll sample scroll_y=%s viewport=%s", scroll_y, viewport_height)
            return self.active_index
        top = offset - scroll_y
        for index, height in enumerate(heights[: self.scene_count]):
            if not math.isfinite(height) or height < 0:
                logger.debug("Ignoring scene %d with height %s", index, height)
            else:
                self.observe(index, scene_progress(top, height, viewport_height))
                top += height
        return self.active_index

    def settle(self) -> int:
        """Snap to the visible scene nearest the band centre (scroll stopped)."""
        centre = sum(ACTIVE_BAND) / 2
        visible = [(abs(p - centre), i) for i, p in self.progress.items() if 0 < p < 1]
        if visible:
            self.active_index = min(visible)[1]
        return self.active_index

    def resize(self, scene_count: int) -> None:
        """Follow a replacement document; keep the index when it still exists."""
        self.scene_count = scene_count
        self.progress = {i: p for i, p in self.progress.items() if i < scene_count}
        if self.active_index >= scene_count:
            self.active_index = max(scene_count - 1, 0)
