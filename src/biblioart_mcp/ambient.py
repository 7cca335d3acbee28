"""Session-scoped display state and the ambient background layers.

A ``ViewContext`` exists only while the interactive journey is mounted. The
scroll observer writes the active index, the pointer observer writes the
pointer position; everything else reads ``snapshot()``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from .models.render import RenderNode, node
from .scroll import ScrollTracker

logger = logging.getLogger(__name__)

_NOISE_TEXTURE = "https://grainy-gradients.vercel.app/noise.svg"


@dataclass(frozen=True)
class Pointer:
    x: float = 0.5
    y: float = 0.5
    abs_x: float = 0.0
    abs_y: float = 0.0


@dataclass(frozen=True)
class ViewState:
    """Immutable inputs of one render pass."""

    active_index: int = 0
    pointer: Pointer = field(default_factory=Pointer)
    progress: tuple[float, ...] = ()

    def progress_of(self, index: int) -> float:
        return self.progress[index] if index < len(self.progress) else 0.0


class ViewContext:
    """Display state of one mounted journey view."""

    def __init__(self, scene_count: int) -> None:
        self.scroll = ScrollTracker(scene_count)
        self.pointer = Pointer()

    def move_pointer(self, x: float, y: float, width: float, height: float) -> Pointer:
        """Record a pointer sample in viewport pixels; bad samples are dropped."""
        if not all(math.isfinite(v) for v in (x, y, width, height)) or width <= 0 or height <= 0:
            logger.debug("Ignoring pointer sample (%s, %s) in %sx%s", x, y, width, height)
            return self.pointer
        self.pointer = Pointer(x=x / width, y=y / height, abs_x=x, abs_y=y)
        return self.pointer

    def snapshot(self) -> ViewState:
        tracker = self.scroll
        return ViewState(
            active_index=tracker.active_index,
            pointer=self.pointer,
            progress=tuple(tracker.progress.get(i, 0.0) for i in range(tracker.scene_count)),
        )


def background_layer(pattern: str | None, color: str) -> RenderNode:
    """Fixed pattern layer behind the journey; unknown patterns fall back to noise."""
    base = {"opacity": 0.15, "fixed": True, "transition": "all 1s ease"}
    if pattern == "grid":
        return node("background", pattern="grid", size="40px 40px", **base,
                    image=f"linear-gradient({color} 1px, transparent 1px), "
                          f"linear-gradient(to right, {color} 1px, transparent 1px)")
    if pattern == "dots":
        return node("background", pattern="dots", size="20px 20px", **base,
                    image=f"radial-gradient({color} 1px, transparent 1px)")
    if pattern == "lines":
        return node("background", pattern="lines", size="20px 20px", **base,
                    image=f"repeating-linear-gradient(45deg, {color} 0, {color} 1px, "
                          f"transparent 0, transparent 50%)")
    if pattern == "crosshairs":
        return node("background", node("fade", direction="to bottom", to="black"),
                    pattern="crosshairs", size="40px 40px", position="0 0, 20px 20px", **base,
                    image=f"radial-gradient({color} 1px, transparent 1px), "
                          f"radial-gradient({color} 1px, transparent 1px)")
    if pattern == "gradient_mesh":
        return node("background", pattern="gradient_mesh", **base,
                    image=f"radial-gradient(at 20% 30%, {color} 0, transparent 50%), "
                          f"radial-gradient(at 80% 70%, {color} 0, transparent 50%)")
    return node("background", pattern="noise", image=f"url('{_NOISE_TEXTURE}')",
                fixed=True, opacity=0.05)


def ambient_glow(pointer: Pointer, color: str) -> RenderNode:
    """Soft light following the pointer."""
    return node(
        "glow",
        image=f"radial-gradient(circle at {pointer.abs_x:g}px {pointer.abs_y:g}px, "
              f"{color}10 0%, transparent 40%)",
        fixed=True,
    )
