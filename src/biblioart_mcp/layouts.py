"""Layout dispatch -- a closed registry of six presentation strategies.

Each strategy is a pure ``render(scene, progress) -> RenderNode``. Dispatch is
total: any tag outside the six (including empty or missing) resolves to
``split_dynamic``.
"""

from __future__ import annotations

from enum import Enum

from .emphasis import render_emphasis
from .entity import render_entity
from .models.document import Scene, VisualParams
from .models.render import RenderNode, node


class LayoutKind(str, Enum):
    TYPOGRAPHIC_STORM = "typographic_storm"
    ENTITY_FOCUS = "entity_focus"
    CONSTELLATION_NODES = "constellation_nodes"
    SPLIT_DYNAMIC = "split_dynamic"
    TIMELINE_PROCESS = "timeline_process"
    ARCHITECTURAL_LENS = "architectural_lens"


DEFAULT_LAYOUT = LayoutKind.SPLIT_DYNAMIC


def _lerp(progress: float, p0: float, p1: float, v0: float, v1: float) -> float:
    """Map progress in [p0, p1] onto [v0, v1], clamped at both ends."""
    if progress <= p0:
        return v0
    if progress >= p1:
        return v1
    return v0 + (v1 - v0) * (progress - p0) / (p1 - p0)


def _paragraphs(scene: Scene, limit: int | None = None, **props) -> list[RenderNode]:
    accent = scene.visual.palette.accent
    texts = scene.paragraphs if limit is None else scene.paragraphs[:limit]
    return [node("paragraph", render_emphasis(p, accent), **props) for p in texts]


class LayoutStrategy:
    """Uniform capability every layout variant implements."""

    kind: LayoutKind

    def render(self, scene: Scene, progress: float) -> RenderNode:
        raise NotImplementedError


class TypographicStorm(LayoutStrategy):
    """Drifting ghost phrase behind a glass panel of text."""

    kind = LayoutKind.TYPOGRAPHIC_STORM

    def render(self, scene: Scene, progress: float) -> RenderNode:
        palette = scene.visual.palette
        return node(
            "stack",
            node("ghost_text", text=scene.highlight_phrase,
                 x=_lerp(progress, 0, 1, -200, 200), opacity=0.04, blur="sm"),
            node("backdrop",
                 render_entity(scene.visual.visual_params, palette.primary, palette.secondary, progress),
                 opacity=0.15),
            node(
                "panel",
                node("tag", text=scene.chapter_title),
                node("heading", text=scene.highlight_phrase, level=1, blend="lighten"),
                *_paragraphs(scene, size="xl"),
                glass=True,
            ),
            layout=self.kind.value,
            align="center",
        )


class EntityFocus(LayoutStrategy):
    """Text column beside a dominant entity."""

    kind = LayoutKind.ENTITY_FOCUS

    def render(self, scene: Scene, progress: float) -> RenderNode:
        palette = scene.visual.palette
        return node(
            "columns",
            node(
                "column",
                node("rule", width=60, color=palette.text),
                node("heading", text=scene.highlight_phrase, level=2),
                *_paragraphs(scene, border="left"),
                order=2,
            ),
            node(
                "column",
                render_entity(scene.visual.visual_params, palette.primary, palette.secondary, progress),
                order=1,
            ),
            layout=self.kind.value,
        )


class ConstellationNodes(LayoutStrategy):
    """Gallery items as floating nodes; a missing gallery is an empty node set."""

    kind = LayoutKind.CONSTELLATION_NODES

    def render(self, scene: Scene, progress: float) -> RenderNode:
        palette = scene.visual.palette
        items = scene.visual.gallery_items or ()
        nodes = [
            node(
                "star",
                node("heading", text=item.title, level=3, hover_color=palette.primary),
                node("caption", text=item.description),
                dot_color=palette.primary,
                y_offset=40 if i % 2 == 0 else -40,
                reveal_delay=round(i * 0.1, 2),
                icon=item.icon,
            )
            for i, item in enumerate(items)
        ]
        return node(
            "stack",
            node(
                "header",
                node("heading", text=scene.highlight_phrase, level=2, gradient=True),
                *_paragraphs(scene, limit=1),
            ),
            node("constellation", *nodes),
            layout=self.kind.value,
        )


class SplitDynamic(LayoutStrategy):
    """Entity panel on one side, text on the other. The fallback layout."""

    kind = LayoutKind.SPLIT_DYNAMIC

    def render(self, scene: Scene, progress: float) -> RenderNode:
        palette = scene.visual.palette
        return node(
            "columns",
            node(
                "column",
                node("heading", text=scene.highlight_phrase, level=2),
                node("divider", fade="right"),
                *_paragraphs(scene, size="xl"),
                order=2,
            ),
            node(
                "panel",
                node("vignette", scale=_lerp(progress, 0, 1, 1.0, 1.1)),
                render_entity(scene.visual.visual_params, palette.secondary, palette.primary, progress),
                order=1,
            ),
            layout=self.kind.value,
        )


class TimelineProcess(LayoutStrategy):
    """Numbered steps along a line that fills with progress."""

    kind = LayoutKind.TIMELINE_PROCESS

    def render(self, scene: Scene, progress: float) -> RenderNode:
        palette = scene.visual.palette
        steps = []
        for i, paragraph in enumerate(_paragraphs(scene, size="2xl")):
            head = [node("heading", text=scene.highlight_phrase, level=2)] if i == 0 else []
            steps.append(node("step", node("badge", text=str(i + 1)), *head, paragraph, node("anchor")))
        if not steps:
            steps.append(node("step", node("heading", text=scene.highlight_phrase, level=2)))
        return node(
            "columns",
            node("track", fill=_lerp(progress, 0.2, 0.8, 0.0, 1.0), color=palette.accent),
            node("column", *steps),
            node(
                "sidecar",
                render_entity(scene.visual.visual_params, palette.primary, palette.secondary, progress),
                sticky=True,
            ),
            layout=self.kind.value,
        )


class ArchitecturalLens(LayoutStrategy):
    """Structural framing: index word and entities flank the text column."""

    kind = LayoutKind.ARCHITECTURAL_LENS

    def render(self, scene: Scene, progress: float) -> RenderNode:
        palette = scene.visual.palette
        params = scene.visual.visual_params
        geometric = VisualParams(
            shape="geometric", motion=params.motion, complexity=params.complexity, speed=params.speed,
        )
        words = scene.chapter_title.split()
        return node(
            "frame",
            node(
                "column",
                node("label", text="Analysis Mode"),
                node("index_word", text=words[0] if words else ""),
                render_entity(geometric, palette.accent, palette.primary, progress),
                span=3,
                align="right",
            ),
            node(
                "column",
                node("heading", text=scene.highlight_phrase, level=2, align="center"),
                *_paragraphs(scene, align="justify"),
                span=6,
                bordered=True,
            ),
            node(
                "column",
                node("blueprint",
                     render_entity(params, palette.secondary, palette.accent, progress),
                     dashed=True),
                span=3,
            ),
            layout=self.kind.value,
            guides=(0.25, 0.75),
        )


REGISTRY: dict[LayoutKind, LayoutStrategy] = {
    strategy.kind: strategy
    for strategy in (
        TypographicStorm(),
        EntityFocus(),
        ConstellationNodes(),
        SplitDynamic(),
        TimelineProcess(),
        ArchitecturalLens(),
    )
}

if set(REGISTRY) != set(LayoutKind):
    raise RuntimeError("Layout registry must cover every LayoutKind")


def resolve_layout(tag: str | None) -> LayoutKind:
    """Map a layout tag onto its kind; anything unrecognized is the default."""
    try:
        return LayoutKind(tag)
    except ValueError:
        return DEFAULT_LAYOUT


def strategy_for(tag: str | None) -> LayoutStrategy:
    return REGISTRY[resolve_layout(tag)]


def render_scene(scene: Scene, progress: float, index: int, total: int) -> RenderNode:
    """Scene section: chapter marker plus the dispatched layout."""
    return node(
        "scene",
        node("chapter_marker", text=f"CHAPTER {index + 1} / {total}"),
        strategy_for(scene.visual.layout).render(scene, progress),
        id=f"scene-{index}",
        scene_id=scene.id,
        progress=progress,
    )
