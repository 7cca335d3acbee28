"""The journey view as one pure function of document, display state and app state."""

from __future__ import annotations

from .ambient import ViewState, ambient_glow, background_layer
from .layouts import render_scene
from .models.document import Document, Meta, Palette
from .models.render import RenderNode, node
from .state import AppState


def table_of_contents(document: Document, active_index: int) -> list[dict]:
    """Chapter entries in narrative order, flagging the active one."""
    return [
        {
            "index": i,
            "label": f"CHAPTER {i + 1}",
            "title": scene.chapter_title,
            "scene_id": scene.id,
            "active": i == active_index,
        }
        for i, scene in enumerate(document.screenplay)
    ]


def _hero(meta: Meta, palette: Palette) -> RenderNode:
    return node(
        "hero",
        node("aurora", color=palette.primary, keyframes={"opacity": [0.3, 0.6, 0.3], "scale": [1, 1.2, 1]}),
        node("eyebrow", text="Visual Archive"),
        node("heading", text=meta.title, level=1),
        node("quote", text=meta.essence),
    )


def _nav(busy: bool) -> RenderNode:
    return node(
        "nav",
        node("button", text="Library", action="reset"),
        node("button", action="edit", icon="pencil", disabled=busy),
        node("button", action="download", icon="download"),
        node("button", text="Index", action="contents", icon="menu"),
        blend="exclusion",
    )


def _contents(document: Document, active_index: int) -> RenderNode:
    entries = [
        node("toc_entry", node("caption", text=entry["label"]), node("heading", text=entry["title"], level=3),
             target=f"scene-{entry['index']}", active=entry["active"])
        for entry in table_of_contents(document, active_index)
    ]
    return node("contents", node("heading", text="Table of Contents", level=2), *entries)


def render_journey(document: Document, view: ViewState, app_state: AppState) -> RenderNode:
    """Full visual tree for the mounted journey."""
    scenes = document.screenplay
    active = min(max(view.active_index, 0), len(scenes) - 1)
    palette = scenes[active].visual.palette
    total = len(scenes)
    return node(
        "journey",
        background_layer(scenes[active].visual.background_pattern, palette.primary),
        ambient_glow(view.pointer, palette.primary),
        _nav(busy=app_state is AppState.UPDATING),
        _contents(document, active),
        node(
            "main",
            _hero(document.meta, scenes[0].visual.palette),
            *(render_scene(scene, view.progress_of(i), i, total) for i, scene in enumerate(scenes)),
            node(
                "footer",
                node("caption", text="End of Volume"),
                node("heading", text=document.meta.title, level=2),
                node("button", text="Open New Book", action="reset"),
            ),
        ),
        background=palette.background,
        color=palette.text,
        active_index=active,
        updating=app_state is AppState.UPDATING,
    )
