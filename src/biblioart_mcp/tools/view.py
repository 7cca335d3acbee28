"""Journey view tools -- scroll, pointer, render, contents."""

from __future__ import annotations

from typing import Annotated

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from ..ambient import ViewContext
from ..errors import NoDocument, make_tool_error
from ..layouts import render_scene
from ..state import JourneyController, get_journey
from ..types import PixelValue, coerce_json_param
from ..view import render_journey, table_of_contents

view_server = FastMCP("view")


def _mounted(journey: JourneyController) -> ViewContext:
    if journey.view is None or journey.document is None:
        raise NoDocument(f"No journey view is mounted (state {journey.state.value})")
    return journey.view


@view_server.tool(
    annotations=ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def view_scroll(
    scroll_y: PixelValue,
    viewport_height: PixelValue,
    scene_heights: Annotated[list[float] | str, Field(description="Scene heights in narrative order")],
    hero_height: PixelValue = 0.0,
    settled: Annotated[bool, Field(description="Scrolling has stopped; snap to the nearest scene")] = False,
) -> dict:
    """Feed a scroll sample and return the active chapter and per-scene progress.

    Args:
        scroll_y: Page scroll offset.
        viewport_height: Visible height.
        scene_heights: Height of each scene section (JSON list accepted).
        hero_height: Height of the header above the first scene.
        settled: True once the user stopped scrolling.

    Returns:
        Dict with active_index, active_title, and progress per scene.
    """
    try:
        journey = get_journey()
        view = _mounted(journey)
        heights = coerce_json_param(scene_heights, list)
        if not isinstance(heights, list):
            raise ValueError("scene_heights must be a list of numbers")
        view.scroll.sample(scroll_y, viewport_height, [float(h) for h in heights], offset=hero_height)
        if settled:
            view.scroll.settle()
        state = view.snapshot()
        return {
            "active_index": state.active_index,
            "active_title": journey.document.screenplay[state.active_index].chapter_title,
            "progress": list(state.progress),
        }
    except Exception as exc:
        return make_tool_error(exc)


@view_server.tool(
    annotations=ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def view_pointer(x: PixelValue, y: PixelValue, width: PixelValue, height: PixelValue) -> dict:
    """Record the pointer position that drives the ambient glow."""
    try:
        pointer = _mounted(get_journey()).move_pointer(x, y, width, height)
        return {"x": pointer.x, "y": pointer.y, "abs_x": pointer.abs_x, "abs_y": pointer.abs_y}
    except Exception as exc:
        return make_tool_error(exc)


@view_server.tool(annotations=ToolAnnotations(readOnlyHint=True))
async def view_render(
    scene_index: Annotated[int | None, Field(ge=0, description="Render only this scene")] = None,
) -> dict:
    """Render the mounted journey, or one scene of it, as a visual tree.

    Returns:
        Dict with ``tree`` (nested kind/props/children/text nodes).
    """
    try:
        journey = get_journey()
        view = _mounted(journey)
        state = view.snapshot()
        scenes = journey.document.screenplay
        if scene_index is None:
            tree = render_journey(journey.document, state, journey.state)
        elif scene_index >= len(scenes):
            raise ValueError(f"scene_index {scene_index} out of range (0-{len(scenes) - 1})")
        else:
            tree = render_scene(scenes[scene_index], state.progress_of(scene_index), scene_index, len(scenes))
        return {"tree": tree.model_dump(mode="json")}
    except Exception as exc:
        return make_tool_error(exc)


@view_server.tool(annotations=ToolAnnotations(readOnlyHint=True))
async def view_contents() -> dict:
    """Table of contents of the mounted journey, with the active chapter flagged."""
    try:
        journey = get_journey()
        view = _mounted(journey)
        return {"entries": table_of_contents(journey.document, view.scroll.active_index)}
    except Exception as exc:
        return make_tool_error(exc)
