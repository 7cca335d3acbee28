"""Journey lifecycle tools -- 5 tools on a FastMCP sub-server."""

from __future__ import annotations

from typing import Annotated

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from ..errors import make_tool_error
from ..state import get_journey
from ..types import BookTitle, EditInstruction, SourceFilePath

journey_server = FastMCP("journey")


@journey_server.tool(
    annotations=ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=False,
        openWorldHint=True,
    )
)
async def journey_open_file(file_path: SourceFilePath) -> dict:
    """Open a visual journey from a local book file.

    Extracts the text (PDF pages are capped by BIBLIOART_MAX_PAGES), asks
    Gemini for a screenplay, and moves through TRANSITIONING into READY.
    A failure drops back to IDLE with a blocking notice.

    Args:
        file_path: Path to a .pdf, .txt or .md file.

    Returns:
        Journey status dict (state, title, scene_count, notice, epoch).
    """
    try:
        status = await get_journey().submit_file(file_path)
        return status.to_dict()
    except Exception as exc:
        return make_tool_error(exc)


@journey_server.tool(
    annotations=ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=False,
        openWorldHint=True,
    )
)
async def journey_open_title(title: BookTitle) -> dict:
    """Open a journey for a book Gemini already knows, by title alone.

    An unrecognized title enters ERROR with an inline notice and returns to
    IDLE after BIBLIOART_ERROR_DELAY seconds.

    Args:
        title: Book title, optionally "Title by Author".

    Returns:
        Journey status dict.
    """
    try:
        status = await get_journey().submit_title(title)
        return status.to_dict()
    except Exception as exc:
        return make_tool_error(exc)


@journey_server.tool(
    annotations=ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=True,
    )
)
async def journey_refine(instruction: EditInstruction) -> dict:
    """Regenerate the open screenplay after a free-text change request.

    The current document stays in place if refinement fails or times out;
    the failure is reported as a non-blocking notice.

    Args:
        instruction: What to change.

    Returns:
        Journey status dict.
    """
    try:
        status = await get_journey().submit_edit(instruction)
        return status.to_dict()
    except Exception as exc:
        return make_tool_error(exc)


@journey_server.tool(
    annotations=ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=False,
        openWorldHint=False,
    )
)
async def journey_reset() -> dict:
    """Close the open journey and discard its document."""
    try:
        return get_journey().reset().to_dict()
    except Exception as exc:
        return make_tool_error(exc)


@journey_server.tool(annotations=ToolAnnotations(readOnlyHint=True))
async def journey_status(
    include_document: Annotated[bool, Field(description="Include the full screenplay JSON")] = False,
    wait: Annotated[bool, Field(description="Wait for pending settle / auto-reset timers first")] = False,
) -> dict:
    """Report the lifecycle state, the open document summary, and any notice."""
    try:
        journey = get_journey()
        status = await journey.wait_for_timers() if wait else journey.snapshot()
        return status.to_dict(include_document=include_document)
    except Exception as exc:
        return make_tool_error(exc)
