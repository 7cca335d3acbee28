"""Static snapshot export tool."""

from __future__ import annotations

from typing import Annotated

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from ..config import get_config
from ..errors import NoDocument, make_tool_error
from ..export import write_export
from ..state import get_journey

export_server = FastMCP("export")


@export_server.tool(
    annotations=ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def export_journey(
    output_dir: Annotated[str | None, Field(
        description="Directory for the HTML file (defaults to BIBLIOART_EXPORT_DIR)",
    )] = None,
) -> dict:
    """Write the open journey as a standalone HTML page.

    Exporting the same document twice produces byte-identical files.

    Returns:
        Dict with path, filename, and scene_count.
    """
    try:
        document = get_journey().document
        if document is None:
            raise NoDocument("No journey is open to export")
        target = write_export(document, output_dir or get_config().export_dir)
        return {
            "path": str(target),
            "filename": target.name,
            "scene_count": len(document.screenplay),
        }
    except Exception as exc:
        return make_tool_error(exc)
