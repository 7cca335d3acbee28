"""Main FastMCP server -- mounts all sub-servers."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastmcp import FastMCP

from .client import GeminiClient
from .tools.export import export_server
from .tools.infra import infra_server
from .tools.journey import journey_server
from .tools.view import view_server

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(server: FastMCP):
    """Startup/shutdown hook; tears down shared Gemini clients."""
    yield {}
    closed = await GeminiClient.close_all()
    logger.info("Lifespan shutdown: closed %d client(s)", closed)


app = FastMCP(
    "biblioart",
    instructions=(
        "Turns a book into a scroll-driven visual journey. Open one from a file or a "
        "known title, refine it with free-text edits, drive the view with scroll and "
        "pointer samples, and export a standalone HTML snapshot."
    ),
    lifespan=_lifespan,
)

app.mount(journey_server)
app.mount(view_server)
app.mount(export_server)
app.mount(infra_server)


def main() -> None:
    """Entry-point for ``biblioart-mcp`` console script."""
    app.run()


if __name__ == "__main__":
    main()
