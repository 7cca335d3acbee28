"""Shared test fixtures for biblioart-mcp."""

from __future__ import annotations

import copy
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from biblioart_mcp.models.document import Document


def unwrap_tool(tool: Any) -> Any:
    """Extract the raw coroutine from a FastMCP FunctionTool, if wrapped.

    FastMCP 2.x wraps @server.tool functions in FunctionTool (not callable).
    FastMCP 3.x preserves the original function. This helper works with both.
    """
    return getattr(tool, "fn", tool)


def _scene(scene_id: str, layout: str, **visual: Any) -> dict:
    return {
        "id": scene_id,
        "chapterTitle": f"The {scene_id.title()} Chapter",
        "paragraphs": [
            f"In {scene_id} the *storm* gathers.",
            "A second, quieter paragraph.",
        ],
        "highlightPhrase": f"{scene_id.title()} rises",
        "visual": {
            "layout": layout,
            "backgroundPattern": "grid",
            "palette": {
                "primary": "#ff0055",
                "secondary": "#00ccff",
                "accent": "#ffd700",
                "background": "#0a0a0a",
                "text": "#f0f0f0",
            },
            "visualParams": {"shape": "spiky", "motion": "explode", "complexity": 5, "speed": 1},
            **visual,
        },
    }


SAMPLE_WIRE: dict = {
    "meta": {
        "title": "The Test Book",
        "author": "A. Writer",
        "essence": "A book about tests.",
        "language": "en-US",
    },
    "screenplay": [
        _scene("dawn", "typographic_storm"),
        _scene("council", "constellation_nodes", galleryItems=[
            {"title": "Elrond", "description": "Host"},
            {"title": "Gandalf", "description": "Wizard", "icon": "star"},
        ]),
        _scene("road", "timeline_process"),
    ],
}


def sample_wire() -> dict:
    """Fresh deep copy of the sample document payload (camelCase keys)."""
    return copy.deepcopy(SAMPLE_WIRE)


@pytest.fixture(autouse=True)
def _set_dummy_api_key(monkeypatch):
    """Ensure tests never hit real Gemini API."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key-not-real")


@pytest.fixture(autouse=True)
def _isolate_dotenv(tmp_path, monkeypatch):
    """Prevent tests from loading the user's real ~/.config/biblioart-mcp/.env."""
    monkeypatch.setattr(
        "biblioart_mcp.config.DEFAULT_ENV_PATH",
        tmp_path / "nonexistent.env",
    )


@pytest.fixture()
def clean_config():
    """Reset the config singleton between tests."""
    import biblioart_mcp.config as cfg_mod

    cfg_mod._config = None
    yield
    cfg_mod._config = None


@pytest.fixture()
def mock_gemini_client():
    """Patch GeminiClient.get() and .generate() for unit tests."""
    with (
        patch("biblioart_mcp.client.GeminiClient.get") as mock_get,
        patch(
            "biblioart_mcp.client.GeminiClient.generate", new_callable=AsyncMock
        ) as mock_gen,
    ):
        client = MagicMock()
        mock_get.return_value = client
        yield {"get": mock_get, "generate": mock_gen, "client": client}


@pytest.fixture()
def sample_document() -> Document:
    return Document.model_validate(sample_wire())
