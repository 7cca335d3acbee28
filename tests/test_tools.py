"""Tests for the MCP tool surface."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

import biblioart_mcp.config as cfg_mod
import biblioart_mcp.state as state_mod
import biblioart_mcp.tools.export as export_mod
import biblioart_mcp.tools.infra as infra_mod
import biblioart_mcp.tools.journey as journey_mod
import biblioart_mcp.tools.view as view_mod
from biblioart_mcp.config import ServerConfig
from biblioart_mcp.models.knowledge import TitleCheck
from biblioart_mcp.state import JourneyController
from tests.conftest import unwrap_tool

journey_open_file = unwrap_tool(journey_mod.journey_open_file)
journey_open_title = unwrap_tool(journey_mod.journey_open_title)
journey_refine = unwrap_tool(journey_mod.journey_refine)
journey_reset = unwrap_tool(journey_mod.journey_reset)
journey_status = unwrap_tool(journey_mod.journey_status)
view_scroll = unwrap_tool(view_mod.view_scroll)
view_pointer = unwrap_tool(view_mod.view_pointer)
view_render = unwrap_tool(view_mod.view_render)
view_contents = unwrap_tool(view_mod.view_contents)
export_journey = unwrap_tool(export_mod.export_journey)
infra_configure = unwrap_tool(infra_mod.infra_configure)


@pytest.fixture(autouse=True)
def _clean_state():
    cfg_mod._config = None
    state_mod._journey = None
    yield
    cfg_mod._config = None
    state_mod._journey = None


@pytest.fixture()
def service(sample_document):
    svc = MagicMock()
    svc.analyze_text = AsyncMock(return_value=sample_document)
    svc.check_title = AsyncMock(return_value=TitleCheck(known=True, analysis=sample_document))
    svc.refine = AsyncMock(side_effect=RuntimeError("refine exploded"))
    state_mod._journey = JourneyController(
        service=svc,
        extractor=MagicMock(return_value="book text"),
        config=ServerConfig(settle_delay_seconds=0.0, error_delay_seconds=0.0),
    )
    return svc


async def _open() -> None:
    await journey_open_title(title="The Test Book")
    out = await journey_status(wait=True)
    assert out["state"] == "READY"


class TestJourneyTools:
    @pytest.mark.asyncio
    async def test_open_title_then_status(self, service):
        out = await journey_open_title(title="The Test Book")
        assert out["state"] == "TRANSITIONING"
        assert out["busy"] is True
        assert out["title"] == "The Test Book"

        out = await journey_status(wait=True, include_document=True)
        assert out["state"] == "READY"
        assert out["scene_count"] == 3
        assert out["document"]["meta"]["author"] == "A. Writer"

    @pytest.mark.asyncio
    async def test_status_failure_returns_tool_error(self, monkeypatch):
        def broken():
            raise RuntimeError("controller unavailable")

        monkeypatch.setattr(journey_mod, "get_journey", broken)
        out = await journey_status()
        assert out["error"] == "controller unavailable"
        assert out["category"] == "UNKNOWN"

    @pytest.mark.asyncio
    async def test_open_file(self, service):
        out = await journey_open_file(file_path="book.pdf")
        assert out["state"] == "TRANSITIONING"
        service.analyze_text.assert_awaited_once_with("book text")

    @pytest.mark.asyncio
    async def test_blank_title_returns_tool_error(self, service):
        out = await journey_open_title(title="  ")
        assert out["category"] == "INVALID_INPUT"

    @pytest.mark.asyncio
    async def test_refine_failure_reports_notice(self, service):
        await _open()
        out = await journey_refine(instruction="darker")
        assert out["state"] == "READY"
        assert out["notice"]["blocking"] is False
        assert "refine exploded" in out["notice"]["message"]

    @pytest.mark.asyncio
    async def test_reset_outside_ready_is_a_tool_error(self, service):
        out = await journey_reset()
        assert out["category"] == "INVALID_TRANSITION"

    @pytest.mark.asyncio
    async def test_reset(self, service):
        await _open()
        out = await journey_reset()
        assert out["state"] == "IDLE"
        assert out["title"] is None


class TestViewTools:
    @pytest.mark.asyncio
    async def test_view_requires_open_journey(self, service):
        for out in (
            await view_render(),
            await view_contents(),
            await view_pointer(x=1, y=1, width=10, height=10),
            await view_scroll(scroll_y=0, viewport_height=800, scene_heights=[800]),
        ):
            assert out["category"] == "NO_DOCUMENT"

    @pytest.mark.asyncio
    async def test_scroll_selects_active_chapter(self, service):
        await _open()
        out = await view_scroll(scroll_y=1000, viewport_height=1000, scene_heights="[1000, 1000, 1000]")
        assert out["active_index"] == 1
        assert out["active_title"] == "The Council Chapter"
        assert out["progress"][0] == 1.0

        contents = await view_contents()
        assert [e["active"] for e in contents["entries"]] == [False, True, False]

    @pytest.mark.asyncio
    async def test_scroll_rejects_non_list_heights(self, service):
        await _open()
        out = await view_scroll(scroll_y=0, viewport_height=800, scene_heights="tall")
        assert out["category"] == "INVALID_INPUT"

    @pytest.mark.asyncio
    async def test_pointer(self, service):
        await _open()
        out = await view_pointer(x=50, y=25, width=100, height=100)
        assert out == {"x": 0.5, "y": 0.25, "abs_x": 50, "abs_y": 25}

    @pytest.mark.asyncio
    async def test_render_whole_journey_and_single_scene(self, service):
        await _open()
        out = await view_render()
        assert out["tree"]["kind"] == "journey"

        out = await view_render(scene_index=2)
        assert out["tree"]["kind"] == "scene"
        assert out["tree"]["props"]["scene_id"] == "road"

        out = await view_render(scene_index=9)
        assert out["category"] == "INVALID_INPUT"


class TestExportTool:
    @pytest.mark.asyncio
    async def test_export_without_journey(self, service, tmp_path):
        out = await export_journey(output_dir=str(tmp_path))
        assert out["category"] == "NO_DOCUMENT"

    @pytest.mark.asyncio
    async def test_export_writes_file(self, service, tmp_path):
        await _open()
        out = await export_journey(output_dir=str(tmp_path))
        assert out["filename"] == "the_test_book_biblioart.html"
        assert (tmp_path / out["filename"]).is_file()

    @pytest.mark.asyncio
    async def test_export_defaults_to_config_dir(self, service, tmp_path, monkeypatch):
        monkeypatch.setenv("BIBLIOART_EXPORT_DIR", str(tmp_path / "exports"))
        await _open()
        out = await export_journey()
        assert out["path"].startswith(str(tmp_path / "exports"))


class TestInfraTools:
    @pytest.mark.asyncio
    async def test_configure_updates_runtime_config(self):
        out = await infra_configure(model="gemini-test", thinking_level="medium", temperature=0.7)
        cfg = out["current_config"]
        assert cfg["default_model"] == "gemini-test"
        assert cfg["default_thinking_level"] == "medium"
        assert cfg["default_temperature"] == 0.7
        assert "gemini_api_key" not in cfg
        assert out["active_preset"] is None

    @pytest.mark.asyncio
    async def test_preset(self):
        out = await infra_configure(preset="stable")
        assert out["current_config"]["default_model"] == "gemini-3-pro-preview"
        assert out["active_preset"] == "stable"

    @pytest.mark.asyncio
    async def test_invalid_thinking_level_returns_error(self):
        out = await infra_configure(thinking_level="ultra")
        assert out["category"] == "API_INVALID_ARGUMENT"
        assert out["retryable"] is False

    @pytest.mark.asyncio
    async def test_unknown_preset(self):
        out = await infra_configure(preset="turbo")
        assert "Unknown preset" in out["error"]

    @pytest.mark.asyncio
    async def test_no_overrides_reports_presets(self):
        out = await infra_configure()
        assert set(out["available_presets"]) == {"best", "stable", "fast"}
        assert out["active_preset"] == "fast"
