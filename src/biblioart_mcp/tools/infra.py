"""Infrastructure tools -- runtime configuration."""

from __future__ import annotations

from typing import Annotated

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from ..config import MODEL_PRESETS, get_config, update_config
from ..errors import make_tool_error
from ..types import ModelPreset, ThinkingLevel

infra_server = FastMCP("infra")
_SENSITIVE_CONFIG_FIELDS = {"gemini_api_key"}


def _redacted_config() -> dict:
    return get_config().model_dump(exclude=_SENSITIVE_CONFIG_FIELDS)


@infra_server.tool(
    annotations=ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def infra_configure(
    preset: Annotated[ModelPreset | None, Field(
        description='Named model preset: "best" (3.1 Pro), "stable" (3 Pro), or "fast" (3 Flash)',
    )] = None,
    model: Annotated[str | None, Field(description="Gemini model ID override (takes precedence over preset)")] = None,
    thinking_level: ThinkingLevel | None = None,
    temperature: Annotated[float | None, Field(ge=0.0, le=2.0, description="Sampling temperature")] = None,
) -> dict:
    """Reconfigure screenplay generation at runtime.

    Changes apply to the next submission; an operation already in flight
    keeps the settings it started with.

    Returns:
        Dict with current_config (secrets removed), active_preset, and
        available_presets.
    """
    try:
        overrides: dict[str, object] = {}
        if preset is not None:
            if preset not in MODEL_PRESETS:
                valid = ", ".join(sorted(MODEL_PRESETS))
                raise ValueError(f"Unknown preset '{preset}'. Available: {valid}")
            overrides["default_model"] = MODEL_PRESETS[preset]["default_model"]
        if model is not None:
            overrides["default_model"] = model
        if thinking_level is not None:
            overrides["default_thinking_level"] = thinking_level
        if temperature is not None:
            overrides["default_temperature"] = temperature

        cfg = update_config(**overrides) if overrides else get_config()
        active = next(
            (name for name, p in MODEL_PRESETS.items() if p["default_model"] == cfg.default_model),
            None,
        )
        return {
            "current_config": _redacted_config(),
            "active_preset": active,
            "available_presets": {k: v["label"] for k, v in MODEL_PRESETS.items()},
        }
    except Exception as exc:
        return make_tool_error(exc)
