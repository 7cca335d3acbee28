"""Shared type aliases and helpers for tool parameters."""

from __future__ import annotations

import json
from typing import Annotated, Literal

from pydantic import Field


def coerce_json_param(value: str | dict | list | None, expected_type: type) -> dict | list | None:
    """Parse MCP JSON-RPC string params back to dict/list.

    Some clients send list params as JSON strings; pydantic v2 rejects those.

    Returns:
        Parsed value if coercion succeeded, original value otherwise.
    """
    if not isinstance(value, str):
        return value
    try:
        parsed = json.loads(value)
    except (json.JSONDecodeError, TypeError):
        return value
    return parsed if isinstance(parsed, expected_type) else value

# ── Literal enums ────────────────────────────────────────────────────────────

ThinkingLevel = Literal["minimal", "low", "medium", "high"]
ModelPreset = Literal["best", "stable", "fast"]

# ── Annotated aliases ────────────────────────────────────────────────────────

SourceFilePath = Annotated[str, Field(
    min_length=1,
    description="Path to the book file (.pdf, .txt or .md)",
)]
BookTitle = Annotated[str, Field(min_length=1, max_length=500, description="Book title, optionally with author")]
EditInstruction = Annotated[str, Field(
    min_length=1,
    max_length=2000,
    description='Free-text change request, e.g. "make chapter 2 darker"',
)]
PixelValue = Annotated[float, Field(description="Length or position in CSS pixels")]
