"""Book analysis document -- the screenplay the engine renders and exports.

Wire names are camelCase (``chapterTitle``, ``visualParams`` ...) because the
document travels to and from Gemini as JSON; Python code uses snake_case
attributes. Models are frozen: the controller replaces a document wholesale and
nothing downstream may edit one in place.

``layout``, ``backgroundPattern``, ``shape`` and ``motion`` accept any string.
The generation schema still advertises the closed sets so the producer aims
for them, but the renderers resolve unknown values to their defaults.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

LAYOUT_TAGS = (
    "typographic_storm",
    "entity_focus",
    "constellation_nodes",
    "split_dynamic",
    "timeline_process",
    "architectural_lens",
)
BACKGROUND_PATTERNS = ("noise", "grid", "lines", "dots", "gradient_mesh", "crosshairs")
SHAPES = ("organic", "geometric", "spiky", "fluid", "scattered", "architectural")
MOTIONS = ("pulse", "rotate", "flow", "explode", "orbit", "scan")

NonEmptyStr = Annotated[str, Field(min_length=1)]


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Meta(_WireModel):
    """Book-level metadata."""

    title: str
    author: str
    essence: str
    language: str


class Palette(_WireModel):
    """Five named colors of a scene; ``accent`` colors the emphasized runs."""

    primary: str
    secondary: str
    accent: str
    background: str
    text: str


class VisualParams(_WireModel):
    """Parameters of the generative entity."""

    shape: str = Field(json_schema_extra={"enum": list(SHAPES)})
    motion: str = Field(json_schema_extra={"enum": list(MOTIONS)})
    complexity: float = Field(description="1 (sparse) to 10 (dense)")
    speed: float = Field(description="Full turns per pass through the viewport")


class GalleryItem(_WireModel):
    title: str
    description: str
    icon: str | None = None


class DataPoint(_WireModel):
    label: str
    value: float


class VisualConfig(_WireModel):
    """How a scene is presented."""

    layout: str | None = Field(default=None, json_schema_extra={"enum": list(LAYOUT_TAGS)})
    background_pattern: str | None = Field(default=None, json_schema_extra={"enum": list(BACKGROUND_PATTERNS)})
    palette: Palette
    visual_params: VisualParams
    gallery_items: tuple[GalleryItem, ...] | None = None
    data_points: tuple[DataPoint, ...] | None = None


class Scene(_WireModel):
    """One chapter-level unit of narrative text plus its visual configuration."""

    id: str
    chapter_title: str
    paragraphs: tuple[NonEmptyStr, ...] = Field(
        description="2-3 short, impactful paragraphs. Use *asterisks* for highlights.",
    )
    highlight_phrase: NonEmptyStr
    visual: VisualConfig


class Document(_WireModel):
    """Root value: book metadata plus the ordered, non-empty screenplay."""

    meta: Meta
    screenplay: tuple[Scene, ...] = Field(min_length=1)

    @model_validator(mode="after")
    def _unique_scene_ids(self) -> Document:
        seen: set[str] = set()
        for scene in self.screenplay:
            if scene.id in seen:
                raise ValueError(f"Duplicate scene id '{scene.id}'")
            seen.add(scene.id)
        return self

    def to_wire(self) -> dict:
        """Dump with camelCase keys, as Gemini produces and expects it."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def document_schema() -> dict:
    """JSON schema handed to Gemini as ``response_json_schema``."""
    return Document.model_json_schema(by_alias=True)
