"""Render tree -- the retained scene graph handed to the rendering backend.

The engine never paints. Layouts, the entity renderer and the journey view
build immutable ``RenderNode`` trees from explicit inputs; the backend maps
``kind`` to a primitive and interpolates the numeric props.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RenderNode(BaseModel):
    """A node of the visual tree."""

    model_config = ConfigDict(frozen=True)

    kind: str
    props: dict[str, Any] = Field(default_factory=dict)
    children: tuple[RenderNode, ...] = ()
    text: str | None = None

    def find(self, kind: str) -> list[RenderNode]:
        """Depth-first list of descendant nodes (self included) with *kind*."""
        found = [self] if self.kind == kind else []
        for child in self.children:
            found.extend(child.find(kind))
        return found

    def texts(self) -> list[str]:
        """All text leaves in document order."""
        out = [self.text] if self.text is not None else []
        for child in self.children:
            out.extend(child.texts())
        return out


def node(kind: str, *children: RenderNode, text: str | None = None, **props: Any) -> RenderNode:
    """Shorthand constructor used by the layout and view builders."""
    return RenderNode(kind=kind, props=props, children=children, text=text)
