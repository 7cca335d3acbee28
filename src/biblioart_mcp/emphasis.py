"""Inline emphasis markup: ``*word*`` runs render in the scene's accent color."""

from __future__ import annotations

from dataclasses import dataclass

from .models.render import RenderNode, node

MARKER = "*"


@dataclass(frozen=True)
class TextRun:
    text: str
    emphasized: bool = False


def parse_emphasis(text: str, marker: str = MARKER) -> list[TextRun]:
    """Split *text* into plain and emphasized runs.

    Markers pair left to right. An unmatched trailing marker, and everything
    after it, stays literal, as does an empty pair, so no input text is lost.

    >>> parse_emphasis("A *B* C")
    [TextRun(text='A ', emphasized=False), TextRun(text='B', emphasized=True), TextRun(text=' C', emphasized=False)]
    """
    runs: list[TextRun] = []

    def plain(chunk: str) -> None:
        if not chunk:
            return
        if runs and not runs[-1].emphasized:
            runs[-1] = TextRun(runs[-1].text + chunk)
        else:
            runs.append(TextRun(chunk))

    pos = 0
    while pos < len(text):
        start = text.find(marker, pos)
        if start == -1:
            break
        end = text.find(marker, start + len(marker))
        if end == -1:
            break
        plain(text[pos:start])
        inner = text[start + len(marker):end]
        if inner:
            runs.append(TextRun(inner, emphasized=True))
        else:
            plain(marker * 2)
        pos = end + len(marker)
    plain(text[pos:])
    return runs


def render_emphasis(text: str, accent: str) -> RenderNode:
    """Paragraph text as a run tree; emphasized runs carry the accent color."""
    children = []
    for run in parse_emphasis(text):
        if run.emphasized:
            children.append(node(
                "span",
                text=run.text,
                color=accent,
                font_weight="bold",
                text_shadow=f"0 0 10px {accent}40",
                emphasized=True,
            ))
        else:
            children.append(node("span", text=run.text))
    return node("text", *children)
