"""Static snapshot exporter -- one self-contained HTML page per document.

The page carries its styles inline and needs nothing beyond the browser's
``IntersectionObserver`` to reveal scenes as they scroll into view. Every
piece of document text is HTML-escaped, and palette values are only emitted
when they look like CSS colors.
"""

from __future__ import annotations

import html
import logging
import re
from pathlib import Path

from .emphasis import parse_emphasis
from .layouts import LayoutKind, resolve_layout
from .models.document import Document, Palette, Scene

logger = logging.getLogger(__name__)

FILENAME_SUFFIX = "_biblioart.html"
FALLBACK_BACKGROUND = "#050505"
FALLBACK_TEXT = "#e0e0e0"
FALLBACK_ACCENT = "#ffffff"

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})")
_FUNC_COLOR = re.compile(r"(?:rgb|rgba|hsl|hsla)\(\s*[0-9.,%\s/+-]+\)", re.IGNORECASE)
_NAMED_COLOR = re.compile(r"[a-zA-Z]{3,30}")
_LANG = re.compile(r"[A-Za-z]{2,8}(?:-[A-Za-z0-9]{1,8})*")

_STYLE = """\
*, *::before, *::after { box-sizing: border-box; }
body { margin: 0; font-family: Inter, "Helvetica Neue", Arial, sans-serif; background: #050505; color: #e0e0e0; overflow-x: hidden; }
.display { font-family: "Playfair Display", Georgia, serif; }
header { min-height: 100vh; display: flex; flex-direction: column; align-items: center; justify-content: center; text-align: center; padding: 2rem; }
header h1 { font-size: clamp(3rem, 10vw, 8rem); margin: 0 0 2rem; color: #fff; }
header .author { text-transform: uppercase; letter-spacing: .3em; font-size: .8rem; color: #888; margin-bottom: 3rem; }
header .essence { max-width: 36rem; font-size: 1.25rem; font-style: italic; font-weight: 300; color: #ccc; }
.scene { min-height: 100vh; padding: 4rem 2rem; display: flex; align-items: center; justify-content: center; opacity: 0; transform: translateY(20px); transition: opacity 1s, transform 1s; }
.scene.visible { opacity: 1; transform: translateY(0); }
.scene p { font-size: 1.1rem; font-weight: 300; line-height: 1.7; margin: 0 0 1rem; }
.storm { max-width: 56rem; text-align: center; }
.storm h2 { font-size: clamp(3rem, 8vw, 6rem); margin: 0 0 2rem; }
.constellation { max-width: 72rem; width: 100%; }
.constellation h2 { font-size: 2.5rem; text-align: center; margin: 0 0 3rem; }
.cards { display: grid; grid-template-columns: repeat(auto-fit, minmax(16rem, 1fr)); gap: 2rem; margin-top: 2rem; }
.card { padding: 2rem; border: 1px solid rgba(255,255,255,.1); border-radius: 12px; background: rgba(255,255,255,.05); }
.card h3 { margin: 0 0 .5rem; font-size: 1.2rem; }
.card p { font-size: .9rem; opacity: .7; }
.split { max-width: 72rem; width: 100%; display: grid; grid-template-columns: repeat(auto-fit, minmax(20rem, 1fr)); gap: 4rem; align-items: center; }
.tag { display: inline-block; font-size: .7rem; text-transform: uppercase; letter-spacing: .2em; border: 1px solid currentColor; border-radius: 999px; padding: .25rem .6rem; opacity: .6; }
.split h2 { font-size: 3rem; margin: 1.5rem 0; }
.split .body { border-left: 1px solid rgba(255,255,255,.2); padding-left: 1.5rem; }
.emblem { display: flex; justify-content: center; }
.emblem svg { width: 16rem; height: 16rem; }
footer { padding: 6rem 2rem; text-align: center; color: #666; text-transform: uppercase; letter-spacing: .3em; font-size: .75rem; }"""

_SCRIPT = """\
const observer = new IntersectionObserver((entries) => {
  entries.forEach((entry) => {
    if (entry.isIntersecting) entry.target.classList.add('visible');
  });
}, { threshold: 0.2 });
document.querySelectorAll('.scene').forEach((el) => observer.observe(el));"""


def _safe_color(value: str, fallback: str) -> str:
    """Return *value* if it looks like a CSS color, else *fallback*."""
    candidate = (value or "").strip()
    for pattern in (_HEX_COLOR, _FUNC_COLOR, _NAMED_COLOR):
        if pattern.fullmatch(candidate):
            return candidate
    logger.debug("Replacing unsafe color %r with %s", value, fallback)
    return fallback


def _safe_lang(value: str) -> str:
    candidate = (value or "").strip()
    return candidate if _LANG.fullmatch(candidate) else "en"


def _esc(text: str) -> str:
    return html.escape(text, quote=True)


def _inline(text: str, accent: str) -> str:
    parts = []
    for run in parse_emphasis(text):
        if run.emphasized:
            parts.append(f'<span style="color:{accent};font-weight:bold">{_esc(run.text)}</span>')
        else:
            parts.append(_esc(run.text))
    return "".join(parts)


def _paragraphs(scene: Scene, accent: str) -> str:
    return "\n".join(f"<p>{_inline(p, accent)}</p>" for p in scene.paragraphs)


def _emblem(scene: Scene, palette: Palette) -> str:
    primary = _safe_color(palette.primary, FALLBACK_ACCENT)
    secondary = _safe_color(palette.secondary, FALLBACK_ACCENT)
    label = _esc(scene.visual.visual_params.shape)
    return (
        f'<svg viewBox="0 0 200 200" role="img" aria-label="{label}">'
        f'<circle cx="100" cy="100" r="90" fill="none" stroke="{secondary}" stroke-opacity="0.4"/>'
        f'<circle cx="100" cy="100" r="60" fill="none" stroke="{primary}" stroke-dasharray="4 6"/>'
        f'<circle cx="100" cy="100" r="24" fill="{primary}" fill-opacity="0.8"/>'
        "</svg>"
    )


def _scene_body(scene: Scene) -> str:
    palette = scene.visual.palette
    accent = _safe_color(palette.accent, FALLBACK_ACCENT)
    highlight = _esc(scene.highlight_phrase)
    kind = resolve_layout(scene.visual.layout)
    items = scene.visual.gallery_items

    if kind is LayoutKind.TYPOGRAPHIC_STORM:
        return (
            f'<div class="storm"><h2 class="display">{highlight}</h2>\n'
            f"{_paragraphs(scene, accent)}</div>"
        )
    if kind is LayoutKind.CONSTELLATION_NODES and items:
        cards = "\n".join(
            f'<div class="card"><h3>{_esc(item.title)}</h3><p>{_esc(item.description)}</p></div>'
            for item in items
        )
        return (
            f'<div class="constellation"><h2 class="display">{highlight}</h2>\n'
            f'{_paragraphs(scene, accent)}\n<div class="cards">\n{cards}\n</div></div>'
        )
    return (
        '<div class="split"><div>'
        f'<span class="tag">{_esc(scene.chapter_title)}</span>'
        f'<h2 class="display">{highlight}</h2>\n'
        f'<div class="body">{_paragraphs(scene, accent)}</div></div>'
        f'<div class="emblem">{_emblem(scene, palette)}</div></div>'
    )


def _section(scene: Scene) -> str:
    palette = scene.visual.palette
    background = _safe_color(palette.background, FALLBACK_BACKGROUND)
    foreground = _safe_color(palette.text, FALLBACK_TEXT)
    return (
        f'<section class="scene" id="{_esc(scene.id)}" '
        f'style="background-color:{background};color:{foreground}">\n'
        f"{_scene_body(scene)}\n</section>"
    )


def export_html(document: Document) -> str:
    """Render *document* as a standalone HTML page; same input, same bytes."""
    meta = document.meta
    sections = "\n".join(_section(scene) for scene in document.screenplay)
    return f"""<!DOCTYPE html>
<html lang="{_safe_lang(meta.language)}">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{_esc(meta.title)} - Visual Journey</title>
<style>
{_STYLE}
</style>
</head>
<body>
<header>
<h1 class="display">{_esc(meta.title)}</h1>
<p class="author">{_esc(meta.author)}</p>
<p class="essence">&ldquo;{_esc(meta.essence)}&rdquo;</p>
</header>
<main>
{sections}
</main>
<footer>End of Volume &middot; {_esc(meta.title)}</footer>
<script>
{_SCRIPT}
</script>
</body>
</html>
"""


def export_filename(title: str) -> str:
    """Download name for *title*, e.g. ``"Dune: Part 1"`` -> ``dune__part_1_biblioart.html``."""
    if not title.strip():
        return "untitled" + FILENAME_SUFFIX
    return re.sub(r"[^a-z0-9]", "_", title, flags=re.IGNORECASE).lower() + FILENAME_SUFFIX


def write_export(document: Document, output_dir: str | Path) -> Path:
    """Write the snapshot page into *output_dir*, creating it if needed."""
    directory = Path(output_dir).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / export_filename(document.meta.title)
    target.write_text(export_html(document), encoding="utf-8")
    logger.info("Exported %d scene(s) to %s", len(document.screenplay), target)
    return target
