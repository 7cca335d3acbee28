"""Generative entity -- a procedural shape driven by visual params and scroll progress.

Every output is a pure function of ``(params, color, secondary, progress)``.
The progress curves are:

- rotation: ``progress * speed * 360`` degrees, linear;
- pulse: a symmetric bump, 1.0 at both ends and 1.1 at ``progress = 0.5``.
"""

from __future__ import annotations

import math

from .models.document import VisualParams
from .models.render import RenderNode, node

PULSE_PEAK = 1.1
BASE_SPIKES = 12
_MIN_SPIKES = 6
_MAX_SPIKES = 24

# Ambient (time-based) animation per motion tag; progress-linked values are separate.
_MOTION_ANIMATIONS = {
    "pulse": "breathe",
    "rotate": "spin-slow",
    "flow": "drift",
    "explode": "burst",
    "orbit": "orbit",
    "scan": "scan",
}

_FLUID_RADII = (
    "40% 60% 70% 30% / 40% 50% 60% 50%",
    "30% 70% 70% 30% / 30% 30% 70% 70%",
)


def _clamp(progress: float) -> float:
    if math.isnan(progress):
        return 0.0
    return min(max(progress, 0.0), 1.0)


def rotation(progress: float, speed: float) -> float:
    """Rotation in degrees at *progress*."""
    return _clamp(progress) * speed * 360


def pulse(progress: float) -> float:
    """Scale factor: 1.0 at progress 0 and 1, peaking at 0.5."""
    p = _clamp(progress)
    return 1 + (PULSE_PEAK - 1) * (1 - abs(2 * p - 1))


def spike_count(complexity: float) -> int:
    """Spikes for the spiky variant; complexity 5 gives the base count."""
    if not math.isfinite(complexity) or complexity <= 0:
        return BASE_SPIKES
    return min(max(round(BASE_SPIKES * complexity / 5), _MIN_SPIKES), _MAX_SPIKES)


def _spiky(params: VisualParams, color: str, secondary: str, progress: float) -> RenderNode:
    count = spike_count(params.complexity)
    step = 360 / count
    spikes = [
        node("polygon", points="100,100 110,20 100,0 90,20", fill="url(#spikeGrad)",
             rotate=i * step, opacity=0.8, blend="plus-lighter")
        for i in range(count)
    ]
    return node(
        "group",
        node(
            "svg",
            node("linear_gradient", node("stop", offset=0, color=color),
                 node("stop", offset=1, color=secondary), id="spikeGrad"),
            *spikes,
            node("circle", cx=100, cy=100, r=30, fill=color, blur="md"),
            view_box="0 0 200 200",
        ),
        rotate=rotation(progress, params.speed),
        scale=pulse(progress),
    )


def _geometric(params: VisualParams, color: str, secondary: str, progress: float) -> RenderNode:
    angle = rotation(progress, params.speed)
    return node(
        "group",
        node("frame", border=color, depth=10, opacity=0.3),
        node("frame", border=color, depth=-10, opacity=0.3),
        node("gradient", start=color, end="transparent", direction="to bottom right",
             opacity=0.2, scale=pulse(progress)),
        rotate_x=angle,
        rotate_y=angle,
        border=color,
        fill=secondary,
        perspective=1000,
    )


def _fluid(params: VisualParams, color: str, secondary: str, progress: float) -> RenderNode:
    return node(
        "blob",
        rotate=rotation(progress, params.speed),
        background=f"radial-gradient(circle at 30% 30%, {color}, {secondary})",
        border_radius_keyframes=list(_FLUID_RADII),
        keyframe_seconds=10,
        blur="xl",
        opacity=0.7,
        blend="screen",
    )


def _halo(params: VisualParams, color: str, secondary: str, progress: float) -> RenderNode:
    return node(
        "group",
        node("glow", color=color, scale=pulse(progress), blur=100, opacity=0.3),
        node(
            "svg",
            node("circle", cx=50, cy=50, r=48, stroke=color, stroke_width=0.2, dash="1 3"),
            node("circle", cx=50, cy=50, r=30, stroke=secondary, stroke_width=0.5),
            node("path", d="M50 20 L50 80 M20 50 L80 50", stroke=color, stroke_width=0.2),
            view_box="0 0 100 100",
            opacity=0.6,
            animation="spin-slow",
        ),
    )


_VARIANTS = {
    "spiky": _spiky,
    "geometric": _geometric,
    "fluid": _fluid,
}


def render_entity(params: VisualParams, color: str, secondary: str, progress: float) -> RenderNode:
    """Build the entity for *params*; unknown shapes get the halo variant."""
    variant = _VARIANTS.get(params.shape, _halo)
    body = variant(params, color, secondary, progress)
    return node(
        "entity",
        body,
        shape=params.shape if params.shape in _VARIANTS else "default",
        animation=_MOTION_ANIMATIONS.get(params.motion),
    )
