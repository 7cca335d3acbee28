"""Tests for the generative entity renderer."""

from __future__ import annotations

import math

import pytest

from biblioart_mcp.entity import (
    BASE_SPIKES,
    pulse,
    render_entity,
    rotation,
    spike_count,
)
from biblioart_mcp.models.document import VisualParams


def _params(shape: str = "spiky", motion: str = "pulse", complexity: float = 5, speed: float = 1) -> VisualParams:
    return VisualParams(shape=shape, motion=motion, complexity=complexity, speed=speed)


class TestCurves:
    def test_rotation_is_linear_in_progress(self):
        assert rotation(0.0, 2) == 0
        assert rotation(0.25, 2) == pytest.approx(180)
        assert rotation(0.5, 2) == pytest.approx(360)
        assert rotation(1.0, 2) == pytest.approx(720)

    def test_rotation_clamps_progress(self):
        assert rotation(1.5, 1) == pytest.approx(360)
        assert rotation(-1.0, 1) == 0

    def test_pulse_peaks_at_midpoint(self):
        assert pulse(0.0) == pytest.approx(1.0)
        assert pulse(0.5) == pytest.approx(1.1)
        assert pulse(1.0) == pytest.approx(1.0)

    def test_pulse_is_symmetric(self):
        assert pulse(0.25) == pytest.approx(pulse(0.75))

    def test_nan_progress_treated_as_start(self):
        assert rotation(math.nan, 1) == 0
        assert pulse(math.nan) == pytest.approx(1.0)


class TestSpikeCount:
    def test_base_complexity(self):
        assert spike_count(5) == BASE_SPIKES

    def test_clamped_range(self):
        assert spike_count(1) == 6
        assert spike_count(100) == 24

    @pytest.mark.parametrize("value", [0, -3, math.nan, math.inf])
    def test_degenerate_values_fall_back(self, value):
        assert spike_count(value) == BASE_SPIKES


class TestRenderEntity:
    def test_spiky_uses_spike_count(self):
        tree = render_entity(_params(complexity=10), "#f00", "#0f0", 0.5)
        assert tree.props["shape"] == "spiky"
        assert len(tree.find("polygon")) == spike_count(10)

    def test_unknown_shape_renders_default_variant(self):
        tree = render_entity(_params(shape="hexagonal"), "#f00", "#0f0", 0.5)
        assert tree.props["shape"] == "default"

    def test_output_is_pure(self):
        params = _params(shape="geometric")
        a = render_entity(params, "#f00", "#0f0", 0.3)
        b = render_entity(params, "#f00", "#0f0", 0.3)
        assert a == b

    def test_progress_changes_output(self):
        params = _params(shape="geometric")
        assert render_entity(params, "#f00", "#0f0", 0.1) != render_entity(params, "#f00", "#0f0", 0.9)

    @pytest.mark.parametrize("shape", ["organic", "geometric", "spiky", "fluid", "scattered", "architectural"])
    def test_every_shape_renders(self, shape):
        tree = render_entity(_params(shape=shape), "#f00", "#0f0", 0.5)
        assert tree.kind == "entity"
