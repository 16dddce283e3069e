"""Tests for tmcpu.gradient - usage to colour."""

import math
import re
from unittest.mock import patch

import pytest

from tmcpu.gradient import Gradient, usage_to_hex, usage_to_rgb


def test_idle_is_green():
    assert usage_to_hex(0.0) == "#00ff00"


def test_busy_is_red():
    assert usage_to_hex(1.0) == "#ff0000"


def test_half_is_yellow():
    assert usage_to_hex(0.5) == "#ffff00"


def test_quarter_leans_green():
    r, g, b = usage_to_rgb(0.25)
    assert g == 255
    assert 0 < r < 255
    assert b == 0


def test_deterministic():
    assert usage_to_hex(0.37) == usage_to_hex(0.37)


@pytest.mark.parametrize("usage", [-0.5, 1.5, 3.0, 1e9])
def test_out_of_range_is_not_clamped(usage):
    """Usage beyond [0, 1] keeps sweeping the hue instead of sticking to an end."""
    colour = usage_to_hex(usage)
    assert re.fullmatch(r"#[0-9a-f]{6}", colour)


def test_over_full_usage_goes_past_red():
    # hue -60 degrees == 300 degrees, magenta
    assert usage_to_hex(1.5) == "#ff00ff"


@pytest.mark.parametrize("usage", [math.nan, math.inf, -math.inf])
def test_non_finite_does_not_crash(usage):
    assert usage_to_hex(usage) == "#000000"


def test_gradient_is_lazy():
    gradient = Gradient(0.5)
    assert not gradient.computed
    assert gradient.hex == "#ffff00"
    assert gradient.computed


def test_gradient_computes_once():
    with patch("tmcpu.gradient.usage_to_hex", return_value="#123456") as mapper:
        gradient = Gradient(0.5)
        assert gradient.hex == "#123456"
        assert gradient.hex == "#123456"
    mapper.assert_called_once_with(0.5)
