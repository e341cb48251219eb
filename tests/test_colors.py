"""Tests for color resolution and the fallback substitution."""

import pytest

from savepattern.colors import (
    FALLBACK_COLOR,
    ResolvedColor,
    Unresolved,
    resolve_color,
    with_fallback,
)


class TestResolveColor:
    """resolve_color() never raises; it returns ResolvedColor or Unresolved."""

    def test_rgb_tuple_gets_opaque_alpha(self):
        assert resolve_color((10, 20, 30)) == ResolvedColor(10, 20, 30, 255)

    def test_rgba_list(self):
        assert resolve_color([10, 20, 30, 40]).rgba == (10, 20, 30, 40)

    def test_hex_string(self):
        assert resolve_color("#ff8800").rgba == (255, 136, 0, 255)

    def test_hex_string_with_alpha(self):
        assert resolve_color("#ff880080").rgba == (255, 136, 0, 128)

    def test_named_color(self):
        assert resolve_color("black").rgba == (0, 0, 0, 255)

    def test_resolved_passes_through(self):
        c = ResolvedColor(1, 2, 3, 4)
        assert resolve_color(c) is c

    @pytest.mark.parametrize("value", [
        None,
        "definitely-not-a-color",
        (1, 2),
        (1, 2, 3, 4, 5),
        (256, 0, 0),
        (-1, 0, 0),
        (0.5, 0.5, 0.5),
        (True, 0, 0),
        3.14,
        object(),
    ])
    def test_unpaintable_values_unresolved(self, value):
        result = resolve_color(value)
        assert isinstance(result, Unresolved)
        assert result.reason

    def test_is_opaque(self):
        assert ResolvedColor(0, 0, 0).is_opaque
        assert not ResolvedColor(0, 0, 0, 10).is_opaque

    @pytest.mark.parametrize("channels", [
        (300, 0, 0),
        (0, -1, 0),
        (0, 0, 0, 256),
        (True, 0, 0),
        (0.5, 0, 0),
    ])
    def test_resolved_color_checks_channels(self, channels):
        with pytest.raises(ValueError):
            ResolvedColor(*channels)


class TestWithFallback:
    """The explicit fallback substitution."""

    def test_resolved_unchanged(self):
        c = ResolvedColor(1, 2, 3)
        assert with_fallback(c) is c

    def test_unresolved_becomes_red(self):
        assert with_fallback(Unresolved(None, "no color")).rgba == FALLBACK_COLOR
        assert FALLBACK_COLOR == (255, 0, 0, 255)

    def test_custom_fallback(self):
        result = with_fallback(Unresolved("x", "bad"), fallback=(1, 1, 1, 1))
        assert result.rgba == (1, 1, 1, 1)
