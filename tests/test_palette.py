import json
import logging
import re

import numpy as np
import pytest
from coloraide import Color

from curve_palette.color import canon_hex, hex_to_rgb, hsl_to_rgb, print_hsl, rgb_to_hsl
from curve_palette.curves import make_curve
from curve_palette.palette import ColorPalette

HEX = re.compile(r"^#[0-9a-f]{6}$")


def overshooting_palette():
    hs = {"type": "sinusoidal", "scale": {"x": 3, "y": -3}, "overflow": "wrap", "rotation": 2.0}
    l = {"type": "bounce", "translation": {"x": 0, "y": -0.5}, "scale": {"x": 1, "y": 2.5}, "overflow": "wrap"}
    return ColorPalette(hs, l)


def test_defaults():
    p = ColorPalette()
    assert p.hs_curve.type == "exponential"
    assert p.hs_curve.surface.type == "unitCircle"
    assert p.l_curve.type == "linear"
    assert p.l_curve.surface.type == "unitSquare"
    assert (p.start, p.end) == (0.0, 1.0)


def test_color_values_stay_in_range_when_curves_overshoot():
    for p in (overshooting_palette(), ColorPalette("elastic", "back")):
        p.update_curve_clamp_bounds()
        for n in np.linspace(0, 1, 101):
            h, s, l = p.get_color_values(float(n))
            assert 0.0 <= h < 360.0
            assert 0.0 <= s <= 1.0
            assert 0.0 <= l <= 1.0


def test_clamped_curves_sample_their_own_windows():
    hs = {"type": "linear", "translation": {"x": -1.5, "y": 0}, "scale": {"x": 3, "y": 0}}
    p = ColorPalette(hs, "linear")
    p.update_curve_clamp_bounds()
    # hs curve only leaves the circle near both ends; l curve never clamps
    assert p.hs_curve.clamp_start == pytest.approx(1 / 6, abs=1e-6)
    assert p.hs_curve.clamp_end == pytest.approx(5 / 6, abs=1e-6)
    assert (p.l_curve.clamp_start, p.l_curve.clamp_end) == (0.0, 1.0)

    h0, s0, l0 = p.get_color_values(0.0)
    assert h0 == pytest.approx(180.0)
    assert s0 == pytest.approx(1.0)
    assert l0 == pytest.approx(0.25)


def test_start_end_are_kept_ordered(caplog):
    p = ColorPalette(start=0.2, end=0.8)
    with caplog.at_level(logging.WARNING):
        p.set_start(0.9)
        assert p.start == 0.8
        p.set_end(0.1)
        assert p.end == 0.8
    assert "cannot be greater" in caplog.text
    assert "cannot be less" in caplog.text


def test_start_end_are_held_to_unit_range(caplog):
    hs = {"type": "polynomial", "exponent": 2.5, "overflow": "wrap"}
    with caplog.at_level(logging.WARNING):
        p = ColorPalette(hs, "linear", start=-0.5, end=1.5)
    assert (p.start, p.end) == (0.0, 1.0)
    assert "must lie in [0, 1]" in caplog.text

    h, s, l = p.get_color_values(0.0)
    assert all(isinstance(v, float) for v in (h, s, l))
    assert p.get_color_values(-0.25) == p.get_color_values(0.0)


def test_hs_curve_must_live_on_unit_circle(caplog):
    p = ColorPalette()
    before = p.hs_curve
    with caplog.at_level(logging.ERROR):
        p.set_hs_curve(make_curve("linear", "unitSquare"))
    assert p.hs_curve is before
    assert "unitCircle" in caplog.text

    circle = make_curve("bounce", "unitCircle")
    p.set_hs_curve(circle)
    assert p.hs_curve is circle


def test_known_conversions():
    assert hsl_to_rgb(0, 1, 0.5) == (255, 0, 0)
    assert hsl_to_rgb(120, 1, 0.5) == (0, 255, 0)
    assert hsl_to_rgb(300, 0, 1) == (255, 255, 255)
    assert hsl_to_rgb(42, 0.7, 0) == (0, 0, 0)
    assert print_hsl(200, 0.5, 0.25) == "hsl(200, 50%, 25%)"


def test_output_formats():
    p = ColorPalette()
    p.update_curve_clamp_bounds()
    assert HEX.match(p.hex_value_at(0.3))
    assert re.match(r"^rgb\(\d{1,3}, \d{1,3}, \d{1,3}\)$", p.rgb_value_at(0.3))
    assert re.match(r"^hsl\([\d.]+, [\d.]+%, [\d.]+%\)$", p.hsl_value_at(0.3))


def test_hex_round_trip_within_one_step():
    p = overshooting_palette()
    for n in np.linspace(0, 1, 33):
        h, s, l = p.get_color_values(float(n))
        exact = np.asarray(Color("hsl", [h, s, l]).convert("srgb").coords()) * 255.0
        rgb = hex_to_rgb(p.hex_value_at(float(n)))
        assert np.all(np.abs(np.asarray(rgb) - exact) <= 1.0)

        h_back, s_back, l_back = rgb_to_hsl(*rgb)
        assert l_back == pytest.approx(l, abs=1 / 255)

        # one 8-bit step moves s and h further as the colour nears grey
        spread = 1.0 - abs(2.0 * l - 1.0)
        if spread > 0.1:
            assert s_back == pytest.approx(s, abs=3 / (255 * spread))
        chroma = s * spread
        if chroma > 0.05:
            dh = abs(h_back - h) % 360.0
            assert min(dh, 360.0 - dh) <= 180 / (255 * chroma)


def test_hex_parsing():
    assert canon_hex(" #ABC ") == "#aabbcc"
    assert hex_to_rgb("00507f") == (0, 80, 127)
    with pytest.raises(ValueError):
        hex_to_rgb("#12345")
    h, s, l = rgb_to_hsl(255, 0, 0)
    assert (h, s, l) == pytest.approx((0.0, 1.0, 0.5))
    assert rgb_to_hsl(128, 128, 128)[:2] == (0.0, 0.0)


def test_export_format():
    p = ColorPalette({"type": "elastic", "amplitude": 2}, "linear", start=0.1, end=0.9)
    out = p.export_palette_params()
    hs, l, pal = json.loads("[" + out + "]")

    assert out.count("}, {") == 2
    assert hs["type"] == "elastic"
    assert hs["amplitude"] == "2.000"
    assert re.match(r"^-?\d+\.\d{3}$", hs["translation"]["x"])
    assert hs["reverse"] is False
    assert hs["overflow"] == "clamp"
    assert "variation" not in l
    assert pal == {"start": "0.100", "end": "0.900"}

    assert json.loads("[" + p.export_palette_params(5) + "]")[2]["end"] == "0.90000"
    assert json.loads("[" + p.export_palette_params(0) + "]")[2]["end"] == "1"
    assert p.export_palette_params(-1) == p.export_palette_params()


def test_exported_params_rebuild_the_palette():
    p = ColorPalette({"type": "back", "overshoot": 2.5, "rotation": 0.4}, "sinusoidal", start=0.05)
    hs, l, pal = json.loads("[" + p.export_palette_params(12) + "]")
    q = ColorPalette.from_params(hs, l, pal)
    assert q.hs_curve.type == "back"
    assert q.hs_curve.shape.overshoot == pytest.approx(2.5)
    assert q.color_stops(9) == p.color_stops(9)


def test_color_stops_and_gradient():
    p = ColorPalette()
    stops = p.color_stops(5)
    assert len(stops) == 5
    assert all(HEX.match(s) for s in stops)

    grad = p.gradient_stops(4)
    assert [o for o, _ in grad] == [0.0, 0.25, 0.5, 0.75, 1.0]
    assert all(c.startswith("hsl(") for _, c in grad)
