import logging
from math import atan2, hypot, pi

import numpy as np
import pytest

from curve_palette import easing
from curve_palette.curves import (
    SHAPES,
    CurvePoint,
    apply_param,
    make_curve,
    resolve_clamp_bounds,
)


def identity_linear(surface="unitSquare", **opts):
    params = {"translation": {"x": 0, "y": 0}, "scale": {"x": 1, "y": 1}, "overflow": "wrap"}
    params.update(opts)
    return make_curve("linear", surface, **params)


def test_untransformed_linear_is_diagonal():
    c = identity_linear()
    for t in np.linspace(0, 1, 17):
        p = c.coords_at(float(t))
        assert p.x == pytest.approx(t)
        assert p.y == pytest.approx(t)
        assert not p.clamped


def test_reverse_mirrors_parameter():
    fwd = make_curve("back", "unitSquare", overflow="wrap")
    rev = make_curve("back", "unitSquare", overflow="wrap", reverse=True)
    for t in np.linspace(0, 1, 9):
        t = float(t)
        assert np.allclose(rev.local_coords_at(t), fwd.local_coords_at(1 - t))
        assert np.allclose(rev.coords_at(t)[:2], fwd.coords_at(1 - t)[:2])


def test_elastic_out_scenario():
    c = make_curve("elastic", "unitSquare", amplitude=2, period=0.3, variation="out")
    assert c.scale == (1.0, 0.5)
    assert c.translation == (0.0, 0.25)
    assert np.allclose(c.coords_at(0)[:2], (0.0, 0.25), atol=1e-2)
    assert np.allclose(c.coords_at(1)[:2], (1.0, 0.75), atol=1e-2)


@pytest.mark.parametrize("variation", easing.VARIATIONS)
@pytest.mark.parametrize(
    "factory",
    [
        lambda v: easing.poly(v, 2.5),
        easing.sinusoidal,
        easing.exponential,
        lambda v: easing.back(v, 1.70158),
        easing.bounce,
        lambda v: easing.elastic(v, 1.5, 0.4),
    ],
)
def test_easing_endpoints(factory, variation):
    f = factory(variation)
    assert f(0.0) == pytest.approx(0.0, abs=1e-9)
    assert f(1.0) == pytest.approx(1.0, abs=1e-9)


def test_unit_circle_clamps_radius_keeping_angle():
    c = identity_linear("unitCircle", scale={"x": 3, "y": 3})
    p = c.coords_at(1.0)
    assert p.clamped
    assert hypot(p.x, p.y) == pytest.approx(1.0)
    assert atan2(p.y, p.x) == pytest.approx(pi / 4)

    inside = c.coords_at(0.1)
    assert not inside.clamped
    assert np.allclose(inside[:2], (0.3, 0.3))


def test_unit_square_clamps_each_axis():
    c = identity_linear(translation={"x": -0.5, "y": 0.5})
    p = c.coords_at(0.0)
    assert p.clamped
    assert (p.x, p.y) == (0.0, 0.5)
    assert c.surface.center == (0.5, 0.5)
    assert make_curve("linear", "unitCircle").surface.center == (0.0, 0.0)


def test_clamp_bounds_bracket_inside_run():
    # y = 1.5t - 0.25 stays inside for t in [1/6, 5/6]
    c = identity_linear(translation={"x": 0, "y": -0.25}, scale={"x": 1, "y": 1.5})
    c.set_overflow("clamp")

    assert c.clamp_start == pytest.approx(1 / 6, abs=1e-6)
    assert c.clamp_end == pytest.approx(5 / 6, abs=1e-6)
    assert not c.coords_at(c.clamp_start).clamped
    assert not c.coords_at(c.clamp_end).clamped
    assert c.coords_at(c.clamp_start - 1e-3).clamped
    assert c.coords_at(c.clamp_end + 1e-3).clamped


def test_clamp_bounds_take_first_run():
    # inside, outside, inside again: only the first run counts
    inside = lambda t: 0.0 <= t <= 0.3 or t >= 0.7  # noqa: E731

    def sample(t):
        return CurvePoint(t, t, not inside(t))

    start, end = resolve_clamp_bounds(sample)
    assert start == 0.0
    assert end == pytest.approx(0.3, abs=1e-6)


def test_fully_clamped_curve_collapses_to_midpoint():
    c = identity_linear(translation={"x": 0, "y": 2})
    c.set_overflow("clamp")
    assert (c.clamp_start, c.clamp_end) == (0.5, 0.5)


def test_transform_setters_leave_clamp_bounds_stale():
    c = make_curve("linear", "unitSquare")
    assert (c.clamp_start, c.clamp_end) == (0.0, 1.0)
    c.set_translate_y(-0.25)
    assert (c.clamp_start, c.clamp_end) == (0.0, 1.0)
    c.set_clamp_bounds()
    assert c.clamp_start == pytest.approx(0.5, abs=1e-6)


def test_apply_param_refreshes_clamp_bounds():
    c = make_curve("linear", "unitSquare")
    apply_param(c, "translateY", -0.25)
    assert c.translation.y == -0.25
    assert c.clamp_start == pytest.approx(0.5, abs=1e-6)

    apply_param(c, "rotate", 0.1)
    assert c.rotation == 0.1


def test_invalid_elastic_params_are_rejected(caplog):
    c = make_curve("elastic", "unitSquare", amplitude=2, period=0.5)
    with caplog.at_level(logging.WARNING):
        c.set_amplitude(1)
        c.set_amplitude(float("nan"))
        c.set_period(0)
        c.set_period(-3)
    assert c.shape.amplitude == 2
    assert c.shape.period == 0.5
    assert "Amplitude must be a number greater than 1" in caplog.text
    assert "Period must be a number greater than 0" in caplog.text


def test_non_finite_transform_is_rejected():
    c = make_curve("linear", "unitSquare")
    c.set_translate_x(float("inf"))
    c.set_scale({"x": 1, "y": "wide"})
    c.set_rotation(None)
    assert c.translation == (0.0, 0.25)
    assert c.scale == (1.0, 0.5)
    assert c.rotation == 0.0


def test_unknown_type_falls_back_to_linear(caplog):
    with caplog.at_level(logging.WARNING):
        c = make_curve("spiral", "unitSquare")
    assert c.type == "linear"
    assert "not supported" in caplog.text


def test_variant_params_only_on_their_variant(caplog):
    c = make_curve("linear", "unitSquare")
    with caplog.at_level(logging.WARNING):
        c.set_amplitude(3)
    assert not hasattr(c.shape, "amplitude")
    assert "no amplitude parameter" in caplog.text


def test_arc_sweeps_half_circle():
    c = make_curve("arc", "unitCircle", overflow="wrap")
    assert c.category == "geometry"
    assert np.allclose(c.coords_at(0.0)[:2], (1.0, 0.0))
    assert np.allclose(c.coords_at(0.5)[:2], (0.0, 1.0))
    assert np.allclose(c.coords_at(1.0)[:2], (-1.0, 0.0), atol=1e-12)

    c.set_angle_offset(pi / 2)
    assert np.allclose(c.coords_at(0.0)[:2], (0.0, 1.0))


def test_params_export_only_variant_fields():
    lin = make_curve("linear", "unitSquare").params()
    assert "variation" not in lin and "amplitude" not in lin
    assert lin["surface"] == "unitSquare"
    arc = make_curve("arc", "unitCircle").params()
    assert arc["surface"] == "unitCircle"
    assert {"angleStart", "angleEnd", "angleOffset", "radius", "variation"} <= set(arc)


def test_every_type_builds_on_both_surfaces():
    for name in SHAPES:
        for surface in ("unitCircle", "unitSquare"):
            c = make_curve(name, surface)
            assert c.type == name
            assert 0.0 <= c.clamp_start <= c.clamp_end <= 1.0


def test_negative_exponent_is_rejected(caplog):
    c = make_curve("polynomial", "unitSquare", exponent=2)
    with caplog.at_level(logging.ERROR):
        apply_param(c, "exponent", -1)
    assert c.shape.exponent == 2
    assert "Exponent must be a non-negative number" in caplog.text
    assert c.coords_at(0.0).clamped is False

    built = make_curve("polynomial", "unitSquare", exponent=-1)
    assert built.shape.exponent == 2
    assert 0.0 <= built.clamp_start <= built.clamp_end <= 1.0
