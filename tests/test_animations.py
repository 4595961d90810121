import pytest

from core.models import ColorHSL
from visual.animations import (
    lerp,
    lerp_color,
    ease_out_expo,
    ease_in_out_cubic,
    ease_in_out_quad,
    ease_in_out_expo,
    ColorTransition,
)

RED = ColorHSL(0, 80, 50)
TEAL = ColorHSL(180, 40, 30)


def test_lerp():
    assert lerp(0, 10, 0.25) == 2.5


def test_lerp_color_endpoints():
    samples = [ColorHSL(350, 75, 62), ColorHSL(10, 20, 30), RED, TEAL, ColorHSL(359.5, 0, 100)]
    for a in samples:
        for b in samples:
            assert lerp_color(a, b, 0) == a
            assert lerp_color(a, b, 1) == b


def test_hue_takes_shortest_path():
    mid = lerp_color(ColorHSL(350, 50, 50), ColorHSL(10, 50, 50), 0.5)
    assert mid.hue == 0

    mid = lerp_color(ColorHSL(10, 50, 50), ColorHSL(350, 50, 50), 0.5)
    assert mid.hue == 0


def test_hue_result_is_normalized():
    color = lerp_color(ColorHSL(340, 50, 50), ColorHSL(40, 50, 50), 0.75)
    assert color.hue == 25
    assert 0 <= color.hue < 360


def test_saturation_and_lightness_interpolate_linearly():
    mid = lerp_color(RED, TEAL, 0.5)
    assert mid.saturation == 60
    assert mid.lightness == 40


def test_easing_endpoints():
    for easing in (ease_out_expo, ease_in_out_cubic, ease_in_out_quad, ease_in_out_expo):
        assert easing(0) == pytest.approx(0, abs=1e-3)
        assert easing(1) == 1


def test_ease_out_expo_is_fast_then_slow():
    assert ease_out_expo(0.1) > 0.4
    assert ease_out_expo(0.5) > 0.95


def test_transition_settles_exactly_on_target():
    transition = ColorTransition(RED, duration=0.3)
    transition.set_target(TEAL, now=1.0)

    assert transition.value_at(1.0) == RED
    halfway = transition.value_at(1.15)
    assert halfway != RED and halfway != TEAL
    assert transition.value_at(1.3) == TEAL
    assert transition.value_at(5.0) == TEAL
    assert transition.is_complete(1.3)


def test_transition_progress_is_clamped():
    transition = ColorTransition(RED)
    transition.set_target(TEAL, now=2.0)
    assert transition.progress(1.0) == 0.0
    assert transition.progress(10.0) == 1.0


def test_retarget_starts_from_displayed_color():
    transition = ColorTransition(RED, duration=1.0)
    transition.set_target(TEAL, now=0.0)
    shown = transition.value_at(0.5)

    new_target = ColorHSL(90, 10, 90)
    transition.set_target(new_target, now=0.5)
    assert transition.start_color == shown
    assert transition.value_at(0.5) == shown
    assert transition.value_at(1.5) == new_target


def test_transition_rejects_non_positive_duration():
    with pytest.raises(ValueError):
        ColorTransition(RED, duration=0)
