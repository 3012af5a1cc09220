import pytest

from Light_Bake.engine.easing import (
    EASE_FUNCTIONS,
    INSTANT,
    LINEAR,
    get_ease_function,
    get_ease_function_or_default,
    interpolate,
)


@pytest.mark.parametrize("name", sorted(set(EASE_FUNCTIONS) - {INSTANT}))
def test_easing_boundaries(name):
    ease = EASE_FUNCTIONS[name]
    assert ease(0.0) == pytest.approx(0.0, abs=1e-9)
    assert ease(1.0) == pytest.approx(1.0, abs=1e-9)


def test_instant_holds_start_value():
    ease = EASE_FUNCTIONS[INSTANT]
    assert interpolate(3.0, 10.0, 0.0, ease) == 3.0
    assert interpolate(3.0, 10.0, 0.99, ease) == 3.0


def test_lookup_is_case_insensitive():
    assert get_ease_function("instant") is EASE_FUNCTIONS[INSTANT]
    assert get_ease_function("inoutsine") is EASE_FUNCTIONS["InOutSine"]


def test_unknown_easing_falls_back_to_linear():
    assert get_ease_function("Wobble") is None
    assert get_ease_function(None) is None
    assert get_ease_function_or_default("Wobble") is EASE_FUNCTIONS[LINEAR]


def test_interpolate_linear_midpoint():
    assert interpolate(2.0, 4.0, 0.5, EASE_FUNCTIONS[LINEAR]) == pytest.approx(3.0)
