"""Tests for saturation primitives."""

import pytest

from healthy_food_score.services.saturation import (
    logistic,
    positional_weight,
    positional_weights,
    saturate,
)


def test_saturate_half_at_k() -> None:
    assert saturate(5, 5) == 0.5
    assert saturate(0, 5) == 0.0


def test_saturate_is_monotonic_and_bounded() -> None:
    values = [saturate(x, 10) for x in (0, 1, 5, 50, 500, 5000)]
    assert values == sorted(values)
    assert all(0 <= value < 1 for value in values)


def test_saturate_negative_is_absent_signal() -> None:
    assert saturate(-3, 5) == 0.0


def test_saturate_zero_k_is_step() -> None:
    assert saturate(0, 0) == 0.0
    assert saturate(0.01, 0) == 1.0


def test_positional_weights_sum_to_one() -> None:
    for n in (1, 2, 5, 20):
        assert sum(positional_weights(n)) == pytest.approx(1.0)


def test_positional_weights_decrease_with_position() -> None:
    weights = positional_weights(4)
    assert weights == sorted(weights, reverse=True)
    assert positional_weight(1, 4) == pytest.approx(weights[0])
    assert positional_weight(4, 4) == pytest.approx(weights[3])


def test_positional_weight_out_of_range() -> None:
    assert positional_weight(0, 3) == 0.0
    assert positional_weight(4, 3) == 0.0
    assert positional_weights(0) == []


def test_logistic_is_stable_for_large_inputs() -> None:
    assert logistic(0) == 0.5
    assert logistic(1000) == pytest.approx(1.0)
    assert logistic(-1000) == pytest.approx(0.0)
