import math

import numpy as np
import pytest

from backpropnet.core.activations import Activation
from backpropnet.core.errors import DimensionMismatch
from backpropnet.core.rng import RandomSource
from backpropnet.core.unit import Unit


@pytest.mark.parametrize(
    "activation, scale",
    [
        (Activation.RELU, math.sqrt(2.0 / 4)),
        (Activation.TANH, math.sqrt(2.0 / 5)),
        (Activation.LINEAR, math.sqrt(2.0 / 5)),
    ],
)
def test_initial_weights_are_scaled_gaussians(activation, scale):
    unit = Unit(4, RandomSource(5), activation)
    reference = RandomSource(5)
    expected = [reference.gaussian() * scale for _ in range(4)]
    assert np.allclose(unit.weights, expected)
    assert unit.bias == 0.0


def test_forward_caches_pre_activation_and_output():
    unit = Unit(2, RandomSource(0), "sigmoid")
    unit.weights[:] = [0.5, -1.0]
    unit.bias = 0.25
    out = unit.forward([2.0, 1.0])
    assert unit.pre_activation == pytest.approx(0.25)
    assert out == pytest.approx(1.0 / (1.0 + math.exp(-0.25)))
    assert unit.output == out


def test_derivative_uses_cached_pre_activation():
    unit = Unit(1, RandomSource(0), "sigmoid")
    unit.weights[:] = [1.0]
    unit.forward([700.0])
    assert unit.output == 1.0
    assert unit.activation_derivative(unit.pre_activation) == 0.0


def test_forward_rejects_wrong_length():
    unit = Unit(3, RandomSource(0), "linear")
    before = unit.weights.copy()
    with pytest.raises(DimensionMismatch):
        unit.forward([1.0, 2.0])
    assert np.array_equal(unit.weights, before)


def test_update_adds_deltas_in_place():
    unit = Unit(2, RandomSource(0), "linear")
    unit.weights[:] = [1.0, 2.0]
    unit.update([0.5, -0.5], 0.1)
    assert np.allclose(unit.weights, [1.5, 1.5])
    assert unit.bias == pytest.approx(0.1)
    with pytest.raises(DimensionMismatch):
        unit.update([1.0], 0.0)


def test_snapshot_and_str():
    unit = Unit(2, RandomSource(0), "tanh")
    unit.weights[:] = [0.12345, -1.0]
    snap = unit.snapshot()
    assert snap.weights == (0.12345, -1.0)
    assert snap.activation == "tanh"
    assert str(unit) == "Weights: [0.1235, -1.0000], Bias: 0.000000, Activation: tanh"
