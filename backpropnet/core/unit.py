"""A single fully-connected computational node."""

from __future__ import annotations

import math

import numpy as np

from .activations import Activation
from .errors import DimensionMismatch
from .rng import RandomSource
from .types import Array, UnitSnapshot, Vector


class Unit:
    """Weighted sum plus activation, with per-pass caches for backprop.

    ``pre_activation`` and ``output`` are overwritten by every
    :meth:`forward` call and read by the backward pass that follows it, so a
    unit must not serve two forward passes at once.
    """

    def __init__(
        self,
        input_count: int,
        rng: RandomSource,
        activation: Activation | str = Activation.SIGMOID,
    ) -> None:
        self.activation_type = Activation.parse(activation)
        if self.activation_type is Activation.RELU:
            scale = math.sqrt(2.0 / input_count)
        else:
            scale = math.sqrt(2.0 / (input_count + 1))
        self.weights: Array = np.array(
            [rng.gaussian() * scale for _ in range(input_count)], dtype=np.float64
        )
        self.bias = 0.0
        self.pre_activation = 0.0
        self.output = 0.0

    @property
    def input_count(self) -> int:
        return int(self.weights.shape[0])

    def forward(self, inputs: Vector | Array) -> float:
        if len(inputs) != self.weights.shape[0]:
            raise DimensionMismatch("unit input", self.weights.shape[0], len(inputs))
        z = float(np.dot(np.asarray(inputs, dtype=np.float64), self.weights)) + self.bias
        self.pre_activation = z
        self.output = self.activation(z)
        return self.output

    def activation(self, z: float) -> float:
        return self.activation_type.apply(z)

    def activation_derivative(self, z: float) -> float:
        return self.activation_type.derivative(z)

    def update(self, weight_deltas: Vector | Array, bias_delta: float) -> None:
        if len(weight_deltas) != self.weights.shape[0]:
            raise DimensionMismatch(
                "weight deltas", self.weights.shape[0], len(weight_deltas)
            )
        self.weights += np.asarray(weight_deltas, dtype=np.float64)
        self.bias += float(bias_delta)

    def snapshot(self) -> UnitSnapshot:
        return UnitSnapshot(
            weights=tuple(float(w) for w in self.weights),
            bias=float(self.bias),
            activation=self.activation_type.value,
        )

    def __str__(self) -> str:
        weights = ", ".join(f"{w:.4f}" for w in self.weights)
        return (
            f"Weights: [{weights}], Bias: {self.bias:.6f}, "
            f"Activation: {self.activation_type.value}"
        )

    def __repr__(self) -> str:
        return f"Unit(input_count={self.input_count}, activation={self.activation_type.value!r})"


__all__ = ["Unit"]
