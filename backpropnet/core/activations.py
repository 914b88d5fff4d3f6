"""Scalar activation functions and their derivatives."""

from __future__ import annotations

import math
from enum import Enum
from typing import Callable, Dict, Tuple

from .errors import ConfigurationError

# Beyond this magnitude sigmoid and tanh are returned as their asymptotes.
SATURATION_LIMIT = 500.0

ScalarFn = Callable[[float], float]


def linear(z: float) -> float:
    return z


def linear_deriv(z: float) -> float:
    return 1.0


def relu(z: float) -> float:
    """Return the ReLU activation."""

    return max(0.0, z)


def relu_deriv(z: float) -> float:
    # z == 0 counts as inactive
    return 1.0 if z > 0 else 0.0


def sigmoid(z: float) -> float:
    """Logistic function, clipped to 0/1 outside ``SATURATION_LIMIT``."""

    if z > SATURATION_LIMIT:
        return 1.0
    if z < -SATURATION_LIMIT:
        return 0.0
    try:
        return 1.0 / (1.0 + math.exp(-z))
    except OverflowError:
        return 1.0 if z > 0 else 0.0


def sigmoid_deriv(z: float) -> float:
    s = sigmoid(z)
    return s * (1.0 - s)


def tanh(z: float) -> float:
    """Hyperbolic tangent, clipped to -1/1 outside ``SATURATION_LIMIT``."""

    if z > SATURATION_LIMIT:
        return 1.0
    if z < -SATURATION_LIMIT:
        return -1.0
    try:
        return math.tanh(z)
    except OverflowError:  # pragma: no cover - math.tanh saturates on its own
        return 1.0 if z > 0 else -1.0


def tanh_deriv(z: float) -> float:
    t = tanh(z)
    return 1.0 - t * t


class Activation(Enum):
    """Closed set of activation functions supported by a unit."""

    LINEAR = "linear"
    RELU = "relu"
    SIGMOID = "sigmoid"
    TANH = "tanh"

    def apply(self, z: float) -> float:
        return _FUNCTIONS[self][0](z)

    def derivative(self, z: float) -> float:
        return _FUNCTIONS[self][1](z)

    @classmethod
    def parse(cls, name: "str | Activation") -> "Activation":
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower()
        for member in cls:
            if member.value == key:
                return member
        available = ", ".join(member.value for member in cls)
        raise ConfigurationError(
            f"Unknown activation {name!r}. Available activations: {available}"
        )

    def __str__(self) -> str:
        return self.value


_FUNCTIONS: Dict[Activation, Tuple[ScalarFn, ScalarFn]] = {
    Activation.LINEAR: (linear, linear_deriv),
    Activation.RELU: (relu, relu_deriv),
    Activation.SIGMOID: (sigmoid, sigmoid_deriv),
    Activation.TANH: (tanh, tanh_deriv),
}


__all__ = [
    "Activation",
    "SATURATION_LIMIT",
    "linear",
    "relu",
    "sigmoid",
    "tanh",
]
