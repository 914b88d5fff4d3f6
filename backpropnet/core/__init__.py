"""Core numerical primitives for backpropnet."""

from . import activations, errors, network, rng, types, unit
from .activations import Activation
from .errors import ConfigurationError, DimensionMismatch, NetworkError
from .network import Layer, Network
from .rng import RandomSource
from .types import Sample, TrainingReport
from .unit import Unit

__all__ = [
    "activations",
    "errors",
    "network",
    "rng",
    "types",
    "unit",
    "Activation",
    "ConfigurationError",
    "DimensionMismatch",
    "Layer",
    "Network",
    "NetworkError",
    "RandomSource",
    "Sample",
    "TrainingReport",
    "Unit",
]
