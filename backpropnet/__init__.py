"""backpropnet public API."""

from .core import activations, types  # noqa: F401
from .core.activations import Activation
from .core.errors import ConfigurationError, DimensionMismatch, NetworkError
from .core.network import Layer, Network
from .core.rng import RandomSource
from .core.types import Sample, TrainingReport
from .core.unit import Unit
from .training.pipelines import load_preset, presets, run_pipeline

__all__ = [
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
    "activations",
    "types",
    "load_preset",
    "presets",
    "run_pipeline",
]
