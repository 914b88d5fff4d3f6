"""Training drivers built on top of :mod:`backpropnet.core`."""

from .pipelines import load_preset, presets, run_pipeline

__all__ = ["load_preset", "presets", "run_pipeline"]
