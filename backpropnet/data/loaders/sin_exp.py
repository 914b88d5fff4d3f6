"""Damped sinusoid ``sin(5x) * exp(-x^2)`` sampled over [-2, 2]."""

from __future__ import annotations

import numpy as np

from ..registry import DatasetSpec, TaskCodec, register_dataset
from ..utils import as_samples

INPUT_SCALE = 2.0
OUTPUT_SCALE = 0.9
CORE_FRACTION = 0.6
NOISE_AMPLITUDE = 0.01

PROBE_INPUTS = (0.1, 0.5, 1.0, 1.5, 2.0, 2.5, 3.0)


def damped_sine(x):
    return np.sin(5 * x) * np.exp(-x * x)


def _sample_points(count: int) -> np.ndarray:
    """60% of points evenly over [-1.5, 1.5], the rest over both tails."""

    idx = np.arange(count, dtype=np.float64)
    core_count = count * CORE_FRACTION
    tail_count = count - core_count
    core = -1.5 + 3.0 * idx / (core_count - 1)
    t = (idx - core_count) / (tail_count - 1)
    tails = np.where(t < 0.5, -2.0 + t, 1.5 + (t - 0.5))
    return np.where(idx < core_count, core, tails)


def _make_dataset(count: int, seed: int, noise: bool) -> tuple[np.ndarray, np.ndarray]:
    rng = np.random.default_rng(seed)
    x = _sample_points(count)
    y = damped_sine(x)
    if noise:
        y = y + (rng.random(count) - 0.5) * NOISE_AMPLITUDE
    order = rng.permutation(count)
    return x[order] / INPUT_SCALE, y[order] / OUTPUT_SCALE


def _factory(
    count: int = 10000,
    seed: int = 42,
    noise: bool = False,
    **_: object,
) -> DatasetSpec:
    if count < 2:
        raise ValueError("count must be at least 2")
    x, y = _make_dataset(count=int(count), seed=int(seed), noise=bool(noise))

    codec = TaskCodec(
        normalize_input=lambda raw: raw / INPUT_SCALE,
        denormalize_output=lambda pred: pred * OUTPUT_SCALE,
        reference=lambda raw: float(damped_sine(raw)),
        probe_inputs=PROBE_INPUTS,
        hidden_activation="tanh",
        output_activation="linear",
    )
    provenance = {
        "type": "sin_exp",
        "count": int(count),
        "seed": int(seed),
        "noise": bool(noise),
    }
    return DatasetSpec(
        name="sin_exp",
        samples=as_samples(x.reshape(-1, 1), y.reshape(-1, 1)),
        codec=codec,
        provenance=provenance,
    )


register_dataset("sin_exp", _factory)

__all__ = ["PROBE_INPUTS", "damped_sine", "_factory"]
