"""Linear unit-conversion dataset (kilometres to miles by default)."""

from __future__ import annotations

import numpy as np

from ..registry import DatasetSpec, TaskCodec, register_dataset
from ..utils import as_samples

KM_TO_MILES = 0.621371
INPUT_SCALE = 1000.0

# (cumulative probability, low, width) of each raw-input band
_BANDS = (
    (0.3, 0.1, 9.9),
    (0.6, 10.0, 90.0),
    (0.9, 100.0, 400.0),
    (1.0, 500.0, 500.0),
)

PROBE_INPUTS = (0.1, 0.5, 1.0, 5.0, 10.0, 50.0, 100.0, 200.0, 500.0, 750.0, 999.0)


def _make_dataset(count: int, factor: float, seed: int) -> tuple[np.ndarray, np.ndarray]:
    rng = np.random.default_rng(seed)
    band = rng.random(count)
    spread = rng.random(count)
    conditions = [band < edge for edge, _, _ in _BANDS[:-1]]
    choices = [low + spread * width for _, low, width in _BANDS[:-1]]
    _, last_low, last_width = _BANDS[-1]
    x = np.select(conditions, choices, default=last_low + spread * last_width)
    y = x * factor
    return x / INPUT_SCALE, y / (INPUT_SCALE * factor)


def _factory(
    count: int = 10000,
    factor: float = KM_TO_MILES,
    seed: int = 42,
    **_: object,
) -> DatasetSpec:
    if count < 1:
        raise ValueError("count must be positive")
    if factor == 0:
        raise ValueError("conversion factor must be non-zero")
    x, y = _make_dataset(count=int(count), factor=float(factor), seed=int(seed))

    codec = TaskCodec(
        normalize_input=lambda raw: raw / INPUT_SCALE,
        denormalize_output=lambda pred: pred * INPUT_SCALE * factor,
        reference=lambda raw: raw * factor,
        probe_inputs=PROBE_INPUTS,
        hidden_activation="linear",
        output_activation="linear",
    )
    provenance = {
        "type": "conversion",
        "count": int(count),
        "factor": float(factor),
        "seed": int(seed),
    }
    return DatasetSpec(
        name="km_to_miles",
        samples=as_samples(x.reshape(-1, 1), y.reshape(-1, 1)),
        codec=codec,
        provenance=provenance,
    )


register_dataset("km_to_miles", _factory)

__all__ = ["KM_TO_MILES", "PROBE_INPUTS", "_factory"]
