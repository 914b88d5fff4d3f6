"""Utility helpers for dataset generators."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

import numpy as np

from ..core.types import Sample


def as_samples(inputs: np.ndarray, targets: np.ndarray) -> List[Sample]:
    """Pair up rows of two ``(n, d)`` arrays as :class:`Sample` objects."""

    inputs = np.asarray(inputs, dtype=np.float64).reshape(len(inputs), -1)
    targets = np.asarray(targets, dtype=np.float64).reshape(len(targets), -1)
    if inputs.shape[0] != targets.shape[0]:
        raise ValueError(
            f"inputs and targets disagree on sample count: {inputs.shape[0]} != {targets.shape[0]}"
        )
    return [Sample.of(x, y) for x, y in zip(inputs, targets)]


def holdout_split(
    samples: Sequence[Sample], *, train_fraction: float = 0.8
) -> Tuple[List[Sample], List[Sample]]:
    """Split ``samples`` in order into training and validation parts."""

    if not 0 < train_fraction <= 1:
        raise ValueError("train_fraction must be in (0, 1]")
    split_index = int(len(samples) * train_fraction)
    if split_index == 0:
        raise ValueError("Not enough samples for the requested split")
    return list(samples[:split_index]), list(samples[split_index:])


def stack(samples: Iterable[Sample]) -> Tuple[np.ndarray, np.ndarray]:
    """Inverse of :func:`as_samples`."""

    rows = list(samples)
    inputs = np.array([s.inputs for s in rows], dtype=np.float64)
    targets = np.array([s.expected for s in rows], dtype=np.float64)
    return inputs, targets


__all__ = ["as_samples", "holdout_split", "stack"]
