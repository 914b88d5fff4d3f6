"""Regression metrics for evaluating a trained network on held-out samples."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping

import numpy as np

from ..core.types import Array

DEFAULT_METRICS = ("rmse", "mae", "r2")


@dataclass(frozen=True)
class MetricResult:
    name: str
    value: float


def compute_metric(name: str, predictions: Array, targets: Array) -> MetricResult:
    key = name.lower()
    preds = np.asarray(predictions, dtype=np.float64)
    targs = np.asarray(targets, dtype=np.float64)
    if preds.shape != targs.shape:
        raise ValueError(f"Shape mismatch: predictions {preds.shape} vs targets {targs.shape}")
    if key == "mae":
        value = float(np.mean(np.abs(preds - targs)))
    elif key == "rmse":
        value = float(np.sqrt(np.mean((preds - targs) ** 2)))
    elif key == "r2":
        mean = np.mean(targs, axis=0, keepdims=True)
        ss_res = float(np.sum((targs - preds) ** 2))
        ss_tot = float(np.sum((targs - mean) ** 2))
        value = 1.0 if ss_tot == 0 else float(1 - ss_res / (ss_tot + 1e-12))
    elif key == "max_abs_error":
        value = float(np.max(np.abs(preds - targs)))
    else:
        raise KeyError(f"Unknown metric: {name}")
    return MetricResult(name=key, value=value)


def compute_metrics(
    names: Iterable[str], predictions: Array, targets: Array
) -> Mapping[str, float]:
    results: Dict[str, float] = {}
    for name in names:
        metric = compute_metric(name, predictions, targets)
        results[metric.name] = metric.value
    return results


__all__ = ["DEFAULT_METRICS", "MetricResult", "compute_metric", "compute_metrics"]
