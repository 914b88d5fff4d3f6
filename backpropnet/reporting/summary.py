"""Deterministic training summaries."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping, Sequence

import numpy as np

from ..core.types import TrainingReport


def _area(y: np.ndarray, x: np.ndarray) -> float:
    trapezoid = getattr(np, "trapezoid", None)
    if callable(trapezoid):
        return float(trapezoid(y, x))
    return float(np.trapz(y, x))


def compute_auc(points: Sequence[float]) -> float:
    """Return the area-under-curve of ``points`` along an implicit epoch axis."""

    if not points:
        return 0.0
    y = np.asarray(points, dtype=np.float64)
    x = np.arange(len(points), dtype=np.float64)
    return _area(y, x)


def build_summary(report: TrainingReport, *, tail: int = 32) -> Mapping[str, object]:
    history = np.asarray(report.error_history, dtype=np.float64)
    tail_window = min(tail, history.size)
    tail_arr = history[-tail_window:] if tail_window else history[:0]
    return {
        "version": 1,
        "epochs": int(history.size),
        "epochs_to_converge": report.epochs_to_converge,
        "tail_window": tail_window,
        "rms": {
            "initial": float(history[0]),
            "final": float(report.final_error),
            "min": float(np.min(history)),
            "max": float(np.max(history)),
            "mean": float(np.mean(history)),
            "improvement": float(report.improvement),
            "tail_auc": compute_auc(tail_arr.tolist()),
        },
    }


def write_summary(report: TrainingReport, out_summary_json: str | Path, *, tail: int = 32) -> str:
    """Write a deterministic summary of ``report``."""

    out_path = Path(out_summary_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    summary = build_summary(report, tail=tail)
    out_path.write_text(json.dumps(summary, sort_keys=True, indent=2))
    return str(out_path)


__all__ = ["build_summary", "compute_auc", "write_summary"]
