"""Core typing contracts for backpropnet."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

Array = np.ndarray
Vector = Sequence[float]


@dataclass(frozen=True)
class Sample:
    """A single ``(inputs, expected)`` training pair."""

    inputs: Tuple[float, ...]
    expected: Tuple[float, ...]

    @classmethod
    def of(cls, inputs: Vector, expected: Vector) -> "Sample":
        return cls(
            inputs=tuple(float(v) for v in inputs),
            expected=tuple(float(v) for v in expected),
        )


@dataclass(frozen=True)
class TrainingReport:
    """Per-epoch error history of one :meth:`Network.train_batch` run."""

    error_history: Tuple[float, ...]
    final_error: float
    epochs_to_converge: Optional[int] = None

    @property
    def epochs(self) -> int:
        return len(self.error_history)

    @property
    def converged(self) -> bool:
        return self.epochs_to_converge is not None

    @property
    def initial_error(self) -> float:
        return self.error_history[0]

    @property
    def improvement(self) -> float:
        return self.initial_error - self.final_error

    def as_dict(self) -> Dict[str, object]:
        return {
            "error_history": list(self.error_history),
            "final_error": self.final_error,
            "epochs_to_converge": self.epochs_to_converge,
        }


@dataclass(frozen=True)
class UnitSnapshot:
    """Read-only copy of a unit's trainable state."""

    weights: Tuple[float, ...]
    bias: float
    activation: str


@dataclass(frozen=True)
class LayerSnapshot:
    """Read-only copy of every unit in one computing layer."""

    index: int
    activation: str
    units: Tuple[UnitSnapshot, ...]


@dataclass(frozen=True)
class ModelDescription:
    """Description of the feed-forward network architecture."""

    topology: Tuple[int, ...]
    hidden_activation: str
    output_activation: str
    learning_rate: float


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`backpropnet.training.pipelines.run_pipeline`."""

    epochs: int
    final_error: float
    epochs_to_converge: Optional[int]
    metrics_path: str
    manifest_path: str
    summary_path: str = ""
