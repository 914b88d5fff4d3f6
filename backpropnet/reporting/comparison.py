"""Compare denormalised network predictions against a task's reference values."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable, List, Mapping

from ..core.network import Network
from ..data.registry import TaskCodec


@dataclass(frozen=True)
class Comparison:
    input: float
    prediction: float
    actual: float
    error_percent: float
    status: str


def grade(error_percent: float) -> str:
    if error_percent < 1:
        return "Excellent"
    if error_percent < 5:
        return "Good"
    if error_percent < 10:
        return "50/50"
    return "Can be better"


def compare(
    network: Network, codec: TaskCodec, inputs: Iterable[float] | None = None
) -> List[Comparison]:
    rows: List[Comparison] = []
    for raw in codec.probe_inputs if inputs is None else inputs:
        normalised = network.infer([codec.normalize_input(raw)])[0]
        prediction = float(codec.denormalize_output(float(normalised)))
        actual = float(codec.reference(raw))
        error = abs(prediction - actual)
        error_percent = error / abs(actual) * 100 if actual != 0 else 0.0
        rows.append(
            Comparison(
                input=float(raw),
                prediction=prediction,
                actual=actual,
                error_percent=error_percent,
                status=grade(error_percent),
            )
        )
    return rows


def format_rows(rows: Iterable[Comparison]) -> str:
    return "\n".join(
        f"{row.input:.2f} -> {row.prediction:.6f} "
        f"(wanted: {row.actual:.6f}, error: {row.error_percent:.2f}%) {row.status}"
        for row in rows
    )


def as_records(rows: Iterable[Comparison]) -> List[Mapping[str, object]]:
    return [asdict(row) for row in rows]


__all__ = ["Comparison", "as_records", "compare", "format_rows", "grade"]
