"""Fully-connected feed-forward network trained by online backpropagation."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Iterable, List, Mapping, Sequence, Tuple

import numpy as np

from .activations import Activation
from .errors import ConfigurationError, DimensionMismatch
from .rng import RandomSource
from .types import (
    Array,
    LayerSnapshot,
    ModelDescription,
    Sample,
    TrainingReport,
    Vector,
)
from .unit import Unit


class Layer:
    """Ordered units sharing one activation and one input width."""

    def __init__(
        self,
        width: int,
        input_width: int,
        rng: RandomSource,
        activation: Activation,
    ) -> None:
        self.activation = activation
        self.input_width = input_width
        self.units: List[Unit] = [Unit(input_width, rng, activation) for _ in range(width)]

    @property
    def width(self) -> int:
        return len(self.units)

    def forward(self, inputs: Array) -> Array:
        return np.array([unit.forward(inputs) for unit in self.units], dtype=np.float64)

    def weight_matrix(self) -> Array:
        """Return a ``(width, input_width)`` copy of the unit weights."""

        return np.stack([unit.weights for unit in self.units])

    def derivatives(self) -> Array:
        """Activation derivatives at the pre-activations cached by the last pass."""

        return np.array(
            [unit.activation_derivative(unit.pre_activation) for unit in self.units],
            dtype=np.float64,
        )


class Network:
    """Multi-layer perceptron with per-sample gradient descent.

    ``topology[0]`` is the input width and is not backed by a layer; every
    following entry becomes a :class:`Layer`, so ``layers[k]`` has
    ``topology[k + 1]`` units each taking ``topology[k]`` inputs.
    """

    def __init__(
        self,
        topology: Sequence[int],
        learning_rate: float,
        seed: int | None = None,
        hidden_activation: Activation | str = Activation.SIGMOID,
        output_activation: Activation | str = Activation.LINEAR,
    ) -> None:
        topology = tuple(int(width) for width in topology)
        if len(topology) < 2:
            raise ConfigurationError("Network must have at least 2 layers")
        if any(width < 1 for width in topology):
            raise ConfigurationError(f"Layer widths must be positive, got {list(topology)}")
        learning_rate = float(learning_rate)
        if not math.isfinite(learning_rate) or learning_rate <= 0:
            raise ConfigurationError(f"Learning rate must be positive, got {learning_rate}")

        self.topology: Tuple[int, ...] = topology
        self.learning_rate = learning_rate
        self.hidden_activation = Activation.parse(hidden_activation)
        self.output_activation = Activation.parse(output_activation)
        self.rng = RandomSource(seed)
        self.last_error = 0.0

        self.layers: List[Layer] = []
        last = len(topology) - 1
        for idx in range(1, len(topology)):
            activation = self.output_activation if idx == last else self.hidden_activation
            self.layers.append(Layer(topology[idx], topology[idx - 1], self.rng, activation))

    @property
    def input_width(self) -> int:
        return self.topology[0]

    @property
    def output_width(self) -> int:
        return self.topology[-1]

    # ------------------------------------------------------------------
    # Inference and training

    def infer(self, inputs: Vector | Array) -> Array:
        x = self._check_inputs(inputs)
        for layer in self.layers:
            x = layer.forward(x)
        return x

    def train_one(self, inputs: Vector | Array, expected_outputs: Vector | Array) -> float:
        """Run one forward/backward pass and update every unit.

        Returns the root-mean-square of ``expected - output`` for the sample.
        """

        x = self._check_inputs(inputs)
        expected = self._check_expected(expected_outputs)

        activations: List[Array] = [x]
        for layer in self.layers:
            x = layer.forward(x)
            activations.append(x)

        errors = expected - activations[-1]
        self.last_error = float(math.sqrt(np.mean(errors * errors)))

        # Error signals for every layer, computed from the pre-update weights.
        signals: List[Array] = [np.empty(0)] * len(self.layers)
        raw = errors
        for idx in reversed(range(len(self.layers))):
            layer = self.layers[idx]
            signals[idx] = raw * layer.derivatives()
            if idx > 0:
                raw = layer.weight_matrix().T @ signals[idx]

        for idx, layer in enumerate(self.layers):
            layer_input = activations[idx]
            for unit, signal in zip(layer.units, signals[idx]):
                step = self.learning_rate * float(signal)
                unit.update(step * layer_input, step)

        return self.last_error

    def train_batch(
        self,
        dataset: Iterable[Sample | Tuple[Vector, Vector]],
        max_epochs: int,
        target_error: float,
        report_interval: int | None = None,
        callbacks: Sequence[object] = (),
    ) -> TrainingReport:
        """Train for up to ``max_epochs`` shuffled passes over ``dataset``.

        Stops after the first epoch whose RMS error is at or below
        ``target_error``. Every callback receives ``on_epoch(epoch, metrics)``
        (or is called directly when it is a plain callable) after each epoch.
        When ``report_interval`` is positive a progress line is printed every
        ``report_interval`` epochs.
        """

        samples = [self._as_sample(item) for item in dataset]
        if not samples:
            raise ValueError("Training dataset is empty")
        if max_epochs < 1:
            raise ValueError(f"max_epochs must be at least 1, got {max_epochs}")

        history: List[float] = []
        converged_at: int | None = None
        for epoch in range(1, max_epochs + 1):
            total = 0.0
            for idx in self.rng.permutation(len(samples)):
                sample = samples[idx]
                error = self.train_one(sample.inputs, sample.expected)
                total += error * error
            epoch_error = math.sqrt(total / len(samples))
            history.append(epoch_error)
            self._emit_epoch(epoch, {"rms": epoch_error}, callbacks)

            if report_interval and report_interval > 0:
                if (epoch - 1) % report_interval == 0 or epoch == max_epochs:
                    print(f"Epoch: {epoch}, Average Error: {epoch_error:.6f}")

            if epoch_error <= target_error:
                converged_at = epoch
                if report_interval and report_interval > 0:
                    print(f"Target error reached at epoch {epoch}")
                break

        return TrainingReport(
            error_history=tuple(history),
            final_error=history[-1],
            epochs_to_converge=converged_at,
        )

    # ------------------------------------------------------------------
    # Diagnostics

    def describe(self) -> ModelDescription:
        return ModelDescription(
            topology=self.topology,
            hidden_activation=self.hidden_activation.value,
            output_activation=self.output_activation.value,
            learning_rate=self.learning_rate,
        )

    def snapshot(self) -> Tuple[LayerSnapshot, ...]:
        return tuple(
            LayerSnapshot(
                index=idx,
                activation=layer.activation.value,
                units=tuple(unit.snapshot() for unit in layer.units),
            )
            for idx, layer in enumerate(self.layers)
        )

    def format_weights(self) -> str:
        lines: List[str] = []
        for idx, layer in enumerate(self.layers, start=1):
            lines.append(f"Layer {idx}:")
            for num, unit in enumerate(layer.units, start=1):
                lines.append(f"  Unit {num}: {unit}")
        return "\n".join(lines)

    def parameter_count(self) -> int:
        return int(sum(layer.width * (layer.input_width + 1) for layer in self.layers))

    # ------------------------------------------------------------------
    # Persistence

    def state_dict(self) -> Mapping[str, Array]:
        state = {}
        for idx, layer in enumerate(self.layers):
            state[f"layer{idx}.weights"] = layer.weight_matrix()
            state[f"layer{idx}.bias"] = np.array([unit.bias for unit in layer.units])
        return state

    def load_state_dict(self, state: Mapping[str, Array]) -> None:
        staged = []
        for idx, layer in enumerate(self.layers):
            w_key, b_key = f"layer{idx}.weights", f"layer{idx}.bias"
            for key in (w_key, b_key):
                if key not in state:
                    raise KeyError(f"Missing {key} in state dict")
            weights = np.asarray(state[w_key], dtype=np.float64)
            bias = np.asarray(state[b_key], dtype=np.float64)
            if weights.shape != (layer.width, layer.input_width):
                raise DimensionMismatch(w_key, layer.width * layer.input_width, weights.size)
            if bias.shape != (layer.width,):
                raise DimensionMismatch(b_key, layer.width, bias.size)
            staged.append((layer, weights, bias))
        for layer, weights, bias in staged:
            for unit, row, b in zip(layer.units, weights, bias):
                unit.weights = row.copy()
                unit.bias = float(b)

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as handle:
            np.savez_compressed(handle, **self.state_dict())
        return path

    def load_weights(self, path: str | Path) -> None:
        with np.load(Path(path)) as data:
            self.load_state_dict({name: data[name] for name in data.files})

    # ------------------------------------------------------------------
    # Internal helpers

    def _check_inputs(self, inputs: Vector | Array) -> Array:
        x = np.asarray(inputs, dtype=np.float64).reshape(-1)
        if x.shape[0] != self.input_width:
            raise DimensionMismatch("network input", self.input_width, x.shape[0])
        return x

    def _check_expected(self, expected: Vector | Array) -> Array:
        y = np.asarray(expected, dtype=np.float64).reshape(-1)
        if y.shape[0] != self.output_width:
            raise DimensionMismatch("expected output", self.output_width, y.shape[0])
        return y

    def _as_sample(self, item: Sample | Tuple[Vector, Vector]) -> Sample:
        sample = item if isinstance(item, Sample) else Sample.of(*item)
        if len(sample.inputs) != self.input_width:
            raise DimensionMismatch("sample input", self.input_width, len(sample.inputs))
        if len(sample.expected) != self.output_width:
            raise DimensionMismatch(
                "sample expected output", self.output_width, len(sample.expected)
            )
        return sample

    @staticmethod
    def _emit_epoch(
        epoch: int, metrics: Mapping[str, float], callbacks: Sequence[object]
    ) -> None:
        for callback in callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["Layer", "Network"]
