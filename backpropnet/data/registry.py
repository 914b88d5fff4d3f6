"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, MutableMapping, Tuple

from ..core.types import Sample


@dataclass(frozen=True)
class TaskCodec:
    """Maps between raw task values and the normalised values a network sees.

    Attributes
    ----------
    normalize_input:
        Raw scalar input -> network input.
    denormalize_output:
        Network output -> raw scalar prediction.
    reference:
        Ground-truth function on raw inputs, used to grade predictions.
    probe_inputs:
        Raw inputs the presenter evaluates after training.
    hidden_activation / output_activation:
        Activation names that suit the normalised ranges of the task.
    """

    normalize_input: Callable[[float], float]
    denormalize_output: Callable[[float], float]
    reference: Callable[[float], float]
    probe_inputs: Tuple[float, ...] = ()
    hidden_activation: str = "tanh"
    output_activation: str = "linear"


@dataclass(frozen=True)
class DatasetSpec:
    """Description of a generated dataset."""

    name: str
    samples: List[Sample]
    codec: TaskCodec
    provenance: Dict[str, Any] = field(default_factory=dict)

    @property
    def d_in(self) -> int:
        return len(self.samples[0].inputs) if self.samples else 0

    @property
    def d_out(self) -> int:
        return len(self.samples[0].expected) if self.samples else 0

    def __len__(self) -> int:
        return len(self.samples)


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory.

    ``register_dataset`` can be used both as a decorator::

        @register_dataset("sin_exp")
        def make_sin_exp(**kwargs):
            ...

    or directly::

        register_dataset("sin_exp", make_sin_exp)
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    if name is None:
        raise TypeError("register_dataset requires a name when used without a decorator")
    return _decorator


def get_dataset(dataset: str, /, **options: Any) -> DatasetSpec:
    """Build the :class:`DatasetSpec` registered as ``dataset``."""

    if dataset not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY))
        raise KeyError(f"Unknown dataset {dataset!r}. Available datasets: {available}")
    spec = _REGISTRY[dataset](**options)
    _validate_spec(spec)
    return spec


def available_datasets() -> Iterable[str]:
    """Return the sorted list of available dataset identifiers."""

    return sorted(_REGISTRY)


def _validate_spec(spec: DatasetSpec) -> None:
    if not spec.samples:
        raise ValueError(f"Dataset {spec.name!r} produced no samples")
    d_in, d_out = spec.d_in, spec.d_out
    for idx, sample in enumerate(spec.samples):
        if len(sample.inputs) != d_in or len(sample.expected) != d_out:
            raise ValueError(
                f"Dataset {spec.name!r} sample {idx} has shape "
                f"({len(sample.inputs)}, {len(sample.expected)}), expected ({d_in}, {d_out})"
            )


__all__ = [
    "DatasetSpec",
    "TaskCodec",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
