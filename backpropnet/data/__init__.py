"""Dataset registry and generator helpers."""

# Ensure built-in datasets register themselves when the package is imported.
from .loaders import conversion as _conversion  # noqa: F401
from .loaders import sin_exp as _sin_exp  # noqa: F401
from .registry import (
    DatasetSpec,
    TaskCodec,
    available_datasets,
    get_dataset,
    register_dataset,
)

__all__ = [
    "DatasetSpec",
    "TaskCodec",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
