"""Built-in dataset generators.

Importing this package registers every generator with the dataset registry.
"""

from . import conversion, sin_exp  # noqa: F401

__all__ = ["conversion", "sin_exp"]
