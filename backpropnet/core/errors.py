"""Exception hierarchy for the network core."""

from __future__ import annotations


class NetworkError(Exception):
    """Base class for errors raised by :mod:`backpropnet.core`."""


class ConfigurationError(NetworkError, ValueError):
    """The network cannot be built from the requested configuration."""


class DimensionMismatch(NetworkError, ValueError):
    """A vector's length disagrees with the configured layer width."""

    def __init__(self, what: str, expected: int, actual: int) -> None:
        super().__init__(f"{what}: expected length {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


__all__ = ["NetworkError", "ConfigurationError", "DimensionMismatch"]
