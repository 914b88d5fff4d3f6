"""Reporting utilities for backpropnet."""

from .artifacts import write_manifest
from .comparison import compare, format_rows
from .metrics import CsvSink, JsonlSink
from .plots import PlotAdapter
from .summary import write_summary

__all__ = [
    "write_manifest",
    "compare",
    "format_rows",
    "CsvSink",
    "JsonlSink",
    "PlotAdapter",
    "write_summary",
]
