"""
nexusplt: Python package for reading Nexus plot files and translating them to ECL summaries.

This package decodes the binary PLT time-series output of the Nexus reservoir
simulator and rebuilds the field level series as an ECL summary dataset.
"""

__version__ = "2025.10.0"
__author__ = "nexus-plt developers"

from .errors import BadHeader, NexusError, OpenFailure, TruncatedInput, UnmappedKeyword
from .plot import NexusPlot, load
from .summary import DatasetWriter, WriterOptions, build_summary
from .units import Measure, UnitSystem

__all__ = [
    "BadHeader",
    "DatasetWriter",
    "Measure",
    "NexusError",
    "NexusPlot",
    "OpenFailure",
    "TruncatedInput",
    "UnitSystem",
    "UnmappedKeyword",
    "WriterOptions",
    "build_summary",
    "load",
]
