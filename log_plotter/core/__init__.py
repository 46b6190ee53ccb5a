"""
Core module: Configuration, logging, diagnostics and exception handling.
"""

from .config import ChartConfig, Config, TokenPositions, config
from .diagnostics import (
    CollectingSink,
    Diagnostic,
    DiagnosticKind,
    DiagnosticSink,
    LoggingSink,
    Severity,
)
from .exceptions import (
    ChartRenderError,
    ConfigurationError,
    EmptyResultError,
    LogPlotterError,
    TokenIndexError,
)

__all__ = [
    "ChartConfig",
    "Config",
    "TokenPositions",
    "config",
    "CollectingSink",
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticSink",
    "LoggingSink",
    "Severity",
    "ChartRenderError",
    "ConfigurationError",
    "EmptyResultError",
    "LogPlotterError",
    "TokenIndexError",
]
