"""
Custom exceptions for the proxy log plotter.

Every exception here is fatal for a run: recoverable parse problems are
reported as diagnostics instead (see core.diagnostics).
"""


class LogPlotterError(Exception):
    """Base exception for fatal pipeline failures."""
    pass


class ConfigurationError(LogPlotterError):
    """Raised when configuration is invalid for the input being processed."""
    pass


class TokenIndexError(ConfigurationError):
    """Raised when a configured token position is beyond a line's tokens."""

    def __init__(self, message: str, source: str, line_number: int, position: int, token_count: int):
        super().__init__(message)
        self.source = source
        self.line_number = line_number
        self.position = position
        self.token_count = token_count


class EmptyResultError(LogPlotterError):
    """Raised when no records survive extraction or aggregation."""
    pass


class ChartRenderError(LogPlotterError):
    """Raised when a chart cannot be drawn or saved."""
    pass
