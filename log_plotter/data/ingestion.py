"""
Line sources for the extractor.

A source is a named, ordered stream of raw log lines. Sources are read one
at a time, in the order given, by the extractor.

Design:
- Iterator-based, the file is read line by line
- Every line is yielded, blank ones included
- Any read problem is fatal: LogIngestionError ends the run
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Iterator, Tuple, Union

from log_plotter.core.exceptions import LogPlotterError

logger = logging.getLogger(__name__)

NumberedLine = Tuple[int, str]


class LogIngestionError(LogPlotterError):
    """Raised when a line source cannot be opened or read."""

    def __init__(self, message: str, source: str):
        super().__init__(message)
        self.source = source


class BaseLineSource(ABC):
    """
    Abstract base class for line sources.

    Subclasses yield (line_number, line) pairs, line numbers starting at 1.
    """

    name: str

    @abstractmethod
    def lines(self) -> Iterator[NumberedLine]:
        """
        Read lines from the source.

        Yields:
            (line_number, line) for each line

        Raises:
            LogIngestionError: If the source cannot be read
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class TextLogSource(BaseLineSource):
    """
    Reads a plain-text proxy log file (one entry per line).

    Example input:
        INFO 34m2023-08-28 07:01:12.872 ... 2.924797516s
    """

    def __init__(self, filepath: Union[str, Path], encoding: str = "utf-8"):
        """
        Initialize log source.

        Args:
            filepath: Path to log file
            encoding: File encoding (default utf-8)

        Raises:
            LogIngestionError: If file doesn't exist
        """
        self.filepath = Path(filepath)
        self.encoding = encoding
        self.name = str(self.filepath)

        if not self.filepath.is_file():
            raise LogIngestionError(f"Log file not found: {self.filepath}", self.name)

    def lines(self) -> Iterator[NumberedLine]:
        try:
            with open(self.filepath, "r", encoding=self.encoding) as f:
                for line_num, line in enumerate(f, start=1):
                    yield line_num, line.rstrip("\r\n")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading log file {self.filepath}: {e}")
            raise LogIngestionError(f"Failed to read log file {self.filepath}: {e}", self.name) from e


class InMemoryLineSource(BaseLineSource):
    """
    Wraps lines already in memory.

    Accepts a list of lines or a single newline-delimited string.
    """

    def __init__(self, lines: Union[str, Iterable[str]], name: str = "<memory>"):
        if isinstance(lines, str):
            lines = lines.splitlines()
        self._lines = list(lines)
        self.name = name

    def lines(self) -> Iterator[NumberedLine]:
        for line_num, line in enumerate(self._lines, start=1):
            yield line_num, line


def open_sources(paths: Iterable[Union[str, Path]], encoding: str = "utf-8") -> list[TextLogSource]:
    """
    Create a TextLogSource per path, preserving order.

    Raises:
        LogIngestionError: On the first path that does not exist
    """
    return [TextLogSource(path, encoding=encoding) for path in paths]
