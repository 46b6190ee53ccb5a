"""
Record extraction: from raw log lines to a sorted LogRecord sequence.

Per line:
    filter -> split on whitespace -> pick date/time/duration tokens
           -> parse timestamp (skip line on failure)
           -> parse duration (0 on failure)
           -> LogRecord

Records from all sources are concatenated in source order, then line order,
and stably sorted by epoch_seconds: records with equal timestamps keep
their input order.

Failure policy:
- Timestamp that does not parse: diagnostic, line skipped
- Duration that does not parse: diagnostic, duration 0
- Token position beyond the line's tokens: diagnostic, TokenIndexError
- Source that cannot be read: diagnostic, LogIngestionError
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from pydantic import ValidationError

from log_plotter.core.config import TokenPositions
from log_plotter.core.diagnostics import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticSink,
    LoggingSink,
    Severity,
)
from log_plotter.core.exceptions import ConfigurationError, TokenIndexError
from log_plotter.data.filters import LineFilter
from log_plotter.data.ingestion import (
    BaseLineSource,
    InMemoryLineSource,
    LogIngestionError,
    open_sources,
)
from log_plotter.data.parsers import DurationParser, parse_date_time
from log_plotter.data.schema import LogRecord

logger = logging.getLogger(__name__)


@dataclass
class ExtractionStats:
    """Counters for one extraction run."""

    sources: int = 0
    lines_read: int = 0
    lines_matched: int = 0
    records: int = 0
    lines_skipped: int = 0
    durations_degraded: int = 0

    def summary(self) -> str:
        return (
            f"Extracted {self.records} records from {self.lines_matched}/{self.lines_read} "
            f"matching lines in {self.sources} source(s); skipped {self.lines_skipped}, "
            f"zero-filled {self.durations_degraded} duration(s)"
        )


class RecordExtractor:
    """
    Extracts timing records from proxy log sources.

    Example:
        extractor = RecordExtractor(["POST"], date_pos=1, time_pos=2, duration_pos=15)
        records = extractor.extract_files(["proxy.log"])
    """

    def __init__(
        self,
        filter_terms: Sequence[str] = (),
        date_pos: int = 0,
        time_pos: int = 1,
        duration_pos: int = 2,
        sink: Optional[DiagnosticSink] = None,
    ):
        """
        Args:
            filter_terms: Substrings that must all occur in a line
            date_pos: 0-based index of the date token
            time_pos: 0-based index of the time token
            duration_pos: 0-based index of the duration token
            sink: Receives diagnostics; logs them when omitted

        Raises:
            ConfigurationError: If a position is negative
        """
        try:
            self.positions = TokenPositions(date=date_pos, time=time_pos, duration=duration_pos)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid token positions: {e}") from e

        self.line_filter = LineFilter(filter_terms)
        self.sink = sink if sink is not None else LoggingSink()
        self.duration_parser = DurationParser(self._count_degraded)
        self.stats = ExtractionStats()

    @classmethod
    def from_positions(
        cls,
        positions: TokenPositions,
        filter_terms: Sequence[str] = (),
        sink: Optional[DiagnosticSink] = None,
    ) -> "RecordExtractor":
        return cls(filter_terms, positions.date, positions.time, positions.duration, sink=sink)

    def _count_degraded(self, diagnostic: Diagnostic) -> None:
        self.stats.durations_degraded += 1
        self.sink(diagnostic)

    def _token(self, tokens: List[str], position: int, source: str, line_number: int) -> str:
        if position < len(tokens):
            return tokens[position]

        message = (
            f"Token position {position} is out of range for a line with "
            f"{len(tokens)} token(s); check the date/time/duration positions"
        )
        self.sink(Diagnostic(
            kind=DiagnosticKind.TOKEN_INDEX_OUT_OF_RANGE,
            severity=Severity.ABORT,
            message=message,
            source=source,
            line_number=line_number,
        ))
        raise TokenIndexError(f"{source}:{line_number}: {message}", source, line_number, position, len(tokens))

    def extract_line(self, line: str, source: str = "<line>", line_number: int = 1) -> Optional[LogRecord]:
        """
        Extract a record from one line that already passed the filter.

        Returns:
            LogRecord, or None when the timestamp could not be parsed

        Raises:
            TokenIndexError: If a configured position is beyond the tokens
        """
        tokens = line.split()
        date_token = self._token(tokens, self.positions.date, source, line_number)
        time_token = self._token(tokens, self.positions.time, source, line_number)
        duration_token = self._token(tokens, self.positions.duration, source, line_number)

        instant = parse_date_time(date_token, time_token)
        if not instant.ok:
            self.sink(Diagnostic(
                kind=DiagnosticKind.TIMESTAMP_PARSE_FAILURE,
                severity=Severity.SKIP,
                message=f"DateTime can't be parsed: [{date_token}] [{time_token}] ({instant.kind.value})",
                source=source,
                line_number=line_number,
            ))
            return None

        duration_ms = self.duration_parser.parse(duration_token, source=source, line_number=line_number)
        return LogRecord.from_instant(instant.value, duration_ms)

    def extract_source(self, source: BaseLineSource) -> List[LogRecord]:
        """
        Extract records from one source, in line order (unsorted).

        Raises:
            LogIngestionError: If the source cannot be read
            TokenIndexError: If a configured position is out of range
        """
        records: List[LogRecord] = []
        self.stats.sources += 1

        try:
            for line_number, line in source.lines():
                self.stats.lines_read += 1
                if not self.line_filter.matches(line):
                    continue
                self.stats.lines_matched += 1

                record = self.extract_line(line, source.name, line_number)
                if record is None:
                    self.stats.lines_skipped += 1
                    continue
                records.append(record)
        except LogIngestionError as e:
            self._report_read_failure(e)
            raise

        logger.debug(f"{source.name}: {len(records)} records")
        return records

    def extract_lines(self, lines: Union[str, Iterable[str]], source_name: str = "<memory>") -> List[LogRecord]:
        """Extract records from in-memory lines, in line order (unsorted)."""
        return self.extract_source(InMemoryLineSource(lines, name=source_name))

    def extract(self, sources: Iterable[BaseLineSource]) -> List[LogRecord]:
        """
        Extract records from all sources and sort them chronologically.

        Args:
            sources: Line sources, read in order

        Returns:
            Records sorted by epoch_seconds (stable)
        """
        self.stats = ExtractionStats()
        records: List[LogRecord] = []

        for source in sources:
            records.extend(self.extract_source(source))

        # list.sort is stable
        records.sort(key=lambda r: r.epoch_seconds)

        self.stats.records = len(records)
        logger.info(self.stats.summary())
        return records

    def extract_files(self, paths: Iterable[Union[str, Path]], encoding: str = "utf-8") -> List[LogRecord]:
        """
        Extract records from log files, in the given order.

        Raises:
            LogIngestionError: If a file is missing or unreadable
        """
        try:
            sources = open_sources(paths, encoding=encoding)
        except LogIngestionError as e:
            self._report_read_failure(e)
            raise
        return self.extract(sources)

    def _report_read_failure(self, error: LogIngestionError) -> None:
        self.sink(Diagnostic(
            kind=DiagnosticKind.SOURCE_READ_FAILURE,
            severity=Severity.ABORT,
            message=str(error),
            source=error.source,
        ))


def extract_records(
    paths: Iterable[Union[str, Path]],
    filter_terms: Sequence[str] = (),
    positions: Optional[TokenPositions] = None,
    sink: Optional[DiagnosticSink] = None,
) -> List[LogRecord]:
    """
    Convenience function: extract sorted records from log files.

    Example:
        records = extract_records(["a.log", "b.log"], ["POST", "/orders"])
    """
    extractor = RecordExtractor.from_positions(positions or TokenPositions(), filter_terms, sink=sink)
    return extractor.extract_files(paths)
