"""
Fixed-size window averaging of a sorted record series.

Compresses a noisy per-request series into fewer points for plotting. Each
window of the series becomes one AggregatedRecord whose duration is the
truncated mean of the window and whose timestamp is copied from a real
record near the window midpoint (never interpolated).

Window arithmetic, for N records and window size W:

    start = 0, W, 2W, ...
    end = min(start + W - 1, N - 1)      # members are records[start:end]
    midpoint = min(start + W // 2, N - 1)
    stop when start >= end or start >= N

Members span W - 1 records, so the record at `end` is in no window.
W = 1 gives no windows at all.

Example with W = 5, N = 12:
    [0, 4) midpoint 2
    [5, 9) midpoint 7
    [10, 11) midpoint 11
"""

import logging
from typing import Iterator, List, NamedTuple, Sequence

from log_plotter.core.exceptions import LogPlotterError
from log_plotter.data.schema import AggregatedRecord, LogRecord

logger = logging.getLogger(__name__)


class AggregationError(LogPlotterError):
    """Raised when aggregation fails."""
    pass


class WindowBounds(NamedTuple):
    """Indices of one window: members are [start, end), representative is midpoint."""

    start: int
    end: int
    midpoint: int

    @property
    def size(self) -> int:
        return self.end - self.start


def iter_windows(record_count: int, window_size: int) -> Iterator[WindowBounds]:
    """
    Yield window bounds over a series of record_count records.

    Args:
        record_count: Number of records (N)
        window_size: Records spanned per window (W), at least 1

    Yields:
        WindowBounds in ascending order

    Raises:
        AggregationError: If window_size < 1
    """
    if window_size < 1:
        raise AggregationError(f"Window size must be positive, got {window_size}")

    last = record_count - 1
    start = 0
    while True:
        end = min(start + window_size - 1, last)
        if start >= end:
            return
        yield WindowBounds(start, end, min(start + window_size // 2, last))
        start += window_size
        if start >= record_count:
            return


def average_window(records: Sequence[LogRecord], bounds: WindowBounds) -> AggregatedRecord:
    """
    Reduce one window to a single point.

    Duration is the truncated integer mean of records[start:end]; timestamp
    fields come from records[midpoint].
    """
    members = records[bounds.start:bounds.end]
    average = sum(r.duration_ms for r in members) // len(members)
    representative = records[bounds.midpoint]

    return AggregatedRecord(
        timestamp_text=representative.timestamp_text,
        epoch_seconds=representative.epoch_seconds,
        duration_ms=average,
        instant=representative.instant,
        sample_count=len(members),
    )


def aggregate_records(records: Sequence[LogRecord], window_size: int) -> List[AggregatedRecord]:
    """
    Downsample a chronologically sorted series.

    Args:
        records: Records sorted by epoch_seconds
        window_size: Records spanned per output point

    Returns:
        One AggregatedRecord per window (empty for W = 1 or fewer than 2 records)

    Raises:
        AggregationError: If window_size < 1
    """
    aggregated = [average_window(records, bounds) for bounds in iter_windows(len(records), window_size)]
    logger.debug(f"Aggregated {len(records)} records into {len(aggregated)} points (window {window_size})")
    return aggregated


class WindowAggregator:
    """
    Class form of aggregate_records with a fixed window size.

    Example:
        points = WindowAggregator(5).aggregate(records)
    """

    def __init__(self, window_size: int):
        if window_size < 1:
            raise AggregationError(f"Window size must be positive, got {window_size}")
        self.window_size = window_size

    def windows(self, record_count: int) -> Iterator[WindowBounds]:
        return iter_windows(record_count, self.window_size)

    def aggregate(self, records: Sequence[LogRecord]) -> List[AggregatedRecord]:
        return aggregate_records(records, self.window_size)


def describe_series(records: Sequence[LogRecord]) -> str:
    """
    Create a human-readable summary of a record series.

    Example output:
        150 records from 2023-08-28 07:00:01 +00:00 to 2023-08-28 09:12:44 +00:00
        duration ms: min 12, max 5012, mean 301
    """
    if not records:
        return "No records"

    durations = [r.duration_ms for r in records]
    return "\n".join([
        f"{len(records)} records from {records[0].timestamp_text} to {records[-1].timestamp_text}",
        f"duration ms: min {min(durations)}, max {max(durations)}, mean {sum(durations) // len(durations)}",
    ])
