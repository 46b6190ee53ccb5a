"""
Data module: line ingestion, filtering, token parsing, extraction and windowing.

Converts raw proxy log lines into a sorted series of timing records and
optionally downsamples it for plotting. Pipeline:

    Log files
        ↓
    Ingestion (log_plotter/data/ingestion.py) → numbered lines
        ↓
    Filtering (log_plotter/data/filters.py)
        ↓
    Token parsing (log_plotter/data/parsers.py)
        ↓
    Extraction (log_plotter/data/extraction.py) → sorted LogRecord list
        ↓
    Aggregation (log_plotter/data/aggregation.py) → AggregatedRecord list
        ↓
    Chart rendering (log_plotter/plotting.py)
"""

from log_plotter.data.aggregation import (
    AggregationError,
    WindowAggregator,
    WindowBounds,
    aggregate_records,
    describe_series,
    iter_windows,
)
from log_plotter.data.extraction import (
    ExtractionStats,
    RecordExtractor,
    extract_records,
)
from log_plotter.data.filters import LineFilter, matches
from log_plotter.data.ingestion import (
    BaseLineSource,
    InMemoryLineSource,
    LogIngestionError,
    TextLogSource,
    open_sources,
)
from log_plotter.data.parsers import (
    DurationParser,
    ParseFailure,
    ParseFailureKind,
    Parsed,
    TimestampParser,
    extract_date,
    extract_time,
    parse_date_time,
    parse_duration_ms,
)
from log_plotter.data.schema import AggregatedRecord, LogRecord, format_instant

__all__ = [
    # Schema
    "LogRecord",
    "AggregatedRecord",
    "format_instant",

    # Ingestion
    "BaseLineSource",
    "TextLogSource",
    "InMemoryLineSource",
    "LogIngestionError",
    "open_sources",

    # Filtering
    "LineFilter",
    "matches",

    # Parsing
    "DurationParser",
    "TimestampParser",
    "Parsed",
    "ParseFailure",
    "ParseFailureKind",
    "parse_duration_ms",
    "extract_date",
    "extract_time",
    "parse_date_time",

    # Extraction
    "RecordExtractor",
    "ExtractionStats",
    "extract_records",

    # Aggregation
    "WindowAggregator",
    "WindowBounds",
    "AggregationError",
    "aggregate_records",
    "iter_windows",
    "describe_series",
]
