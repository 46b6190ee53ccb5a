"""
Command-line entry point.

    log-plotter -f POST -f /orders -- proxy-1.log proxy-2.log
    log-plotter --data-only -d 0 -t 1 -e 2 access.log

Plots REST proxy execution times, averaged over windows of --step records,
or prints the raw records with --data-only.

Exit codes:
    0  success
    1  fatal pipeline error (unreadable file, bad token position, chart failure)
    2  usage error
    3  no records matched
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence, TextIO

from dotenv import load_dotenv

from log_plotter import __version__
from log_plotter.core.config import TokenPositions, config
from log_plotter.core.diagnostics import (
    CollectingSink,
    Diagnostic,
    DiagnosticKind,
    DiagnosticSink,
    LoggingSink,
    Severity,
)
from log_plotter.core.exceptions import EmptyResultError, LogPlotterError
from log_plotter.core.logging_config import setup_logging
from log_plotter.data import LogRecord, RecordExtractor, aggregate_records, describe_series
from log_plotter.plotting import render_chart

logger = logging.getLogger("log_plotter.cli")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_NO_RECORDS = 3

DEFAULT_LABEL = "all"


def _non_negative(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def _positive(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="log-plotter",
        description="Plot execution times from REST proxy log files",
    )
    positions = config.positions
    parser.add_argument("--data-only", action="store_true", help="Print records only (no plotting)")
    parser.add_argument(
        "-f", "--filter", action="append", default=[], metavar="TERM",
        help="Only use lines containing TERM (repeatable, all must match)",
    )
    parser.add_argument(
        "-d", "--date-pos", type=_non_negative, default=positions.date,
        help="Position of the date token (34m2023-08-28)",
    )
    parser.add_argument(
        "-t", "--time-pos", type=_non_negative, default=positions.time,
        help="Position of the time token (07:01:12.872)",
    )
    parser.add_argument(
        "-e", "--exec-pos", type=_non_negative, default=positions.duration,
        help="Position of the execution time token (2.924797516s)",
    )
    parser.add_argument(
        "-s", "--step", type=_positive, default=config.window_size,
        help="Number of records averaged per chart point",
    )
    parser.add_argument(
        "-o", "--output-dir", default=None,
        help=f"Directory for charts (default: {config.chart.output_dir})",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: config)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("files", nargs="+", help="REST proxy log files")
    return parser


def write_records(records: Sequence[LogRecord], stream: TextIO) -> None:
    """Write one "<timestamp> <epoch_seconds> <duration_ms>" line per record."""
    for record in records:
        stream.write(record.to_line() + "\n")


def chart_label(filter_terms: Sequence[str]) -> str:
    return filter_terms[-1] if filter_terms else DEFAULT_LABEL


def _empty_result(sink: DiagnosticSink, message: str) -> EmptyResultError:
    sink(Diagnostic(
        kind=DiagnosticKind.EMPTY_RESULT_SET,
        severity=Severity.ABORT,
        message=message,
    ))
    return EmptyResultError(message)


def run(args: argparse.Namespace, stdout: TextIO, sink: Optional[CollectingSink] = None) -> int:
    if sink is None:
        sink = CollectingSink(forward=LoggingSink())
    positions = TokenPositions(date=args.date_pos, time=args.time_pos, duration=args.exec_pos)
    extractor = RecordExtractor.from_positions(positions, args.filter, sink=sink)

    records = extractor.extract_files(args.files)
    if not records:
        raise _empty_result(sink, "No records extracted; check the filters and token positions")
    logger.info(describe_series(records))
    if len(sink):
        logger.warning(f"{len(sink)} line(s) reported problems during extraction")

    if args.data_only:
        write_records(records, stdout)
        return EXIT_OK

    points = aggregate_records(records, args.step)
    if not points:
        raise _empty_result(
            sink,
            f"Window size {args.step} leaves nothing to plot for {len(records)} record(s)"
        )

    render_chart(
        [p.as_point() for p in points],
        chart_label(args.filter),
        output_dir=args.output_dir,
    )
    return EXIT_OK


def main(argv: Optional[List[str]] = None, stdout: Optional[TextIO] = None) -> int:
    """
    Run the command line.

    Returns:
        Process exit code
    """
    load_dotenv()
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # --help / --version exit 0, usage errors exit 2
        return e.code if isinstance(e.code, int) else EXIT_USAGE

    setup_logging(level=args.log_level)
    try:
        return run(args, stdout or sys.stdout)
    except EmptyResultError as e:
        logger.error(str(e))
        return EXIT_NO_RECORDS
    except LogPlotterError as e:
        logger.error(str(e))
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
