"""
Token parsers for proxy log lines.

Converts the raw date, time and duration tokens of a log line into values.
The module-level functions are pure: they return Parsed on success or
ParseFailure describing what was wrong, and never raise for bad input.
DurationParser and TimestampParser wrap them for the extractor.

Token shapes handled:
- date: "34m2023-08-28" (colour escape prefix ending in "m") or "2023-08-28"
- time: "07:02:54.235" or "07:02:54"
- duration: "12345.99ms" or "1.123s"

Edge cases (duration):
    "12345.99ms"     -> 12345   (truncated, not rounded)
    "1.123456789s"   -> 1123
    "1.123456789"    -> 0       (no unit)
    "1.A123456789ms" -> 0       (bad number before "ms")
    "1.A123456789s"  -> 0       (bad number before "s")
    "s"              -> 0       ("s" at index 0 counts as no unit)
    "1e17ms"         -> 100000000000000000
    "1e400s"         -> MAX_DURATION_MS (saturated)

Edge cases (date/time):
    "34m2023-08-28"  -> "2023-08-28"
    "2023-08-28"     -> "2023-08-28"   (no marker, unchanged)
    "m2023-08-28"    -> "m2023-08-28"  (marker at index 0, unchanged)
    "07:02:54.235"   -> "07:02:54"
    "07:02:54"       -> "07:02:54"
"""

import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Generic, Optional, TypeVar, Union

from log_plotter.core.diagnostics import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticSink,
    LoggingSink,
    Severity,
)

T = TypeVar("T")

DATE_MARKER = "m20"
TIME_FRACTION_SEPARATOR = "."
MILLIS_SUFFIX = "ms"
SECONDS_SUFFIX = "s"
UTC_OFFSET = "+00:00"
DATE_TIME_FORMAT = "%Y-%m-%d %H:%M:%S %z"
MAX_DURATION_MS = 2 ** 63 - 1

# Decimal float grammar; no underscores, no whitespace, no inf/nan
_NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class ParseFailureKind(str, Enum):
    """Reasons a token could not be parsed."""
    INVALID_NUMBER = "invalid number"
    MISSING_UNIT = "missing unit"
    INVALID_FORMAT = "invalid format"
    TOO_LONG = "trailing input"
    OUT_OF_RANGE = "out of range"


@dataclass(frozen=True)
class Parsed(Generic[T]):
    """Successful parse."""
    value: T
    ok = True


@dataclass(frozen=True)
class ParseFailure:
    """Failed parse, with the offending text."""
    kind: ParseFailureKind
    text: str
    reason: str = ""
    ok = False

    def __str__(self) -> str:
        detail = f": {self.reason}" if self.reason else ""
        return f"{self.kind.value} [{self.text}]{detail}"


ParseResult = Union[Parsed[T], ParseFailure]


def parse_number(text: str) -> ParseResult[Decimal]:
    """
    Parse a decimal number.

    Rejects anything outside the plain float grammar, including
    non-finite values.
    """
    if not _NUMBER_PATTERN.fullmatch(text):
        return ParseFailure(ParseFailureKind.INVALID_NUMBER, text)
    try:
        return Parsed(Decimal(text))
    except InvalidOperation as e:
        return ParseFailure(ParseFailureKind.INVALID_NUMBER, text, str(e))


def _to_millis(number_text: str, scale: int, token: str) -> ParseResult[int]:
    number = parse_number(number_text)
    if not number.ok:
        return ParseFailure(ParseFailureKind.INVALID_NUMBER, token, f"cannot parse {number_text!r}")
    value = number.value
    # Bounds are checked before scaling so huge exponents never overflow
    if value > Decimal(MAX_DURATION_MS) / scale:
        return Parsed(MAX_DURATION_MS)
    if value <= Decimal(-1) / scale:
        return ParseFailure(ParseFailureKind.INVALID_NUMBER, token, "negative duration")
    # int() truncates toward zero
    return Parsed(int(value * scale))


def parse_duration_ms(token: str) -> ParseResult[int]:
    """
    Parse a duration token into integer milliseconds.

    Args:
        token: Duration token, e.g. "12345.99ms" or "1.123s"

    Returns:
        Parsed milliseconds, or ParseFailure (INVALID_NUMBER, MISSING_UNIT)
    """
    ms_index = token.find(MILLIS_SUFFIX)
    if ms_index != -1:
        return _to_millis(token[:ms_index], 1, token)

    # No "s" at all and "s" at index 0 are the same case: no numeric prefix
    s_index = token.find(SECONDS_SUFFIX)
    if s_index <= 0:
        return ParseFailure(ParseFailureKind.MISSING_UNIT, token, "expected a number followed by 'ms' or 's'")

    return _to_millis(token[:s_index], 1000, token)


def extract_date(token: str) -> str:
    """
    Strip the prefix preceding the year from a date token.

    The marker is "m20": the "m" ending a terminal colour sequence followed
    by a year starting with 20. Everything up to and including the "m" is
    dropped. Tokens without the marker (or with it at index 0) are returned
    unchanged.
    """
    offset = token.find(DATE_MARKER)
    if offset <= 0:
        return token
    return token[offset + 1:]


def extract_time(token: str) -> str:
    """Drop the fractional seconds from a time token."""
    offset = token.find(TIME_FRACTION_SEPARATOR)
    if offset == -1:
        return token
    return token[:offset]


def _classify_strptime_error(error: ValueError) -> ParseFailureKind:
    message = str(error)
    if "unconverted data remains" in message:
        return ParseFailureKind.TOO_LONG
    if "out of range" in message or "must be in" in message:
        return ParseFailureKind.OUT_OF_RANGE
    return ParseFailureKind.INVALID_FORMAT


def parse_date_time(date_token: str, time_token: str) -> ParseResult[datetime]:
    """
    Parse date and time tokens into a UTC datetime.

    Composes "<date> <time> +00:00" from the normalized tokens and parses it
    against "%Y-%m-%d %H:%M:%S %z".

    Returns:
        Parsed datetime with a zero UTC offset, or ParseFailure
        (INVALID_FORMAT, TOO_LONG, OUT_OF_RANGE)
    """
    composed = f"{extract_date(date_token)} {extract_time(time_token)} {UTC_OFFSET}"
    try:
        return Parsed(datetime.strptime(composed, DATE_TIME_FORMAT))
    except ValueError as e:
        return ParseFailure(_classify_strptime_error(e), composed, str(e))


class DurationParser:
    """
    Duration parsing that never fails.

    Anomalies are reported to the sink and replaced with 0.
    """

    def __init__(self, sink: Optional[DiagnosticSink] = None):
        self.sink = sink if sink is not None else LoggingSink()

    def parse(self, token: str, source: Optional[str] = None, line_number: Optional[int] = None) -> int:
        result = parse_duration_ms(token)
        if result.ok:
            return result.value

        self.sink(Diagnostic(
            kind=DiagnosticKind.DURATION_PARSE_ANOMALY,
            severity=Severity.DEGRADE,
            message=f"This time can't be parsed, using 0: {result}",
            source=source,
            line_number=line_number,
        ))
        return 0


class TimestampParser:
    """Groups the date/time normalizers and the composer."""

    extract_date = staticmethod(extract_date)
    extract_time = staticmethod(extract_time)
    parse_date_time = staticmethod(parse_date_time)

    def parse(self, date_token: str, time_token: str) -> ParseResult[datetime]:
        return parse_date_time(date_token, time_token)
