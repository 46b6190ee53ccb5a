"""
Unit tests for token parsers.

Tests duration, date and time token handling, including the malformed
tokens proxy logs actually contain.
"""

import pytest
from datetime import datetime, timezone

from log_plotter.core.diagnostics import DiagnosticKind, Severity
from log_plotter.data.parsers import (
    MAX_DURATION_MS,
    DurationParser,
    ParseFailure,
    ParseFailureKind,
    TimestampParser,
    extract_date,
    extract_time,
    parse_date_time,
    parse_duration_ms,
    parse_number,
)


class TestParseDurationMs:
    """Test the pure duration parser."""

    def test_milliseconds_truncated(self):
        """Test that fractional milliseconds are truncated, not rounded."""
        result = parse_duration_ms("12345.99ms")

        assert result.ok
        assert result.value == 12345

    def test_seconds_converted(self):
        """Test that seconds are converted to milliseconds."""
        result = parse_duration_ms("1.123456789s")

        assert result.ok
        assert result.value == 1123

    def test_seconds_decimal_exact(self):
        """Test that seconds conversion does not lose a millisecond to float error."""
        assert parse_duration_ms("1.001s").value == 1001
        assert parse_duration_ms("0.3s").value == 300

    def test_integer_tokens(self):
        """Test whole-number durations."""
        assert parse_duration_ms("250ms").value == 250
        assert parse_duration_ms("2s").value == 2000

    def test_no_unit(self):
        """Test that a number without unit fails."""
        result = parse_duration_ms("1.123456789")

        assert isinstance(result, ParseFailure)
        assert result.kind == ParseFailureKind.MISSING_UNIT

    def test_bad_number_before_ms(self):
        """Test malformed fraction before ms."""
        result = parse_duration_ms("1.A123456789ms")

        assert not result.ok
        assert result.kind == ParseFailureKind.INVALID_NUMBER
        assert result.text == "1.A123456789ms"

    def test_bad_number_before_s(self):
        """Test malformed fraction before s."""
        result = parse_duration_ms("1.A123456789s")

        assert not result.ok
        assert result.kind == ParseFailureKind.INVALID_NUMBER

    def test_seconds_marker_at_start(self):
        """Test that "s" at index 0 is treated like a missing unit."""
        result = parse_duration_ms("s")

        assert not result.ok
        assert result.kind == ParseFailureKind.MISSING_UNIT

    def test_first_s_is_used(self):
        """Test that the first "s" splits the token."""
        result = parse_duration_ms("1.As")

        assert not result.ok
        assert result.kind == ParseFailureKind.INVALID_NUMBER

    def test_ms_takes_precedence(self):
        """Test that the ms suffix is checked before the s suffix."""
        assert parse_duration_ms("5ms").value == 5

    def test_negative_rejected(self):
        """Test that negative durations are rejected."""
        result = parse_duration_ms("-5ms")

        assert not result.ok
        assert result.kind == ParseFailureKind.INVALID_NUMBER

    def test_large_duration_kept(self):
        """Test that a large but parseable duration is not zeroed."""
        assert parse_duration_ms("1e17ms").value == 10 ** 17

    @pytest.mark.parametrize("token", ["1e400s", "1e999999ms", "99999999999999999999ms"])
    def test_huge_duration_saturates(self, token):
        """Test that values past the ceiling saturate."""
        result = parse_duration_ms(token)

        assert result.ok
        assert result.value == MAX_DURATION_MS

    @pytest.mark.parametrize("token", ["infms", "nans", "1_000ms", "ms"])
    def test_non_plain_numbers_rejected(self, token):
        """Test that only plain decimal numbers are accepted."""
        assert not parse_duration_ms(token).ok


class TestParseNumber:
    """Test decimal number parsing."""

    @pytest.mark.parametrize("text", ["1", "1.5", "1.", ".5", "+2", "1e3", "12345.99"])
    def test_valid(self, text):
        """Test accepted number shapes."""
        assert parse_number(text).ok

    @pytest.mark.parametrize("text", ["", "abc", "1.2.3", " 1", "1,5"])
    def test_invalid(self, text):
        """Test rejected number shapes."""
        assert not parse_number(text).ok


class TestDurationParser:
    """Test the diagnostic-emitting duration parser."""

    def test_valid_token_no_diagnostic(self, sink):
        """Test that a valid token emits nothing."""
        parser = DurationParser(sink)

        assert parser.parse("12345.99ms") == 12345
        assert len(sink) == 0

    @pytest.mark.parametrize("token", ["1.123456789", "1.A123456789ms", "1.A123456789s", "1.As"])
    def test_anomaly_degrades_to_zero(self, sink, token):
        """Test that anomalies return 0 and emit one DEGRADE diagnostic."""
        parser = DurationParser(sink)

        assert parser.parse(token) == 0
        assert len(sink) == 1
        diagnostic = sink.diagnostics[0]
        assert diagnostic.kind == DiagnosticKind.DURATION_PARSE_ANOMALY
        assert diagnostic.severity == Severity.DEGRADE
        assert token in diagnostic.message

    def test_diagnostic_carries_location(self, sink):
        """Test that source and line number are attached."""
        DurationParser(sink).parse("oops", source="proxy.log", line_number=7)

        assert str(sink.diagnostics[0]).startswith("proxy.log:7:")


class TestExtractDate:
    """Test date token normalization."""

    def test_prefixed_date(self):
        """Test stripping the prefix before the year."""
        assert extract_date("34m2023-08-28") == "2023-08-28"

    def test_escape_sequence_prefix(self):
        """Test a raw terminal colour sequence as prefix."""
        assert extract_date("\x1b[34m2023-08-28") == "2023-08-28"

    def test_no_marker_unchanged(self):
        """Test that a clean date is returned unchanged."""
        assert extract_date("2023-08-28") == "2023-08-28"

    def test_marker_at_start_unchanged(self):
        """Test that a marker at index 0 leaves the token as is."""
        assert extract_date("m2023-08-28") == "m2023-08-28"


class TestExtractTime:
    """Test time token normalization."""

    def test_fraction_dropped(self):
        """Test that fractional seconds are dropped."""
        assert extract_time("07:02:54.235") == "07:02:54"

    def test_no_fraction_unchanged(self):
        """Test that a time without fraction is unchanged."""
        assert extract_time("07:02:54") == "07:02:54"


class TestParseDateTime:
    """Test composition of date and time tokens."""

    def test_valid_tokens(self):
        """Test parsing a prefixed date with fractional time."""
        result = parse_date_time("34m2023-08-28", "07:02:54.235")

        assert result.ok
        assert result.value == datetime(2023, 8, 28, 7, 2, 54, tzinfo=timezone.utc)
        assert result.value.utcoffset().total_seconds() == 0
        assert int(result.value.timestamp()) == 1693206174

    def test_invalid_time(self):
        """Test that a malformed time fails with an invalid format kind."""
        result = parse_date_time("34m2023-08-28", "A07:02:54.235")

        assert isinstance(result, ParseFailure)
        assert result.kind == ParseFailureKind.INVALID_FORMAT

    def test_impossible_date(self):
        """Test that a well-formed but impossible date is out of range."""
        result = parse_date_time("2023-02-30", "07:02:54")

        assert not result.ok
        assert result.kind == ParseFailureKind.OUT_OF_RANGE

    def test_trailing_garbage(self):
        """Test that unexpected trailing text fails."""
        result = parse_date_time("2023-08-28", "07:02:54Z")

        assert not result.ok

    def test_failure_never_raises(self):
        """Test that arbitrary input returns a failure instead of raising."""
        result = parse_date_time("", "")

        assert not result.ok


class TestTimestampParser:
    """Test the TimestampParser grouping."""

    def test_static_helpers(self):
        """Test that normalizers are reachable on the class."""
        assert TimestampParser.extract_date("34m2023-08-28") == "2023-08-28"
        assert TimestampParser.extract_time("07:02:54.235") == "07:02:54"

    def test_parse(self):
        """Test parse on an instance."""
        result = TimestampParser().parse("34m2023-08-28", "07:02:54.235")

        assert result.ok
        assert result.value.year == 2023
