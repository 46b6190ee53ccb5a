"""
Record schema for the extraction pipeline.

A LogRecord is one (timestamp, duration) observation taken from a proxy log
line. An AggregatedRecord is one averaged point produced by downsampling.

Design rationale:
- Records are immutable (frozen models); every stage builds new ones
- Timestamps carry a fixed zero UTC offset
- epoch_seconds is kept alongside the datetime as the sort key
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


def format_instant(instant: datetime) -> str:
    """
    Render a datetime as "YYYY-MM-DD HH:MM:SS +HH:MM".

    Example: 2023-08-28 07:02:54 +00:00
    """
    offset = instant.strftime("%z")
    return f"{instant:%Y-%m-%d %H:%M:%S} {offset[:3]}:{offset[3:5]}"


class LogRecord(BaseModel):
    """
    One extracted request timing.

    Attributes:
        timestamp_text: Human-readable rendering of instant
        epoch_seconds: Integer seconds since the UTC epoch
        duration_ms: Execution time in milliseconds (0 when unparseable)
        instant: Timezone-aware datetime with a fixed offset

    Notes:
        - Only built once both date and time tokens parsed
        - epoch_seconds is always the integer-seconds projection of instant
    """

    model_config = ConfigDict(frozen=True)

    timestamp_text: str = Field(
        ...,
        description="Rendering of instant"
    )

    epoch_seconds: int = Field(
        ...,
        description="Seconds since the UTC epoch"
    )

    duration_ms: int = Field(
        ...,
        ge=0,
        description="Execution time in milliseconds"
    )

    instant: datetime = Field(
        ...,
        description="Timezone-aware timestamp"
    )

    @model_validator(mode="after")
    def check_instant(self):
        if self.instant.tzinfo is None or self.instant.utcoffset() is None:
            raise ValueError("instant must be timezone aware")
        if self.epoch_seconds != int(self.instant.timestamp()):
            raise ValueError(
                f"epoch_seconds {self.epoch_seconds} does not match instant {self.instant.isoformat()}"
            )
        return self

    @classmethod
    def from_instant(cls, instant: datetime, duration_ms: int, **extra):
        """Build a record, deriving timestamp_text and epoch_seconds."""
        return cls(
            timestamp_text=format_instant(instant),
            epoch_seconds=int(instant.timestamp()),
            duration_ms=duration_ms,
            instant=instant,
            **extra,
        )

    def as_point(self) -> tuple[datetime, int]:
        """(instant, duration_ms) pair for chart rendering."""
        return self.instant, self.duration_ms

    def to_line(self) -> str:
        """Data-only output line: "<timestamp_text> <epoch_seconds> <duration_ms>"."""
        return f"{self.timestamp_text} {self.epoch_seconds} {self.duration_ms}"


class AggregatedRecord(LogRecord):
    """
    One downsampled point.

    Timestamp fields are copied from the record at the window midpoint;
    duration_ms is the truncated mean of the window members.
    """

    sample_count: int = Field(
        ...,
        ge=1,
        description="Number of records averaged into this point"
    )
