"""
Diagnostics emitted while extracting records.

A diagnostic describes one anomaly found in the input and how the pipeline
dealt with it. Parsers and the extractor report through an injected sink
(any callable taking a Diagnostic), so callers decide where reports go:
the default sink logs them, tests collect them.

Severity decides the policy:
- DEGRADE: a value was replaced (duration -> 0), the record is kept
- SKIP: the line was dropped, the run continues
- ABORT: the run stops; an exception is raised right after reporting
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, List, Optional

logger = logging.getLogger(__name__)


class DiagnosticKind(str, Enum):
    """What went wrong."""
    DURATION_PARSE_ANOMALY = "duration_parse_anomaly"
    TIMESTAMP_PARSE_FAILURE = "timestamp_parse_failure"
    TOKEN_INDEX_OUT_OF_RANGE = "token_index_out_of_range"
    SOURCE_READ_FAILURE = "source_read_failure"
    EMPTY_RESULT_SET = "empty_result_set"


class Severity(str, Enum):
    """What the pipeline did about it."""
    DEGRADE = "degrade"
    SKIP = "skip"
    ABORT = "abort"


@dataclass(frozen=True)
class Diagnostic:
    """A single reported anomaly."""

    kind: DiagnosticKind
    severity: Severity
    message: str
    source: Optional[str] = None
    line_number: Optional[int] = None

    @property
    def is_fatal(self) -> bool:
        return self.severity is Severity.ABORT

    def __str__(self) -> str:
        if self.source is None:
            return self.message
        if self.line_number is None:
            return f"{self.source}: {self.message}"
        return f"{self.source}:{self.line_number}: {self.message}"


DiagnosticSink = Callable[[Diagnostic], None]


class LoggingSink:
    """Default sink: forwards diagnostics to the logging system."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def __call__(self, diagnostic: Diagnostic) -> None:
        if diagnostic.is_fatal:
            self.log.error(str(diagnostic))
        else:
            self.log.warning(str(diagnostic))


class CollectingSink:
    """
    Sink that keeps every diagnostic in memory.

    Optionally forwards to another sink, so a run can both log and count.
    """

    def __init__(self, forward: Optional[DiagnosticSink] = None):
        self.diagnostics: List[Diagnostic] = []
        self.forward = forward

    def __call__(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        if self.forward is not None:
            self.forward(diagnostic)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.diagnostics)

    def __len__(self) -> int:
        return len(self.diagnostics)

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.kind is kind]

    def clear(self) -> None:
        self.diagnostics.clear()
