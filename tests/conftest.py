"""
Pytest configuration and shared fixtures.

Provides test configuration instances and sample proxy log data for unit
and integration tests.
"""

import pytest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, List

from log_plotter.core.config import ChartConfig, Config, config
from log_plotter.core.diagnostics import CollectingSink
from log_plotter.data.schema import LogRecord


BASE_INSTANT = datetime(2023, 8, 28, 7, 2, 54, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def no_log_files(monkeypatch):
    """Keep tests from writing rotating log files into the working directory."""
    monkeypatch.setattr(config, "log_to_file", False)


@pytest.fixture
def test_config(tmp_path) -> Config:
    """
    Fixture providing test configuration with explicit values (not from .env).

    Returns:
        Config: Test instance writing charts and logs under tmp_path
    """
    return Config(
        log_level="WARNING",
        logs_dir=tmp_path / "logs",
        log_to_file=False,
        window_size=5,
        chart=ChartConfig(output_dir=tmp_path / "charts", width=400, height=300),
    )


@pytest.fixture
def sink() -> CollectingSink:
    """Diagnostic sink that records everything it receives."""
    return CollectingSink()


@pytest.fixture
def sample_lines() -> List[str]:
    """
    Proxy log lines in the default layout (date 1, time 2, duration 15).

    Lines are deliberately out of chronological order, and include a line
    with a bad timestamp and one with a bad duration.
    """
    prefix = "INFO"
    middle = "rest-proxy [worker-{n}] POST /api/v1/orders HTTP/1.1 200 client=10.0.0.{n} bytes=512 upstream=orders-svc retries=0 cache=miss took"
    return [
        f"{prefix} \x1b[34m2023-08-28 07:02:10.120 {middle.format(n=1)} 1.250s",
        f"{prefix} \x1b[34m2023-08-28 07:01:59.004 {middle.format(n=2)} 830.5ms",
        f"{prefix} \x1b[34m2023-08-28 07:02:10.900 {middle.format(n=3)} 2.000s",
        f"{prefix} \x1b[34m2023-08-28 X07:03:00.000 {middle.format(n=4)} 4.000s",
        f"{prefix} \x1b[34m2023-08-28 07:03:30.500 {middle.format(n=5)} fast",
        "DEBUG health check ok",
    ]


@pytest.fixture
def sample_log_file(tmp_path, sample_lines) -> Path:
    """Write sample_lines to a log file and return its path."""
    path = tmp_path / "proxy.log"
    path.write_text("\n".join(sample_lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def make_records() -> Callable[..., List[LogRecord]]:
    """
    Factory building sorted records one second apart.

    Usage:
        records = make_records([100, 200, 300])
    """
    def _make(durations: List[int], start: datetime = BASE_INSTANT, step_seconds: int = 1) -> List[LogRecord]:
        return [
            LogRecord.from_instant(start + timedelta(seconds=i * step_seconds), duration)
            for i, duration in enumerate(durations)
        ]

    return _make


def pytest_configure(config):
    """
    Pytest hook for custom configuration.

    Registers custom markers used throughout tests.
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running (chart rendering)"
    )
