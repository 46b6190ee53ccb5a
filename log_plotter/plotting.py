"""
Line chart rendering for timing series.

Draws (instant, duration_ms) points as a single line chart and saves it as
a PNG named after the date of the first point and a label:

    charts/2023-08-28_POST.png
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import matplotlib.dates as mdates
from matplotlib.figure import Figure

from log_plotter.core.config import ChartConfig, config
from log_plotter.core.exceptions import ChartRenderError, EmptyResultError

logger = logging.getLogger(__name__)

Point = Tuple[datetime, int]

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def chart_filename(first_instant: datetime, label: str) -> str:
    """
    File name for a chart: "<YYYY-MM-DD>_<label>.png".

    Characters that are unsafe in file names are replaced with "_".
    """
    safe_label = _UNSAFE_FILENAME_CHARS.sub("_", label).strip("_") or "chart"
    return f"{first_instant:%Y-%m-%d}_{safe_label}.png"


def render_chart(
    points: Sequence[Point],
    label: str,
    output_dir: Optional[Union[str, Path]] = None,
    chart_config: Optional[ChartConfig] = None,
) -> Path:
    """
    Render points as a line chart and save it.

    Args:
        points: (instant, duration_ms) pairs in chronological order
        label: Chart label, used in the title and file name
        output_dir: Target directory (created if missing); defaults to config
        chart_config: Size and style settings; defaults to config.chart

    Returns:
        Path of the written PNG

    Raises:
        EmptyResultError: If there are no points
        ChartRenderError: If drawing or saving fails
    """
    if not points:
        raise EmptyResultError("No points to plot")

    chart_config = chart_config or config.chart
    output_dir = Path(output_dir) if output_dir is not None else chart_config.output_dir

    instants = [p[0] for p in points]
    durations = [p[1] for p in points]
    first_instant = instants[0]
    tz = first_instant.tzinfo

    dpi = chart_config.dpi
    fig = Figure(figsize=(chart_config.width / dpi, chart_config.height / dpi), dpi=dpi)
    ax = fig.add_subplot(1, 1, 1)

    ax.plot(instants, durations, color=chart_config.line_color, linestyle="-")
    ax.set_title(f"{first_instant:%Y-%m-%d} {label}")
    ax.set_xlabel("Time")
    ax.set_ylabel("Execution time (ms)")

    if instants[-1] > first_instant:
        ax.set_xlim(first_instant, instants[-1])
    ax.set_ylim(0, max(durations) + chart_config.y_headroom)

    ax.xaxis.set_major_locator(mdates.AutoDateLocator(minticks=5, maxticks=50, tz=tz))
    ax.xaxis.set_major_formatter(mdates.DateFormatter(chart_config.x_label_format, tz=tz))
    ax.tick_params(axis="x", rotation=90, labelsize=8)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()

    path = output_dir / chart_filename(first_instant, label)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        fig.savefig(path)
    except (OSError, ValueError) as e:
        raise ChartRenderError(f"Failed to save chart {path}: {e}") from e

    logger.info(f"Saved chart to: {path}")
    return path
