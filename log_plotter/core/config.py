"""
Application configuration for the proxy log plotter.

Provides environment-aware settings with conservative defaults. Token
positions match the default REST proxy log layout, e.g.:

    ... 34m2023-08-28 07:01:12.872 ... 2.924797516s ...
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TokenPositions(BaseModel):
	"""
	0-based indices into the whitespace-split tokens of a log line.

	Notes:
	- date: token carrying the date, optionally prefixed (34m2023-08-28)
	- time: token carrying the time of day (07:01:12.872)
	- duration: token carrying the execution time (2.924797516s)
	"""

	date: int = Field(1, ge=0, description="Position of the date token")
	time: int = Field(2, ge=0, description="Position of the time token")
	duration: int = Field(15, ge=0, description="Position of the duration token")


class ChartConfig(BaseModel):
	"""
	Chart rendering settings.

	Size is in pixels; it is converted to inches with `dpi`.
	"""

	output_dir: Path = Field(Path("charts"), description="Directory for chart images")
	width: int = Field(1024, ge=100)
	height: int = Field(640, ge=100)
	dpi: int = Field(100, ge=10)
	x_label_format: str = Field("%H:%M", description="strftime format of x tick labels")
	line_color: str = "red"
	y_headroom: int = Field(10, ge=0, description="Milliseconds added above the max value")


class Config(BaseSettings):
	"""
	Global configuration with environment overrides.
	"""

	model_config = SettingsConfigDict(
		env_prefix="LOG_PLOTTER_",
		env_file=".env",
		env_nested_delimiter="__",
		extra="ignore",
	)

	log_level: str = Field("INFO", description="Default logging level")
	logs_dir: Path = Field(Path("logs"), description="Directory for log files")
	log_to_file: bool = Field(True, description="Also write logs to logs_dir")

	positions: TokenPositions = TokenPositions()
	window_size: int = Field(5, ge=1, description="Records per averaged chart point")
	chart: ChartConfig = ChartConfig()


config = Config()
