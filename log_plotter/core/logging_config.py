"""
Logging configuration for command-line use.

Provides logging with file and console output. Console output goes to
stderr so stdout stays reserved for data-only output.
"""

import logging
import logging.handlers
from typing import Optional

from .config import config


def setup_logging(logger_name: str = "log_plotter", level: Optional[str] = None) -> logging.Logger:
    """
    Configure and return a logger instance.

    Args:
        logger_name: Name of the logger (the package name covers all modules)
        level: Log level override; defaults to config.log_level

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)
    level = (level or config.log_level).upper()

    # Don't add handlers if logger already configured
    if logger.handlers:
        logger.setLevel(level)
        return logger

    logger.setLevel(level)

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler (stderr)
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if config.log_to_file:
        config.logs_dir.mkdir(parents=True, exist_ok=True)
        log_file = config.logs_dir / f"{logger_name}.log"
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
