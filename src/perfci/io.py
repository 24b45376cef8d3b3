"""Logging setup shared by the CLI commands."""

import logging
from datetime import datetime
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_level: str = "INFO", log_dir: Path | None = None) -> logging.Logger:
    """Set up logging configuration for perfci.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Optional directory for a timestamped log file

    Returns:
        Configured logger instance
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        handlers.append(logging.FileHandler(log_dir / f"perfci_{timestamp}.log"))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    return logging.getLogger("perfci")
