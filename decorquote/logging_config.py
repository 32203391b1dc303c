"""Console + rotating file logging for the app."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import AppConfig, get_config


def setup_logging(config: AppConfig | None = None) -> None:
    """Send log records to the console and to ``decorquote.log``."""
    config = config or get_config()
    logs_dir = Path(config.log_dir).expanduser()
    logs_dir.mkdir(parents=True, exist_ok=True)

    level = getattr(logging, config.log_level, logging.INFO)

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_h = RotatingFileHandler(
        logs_dir / "decorquote.log",
        maxBytes=2_000_000,  # 2 MB
        backupCount=3,
        encoding="utf-8",
    )
    file_h.setFormatter(fmt)
    file_h.setLevel(level)

    console_h = logging.StreamHandler()
    console_h.setFormatter(fmt)
    console_h.setLevel(level)

    logging.basicConfig(level=level, handlers=[file_h, console_h], force=True)

    # streamlit's watcher is chatty at DEBUG
    logging.getLogger("watchdog").setLevel(logging.WARNING)
