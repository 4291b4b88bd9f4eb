"""Logging configuration for CamGPT."""

import logging
import sys

from src.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# SDK and transport loggers that log every upstream request at INFO
NOISY_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "openai": logging.WARNING,
    "google_genai": logging.WARNING,
    "apscheduler": logging.INFO,
}


def resolve_log_level() -> int:
    """DEBUG forces debug output; otherwise LOG_LEVEL, falling back to INFO."""
    if settings.debug:
        return logging.DEBUG
    level = logging.getLevelName(settings.log_level.upper())
    # getLevelName returns a "Level X" string for unknown names
    return level if isinstance(level, int) else logging.INFO


def setup_logging() -> None:
    """Configure application logging to stdout and quiet upstream SDK loggers."""
    logging.basicConfig(
        level=resolve_log_level(),
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    for name, level in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
