# src/docent/logger.py
"""Logging configuration helpers.

The library itself only creates module-level loggers and never installs
handlers. Applications (and the CLI) call configure_logging() once.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are noisy at INFO
QUIET_LOGGERS = ("LiteLLM", "LiteLLM Router", "LiteLLM Proxy", "httpx", "httpcore", "chromadb")


def configure_logging(level: int = logging.WARNING) -> None:
    """Install a single stderr handler on the root logger.

    Args:
        level: Level for Docent's own loggers. Third-party loggers listed in
            QUIET_LOGGERS are held at WARNING unless level is stricter.
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Get a logger (usually called with __name__)."""
    return logging.getLogger(name)
