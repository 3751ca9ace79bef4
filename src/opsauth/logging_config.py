"""Logging setup shared by the API server and CLI commands."""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(log_level: str = "INFO") -> None:
    """Configure root logger to stdout and quiet chatty third-party loggers."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    noisy_loggers = [
        "uvicorn.access",
        "httpx",
        "httpcore",
        "psycopg",
        "psycopg.pool",
    ]
    for name in noisy_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)
