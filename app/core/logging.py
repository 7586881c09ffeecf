"""
Logging setup shared by the API process, the serverless entry point and scripts.
"""

import logging
import sys

_NOISY_LOGGERS: tuple[str, ...] = ("httpx", "google", "urllib3")


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once and keep SDK transport chatter at WARNING."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["configure_logging"]
