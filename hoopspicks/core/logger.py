"""Logging setup shared by the API process and scripts."""
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # uvicorn access logs are noisy at INFO for webhook retries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
