"""Logging setup for the service process."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())
    if any(getattr(handler, "_central_publisher", False) for handler in root.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._central_publisher = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    # request lines are logged by the portal client itself
    logging.getLogger("httpx").setLevel(logging.WARNING)
