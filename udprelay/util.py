#!/usr/bin/env python3
"""Logging utils shared by the relay and its command-line front ends."""

from __future__ import annotations
import logging                           # Python stdlib logging framework
import sys                               # For stdout handle
from logging.handlers import RotatingFileHandler
from typing import Optional

__all__ = ["LOG", "LOG_FORMAT", "configure_logging"]

# Unified log line format.  Example: [23:59:59] INFO     got: "hi" from: 127.0.0.1:9001
LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(message)s"
DATE_FORMAT = "%H:%M:%S"

# Library modules log through this one named logger; handlers are only
# attached by configure_logging(), which the CLIs call once at startup.
LOG = logging.getLogger("udprelay")


def configure_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Attach console (+ optional rotating file) output to the "udprelay" logger."""
    LOG.setLevel(level)

    # Calling twice must not duplicate every line.
    for handler in list(LOG.handlers):
        LOG.removeHandler(handler)
        handler.close()

    fmt = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    # ----- Console handler (stdout) -----
    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(fmt)
    LOG.addHandler(sh)

    # ----- Rotating file handler -----
    # Rotates once file hits ±1 MiB, keeps 3 backups ⇒ log ≲ 4 MiB on disk.
    if log_file:
        fh = RotatingFileHandler(
            log_file,
            maxBytes=1_048_576,
            backupCount=3,
            encoding="utf-8",
        )
        fh.setFormatter(fmt)
        LOG.addHandler(fh)

    return LOG
