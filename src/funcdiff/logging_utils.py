"""Logging configuration utilities for funcdiff."""

import logging
import os
from typing import Optional

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the process-wide diagnostic sink once.

    Later calls only adjust the level of the ``funcdiff`` logger when an
    explicit level is given, so the CLI can honor ``--log-level`` even when
    a host application already installed handlers.
    """
    log_level = (level or os.getenv("FUNCDIFF_LOG_LEVEL") or os.getenv("LOG_LEVEL", "INFO")).upper()

    if logging.getLogger().handlers:
        if level:
            logging.getLogger("funcdiff").setLevel(log_level)
        return

    logging.basicConfig(level=log_level, format=_LOG_FORMAT)
