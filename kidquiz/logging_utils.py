"""
logging_utils.py
======================

Console logging for the kidquiz package.

Every module logs through logging.getLogger(__name__) under the "kidquiz"
logger; setup_logging() attaches one handler there and quiets the chattier
Google client loggers.
"""

import logging
from typing import Optional


def setup_logging(level: Optional[str] = None) -> None:
    # Streamlit re-executes the script on every interaction; only install once
    logger = logging.getLogger("kidquiz")
    lvl = getattr(logging, (level or "INFO").upper(), logging.INFO)
    logger.setLevel(lvl)

    if any(getattr(h, "_kidquiz", False) for h in logger.handlers):
        for h in logger.handlers:
            h.setLevel(lvl)
        return

    fmt = logging.Formatter(
        fmt="%(asctime)sZ | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    sh = logging.StreamHandler()
    sh.setLevel(lvl)
    sh.setFormatter(fmt)
    sh._kidquiz = True  # type: ignore[attr-defined]
    logger.addHandler(sh)
    logger.propagate = False

    logging.getLogger("google.auth").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("grpc").setLevel(logging.WARNING)
