"""Logging setup shared by the GUI and the session command line tool."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from .settings.store import deskcalc_home

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_FILENAME = "deskcalc.log"


def setup_logging(home: Optional[Path] = None, *, level: int = logging.INFO, install_excepthook: bool = True) -> Optional[str]:
    """Configure logging to a persistent file plus stdout.

    The GUI is often started without a visible console, so a log file helps
    debug crashes. An existing logging configuration (e.g. when embedded or
    under a test runner) is left alone. Returns the log file path, or None if
    the log directory cannot be created.
    """

    log_dir = Path(home) if home is not None else deskcalc_home()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        return None
    log_path = log_dir / LOG_FILENAME

    # Don't clobber an existing logging configuration.
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format=LOG_FORMAT,
            handlers=[
                logging.FileHandler(str(log_path), mode="a", encoding="utf-8"),
                logging.StreamHandler(sys.stdout),
            ],
        )

    if install_excepthook:
        # Hook unhandled exceptions so we get a traceback in the log file.
        previous = sys.excepthook

        def _excepthook(exc_type, exc, tb):
            logging.error("Unhandled exception", exc_info=(exc_type, exc, tb))
            previous(exc_type, exc, tb)

        sys.excepthook = _excepthook

    return str(log_path)


__all__ = ["LOG_FILENAME", "LOG_FORMAT", "setup_logging"]
