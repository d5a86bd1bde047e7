# tasktracker/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_MARK = "_tasktracker_handler"


class _ThirdPartyNoiseFilter(logging.Filter):
    """
    Keep our own logs, and only WARNING+ from everyone else
    (werkzeug prints a line per request, we already log those ourselves).
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("tasktracker"):
            return True
        return record.levelno >= logging.WARNING


def configure_logging(app) -> None:
    """
    Configure logging with:
    - Console handler (stderr), filtered
    - Rotating file handler under LOG_DIR, when set

    Safe to call once per app; handlers installed by a previous call are replaced.
    """
    level = logging.getLevelName(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Remove handlers we installed earlier (tests create many apps).
    for h in list(root.handlers):
        if getattr(h, _HANDLER_MARK, False):
            root.removeHandler(h)
            h.close()

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ThirdPartyNoiseFilter())
    setattr(ch, _HANDLER_MARK, True)
    root.addHandler(ch)

    log_dir = app.config.get("LOG_DIR")
    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            str(log_dir / "tasktracker.log"),
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        setattr(fh, _HANDLER_MARK, True)
        root.addHandler(fh)

    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.captureWarnings(True)
