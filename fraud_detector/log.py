"""Logging for the detector: one package logger, console plus a daily file."""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

PACKAGE_LOGGER = "fraud_detector"
_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_configured = False


def _log_dir() -> Path:
    override = os.environ.get("FRAUD_DETECTOR_LOG_DIR", "").strip()
    return Path(override) if override else Path(__file__).resolve().parent.parent / "logs"


def get_logger(name: str) -> logging.Logger:
    """Return a named logger; configures the package logger on first call."""
    global _configured
    if not _configured:
        _configure()
        _configured = True
    return logging.getLogger(name)


def set_level(level: int) -> None:
    """Change the console level at runtime (the file handler always keeps DEBUG)."""
    pkg = logging.getLogger(PACKAGE_LOGGER)
    pkg.setLevel(min(level, logging.DEBUG) if _has_file_handler(pkg) else level)
    for handler in pkg.handlers:
        if not isinstance(handler, logging.FileHandler):
            handler.setLevel(level)


def _has_file_handler(logger: logging.Logger) -> bool:
    return any(isinstance(h, logging.FileHandler) for h in logger.handlers)


def _configure() -> None:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    pkg = logging.getLogger(PACKAGE_LOGGER)
    pkg.setLevel(level)

    # An embedding application that already set up root logging keeps control
    if logging.getLogger().handlers or pkg.handlers:
        return

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FMT)
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    pkg.addHandler(console)

    if os.environ.get("FRAUD_DETECTOR_NO_LOG_FILE"):
        return
    try:
        log_dir = _log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(
            log_dir / f"detector_{datetime.now().strftime('%Y-%m-%d')}.log", encoding="utf-8",
        )
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(formatter)
        pkg.addHandler(fh)
        pkg.setLevel(logging.DEBUG)
    except OSError:
        pass
