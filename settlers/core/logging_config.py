"""Unified logging configuration for the settlers server.

Usage:
    from settlers.core.logging_config import setup_logging

    logger = setup_logging(__name__, level="DEBUG", log_dir=Path("logs"))
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional, Union

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
COMPACT_FORMAT = "%(asctime)s %(levelname).1s %(message)s"
DETAILED_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "%(filename)s:%(lineno)d - %(funcName)s - %(message)s"
)
STRUCTURED_FORMAT = (
    '{"time": "%(asctime)s", "logger": "%(name)s", '
    '"level": "%(levelname)s", "message": "%(message)s"}'
)

_FORMATS = {
    "default": DEFAULT_FORMAT,
    "compact": COMPACT_FORMAT,
    "detailed": DETAILED_FORMAT,
    "structured": STRUCTURED_FORMAT,
}

# Packages which log too much at INFO
NOISY_PACKAGES = ("urllib3", "asyncio", "prometheus_client")


def setup_logging(
    name: str,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    log_dir: Optional[Path] = None,
    console: bool = True,
    format_style: str = "default",
    propagate: bool = False,
) -> logging.Logger:
    """Configure and return a named logger.

    Calling this again for the same name doesn't add duplicate handlers.

    Args:
        name: Logger name, usually ``__name__`` or a tool name
        level: Level as int or name ("DEBUG", "INFO", ...)
        log_file: Write to this file, in addition to the console
        log_dir: Write to ``<log_dir>/<name>.log`` if log_file isn't given
        console: Add a stderr handler
        format_style: One of default, compact, detailed, structured;
            unknown styles use default
        propagate: Pass records up to the root logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = propagate

    formatter = logging.Formatter(_FORMATS.get(format_style, DEFAULT_FORMAT))

    if console and not any(
        type(h) is logging.StreamHandler for h in logger.handlers
    ):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if log_file is None and log_dir is not None:
        log_file = Path(log_dir) / f"{name.replace('.', '_')}.log"

    if log_file is not None:
        log_path = Path(log_file).resolve()
        already = any(
            isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_path
            for h in logger.handlers
        )
        if not already:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger


def configure_third_party_loggers(
    quiet: bool = True,
    verbose_packages: Optional[Iterable[str]] = None,
) -> None:
    """Set noisy third-party loggers to WARNING, except verbose_packages."""
    if not quiet:
        return
    keep = set(verbose_packages or ())
    for package in NOISY_PACKAGES:
        if package not in keep:
            logging.getLogger(package).setLevel(logging.WARNING)
