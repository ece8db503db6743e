"""Logging setup for lifereel applications.

Library modules only call ``logging.getLogger(__name__)`` and stay silent
until an application (the CLI, a UI shell) calls :func:`configure_logging`,
which routes the ``lifereel`` logger tree to a Rich console on stderr and,
optionally, to a plain-text log file.

Example:
    >>> from lifereel.config import get_config
    >>> configure_logging(get_config().logging, verbose=True)
    >>> with timed("Scanning ~/Pictures/ada", logger):
    ...     photos = source.all()
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from lifereel.config import LoggingConfig

ROOT_LOGGER = "lifereel"

# Pillow logs every EXIF tag it decodes at DEBUG.
QUIET_LOGGERS = ("PIL",)

LOG_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"

_stderr = Console(stderr=True)


def _file_handler(path: Path, level: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def configure_logging(settings: LoggingConfig, verbose: bool = False) -> logging.Logger:
    """Attach console (and file) handlers to the ``lifereel`` logger.

    Calling this again replaces the handlers installed by the previous call.

    Args:
        settings: The ``logging`` section of the application config.
        verbose: Force DEBUG regardless of ``settings.level``.

    Returns:
        The configured ``lifereel`` logger.
    """
    level = logging.DEBUG if verbose else logging.getLevelName(settings.level)

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    root.handlers = [
        RichHandler(
            console=_stderr,
            level=level,
            show_time=False,
            show_path=verbose,
            rich_tracebacks=True,
        )
    ]
    if settings.log_file is not None:
        root.addHandler(_file_handler(settings.log_file, level))
    root.propagate = False

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.debug(f"Logging at {logging.getLevelName(level)}, file={settings.log_file}")
    return root


@contextmanager
def timed(message: str, logger: logging.Logger, level: int = logging.DEBUG) -> Iterator[None]:
    """Log how long the wrapped block took, or that it failed."""
    started = time.perf_counter()
    try:
        yield
    except Exception:
        logger.error(f"{message} failed after {time.perf_counter() - started:.2f}s")
        raise
    logger.log(level, f"{message} took {time.perf_counter() - started:.2f}s")
