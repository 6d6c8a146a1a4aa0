"""Logging configuration for dottie.

The CLI calls :func:`setup_logging` once per invocation. Library modules only
ever do::

    import logging
    logger = logging.getLogger(__name__)

and never print. Handlers are attached to the ``dottie`` package logger, so
every module under the package reports through them while other libraries'
loggers are left alone.
"""

import logging
import sys
from pathlib import Path
from types import TracebackType
from typing import Optional, Type

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "dottie"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Log output goes to stderr
console = Console(stderr=True)


def setup_logging(debug: bool = False, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the ``dottie`` logger.

    The console only shows warnings (per-entry link and backup failures)
    unless ``debug`` is set, because the commands report their own results.
    A log file, when given, always records everything down to DEBUG so a
    run can be reconstructed afterwards.

    Calling it again replaces the handlers from the previous call.

    Args:
        debug: Show debug messages, file paths and locals in tracebacks.
        log_file: Optional path of a log file; ``~`` is expanded and missing
            parent directories are created.

    Returns:
        logging.Logger: The configured package logger.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(logging.DEBUG)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=console,
        level=logging.DEBUG if debug else logging.WARNING,
        show_path=debug,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=debug,
    )
    package_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        package_logger.addHandler(file_handler)
        package_logger.debug("Writing log to %s", log_path)

    sys.excepthook = _log_uncaught
    return package_logger


def _log_uncaught(
    exc_type: Type[BaseException],
    exc_value: BaseException,
    exc_traceback: Optional[TracebackType],
) -> None:
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logging.getLogger(PACKAGE_LOGGER).critical(
        "Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback)
    )
