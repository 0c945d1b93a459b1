"""
Console and file logging for the randobot package loggers
"""
import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "randobot"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "asyncio")


def configure_logging(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = "logs/randobot.log",
    console: Optional[Console] = None,
) -> logging.Logger:
    """Attach a rich console handler and an optional log file to the package logger.

    Calling it again replaces the handlers installed by the previous call, so the
    CLI commands and the server can each pick their own level.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.addHandler(
        RichHandler(console=console or Console(stderr=True), rich_tracebacks=True, show_path=False)
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        package_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return package_logger
