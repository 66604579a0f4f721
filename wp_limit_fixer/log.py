"""Logger setup: rich console output plus a plain file log."""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from rich.logging import RichHandler

from wp_limit_fixer.ui import console, print_warning

LOGGER_NAME = "wp_limit_fixer"
DEFAULT_LOG_FILE = "/var/log/wp_limit_fixer.log"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    log_file: Optional[Union[str, Path]] = DEFAULT_LOG_FILE, debug: bool = False
) -> logging.Logger:
    """
    Set up and configure the application logger.

    Operator output goes through the ui.print_* helpers, so the console
    handler stays quiet unless ``debug`` is set. The file handler records
    everything. If the log file cannot be opened the run continues
    without it.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Remove any existing handlers
    for h in logger.handlers[:]:
        logger.removeHandler(h)
        h.close()

    console_handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    console_handler.setLevel(logging.DEBUG if debug else logging.CRITICAL)
    logger.addHandler(console_handler)

    if not log_file:
        return logger

    log_file = Path(log_file)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
    except OSError as e:
        print_warning(f"Could not set up file logging at {log_file}: {e}")
        return logger

    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    logger.addHandler(file_handler)

    try:
        os.chmod(str(log_file), 0o600)
    except OSError as e:
        logger.warning(f"Could not set permissions on log file {log_file}: {e}")

    logger.debug(f"Logging initialized. Log file: {log_file}")
    return logger
