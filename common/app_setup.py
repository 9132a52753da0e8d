"""
Reusable logging and print setup for the command-line parts of the project.

Functions:
    setup_logging      - Configure and return the root logger.
    set_print_logger   - Set the logger for print_and_log and print_error.
    print_and_log      - Print (rich) and log an info message.
    print_error        - Print (rich, stderr) and log an error message.
"""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.markup import escape

# Module-level variable to hold the logger for print_and_log and print_error
_print_logger: Optional[logging.Logger] = None

# soft_wrap: long lines are not broken at the terminal width
_console = Console(soft_wrap=True, highlight=False)
_err_console = Console(stderr=True, soft_wrap=True)


def setup_logging(app_name: str = "marklookup", loglevel: int = logging.INFO, logfile: Optional[str] = None) -> logging.Logger:
    """
    Set up logging for the application.
    - Logs to ~/.<app_name>/log.txt unless a custom logfile is given.
    - The MARKLOOKUP_LOGFILE environment variable overrides the default location.
    Returns the configured logger.
    """
    logger = logging.getLogger()
    logger.setLevel(loglevel)
    formatter = logging.Formatter(f'%(asctime)s %(levelname)s %(process)d [{app_name}] %(name)s: %(message)s')
    if logfile is None:
        logfile = os.environ.get("MARKLOOKUP_LOGFILE")
    if logfile is None:
        log_dir = os.path.expanduser(f"~/.{app_name}")
        os.makedirs(log_dir, exist_ok=True)
        logfile = os.path.join(log_dir, "log.txt")
    handler = logging.FileHandler(logfile)

    # Remove any existing handlers
    for h in logger.handlers[:]:
        logger.removeHandler(h)
        h.close()

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    set_print_logger(logger)
    logger.debug("Logger initialized, writing to %s", logfile)
    return logger


def set_print_logger(logger: logging.Logger):
    """
    Set the logger to be used by print_and_log and print_error.
    Called by setup_logging; call it directly only for a custom logger.
    """
    global _print_logger
    _print_logger = logger


def print_and_log(message: str, **kwargs):
    """
    Print to console (via rich) and log as info.
    The message is escaped, so reprs with brackets are printed verbatim.
    """
    _console.print(escape(message), **kwargs)
    if _print_logger is not None:
        _print_logger.info(message)


def print_error(message: str, **kwargs):
    """
    Print and log an error message (stderr and error level), using the logger set by set_print_logger.
    """
    _err_console.print(f"[bold red]{escape(message)}[/bold red]", **kwargs)
    if _print_logger is not None:
        _print_logger.error(message)
