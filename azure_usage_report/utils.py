import os
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import LOG_FILENAME

_QUIET_AZURE_LOGGERS = (
    'azure.identity',
    'azure.mgmt',
    'azure.core.pipeline.policies.http_logging_policy',
)


def log_filename_for(output_file: Optional[str]) -> str:
    """Log file kept beside the workbook, e.g. reports/usage.xlsx -> reports/usage.log."""
    if not output_file:
        return LOG_FILENAME
    return os.path.splitext(output_file)[0] + ".log"


def setup_logger(level=logging.INFO, filename=LOG_FILENAME, console: Optional[Console] = None):
    """Routes the root logger to a per-run log file and to the report's Rich console.

    Sharing the console keeps log lines from breaking up status spinners and
    per-item skip messages. The file is truncated so it only holds the current run.
    """
    logger = logging.getLogger()
    logger.setLevel(level)
    if logger.hasHandlers():
        logger.handlers.clear()

    file_handler = logging.FileHandler(filename, mode="w", encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s"))
    logger.addHandler(file_handler)

    rich_handler = RichHandler(console=console, rich_tracebacks=True, markup=False, show_path=False)
    # The console already shows progress; only warnings and up are echoed there unless debugging
    rich_handler.setLevel(level if level <= logging.DEBUG else max(level, logging.WARNING))
    logger.addHandler(rich_handler)

    # Azure SDK loggers are chatty at INFO
    sdk_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for logger_name in _QUIET_AZURE_LOGGERS:
        logging.getLogger(logger_name).setLevel(sdk_level)

    logger.info(f"Logging to '{filename}' at level {logging.getLevelName(level)}")
    return logger
