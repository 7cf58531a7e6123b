import logging
from unittest.mock import MagicMock

import pytest
from rich.console import Console
from rich.logging import RichHandler

from azure_usage_report.utils import setup_logger, log_filename_for


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.parametrize("output_file, expected", [
    ("AzureUsageReport.xlsx", "AzureUsageReport.log"),
    ("reports/usage.xlsx", "reports/usage.log"),
    (None, "usage_report_log.txt"),
])
def test_log_filename_for(output_file, expected):
    assert log_filename_for(output_file) == expected


def test_setup_logger_uses_report_console(tmp_path, restore_root_logger):
    console = Console(file=MagicMock(), force_terminal=False)
    log_file = tmp_path / "run.log"

    logger = setup_logger(level=logging.INFO, filename=str(log_file), console=console)
    logger.info("collected 3 rows")

    rich_handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
    assert len(rich_handlers) == 1
    assert rich_handlers[0].console is console
    assert rich_handlers[0].level == logging.WARNING
    assert logging.getLogger("azure.mgmt").level == logging.WARNING
    for handler in logger.handlers:
        handler.flush()
    assert "collected 3 rows" in log_file.read_text(encoding="utf-8")


def test_setup_logger_truncates_previous_log(tmp_path, restore_root_logger):
    log_file = tmp_path / "run.log"
    log_file.write_text("old run\n", encoding="utf-8")

    setup_logger(level=logging.DEBUG, filename=str(log_file), console=Console(file=MagicMock()))
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "old run" not in log_file.read_text(encoding="utf-8")
    assert logging.getLogger("azure.identity").level == logging.DEBUG
