import logging
from unittest.mock import MagicMock

import pytest

import usage_report
from azure_usage_report.clients import AuthenticationFailedError
from azure_usage_report.models import Subscription


@pytest.fixture
def patched(mocker, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    mocker.patch("usage_report.utils.setup_logger", return_value=logging.getLogger())
    credential = MagicMock()
    mocks = {
        "credential": credential,
        "get_azure_credentials": mocker.patch("usage_report.clients.get_azure_credentials", return_value=credential),
        "list_subscriptions": mocker.patch("usage_report.clients.list_subscriptions", return_value=[Subscription("sub-1", "Prod")]),
        "close_credentials": mocker.patch("usage_report.clients.close_credentials"),
        "generate_report": mocker.patch("usage_report.report.generate_report"),
    }
    return mocks


def test_default_output_file(patched):
    assert usage_report.main([]) == 0

    args, _ = patched["generate_report"].call_args
    assert args[0] is patched["credential"]
    assert args[2] == "AzureUsageReport.xlsx"
    patched["close_credentials"].assert_called_once_with(patched["credential"])


def test_custom_output_file(patched):
    usage_report.main(["--output-file", "out/custom.xlsx"])

    args, _ = patched["generate_report"].call_args
    assert args[2] == "out/custom.xlsx"


def test_authentication_failure_aborts(patched):
    patched["list_subscriptions"].side_effect = AuthenticationFailedError("denied")

    assert usage_report.main([]) == 1

    patched["generate_report"].assert_not_called()
    patched["close_credentials"].assert_called_once_with(patched["credential"])


def test_session_closed_when_report_fails(patched):
    patched["generate_report"].side_effect = OSError("disk full")

    with pytest.raises(OSError):
        usage_report.main([])

    patched["close_credentials"].assert_called_once_with(patched["credential"])


def test_previous_workbook_removed_even_when_login_fails(patched, tmp_path):
    stale = tmp_path / "stale.xlsx"
    stale.write_bytes(b"previous run")
    patched["list_subscriptions"].side_effect = AuthenticationFailedError("denied")

    assert usage_report.main(["--output-file", str(stale)]) == 1

    assert not stale.exists()


def test_log_file_sits_beside_workbook(patched):
    usage_report.main(["--output-file", "reports/usage.xlsx"])

    _, kwargs = usage_report.utils.setup_logger.call_args
    assert kwargs["filename"] == "reports/usage.log"
    assert kwargs["console"] is usage_report.console
