# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging
import socket
import ssl
import sys

import httpx
import pytest

from sitecheck import config
from sitecheck.cancel import CancellationToken
from sitecheck.config import DEFAULT_USER_AGENT, HttpSettings, MonitorSettings
from sitecheck.errors import ConfigError, ErrorCategory, categorize_exception, error_category_to_reason
from sitecheck.log import setup_logging


def test_monitor_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("SITECHECK_TIMEOUT", "3.5")
    monkeypatch.setenv("SITECHECK_RETRIES", "2")
    monkeypatch.setenv("SITECHECK_WORKERS", "8")
    monkeypatch.setenv("SITECHECK_PERIOD", "60")
    monkeypatch.setenv("SITECHECK_RETRY_DELAY", "0.25")
    monkeypatch.setenv("SITECHECK_FAIL_ON_HTTP_ERROR", "yes")

    settings = config.load_monitor_settings()

    assert settings.timeout == 3.5
    assert settings.max_retries == 2
    assert settings.worker_count == 8
    assert settings.period == 60.0
    assert settings.retry_delay == 0.25
    assert settings.fail_on_http_error is True


def test_monitor_settings_defaults_match_cli_tool(monkeypatch):
    for name in ("SITECHECK_TIMEOUT", "SITECHECK_RETRIES", "SITECHECK_WORKERS", "SITECHECK_PERIOD"):
        monkeypatch.delenv(name, raising=False)
    settings = config.load_monitor_settings()
    assert settings.timeout == 5.0
    assert settings.max_retries == 1
    assert settings.worker_count == 50
    assert settings.period is None


def test_monitor_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("SITECHECK_TIMEOUT", "not-a-number")
    monkeypatch.setenv("SITECHECK_RETRIES", "ten")
    monkeypatch.setenv("SITECHECK_WORKERS", "")
    monkeypatch.setenv("SITECHECK_PERIOD", "soon")

    settings = config.load_monitor_settings()

    assert settings.timeout == MonitorSettings.timeout
    assert settings.max_retries == MonitorSettings.max_retries
    assert settings.worker_count == MonitorSettings.worker_count
    assert settings.period is None


def test_non_positive_period_env_means_single_shot(monkeypatch):
    monkeypatch.setenv("SITECHECK_PERIOD", "0")
    assert config.load_monitor_settings().period is None


def test_http_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("SITECHECK_USER_AGENT", "CustomAgent/1.0")
    monkeypatch.setenv("SITECHECK_HTTP_REDIRECTS", "false")
    monkeypatch.setenv("SITECHECK_HTTP_MAX_REDIRECTS", "5")
    monkeypatch.setenv("SITECHECK_HTTP_VERIFY_SSL", "0")
    monkeypatch.setenv("SITECHECK_HTTP_MAX_BODY_BYTES", "-1")

    settings = config.load_http_settings()

    assert settings.user_agent == "CustomAgent/1.0"
    assert settings.allow_redirects is False
    assert settings.max_redirects == 5
    assert settings.verify_ssl is False
    assert settings.max_body_bytes == HttpSettings.max_body_bytes


def test_load_settings_reads_env_at_call_time(monkeypatch):
    monkeypatch.setenv("SITECHECK_TIMEOUT", "7.7")
    assert config.load_monitor_settings().timeout == 7.7
    monkeypatch.setenv("SITECHECK_TIMEOUT", "8.8")
    assert config.load_monitor_settings().timeout == 8.8
    assert "sitecheck/" in DEFAULT_USER_AGENT


@pytest.mark.parametrize(
    "overrides",
    [
        {"timeout": 0},
        {"max_retries": -1},
        {"worker_count": 0},
        {"period": -5.0},
        {"retry_delay": -0.1},
    ],
)
def test_monitor_settings_validate_rejects_out_of_range(overrides):
    with pytest.raises(ConfigError):
        MonitorSettings(**overrides).validate()


def test_validate_returns_settings_for_chaining():
    settings = MonitorSettings(max_retries=0, worker_count=1)
    assert settings.validate() is settings


def test_categorize_exception_maps_httpx_and_socket_errors():
    assert categorize_exception(httpx.ReadTimeout("slow")) == ErrorCategory.TIMEOUT
    assert categorize_exception(httpx.ConnectTimeout("slow")) == ErrorCategory.TIMEOUT
    assert categorize_exception(httpx.ConnectError("refused")) == ErrorCategory.CONNECTION_ERROR
    assert categorize_exception(ConnectionResetError()) == ErrorCategory.CONNECTION_ERROR
    assert categorize_exception(ValueError("odd")) == ErrorCategory.UNKNOWN_ERROR


def test_categorize_exception_follows_cause_chain():
    dns = httpx.ConnectError("[Errno -2] Name or service not known")
    dns.__cause__ = socket.gaierror(-2, "Name or service not known")
    assert categorize_exception(dns) == ErrorCategory.DNS_ERROR

    tls = httpx.ConnectError("certificate verify failed")
    tls.__cause__ = ssl.SSLCertVerificationError("certificate verify failed")
    assert categorize_exception(tls) == ErrorCategory.SSL_ERROR


def test_error_category_to_reason_accepts_strings():
    assert error_category_to_reason("TIMEOUT") == "No response within timeout"
    assert error_category_to_reason(ErrorCategory.DNS_ERROR) == "DNS resolution failure"
    assert error_category_to_reason("SOMETHING_ELSE") == "Request error"
    assert error_category_to_reason(None) == ""


def test_cancellation_token_keeps_first_reason():
    token = CancellationToken()
    assert token.is_cancelled is False
    assert token.wait(0.01) is False

    token.cancel("signal SIGINT")
    token.cancel("again")

    assert token.is_cancelled is True
    assert token.reason == "signal SIGINT"
    assert token.wait(0) is True


def test_setup_logging_accepts_unknown_levels(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    setup_logging("debug")
    setup_logging("chatty")

    assert calls[0]["level"] == logging.DEBUG
    assert calls[1]["level"] == logging.WARNING
    assert calls[0]["stream"] is sys.stderr
