# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import io
import json
from datetime import datetime, timezone

import pytest

from sitecheck.errors import TargetError
from sitecheck.models.probe import HeaderMatch, ProbeOutcome, ProbeResult, ProbeTarget, ValidationReason
from sitecheck.models.stats import StatsRecord
from sitecheck.output import format_result, format_summary, print_result, print_summary
from sitecheck.targets import build_targets, parse_header, read_urls_from_file, validate_url


def test_parse_header_splits_on_first_colon():
    check = parse_header("Location:  https://example.com/home ", HeaderMatch.CONTAINS)
    assert check.name == "Location"
    assert check.expected == "https://example.com/home"
    assert check.match == HeaderMatch.CONTAINS


@pytest.mark.parametrize("raw", ["no-colon", ": value", ""])
def test_parse_header_rejects_malformed(raw):
    with pytest.raises(TargetError):
        parse_header(raw)


@pytest.mark.parametrize("url", ["ftp://example.com", "example.com", "http://", "https:///path"])
def test_validate_url_rejects_unprobeable(url):
    with pytest.raises(TargetError):
        validate_url(url)


def test_validate_url_strips_whitespace():
    assert validate_url("  https://example.com/a ") == "https://example.com/a"


def test_read_urls_from_file_skips_comments_and_blanks(tmp_path):
    path = tmp_path / "urls.txt"
    path.write_text("# monitored sites\nhttps://a.test\n\n   \n  # indented comment\nhttp://b.test  \n", encoding="utf-8")
    assert read_urls_from_file(path) == ["https://a.test", "http://b.test"]


def test_read_urls_from_missing_file(tmp_path):
    with pytest.raises(TargetError):
        read_urls_from_file(tmp_path / "missing.txt")


def test_build_targets_shares_checks_and_drops_duplicates(caplog):
    targets = build_targets(
        ["https://a.test", "https://b.test", "https://a.test"],
        headers=["Server: nginx"],
        contains="Welcome",
    )

    assert [target.url for target in targets] == ["https://a.test", "https://b.test"]
    assert all(target.required_headers[0].name == "Server" for target in targets)
    assert all(target.required_body_substring == "Welcome" for target in targets)
    assert "duplicate" in caplog.text


def test_build_targets_without_checks():
    (target,) = build_targets(["http://a.test"], contains="")
    assert target == ProbeTarget(url="http://a.test")
    assert target.needs_body is False


def test_result_line_is_json():
    result = ProbeResult(
        target=ProbeTarget(url="http://a.test"),
        outcome=ProbeOutcome.validation_failure(ValidationReason.BODY_MISMATCH, status_code=200, message="missing"),
        attempts=1,
        response_time_ms=42,
        timestamp=datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        round_id=3,
    )

    payload = json.loads(format_result(result))

    assert payload == {
        "url": "http://a.test",
        "round": 3,
        "outcome": "VALIDATION_FAILURE",
        "status_code": 200,
        "reason": "BODY_MISMATCH",
        "message": "missing",
        "attempts": 1,
        "response_time_ms": 42,
        "timestamp": "2025-01-02T03:04:05Z",
    }
    stream = io.StringIO()
    print_result(result, stream)
    assert stream.getvalue().endswith("\n")


def test_result_rejects_impossible_values():
    with pytest.raises(ValueError):
        ProbeResult(target=ProbeTarget(url="http://a.test"), outcome=ProbeOutcome.success(200), attempts=0, response_time_ms=1)
    with pytest.raises(ValueError):
        ProbeResult(target=ProbeTarget(url="http://a.test"), outcome=ProbeOutcome.success(200), attempts=1, response_time_ms=-1)


def test_summary_format():
    record = StatsRecord(url="https://a.test")
    record.record(True, 120)
    record.record(False, 80)

    text = format_summary([record])

    assert text.splitlines() == [
        "--- stats summary ---",
        "https://a.test -> checks: 2, uptime: 50.0%, avg_rt_ms: 100.0",
        "---------------------",
    ]


def test_summary_json():
    record = StatsRecord(url="https://a.test", checks=1, successes=1, total_response_time_ms=5)
    stream = io.StringIO()
    print_summary([record], stream, as_json=True)
    assert json.loads(stream.getvalue()) == {"summary": [record.to_dict()]}
