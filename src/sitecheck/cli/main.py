# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""sitecheck CLI."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace

from ..cancel import CancellationToken
from ..config import MonitorSettings, load_http_settings, load_monitor_settings
from ..errors import SiteCheckError
from ..http import create_default_http_client
from ..log import setup_logging
from ..models.probe import HeaderMatch
from ..output import print_result, print_summary
from ..runtime import SiteCheck
from ..targets import build_targets, parse_header, read_urls_from_file

logger = logging.getLogger(__name__)

EPILOG = """examples:
  sitecheck https://example.com https://www.python.org
  sitecheck -f urls.txt -n 80 -t 3 -r 2
  sitecheck -p 60 -H 'Server: nginx' --contains 'Welcome' https://example.com
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitecheck",
        description="Concurrent website status checker",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("urls", nargs="*", metavar="URL", help="URLs to check (http/https)")
    parser.add_argument("-n", "--threads", type=int, help="Number of worker threads (default: 50)")
    parser.add_argument("-t", "--timeout", type=float, help="Per-attempt timeout in seconds (default: 5)")
    parser.add_argument("-r", "--retries", type=int, help="Max retries per website (default: 1)")
    parser.add_argument("-p", "--period", type=float, help="Repeat every SECS seconds (default: run once)")
    parser.add_argument("-f", "--file", help="File with one URL per line")
    parser.add_argument(
        "-H",
        "--header",
        action="append",
        default=[],
        metavar="'Name: Value'",
        help="Require a response header to match a value (repeatable)",
    )
    parser.add_argument(
        "--header-match",
        choices=[match.value for match in HeaderMatch],
        default=HeaderMatch.EXACT.value,
        help="How required header values are compared (default: exact)",
    )
    parser.add_argument("--contains", metavar="TEXT", help="Require the response body to contain TEXT")
    parser.add_argument("--max-rounds", type=int, help="Stop after this many rounds")
    parser.add_argument(
        "--fail-on-http-error",
        action="store_true",
        help="Treat 4xx/5xx responses as retryable failures",
    )
    parser.add_argument("--json-summary", action="store_true", help="Print the stats summary as JSON")
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    parser.add_argument("--log-level", help="Logging level (default: SITECHECK_LOG_LEVEL or WARNING)")
    return parser


def _settings_from_args(args: argparse.Namespace) -> MonitorSettings:
    settings = load_monitor_settings()
    overrides = {
        "worker_count": args.threads,
        "timeout": args.timeout,
        "max_retries": args.retries,
        "period": args.period,
    }
    settings = replace(settings, **{key: value for key, value in overrides.items() if value is not None})
    if args.fail_on_http_error:
        settings.fail_on_http_error = True
    return settings.validate()


@contextmanager
def _cancel_on_signals(cancel: CancellationToken) -> Iterator[None]:
    def _handler(signum, frame):  # noqa: ANN001,ARG001
        if not cancel.is_cancelled:
            sys.stderr.write("\nInterrupt received, finishing the current round...\n")
        cancel.cancel(f"signal {signal.Signals(signum).name}")

    previous = {}
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            previous[signum] = signal.signal(signum, _handler)
        except ValueError:
            # Not in the main thread; the caller owns cancellation.
            pass
    try:
        yield
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        urls = list(read_urls_from_file(args.file)) if args.file else []
        urls.extend(args.urls)
        if not urls:
            sys.stderr.write("No URLs provided. Provide positional URLs or -f <file>.\n")
            return 1
        match = HeaderMatch(args.header_match)
        targets = build_targets(
            urls,
            headers=[parse_header(raw, match) for raw in args.header],
            contains=args.contains,
        )
        settings = _settings_from_args(args)
    except SiteCheckError as exc:
        sys.stderr.write(f"sitecheck: {exc}\n")
        return 2

    http_settings = load_http_settings()
    if args.ignore_ssl_errors:
        http_settings.verify_ssl = False

    cancel = CancellationToken()
    with SiteCheck(settings, create_default_http_client(http_settings), cancel=cancel) as checker:
        with _cancel_on_signals(cancel):
            rounds = checker.run(
                targets,
                sink=print_result,
                on_round_complete=lambda _round_id, records: print_summary(records, as_json=args.json_summary),
                max_rounds=args.max_rounds,
            )

    logger.info("Completed %d round(s) over %d target(s)", rounds, len(targets))
    if cancel.is_cancelled:
        sys.stderr.write("Shutdown complete.\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
