"""
Phone Name Lookup - CLI Runner

Usage:
  python -m pnl.run +254712345678
  python -m pnl.run 0712345678 --config config/example.yaml --ops-log ./out/ops.log

Offline replay against a saved page (no browser):
  python -m pnl.run 0712345678 --html saved_profile.html

Writes exactly one JSON object to stdout.

Exit codes:
  0 - lookup ran (the JSON says whether a name was found)
  1 - config error (file missing, invalid YAML or invalid settings)
  2 - input error (bad arguments, no phone number, missing or unreadable --html file)
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from phonename.config import ConfigError, LookupSettings, load_settings
from phonename.ops_logger import OpsLogger
from phonename.pipeline.lookup import LookupPipeline
from phonename.pipeline.reporter import ResultReporter
from phonename.pipeline.snapshot import StaticSnapshot
from phonename.schemas import LookupRequest, LookupResult


NO_PHONE_ERROR = "No phone number provided"


class UsageError(Exception):
    """Command line could not be parsed."""


class LookupArgumentParser(argparse.ArgumentParser):
    """Raises UsageError instead of exiting, so main can still emit a result."""

    def error(self, message):
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = LookupArgumentParser(prog="pnl.run", description="Resolve a phone number to an owner name")
    parser.add_argument("phone", nargs="?", default=None, help="Phone number to look up")
    parser.add_argument("--config", "-c", default=None, help="Path to YAML config file")
    parser.add_argument("--region", default=None, help="Override the provider region code (default from config: ke)")
    parser.add_argument("--html", default=None, help="Replay extraction against a saved HTML file instead of launching a browser")
    parser.add_argument("--ops-log", default=None, help="Append a JSONL ops record for this run to PATH")
    parser.add_argument("--verbose", "-v", action="store_true", help="Print diagnostics to stderr")
    return parser


def make_ops_logger(args: argparse.Namespace, settings: LookupSettings) -> OpsLogger | None:
    if args.ops_log:
        return OpsLogger(Path(args.ops_log))
    logging_cfg = settings.ops.logging
    if logging_cfg.ops_json:
        return OpsLogger(Path(logging_cfg.path or "ops.log"))
    return None


def main(argv: list[str] | None = None, *, stdout=None) -> int:
    reporter = ResultReporter(stdout)
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        reporter.emit(LookupResult.failed(f"Invalid arguments: {e}"))
        return 2

    phone = (args.phone or "").strip()
    if not phone:
        reporter.emit(LookupResult.failed(NO_PHONE_ERROR))
        return 2

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        reporter.emit(LookupResult.failed(f"Config error: {e}"))
        return 1
    if args.region:
        settings.provider.region_code = args.region.strip()

    try:
        request = LookupRequest(phone_number=phone, region_code=settings.provider.region_code)
    except ValidationError as e:
        print(f"Input error: {e}", file=sys.stderr)
        reporter.emit(LookupResult.failed(f"Invalid lookup request: {e.errors()[0]['msg']}"))
        return 2

    snapshot = None
    if args.html:
        html_path = Path(args.html)
        if not html_path.exists() or not html_path.is_file():
            print(f"Input error: file not found: {html_path}", file=sys.stderr)
            reporter.emit(LookupResult.failed(f"HTML file not found: {html_path}"))
            return 2
        try:
            html = html_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            print(f"Input error: cannot read {html_path}: {e}", file=sys.stderr)
            reporter.emit(LookupResult.failed(f"Cannot read HTML file {html_path}: {e}"))
            return 2
        snapshot = StaticSnapshot(html)

    pipeline = LookupPipeline(
        settings=settings,
        ops_logger=make_ops_logger(args, settings),
        verbose=args.verbose,
    )
    if args.verbose:
        print(f"Python: {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}", file=sys.stderr)

    if snapshot is not None:
        result = pipeline.lookup_snapshot(snapshot, request)
    else:
        result = pipeline.lookup(request)
    reporter.emit(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
