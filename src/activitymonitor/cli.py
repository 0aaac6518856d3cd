"""Command-line entry point for the activity monitor."""
from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional, Sequence, Tuple

from activitymonitor.config import MessageCatalog, MonitorConfig, load_config
from activitymonitor.errors import FatalMonitorError, UsageError
from activitymonitor.monitor import ActivityMonitor
from activitymonitor.services.feed_client import FeedClient
from activitymonitor.services.freshness import FeedFreshnessResolver
from activitymonitor.utils.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)

CONFIG_ENV = "ACTIVITY_MONITOR_CONFIG"
LOG_LEVEL_ENV = "ACTIVITY_MONITOR_LOG_LEVEL"

_VALUE_OPTIONS = {"--config", "--workers"}
_HELP_OPTIONS = {"-h", "--help"}


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def split_argv(argv: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Separate the known options from the positional arguments.

    Anything that is not ``--config``/``--workers`` (with its value) or a help
    flag stays positional, so a window such as ``-x`` reaches validation.
    Everything after ``--`` is positional.
    """
    options: List[str] = []
    positionals: List[str] = []
    tokens = iter(argv)
    for token in tokens:
        if token == "--":
            positionals.extend(tokens)
            break
        name = token.split("=", 1)[0]
        if name in _VALUE_OPTIONS:
            options.append(token)
            if "=" not in token:
                value = next(tokens, None)
                if value is not None:
                    options.append(value)
            continue
        if token in _HELP_OPTIONS:
            options.append(token)
            continue
        positionals.append(token)
    return options, positionals


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = _ArgumentParser(
        description="List companies whose feeds show no activity within a number of days",
        usage="%(prog)s [--config PATH] [--workers N] <tablePath> <windowDays>",
    )
    parser.add_argument(
        "--config",
        default=os.environ.get(CONFIG_ENV),
        help=f"Optional YAML configuration (default: ${CONFIG_ENV})",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of feeds fetched in parallel (overrides fetch.max_workers)",
    )
    options, positionals = split_argv(argv)
    args = parser.parse_args(options)
    args.positionals = positionals
    return args


def build_config(args: argparse.Namespace) -> MonitorConfig:
    cfg = load_config(args.config)
    if args.workers is not None:
        if args.workers < 1:
            raise UsageError("--workers must be at least 1")
        cfg.fetch.max_workers = args.workers
    cfg.log_level = os.environ.get(LOG_LEVEL_ENV) or cfg.log_level
    return cfg


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        args = parse_args(sys.argv[1:] if argv is None else argv)
        cfg = build_config(args)
    except UsageError as exc:
        LOGGER.info("Rejected command line: %s", exc)
        print(MessageCatalog().render(exc.message_key))
        return 0
    configure_logging(cfg.log_level)

    with FeedClient.from_config(cfg.fetch) as client:
        monitor = ActivityMonitor(cfg, FeedFreshnessResolver(client))
        try:
            output = monitor.run(args.positionals)
        except FatalMonitorError as exc:
            LOGGER.error("Run aborted: %s", exc)
            print(monitor.describe_failure(exc), file=sys.stderr)
            return exc.exit_code
    print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
