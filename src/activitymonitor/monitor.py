"""Validates arguments and wires reader, aggregator and report together."""
from __future__ import annotations

import re
from pathlib import Path
from typing import Optional, Sequence

from activitymonitor.config import MonitorConfig
from activitymonitor.errors import (
    ActivityMonitorError,
    InputNotFoundError,
    InvalidWindowError,
    UsageError,
    ValidationError,
)
from activitymonitor.pipelines.activity_pipeline import ActivityAggregator, FreshnessResolver
from activitymonitor.reporting.report import Report, build_report, render_report
from activitymonitor.services.company_sources import read_company_sources
from activitymonitor.utils.logging import get_logger

LOGGER = get_logger(__name__)


_WINDOW_PATTERN = re.compile(r"\s*\+?[0-9]+\s*", re.ASCII)


def parse_window(value: str) -> int:
    # plain ASCII digits only; int() alone would take "1_0" and other scripts' digits
    if not _WINDOW_PATTERN.fullmatch(value):
        raise InvalidWindowError(value)
    return int(value)


class ActivityMonitor:
    """Reports companies whose feeds have been quiet for a number of days."""

    def __init__(self, cfg: MonitorConfig, resolver: FreshnessResolver) -> None:
        self.cfg = cfg
        self.aggregator = ActivityAggregator(resolver, max_workers=cfg.fetch.max_workers)

    def validate(self, args: Sequence[str]) -> tuple[Path, int]:
        if len(args) != 2:
            raise UsageError(f"expected 2 arguments, got {len(args)}")
        table_path = Path(args[0])
        if not table_path.is_file():
            raise InputNotFoundError(args[0])
        return table_path, parse_window(args[1])

    def report(self, table_path: Path, window: int) -> Report:
        state = self.aggregator.aggregate(read_company_sources(table_path), window)
        report = build_report(state, window)
        LOGGER.info(
            "%d of %d company(ies) inactive for %d+ days", len(report.inactive_companies), len(state), window
        )
        return report

    def run(self, args: Sequence[str]) -> str:
        """Return the rendered report, or the message for invalid arguments.

        MalformedInputError and FeedUnreadableError propagate: they abort the
        run without a report.
        """
        try:
            table_path, window = self.validate(args)
        except ValidationError as exc:
            LOGGER.info("Rejected arguments: %s", exc)
            return self.describe_failure(exc)
        return render_report(self.report(table_path, window), self.cfg.messages)

    def describe_failure(self, exc: ActivityMonitorError) -> str:
        key: Optional[str] = getattr(exc, "message_key", None)
        if not key:
            return str(exc)
        return self.cfg.messages.render(key, **exc.template_values())


__all__ = ["ActivityMonitor", "parse_window"]
