"""Inactive-company report."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from activitymonitor.config import MessageCatalog
from activitymonitor.pipelines.activity_pipeline import CompanyActivityState

INDENT = "    "


@dataclass(frozen=True)
class Report:
    window: int
    inactive_companies: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_inactive(self) -> bool:
        return bool(self.inactive_companies)


def build_report(state: CompanyActivityState, window: int) -> Report:
    companies = sorted(state.inactive_companies(), key=lambda name: (name.casefold(), name))
    return Report(window=window, inactive_companies=tuple(companies))


def render_report(report: Report, messages: MessageCatalog) -> str:
    if not report.has_inactive:
        return messages.render("no_results", days=report.window)
    lines = [messages.render("yes_results", days=report.window)]
    lines.extend(f"{INDENT}{company}" for company in report.inactive_companies)
    return "\n".join(lines)
