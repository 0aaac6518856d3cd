"""Configuration objects and helpers."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

DEFAULT_MESSAGES: Dict[str, str] = {
    "help": (
        "Usage: check-activity <tablePath> <windowDays>\n"
        "Reads a comma-separated list of companies and their feed sources, and lists\n"
        "every company with no feed activity within the given number of days."
    ),
    "file_not_found": "Could not find the input file: {path}",
    "invalid_day_count": "Invalid day count '{value}'. Please provide a whole number of days, zero or greater.",
    "no_results": "No inactive companies found within {days} days.",
    "yes_results": "The following companies have been inactive for {days}+ days:",
    "cannot_load_feed": "Unable to load the feed at {source}: {reason}",
    "malformed_input": "Malformed row in {path} at line {line_number}: {line}",
}


@dataclass
class MessageCatalog:
    templates: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_MESSAGES))

    def render(self, key: str, **values: Any) -> str:
        return self.templates[key].format(**values)

    @classmethod
    def from_overrides(cls, overrides: Optional[Mapping[str, str]]) -> "MessageCatalog":
        templates = dict(DEFAULT_MESSAGES)
        for key, value in (overrides or {}).items():
            if key not in DEFAULT_MESSAGES:
                raise ValueError(f"Unknown message template '{key}'")
            templates[key] = str(value)
        return cls(templates=templates)


@dataclass
class FetchConfig:
    timeout_seconds: float = 15.0
    user_agent: str = "activity-monitor/0.1 (+feed freshness check)"
    max_workers: int = 4

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError("fetch.timeout_seconds must be positive")
        if int(self.max_workers) < 1:
            raise ValueError("fetch.max_workers must be at least 1")
        self.max_workers = int(self.max_workers)
        self.timeout_seconds = float(self.timeout_seconds)


@dataclass
class MonitorConfig:
    fetch: FetchConfig = field(default_factory=FetchConfig)
    messages: MessageCatalog = field(default_factory=MessageCatalog)
    log_level: str = "WARNING"


def load_config(path: Path | str | None = None) -> MonitorConfig:
    if path is None:
        return MonitorConfig()
    path = Path(path)
    with path.open("r", encoding="utf-8") as handle:
        raw: Dict[str, Any] = yaml.safe_load(handle) or {}

    return MonitorConfig(
        fetch=FetchConfig(**(raw.get("fetch") or {})),
        messages=MessageCatalog.from_overrides(raw.get("messages")),
        log_level=str(raw.get("log_level", "WARNING")),
    )
