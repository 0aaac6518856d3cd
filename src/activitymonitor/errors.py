"""Error taxonomy for the activity monitor."""
from __future__ import annotations

from pathlib import Path


class ActivityMonitorError(Exception):
    """Base class for every error raised by the monitor."""


class ValidationError(ActivityMonitorError):
    """Bad caller input, rendered as a message instead of aborting."""

    message_key: str = "help"

    def template_values(self) -> dict:
        return {}


class UsageError(ValidationError):
    message_key = "help"

    def __init__(self, detail: str) -> None:
        super().__init__(f"Bad command line: {detail}")
        self.detail = detail


class InputNotFoundError(ValidationError):
    message_key = "file_not_found"

    def __init__(self, path: str) -> None:
        super().__init__(f"Input table not found: {path}")
        self.path = path

    def template_values(self) -> dict:
        return {"path": self.path}


class InvalidWindowError(ValidationError):
    message_key = "invalid_day_count"

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid day count: {value!r}")
        self.value = value

    def template_values(self) -> dict:
        return {"value": self.value}


class FatalMonitorError(ActivityMonitorError):
    """Aborts the whole run; no report is produced."""

    message_key: str = ""
    exit_code: int = 1

    def template_values(self) -> dict:
        return {}


class MalformedInputError(FatalMonitorError):
    message_key = "malformed_input"
    exit_code = 2

    def __init__(self, path: Path | str, line_number: int, line: str, detail: str = "") -> None:
        text = f"Malformed row at {path}:{line_number}: {line!r}"
        if detail:
            text = f"{text} ({detail})"
        super().__init__(text)
        self.path = str(path)
        self.line_number = line_number
        self.line = line
        self.detail = detail

    def template_values(self) -> dict:
        return {"path": self.path, "line_number": self.line_number, "line": self.line}


class FeedUnreadableError(FatalMonitorError):
    message_key = "cannot_load_feed"
    exit_code = 3

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Cannot load feed {source}: {reason}")
        self.source = source
        self.reason = reason

    def template_values(self) -> dict:
        return {"source": self.source, "reason": self.reason}


__all__ = [
    "ActivityMonitorError",
    "FatalMonitorError",
    "FeedUnreadableError",
    "InputNotFoundError",
    "InvalidWindowError",
    "MalformedInputError",
    "UsageError",
    "ValidationError",
]
