"""Reduces a feed to the number of days since its latest entry."""
from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol, Union

import feedparser

from activitymonitor.errors import FeedUnreadableError
from activitymonitor.utils.logging import get_logger

LOGGER = get_logger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class DaysSinceUpdate:
    days: int

    def is_within(self, window: int) -> bool:
        return self.days < window


@dataclass(frozen=True)
class NoEntries:
    """The feed exists but has never published anything."""

    def is_within(self, window: int) -> bool:
        return False


FreshnessResult = Union[DaysSinceUpdate, NoEntries]
NO_ENTRIES = NoEntries()


class FeedFetcher(Protocol):
    def fetch(self, locator: str) -> bytes:
        ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _struct_to_datetime(value: Optional[time.struct_time]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime(*value[:6], tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return None


def entry_timestamp(entry: dict) -> Optional[datetime]:
    """Pick the activity date of a feed entry.

    The update date wins unless it is missing or the epoch placeholder, in
    which case the publication date is used.
    """
    # plain dict lookups skip FeedParserDict's deprecated updated -> published alias
    updated = _struct_to_datetime(dict.get(entry, "updated_parsed"))
    if updated is not None and updated != EPOCH:
        return updated
    return _struct_to_datetime(dict.get(entry, "published_parsed"))


def days_between(stamp: datetime, now: datetime) -> int:
    # timedelta.days is floored; future stamps count as today
    return max(0, (now - stamp).days)


class FeedFreshnessResolver:
    def __init__(self, fetcher: FeedFetcher, *, clock: Callable[[], datetime] = _utc_now) -> None:
        self._fetcher = fetcher
        self._clock = clock

    def resolve(self, source: str, now: Optional[datetime] = None) -> FreshnessResult:
        """Return the age in days of the first entry of ``source``.

        Feeds list their newest item first, so only that entry is inspected.
        Raises FeedUnreadableError when the source cannot be fetched or is not
        a feed.
        """
        payload = self._fetcher.fetch(source)
        if now is None:
            now = self._clock()
        parsed = self._parse(source, payload)

        if not parsed.entries:
            LOGGER.debug("Feed %s has no entries", source)
            return NO_ENTRIES

        first = parsed.entries[0]
        stamp = entry_timestamp(first)
        if stamp is None:
            LOGGER.warning("First entry of %s carries no date; treating it as published at %s", source, EPOCH.date())
            stamp = EPOCH
        days = days_between(stamp, now)
        LOGGER.debug("Feed %s last updated %d day(s) ago (%s)", source, days, stamp.isoformat())
        return DaysSinceUpdate(days)

    @staticmethod
    def _parse(source: str, payload: bytes) -> feedparser.FeedParserDict:
        try:
            parsed = feedparser.parse(payload)
        except Exception as exc:
            raise FeedUnreadableError(source, f"parse failure: {exc}") from exc

        problem = parsed.get("bozo_exception") if parsed.get("bozo") else None
        if problem is not None and not isinstance(problem, feedparser.CharacterEncodingOverride):
            raise FeedUnreadableError(source, f"malformed feed: {problem}")
        if not parsed.entries and not parsed.get("version"):
            raise FeedUnreadableError(source, "not a recognised feed document")
        return parsed


__all__ = [
    "DaysSinceUpdate",
    "EPOCH",
    "FeedFreshnessResolver",
    "FreshnessResult",
    "NO_ENTRIES",
    "NoEntries",
    "days_between",
    "entry_timestamp",
]
