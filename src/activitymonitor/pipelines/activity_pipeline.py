"""Aggregates per-feed freshness into a per-company activity verdict."""
from __future__ import annotations

from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Deque, Dict, Iterable, Iterator, List, Optional, Protocol, Tuple

from activitymonitor.errors import MalformedInputError
from activitymonitor.services.company_sources import CompanySource
from activitymonitor.services.freshness import FreshnessResult
from activitymonitor.utils.logging import get_logger

LOGGER = get_logger(__name__)


class FreshnessResolver(Protocol):
    def resolve(self, source: str) -> FreshnessResult:
        ...


class CompanyActivityState:
    """Lower-cased company name -> active flag.

    A company flagged active stays active: later rows can only upgrade it.
    """

    def __init__(self) -> None:
        self._activity: Dict[str, bool] = {}

    def merge(self, company: str, is_active: bool) -> None:
        key = company.lower()
        self._activity[key] = self._activity.get(key, False) or is_active

    def is_active(self, company: str) -> bool:
        return self._activity[company.lower()]

    def inactive_companies(self) -> List[str]:
        return [name for name, active in self._activity.items() if not active]

    def __contains__(self, company: object) -> bool:
        return isinstance(company, str) and company.lower() in self._activity

    def __len__(self) -> int:
        return len(self._activity)

    def as_dict(self) -> Dict[str, bool]:
        return dict(self._activity)


class ActivityAggregator:
    """Resolves every row's feed and OR-merges the results per company.

    With ``max_workers > 1`` feeds are fetched on a thread pool, but results
    are merged one at a time in row order. The first unreadable feed (by row
    order) aborts the run; queued fetches are cancelled and later results are
    dropped.
    """

    def __init__(self, resolver: FreshnessResolver, *, max_workers: int = 1) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.resolver = resolver
        self.max_workers = max_workers

    def aggregate(self, rows: Iterable[CompanySource], window: int) -> CompanyActivityState:
        if window < 0:
            raise ValueError("window must be zero or greater")
        state = CompanyActivityState()
        resolved = 0
        for row, freshness in self._resolved(rows):
            row_active = freshness.is_within(window)
            state.merge(row.company, row_active)
            resolved += 1
            LOGGER.debug(
                "%s via %s -> %s (active=%s)", row.company, row.feed_source, freshness, row_active
            )
        LOGGER.info(
            "Resolved %d feed(s) for %d company(ies) using %d worker(s)",
            resolved,
            len(state),
            self.max_workers,
        )
        return state

    def _resolved(self, rows: Iterable[CompanySource]) -> Iterator[Tuple[CompanySource, FreshnessResult]]:
        if self.max_workers == 1:
            for row in rows:
                yield row, self.resolver.resolve(row.feed_source)
            return
        yield from self._resolved_concurrently(iter(rows))

    def _resolved_concurrently(
        self, rows: Iterator[CompanySource]
    ) -> Iterator[Tuple[CompanySource, FreshnessResult]]:
        pool = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="feed-fetch")
        pending: Deque[Tuple[CompanySource, Future]] = deque()
        read_error: Optional[MalformedInputError] = None
        reading = True
        try:
            while True:
                while reading and len(pending) < self.max_workers:
                    try:
                        row = next(rows)
                    except StopIteration:
                        reading = False
                        break
                    except MalformedInputError as exc:
                        # raised only after every earlier row has settled
                        read_error = exc
                        reading = False
                        break
                    pending.append((row, pool.submit(self.resolver.resolve, row.feed_source)))
                if not pending:
                    break
                row, future = pending.popleft()
                yield row, future.result()
            if read_error is not None:
                raise read_error
        finally:
            pool.shutdown(wait=False, cancel_futures=True)


__all__ = ["ActivityAggregator", "CompanyActivityState"]
