"""Retrieves raw feed documents over HTTP or from disk."""
from __future__ import annotations

from pathlib import Path
from typing import Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

import requests

from activitymonitor.config import FetchConfig
from activitymonitor.errors import FeedUnreadableError
from activitymonitor.utils.logging import get_logger

LOGGER = get_logger(__name__)

_HTTP_SCHEMES = {"http", "https"}


class FeedClient:
    """Fetches feed bytes; one instance (and one HTTP session) per run."""

    def __init__(
        self,
        *,
        timeout: float = 15.0,
        user_agent: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._timeout = timeout
        self._session = session or requests.Session()
        if user_agent:
            self._session.headers.update({"User-Agent": user_agent})

    @classmethod
    def from_config(cls, cfg: FetchConfig) -> "FeedClient":
        return cls(timeout=cfg.timeout_seconds, user_agent=cfg.user_agent)

    def fetch(self, locator: str) -> bytes:
        parsed = urlparse(locator)
        scheme = parsed.scheme.lower()
        if scheme in _HTTP_SCHEMES:
            return self._fetch_http(locator)
        # single-letter schemes are Windows drive letters
        if scheme == "file" or len(scheme) <= 1:
            return self._fetch_file(locator, parsed.path if scheme == "file" else None)
        raise FeedUnreadableError(locator, f"unsupported scheme '{parsed.scheme}'")

    def _fetch_http(self, locator: str) -> bytes:
        try:
            response = self._session.get(locator, timeout=self._timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise FeedUnreadableError(locator, f"HTTP status {status}") from exc
        except requests.RequestException as exc:
            raise FeedUnreadableError(locator, str(exc) or exc.__class__.__name__) from exc
        LOGGER.debug("Fetched %d bytes from %s", len(response.content), locator)
        return response.content

    @staticmethod
    def _fetch_file(locator: str, url_path: Optional[str]) -> bytes:
        path = Path(url2pathname(url_path)) if url_path is not None else Path(locator)
        try:
            return path.read_bytes()
        except OSError as exc:
            raise FeedUnreadableError(locator, exc.strerror or str(exc)) from exc

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "FeedClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


__all__ = ["FeedClient"]
