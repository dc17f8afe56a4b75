# === FILE: site_crawler/crawler/crawler.py ===
from __future__ import annotations

import logging
import time
from typing import FrozenSet, List, Optional, Union

from aiohttp import ClientSession, ClientTimeout

from site_crawler.crawler.fetcher import Fetcher
from site_crawler.crawler.models import (
    EventSink,
    Failed,
    Fetched,
    PrefixFilter,
    Skipped,
    SkipReason,
    VisitedSet,
)
from site_crawler.exceptions import MalformedURLError, ParseError
from site_crawler.logger import LOGGER_NAME, enable_diagnostics, resolve_debug
from site_crawler.parser.html_parser import extract_links
from site_crawler.utils import normalize_url, split_url, url_extension

__all__ = ("SiteCrawler", "LARGE_FILE_EXTENSIONS")

LARGE_FILE_EXTENSIONS: FrozenSet[str] = frozenset({"zip", "tar", "rar", "jar", "arj", "gz"})


class SiteCrawler:
    """
    Same-host depth-first crawler.

    Candidates are processed one at a time in pre-order: a page's links are
    all checked only after the subtree of the previous sibling is finished.
    A URL is recorded in the visited set *before* it is fetched, so a broken
    link is still counted and never retried.
    """

    def __init__(
        self,
        *,
        limit: int = 0,
        prefix_filter: Optional[PrefixFilter] = None,
        timeout: float = 10.0,
        debug: Optional[bool] = None,
        on_event: Optional[EventSink] = None,
        session: Optional[ClientSession] = None,
        fetcher: Optional[Fetcher] = None,
    ) -> None:
        if limit < 0:
            raise ValueError("limit must be >= 0")
        if timeout <= 0:
            raise ValueError("timeout must be > 0")
        self.limit = limit
        self.prefix_filter = prefix_filter or PrefixFilter()
        self.timeout = timeout
        self.debug = resolve_debug(debug)
        self.on_event = on_event
        self.session = session
        self.fetcher = fetcher
        self._own_session = False
        self.logger = logging.getLogger(LOGGER_NAME)
        if self.debug:
            enable_diagnostics()

    async def __aenter__(self) -> SiteCrawler:
        if self.fetcher is None:
            if self.session is None:
                self.session = ClientSession(
                    timeout=ClientTimeout(total=self.timeout),
                    raise_for_status=False,
                )
                self._own_session = True
            self.fetcher = Fetcher(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._own_session and self.session and not self.session.closed:
            await self.session.close()
        self._own_session = False

    async def crawl(
        self,
        base_url: str,
        start_url: str,
        pages: Optional[VisitedSet] = None,
    ) -> VisitedSet:
        """
        Walk every same-host page reachable from *start_url*.

        *base_url* (``scheme://host``) is the resolution base for relative
        links and the source of the scheme in recorded keys. *pages* is
        extended in place and returned.
        """
        if self.fetcher is None:
            raise RuntimeError("Fetcher not initialized; use 'async with SiteCrawler(...)'")
        split_url(base_url)
        pages = VisitedSet() if pages is None else pages

        start = time.monotonic()
        stack: List[str] = [start_url]
        while stack:
            current = stack.pop()
            if self.limit and len(pages) >= self.limit:
                self.logger.info("crawl limit reached: %d", self.limit)
                self._report(Skipped(current, SkipReason.LIMIT_REACHED, f"limit: {self.limit}"))
                break
            children = await self._visit(base_url, current, pages)
            # reversed so that the first link is popped first
            stack.extend(reversed(children))

        duration = time.monotonic() - start
        self.logger.info(
            "crawled %d pages in %.2f s, limit: %d", len(pages), duration, self.limit
        )
        return pages

    async def _visit(self, base_url: str, current_url: str, pages: VisitedSet) -> List[str]:
        """Run the checks for one candidate, record and fetch it; return its links."""
        try:
            base = split_url(base_url)
            current = split_url(current_url)
            if base.hostname != current.hostname:
                return self._skip(current_url, SkipReason.CROSS_HOST, str(current.hostname))
            normalized = f"{base.scheme}://{normalize_url(current_url, remove_bookmark=True)}"
        except MalformedURLError as exc:
            return self._fail(current_url, exc)

        ext = url_extension(normalized)
        if ext in LARGE_FILE_EXTENSIONS:
            return self._skip(current_url, SkipReason.LARGE_FILE, ext)

        rejected = self.prefix_filter.check(normalized)
        if rejected is SkipReason.NOT_INCLUDED:
            self.logger.info(
                "skipping url %s because it does not start with any required prefix urls.",
                normalized,
            )
            return self._skip(current_url, rejected, normalized)
        if rejected is SkipReason.EXCLUDED:
            self.logger.info(
                "skipping url %s because it starts with one or more excluded prefix urls.",
                normalized,
            )
            return self._skip(current_url, rejected, normalized)

        if not pages.add(normalized):
            return self._skip(current_url, SkipReason.ALREADY_VISITED, normalized)

        self.logger.info("crawling %s", current_url)
        outcome = await self.fetcher.fetch_html(current_url)  # type: ignore[union-attr]
        if isinstance(outcome, Failed):
            self.logger.warning("error in fetch url: %s, on page: %s", outcome.error, current_url)
            self._report(outcome)
            return []
        if isinstance(outcome, Skipped):
            if self.debug:
                self.logger.debug("%s, on page: %s", outcome.detail, current_url)
            self._report(outcome)
            return []

        self.logger.info("crawled %s", current_url)
        return self._links(outcome, base_url)

    def _links(self, page: Fetched, base_url: str) -> List[str]:
        try:
            return extract_links(
                page.body,
                base_url,
                debug=self.debug,
                on_error=lambda url, exc: self._report(Failed(url, exc)),
            )
        except ParseError as exc:
            if self.debug:
                self.logger.debug("error parsing %s: %s", page.url, exc)
            self._report(Failed(page.url, exc))
            return []

    def _skip(self, url: str, reason: SkipReason, detail: str = "") -> List[str]:
        self._report(Skipped(url, reason, detail))
        return []

    def _fail(self, url: str, error: Exception) -> List[str]:
        if self.debug:
            self.logger.debug("error with url %s: %s", url, error)
        self._report(Failed(url, error))
        return []

    def _report(self, outcome: Union[Skipped, Failed]) -> None:
        if self.on_event is not None:
            self.on_event(outcome)
