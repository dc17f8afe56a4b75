# File: tests/conftest.py
from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Dict, List, Union

import pytest
import pytest_asyncio
from aiohttp import web

from site_crawler.crawler.models import Failed, Fetched, FetchOutcome, Skipped, SkipReason
from site_crawler.logger import LOGGER_NAME

HOST = "127.0.0.1"


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


class StubFetcher:
    """
    In-memory replacement for Fetcher.

    *pages* maps an exact request URL to HTML text or a ready FetchOutcome;
    unknown URLs answer like a 404.
    """

    def __init__(self, pages: Dict[str, Union[str, FetchOutcome]]) -> None:
        self.pages = pages
        self.requested: List[str] = []

    async def fetch_html(self, url: str) -> FetchOutcome:
        self.requested.append(url)
        page = self.pages.get(url)
        if page is None:
            return Skipped(url, SkipReason.BAD_STATUS, "status code: 404")
        if isinstance(page, (Fetched, Skipped, Failed)):
            return page
        return Fetched(url, page, content_type="text/html")


@pytest.fixture()
def stub_fetcher() -> Callable[[Dict[str, Union[str, FetchOutcome]]], StubFetcher]:
    return StubFetcher


@pytest.fixture()
def example_site() -> Dict[str, str]:
    """`/` links to `/a` and `/b`; `/a` links back; `/b` links to another host."""
    return {
        "https://example.com": '<a href="/a">A</a><a href="/b">B</a>',
        "https://example.com/a": '<a href="/">Home</a>',
        "https://example.com/b": '<a href="https://other.com">Other</a>',
    }


@pytest_asyncio.fixture
async def serve(unused_tcp_port: int) -> AsyncIterator[Callable[[web.Application], Awaitable[str]]]:
    """Start an aiohttp app on a free local port, yield its base URL, clean up afterwards."""
    runners: List[web.AppRunner] = []

    async def _start(app: web.Application) -> str:
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, HOST, unused_tcp_port)
        await site.start()
        runners.append(runner)
        return f"http://{HOST}:{unused_tcp_port}"

    yield _start

    for runner in runners:
        await runner.cleanup()


@pytest.fixture()
def crawler_log(caplog):
    """
    caplog attached to the project logger directly (it does not propagate).
    The logger level is restored afterwards.
    """
    lg = logging.getLogger(LOGGER_NAME)
    level = lg.level
    lg.addHandler(caplog.handler)
    yield caplog
    lg.removeHandler(caplog.handler)
    lg.setLevel(level)
