# File: tests/test_fetcher.py
import asyncio

import pytest
from aiohttp import ClientSession, ClientTimeout, web

from site_crawler.crawler.fetcher import HTML_TYPES, XML_TYPES, Fetcher, classify_response
from site_crawler.crawler.models import Failed, Fetched, Skipped, SkipReason
from site_crawler.exceptions import FetchError

URL = "https://example.com/page"


@pytest.mark.parametrize(
    "status,content_type,accept,expected",
    [
        (200, "text/html", HTML_TYPES, None),
        (200, "text/html; charset=utf-8", HTML_TYPES, None),
        (399, "TEXT/HTML", HTML_TYPES, None),
        (400, "text/html", HTML_TYPES, SkipReason.BAD_STATUS),
        (500, None, HTML_TYPES, SkipReason.BAD_STATUS),
        (200, None, HTML_TYPES, SkipReason.MISSING_CONTENT_TYPE),
        (200, "", HTML_TYPES, SkipReason.MISSING_CONTENT_TYPE),
        (200, "application/json", HTML_TYPES, SkipReason.NON_HTML),
        (200, "application/pdf", None, None),
        (404, "text/plain", None, SkipReason.BAD_STATUS),
    ],
)
def test_classify_response(status, content_type, accept, expected):
    result = classify_response(URL, status, content_type, accept)
    if expected is None:
        assert result is None
    else:
        assert isinstance(result, Skipped)
        assert result.reason is expected
        assert result.url == URL


def test_classify_xml_mismatch_reason():
    result = classify_response(URL, 200, "text/html", XML_TYPES, SkipReason.NON_XML)
    assert result.reason is SkipReason.NON_XML
    assert classify_response(URL, 200, "application/xml; charset=utf-8", XML_TYPES) is None


def _app() -> web.Application:
    app = web.Application()

    async def html(_):
        return web.Response(text="<p>hello</p>", content_type="text/html")

    async def plain(_):
        return web.Response(text="hello", content_type="text/plain")

    async def slow(_):
        await asyncio.sleep(2)
        return web.Response(text="late", content_type="text/html")

    app.router.add_get("/html", html)
    app.router.add_get("/plain", plain)
    app.router.add_get("/slow", slow)
    return app


@pytest.mark.asyncio()
async def test_fetch_html_page(serve):
    base = await serve(_app())
    async with ClientSession() as session:
        outcome = await Fetcher(session).fetch_html(f"{base}/html")
    assert isinstance(outcome, Fetched)
    assert outcome.body == "<p>hello</p>"
    assert outcome.raw == b"<p>hello</p>"
    assert outcome.status == 200
    assert outcome.content_type.startswith("text/html")


@pytest.mark.asyncio()
async def test_fetch_non_html_is_skipped(serve):
    base = await serve(_app())
    async with ClientSession() as session:
        outcome = await Fetcher(session).fetch_html(f"{base}/plain")
    assert isinstance(outcome, Skipped)
    assert outcome.reason is SkipReason.NON_HTML


@pytest.mark.asyncio()
async def test_fetch_any_content_type(serve):
    base = await serve(_app())
    async with ClientSession() as session:
        outcome = await Fetcher(session).fetch(f"{base}/plain")
    assert isinstance(outcome, Fetched)
    assert outcome.body == "hello"


@pytest.mark.asyncio()
async def test_fetch_timeout_is_failure(serve):
    base = await serve(_app())
    async with ClientSession(timeout=ClientTimeout(total=0.3)) as session:
        outcome = await Fetcher(session).fetch_html(f"{base}/slow")
    assert isinstance(outcome, Failed)
    assert isinstance(outcome.error, FetchError)


@pytest.mark.asyncio()
async def test_fetch_connection_refused_is_failure(unused_tcp_port):
    async with ClientSession() as session:
        outcome = await Fetcher(session).fetch_html(f"http://127.0.0.1:{unused_tcp_port}/")
    assert isinstance(outcome, Failed)
    assert isinstance(outcome.error, FetchError)
