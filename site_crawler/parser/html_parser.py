# === FILE: site_crawler/parser/html_parser.py ===
"""HTML link extraction for SiteCrawler.

Two helpers live here:

* :func:`extract_links`: every ``<a href>`` target of a document, resolved
  to an absolute URL, in document order and *without* de-duplication (the
  crawler de-duplicates downstream).
* :func:`relative_links`: raw ``href`` values starting with ``/``, used by
  single-page link discovery.

Resolution rules for :func:`extract_links`:

* a target starting with ``/`` is appended to the base URL as-is;
* any other target must already be an absolute URL;
* ``.`` and ``..`` path segments of the result are resolved, so
  ``/x/../b`` and ``/b`` give the same URL.

A target that fails to parse is dropped; the failure goes to the optional
*on_error* callback and, when *debug* is set, to the log. Only a document the
parser rejects as a whole raises :class:`~site_crawler.exceptions.ParseError`.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Callable, Optional

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import Tag

from site_crawler.exceptions import MalformedURLError, ParseError
from site_crawler.logger import enable_diagnostics, logger, resolve_debug
from site_crawler.utils import resolve_url

__all__: Sequence[str] = ("extract_links", "relative_links", "parse_document")

LinkErrorHook = Callable[[str, MalformedURLError], None]


def parse_document(html: str) -> BeautifulSoup:
    """Parse *html* with the stdlib-backed ``html.parser`` builder."""
    try:
        return BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as exc:
        raise ParseError(f"HTML document rejected: {exc}") from exc


def _hrefs(soup: BeautifulSoup) -> list[str]:
    hrefs: list[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if isinstance(href_val, str):
            hrefs.append(href_val.strip())
    return hrefs


def extract_links(
    html: str,
    base_url: str,
    *,
    debug: Optional[bool] = None,
    on_error: Optional[LinkErrorHook] = None,
) -> list[str]:
    """Return resolved absolute targets of all ``<a href>`` elements in *html*.

    *debug* defaults to the ``DEBUG=true`` environment variable.
    """
    debug = resolve_debug(debug)
    if debug:
        enable_diagnostics()
    soup = parse_document(html)
    base = base_url[:-1] if base_url.endswith("/") else base_url

    urls: list[str] = []
    for href in _hrefs(soup):
        kind = "relative" if href.startswith("/") else "absolute"
        candidate = base + href if kind == "relative" else href
        try:
            resolved = resolve_url(candidate)
        except MalformedURLError as exc:
            if debug:
                logger.debug("error with %s url: %s", kind, exc)
            if on_error is not None:
                on_error(candidate, exc)
            continue
        urls.append(resolved)
    return urls


def relative_links(html: str) -> list[str]:
    """``href`` values of ``<a>`` elements that start with ``/``, in document order."""
    soup = parse_document(html)
    return [href for href in _hrefs(soup) if href.startswith("/")]
