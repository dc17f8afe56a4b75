# File: site_crawler/parser/sitemap_parser.py
"""site_crawler.parser.sitemap_parser: Парсинг sitemap.xml и ограниченное извлечение URL из <loc>."""

from __future__ import annotations

import re
from typing import List, Optional, Union

from aiohttp import ClientSession, ClientTimeout
from lxml import etree

from site_crawler.crawler.fetcher import Fetcher
from site_crawler.crawler.models import EventSink, Failed, Fetched
from site_crawler.exceptions import ParseError
from site_crawler.logger import enable_diagnostics, logger, resolve_debug

__all__ = ["extract_sitemap_urls", "fetch_sitemap"]


_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


def _parse_xml(xml_content: Union[str, bytes]) -> etree._Element:
    if isinstance(xml_content, str):
        # строка уже декодирована, объявленная в ней кодировка не применима
        xml_content = _XML_DECLARATION.sub("", xml_content.lstrip("\ufeff"), count=1)
    parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False)
    try:
        root = etree.fromstring(xml_content, parser=parser)
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise ParseError(f"Неправильный XML: {exc}") from exc
    if root is None:
        raise ParseError("Неправильный XML: пустой документ")
    return root


def extract_sitemap_urls(xml_content: Union[str, bytes], limit: int = 0) -> List[str]:
    """Возвращает тексты <loc> из элементов <url> в порядке документа.

    Args:
        xml_content: содержимое sitemap.xml: строка или байты ответа
            (байты декодируются по объявлению encoding в самом документе).
        limit: максимум URL в результате, 0 — без ограничения.

    Returns:
        Список URL. Элементы <url> без непустого <loc> пропускаются.

    Raises:
        ParseError: документ не удалось разобрать как XML.

    Пример:
    ```python
    from site_crawler.parser.sitemap_parser import extract_sitemap_urls

    with open('sitemap.xml', encoding='utf-8') as f:
        urls = extract_sitemap_urls(f.read(), limit=10)
    ```
    """
    if limit < 0:
        raise ValueError("limit must be >= 0")
    root = _parse_xml(xml_content)
    urls: List[str] = []
    for url_el in root.iter("{*}url"):
        if limit and len(urls) >= limit:
            break
        loc = url_el.find(".//{*}loc")
        text = (loc.text or "").strip() if loc is not None else ""
        if text:
            urls.append(text)
    return urls


async def fetch_sitemap(
    url: str,
    limit: int = 0,
    *,
    session: Optional[ClientSession] = None,
    timeout: float = 10.0,
    debug: Optional[bool] = None,
    on_event: Optional[EventSink] = None,
) -> List[str]:
    """Загружает sitemap одним GET и извлекает из него URL.

    Никогда не бросает исключений: ошибка сети, статус > 399, отсутствующий
    или не-XML Content-Type и битый XML дают пустой список.
    debug по умолчанию берётся из переменной окружения ``DEBUG=true``.
    """
    debug = resolve_debug(debug)
    if debug:
        enable_diagnostics()
        logger.debug("actively scraping %s", url)

    if session is None:
        async with ClientSession(timeout=ClientTimeout(total=timeout)) as own:
            outcome = await Fetcher(own).fetch_xml(url)
    else:
        outcome = await Fetcher(session).fetch_xml(url)

    if not isinstance(outcome, Fetched):
        if debug:
            detail = outcome.error if isinstance(outcome, Failed) else outcome.detail
            logger.debug("sitemap %s skipped: %s", url, detail)
        if on_event is not None:
            on_event(outcome)
        return []

    try:
        return extract_sitemap_urls(outcome.raw or outcome.body, limit)
    except ParseError as exc:
        if debug:
            logger.debug("error parsing sitemap %s: %s", url, exc)
        if on_event is not None:
            on_event(Failed(url, exc))
        return []
