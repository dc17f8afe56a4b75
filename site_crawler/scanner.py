# === FILE: site_crawler/scanner.py ===
"""
Точки входа библиотеки: подготовка seed-URL и запуск обхода, поиск ссылок на одной странице.
"""
from __future__ import annotations

from typing import Iterable, List, Optional
from urllib.parse import urljoin

from aiohttp import ClientSession, ClientTimeout

from site_crawler.config import CrawlerConfig
from site_crawler.crawler.crawler import SiteCrawler
from site_crawler.crawler.fetcher import Fetcher
from site_crawler.crawler.models import EventSink, Failed, Fetched, PrefixFilter
from site_crawler.exceptions import FetchError, ParseError
from site_crawler.logger import logger
from site_crawler.parser.html_parser import relative_links
from site_crawler.utils import origin_of, split_url, strip_trailing_slash

__all__ = ["prepare_seed", "crawl_site", "start_scan", "get_available_urls"]


def prepare_seed(seed_url: str) -> tuple[str, str]:
    """
    Возвращает пару (base_url, start_url) для обхода.

    base_url — ``scheme://host[:port]`` из seed, start_url — seed без одного
    завершающего ``/``. Некорректный seed бросает MalformedURLError.
    """
    return origin_of(seed_url), strip_trailing_slash(seed_url)


async def crawl_site(
    seed_url: str,
    limit: int = 0,
    include_prefixes: Optional[Iterable[str]] = None,
    exclude_prefixes: Optional[Iterable[str]] = None,
    *,
    timeout: float = 10.0,
    debug: Optional[bool] = None,
    on_event: Optional[EventSink] = None,
    session: Optional[ClientSession] = None,
    fetcher: Optional[Fetcher] = None,
) -> List[str]:
    """
    Обходит сайт от seed_url и возвращает нормализованные URL в порядке обнаружения.

    Parameters
    ----------
    seed_url : str
        Абсолютный URL начальной страницы.
    limit : int
        Максимум страниц в результате, 0 — без ограничения.
    include_prefixes, exclude_prefixes
        Разрешающие и запрещающие префиксы URL (регистр не важен).
    debug : bool, optional
        Диагностика пропусков и ошибок в лог (уровень DEBUG); по умолчанию
        берётся из переменной окружения ``DEBUG=true``.

    Raises
    ------
    MalformedURLError
        Если seed_url не является корректным URL. Все прочие ошибки
        поглощаются и лишь сообщаются в on_event.
    """
    base_url, start_url = prepare_seed(seed_url)
    crawler = SiteCrawler(
        limit=limit,
        prefix_filter=PrefixFilter.build(include_prefixes, exclude_prefixes),
        timeout=timeout,
        debug=debug,
        on_event=on_event,
        session=session,
        fetcher=fetcher,
    )
    async with crawler:
        pages = await crawler.crawl(base_url, start_url)
    return pages.to_list()


async def start_scan(cfg: CrawlerConfig, on_event: Optional[EventSink] = None) -> List[str]:
    """Запускает crawl_site с параметрами из CrawlerConfig."""
    return await crawl_site(
        cfg.seed_url,
        cfg.limit,
        cfg.include_prefixes,
        cfg.exclude_prefixes,
        timeout=cfg.timeout,
        debug=cfg.debug,
        on_event=on_event,
    )


async def get_available_urls(
    url: str,
    limit: int,
    *,
    session: Optional[ClientSession] = None,
    timeout: float = 10.0,
) -> List[str]:
    """
    Собирает уникальные относительные ссылки (href начинается с ``/``) одной страницы.

    Результат начинается с самого url; ссылок берётся не больше чем
    ``min(limit + 1, число относительных ссылок)`` с учётом url.
    Любая ошибка загрузки или разбора бросает FetchError.
    """
    logger.info("Crawling: %s", url)
    available: List[str] = [url]

    try:
        split_url(url)
        if session is None:
            async with ClientSession(timeout=ClientTimeout(total=timeout)) as own:
                outcome = await Fetcher(own).fetch(url)
        else:
            outcome = await Fetcher(session).fetch(url)
        if isinstance(outcome, Failed):
            raise outcome.error
        if not isinstance(outcome, Fetched):
            raise FetchError(outcome.detail)
        links = relative_links(outcome.body)
    except (FetchError, ParseError, ValueError) as exc:
        raise FetchError(f"get_available_urls: {exc}") from exc

    logger.info("Available Relative Links: %d", len(links))
    if not links:
        return available

    bound = min(limit + 1, len(links))
    index = 0
    # повторяющиеся ссылки не добавляются, поэтому ограничиваем и индекс
    while len(available) < bound and index < bound:
        absolute = urljoin(url, links[index])
        index += 1
        if absolute not in available:
            available.append(absolute)
            logger.info("Found unique relative link: %s", absolute)
    return available
