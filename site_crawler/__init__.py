# site_crawler/__init__.py
"""
SiteCrawler package initializer.
Defines package version and exposes the public crawl API and CLI.
"""
__version__ = "0.1.0"

from site_crawler.crawler.models import PrefixFilter, VisitedSet
from site_crawler.exceptions import CrawlerError, FetchError, MalformedURLError, ParseError
from site_crawler.parser.html_parser import extract_links
from site_crawler.parser.sitemap_parser import extract_sitemap_urls, fetch_sitemap
from site_crawler.scanner import crawl_site, get_available_urls
from site_crawler.utils import normalize_url

# Expose CLI entry point
from site_crawler.cli import cli as main_cli

__all__ = [
    "__version__",
    "main_cli",
    "crawl_site",
    "get_available_urls",
    "extract_links",
    "extract_sitemap_urls",
    "fetch_sitemap",
    "normalize_url",
    "PrefixFilter",
    "VisitedSet",
    "CrawlerError",
    "MalformedURLError",
    "FetchError",
    "ParseError",
]
