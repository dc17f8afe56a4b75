# File: site_crawler/report/__init__.py
"""site_crawler.report: Генерация отчётов об обходе (JSON и HTML), используемая CLI и тестами."""

from .html_report import DEFAULT_TEMPLATE_DIR, render_html
from .json_report import render_json

__all__ = ["render_json", "render_html", "DEFAULT_TEMPLATE_DIR"]
