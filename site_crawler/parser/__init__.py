# site_crawler/parser/__init__.py
"""Парсеры документов: ссылки из HTML и URL из sitemap.xml."""
