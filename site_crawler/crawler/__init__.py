# site_crawler/crawler/__init__.py
"""Recursive same-host crawler, its HTTP fetcher and data models."""
