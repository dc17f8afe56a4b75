# File: tests/test_models.py
from site_crawler.crawler.models import PrefixFilter, SkipReason, VisitedSet


def test_visited_set_keeps_insertion_order_and_uniqueness():
    pages = VisitedSet()
    assert pages.add("https://a.com")
    assert pages.add("https://a.com/b")
    assert not pages.add("https://a.com")
    assert pages.to_list() == ["https://a.com", "https://a.com/b"]
    assert len(pages) == 2
    assert "https://a.com/b" in pages
    assert list(pages) == pages.to_list()


def test_visited_set_from_iterable_drops_duplicates():
    assert VisitedSet(["x", "y", "x"]).to_list() == ["x", "y"]


def test_prefix_filter_build_cleans_values():
    pf = PrefixFilter.build([" HTTPS://A.com/Blog ", "", "https://a.com/blog"], "https://A.com/Tmp")
    assert pf.include == ("https://a.com/blog",)
    assert pf.exclude == ("https://a.com/tmp",)


def test_empty_prefix_filter_accepts_everything():
    pf = PrefixFilter.build()
    assert not pf
    assert pf.check("https://a.com/anything") is None


def test_include_prefixes():
    pf = PrefixFilter.build(include=["https://a.com/blog"])
    assert pf.check("https://a.com/blog/post1") is None
    assert pf.check("https://A.COM/BLOG/post1") is None
    assert pf.check("https://a.com/about") is SkipReason.NOT_INCLUDED


def test_include_prefix_without_scheme():
    pf = PrefixFilter.build(include=["a.com/blog"])
    assert pf.check("https://a.com/blog/post1") is None
    assert pf.check("https://a.com/about") is SkipReason.NOT_INCLUDED


def test_exclude_prefixes_win_over_include():
    pf = PrefixFilter.build(include=["https://a.com/"], exclude=["https://a.com/private"])
    assert pf.check("https://a.com/public") is None
    assert pf.check("https://a.com/private/x") is SkipReason.EXCLUDED
