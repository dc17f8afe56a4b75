# File: tests/test_html_parser.py
from site_crawler.exceptions import MalformedURLError
from site_crawler.parser.html_parser import extract_links, relative_links

BASE = "https://example.com"


def test_relative_and_absolute_links_in_document_order():
    html = """
    <html><body>
      <a href="/first">1</a>
      <a href="https://other.com/page">2</a>
      <p><a href="/second?x=1#frag">3</a></p>
      <a href="http://example.com/third">4</a>
    </body></html>
    """
    assert extract_links(html, BASE) == [
        "https://example.com/first",
        "https://other.com/page",
        "https://example.com/second?x=1#frag",
        "http://example.com/third",
    ]


def test_duplicates_are_kept():
    html = '<a href="/a">1</a><a href="/a">2</a>'
    assert extract_links(html, BASE) == ["https://example.com/a", "https://example.com/a"]


def test_anchor_without_href_is_ignored():
    html = '<a name="top">no href</a><a href=" /spaced ">ok</a>'
    assert extract_links(html, BASE) == ["https://example.com/spaced"]


def test_base_with_trailing_slash():
    assert extract_links('<a href="/a">a</a>', BASE + "/") == ["https://example.com/a"]


def test_unresolvable_links_are_dropped_and_reported():
    html = """
    <a href="page.html">no scheme</a>
    <a href="#top">bookmark</a>
    <a href="http://[::1/broken">bad ipv6</a>
    <a href="/ok">ok</a>
    """
    errors = []
    links = extract_links(html, BASE, on_error=lambda url, exc: errors.append((url, exc)))

    assert links == ["https://example.com/ok"]
    assert [url for url, _ in errors] == ["page.html", "#top", "http://[::1/broken"]
    assert all(isinstance(exc, MalformedURLError) for _, exc in errors)


def test_malformed_relative_link_is_dropped():
    errors = []
    links = extract_links(
        '<a href="/a">a</a>', "http://[::1", on_error=lambda url, exc: errors.append(url)
    )
    assert links == []
    assert errors == ["http://[::1/a"]


def test_dot_segments_are_resolved():
    html = '<a href="/a/./b">1</a><a href="https://example.com/c/../d?q=1">2</a><a href="/x/..">3</a>'
    assert extract_links(html, BASE) == [
        "https://example.com/a/b",
        "https://example.com/d?q=1",
        "https://example.com/",
    ]


def test_empty_document():
    assert extract_links("", BASE) == []


def test_relative_links_only_slash_prefixed():
    html = '<a href="/a">a</a><a href="b">b</a><a href="https://x.com/c">c</a><a href="/a">a</a>'
    assert relative_links(html) == ["/a", "/a"]
