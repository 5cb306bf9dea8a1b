from unittest.mock import MagicMock

from webfetcher.domain.config import FetcherJobConfig
from webfetcher.domain.crawl_context import CrawlContext
from webfetcher.domain.fetch_result import FetchResult
from webfetcher.services.content_extractor import ContentExtractor
from webfetcher.services.robots_policy import RobotsPolicy

ROOT = "http://site.test"
HTML = {"Content-Type": ["text/html; charset=utf-8"]}

MIXED_LINKS = """
<html><body>
  <a href="/a">a</a>
  <a href="/a">a again</a>
  <a href="b.html">b</a>
  <a href="http://site.test/c">c</a>
  <a href="https://site.test/d">d</a>
  <a href="HTTP://SITE.TEST/E">e</a>
  <a href="http://other.com/x">other</a>
  <a href="mailto:me@site.test">mail</a>
  <a href="javascript:void(0)">js</a>
  <a href="/">home</a>
  <a href="//cdn.other.com/lib">cdn</a>
  <link rel="stylesheet" href="/style.css">
  <a href="app.js">script</a>
  <a name="no-href">anchor</a>
</body></html>
"""


def make_context(transport=None, **kwargs):
    config = FetcherJobConfig(url=ROOT, **kwargs)
    return CrawlContext(config, RobotsPolicy.empty(), transport or MagicMock())


def html_result(url, body=MIXED_LINKS, headers=HTML):
    return FetchResult(body.encode("utf-8"), headers, 200, url, ROOT)


def test_extract_links_splits_children_and_externals():
    children, externals = ContentExtractor().extract_links(MIXED_LINKS, ROOT, make_context())

    assert children == [
        "/a",
        "HTTP://SITE.TEST/E",
        "b.html",
        "http://site.test/c",
        "https://site.test/d",
    ]
    assert externals == ["http://other.com/x"]


def test_excluded_links_are_not_children():
    context = make_context(excluded_link=["/a", r"http://site\.test/.*"])

    children, _ = ContentExtractor().extract_links(MIXED_LINKS, ROOT, context)

    assert children == ["HTTP://SITE.TEST/E", "b.html", "https://site.test/d"]


def test_extract_builds_record_and_children():
    extraction = ContentExtractor().extract(html_result(ROOT + "/page"), make_context(), depth=0)

    assert not extraction.excluded
    assert extraction.children == list(extraction.record.child_pages)
    assert extraction.record.url == ROOT + "/page"
    assert extraction.record.root_url == ROOT
    assert extraction.record.external_pages == ("http://other.com/x",)
    assert extraction.record.content == MIXED_LINKS.encode("utf-8")


def test_depth_limit_keeps_links_on_record_but_schedules_none():
    context = make_context(max_depth=1)
    extractor = ContentExtractor()

    assert extractor.extract(html_result(ROOT), context, depth=0).children
    extraction = extractor.extract(html_result(ROOT + "/deep"), context, depth=1)

    assert extraction.children == []
    assert "/a" in extraction.record.child_pages


def test_excluded_page_has_no_children():
    context = make_context(excluded_data=[r".*/private.*"])

    extraction = ContentExtractor().extract(html_result(ROOT + "/private/area"), context, depth=0)

    assert extraction.excluded
    assert extraction.children == []


def test_non_html_content_is_passed_through():
    result = FetchResult(b"\x89PNG\r\n", {"Content-Type": ["image/png"]}, 200, ROOT + "/logo.png", ROOT)

    extraction = ContentExtractor().extract(result, make_context(), depth=0)

    assert extraction.record.content == b"\x89PNG\r\n"
    assert extraction.record.child_pages == ()
    assert extraction.children == []


def test_missing_content_type_is_not_parsed():
    result = FetchResult(b'<a href="/a">a</a>', {}, 200, ROOT, ROOT)

    assert ContentExtractor().extract(result, make_context(), depth=0).children == []


def test_javascript_mode_uses_rendered_source():
    transport = MagicMock()
    transport.rendered_source.return_value = '<html><a href="/rendered">r</a></html>'
    context = make_context(transport=transport, wait_javascript=True)

    extraction = ContentExtractor().extract(html_result(ROOT), context, depth=0)

    transport.rendered_source.assert_called_once_with(ROOT)
    assert extraction.children == ["/rendered"]
    assert extraction.record.content == b'<html><a href="/rendered">r</a></html>'


def test_parser_failure_gives_no_links(caplog):
    def broken_soup(html):
        raise ValueError("cannot parse")

    children, externals = ContentExtractor(soup_factory=broken_soup).extract_links("<a>", ROOT, make_context())

    assert children == []
    assert externals == []
    assert "Error extracting links" in caplog.text


def test_host_extending_the_site_name_is_external():
    html = """
    <a href="http://site.test.evil.org/x">lookalike</a>
    <a href="https://site.testing.example/y">longer name</a>
    <a href="http://site.test">bare site</a>
    <a href="http://site.test?q=1">site with query</a>
    """

    children, externals = ContentExtractor().extract_links(html, ROOT, make_context())

    assert children == ["http://site.test", "http://site.test?q=1"]
    assert externals == ["http://site.test.evil.org/x", "https://site.testing.example/y"]
