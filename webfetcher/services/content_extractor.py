import logging
from typing import Callable, NamedTuple, Optional

from bs4 import BeautifulSoup

from webfetcher.domain.crawl_context import CrawlContext
from webfetcher.domain.fetch_result import FetchResult
from webfetcher.domain.records import CrawlRecord
from webfetcher.services.url_resolver import simplified_host

logger = logging.getLogger(__name__)

_WEB_SCHEMES = ("http://", "https://")
_IGNORED_PREFIXES = ("mailto", "javascript")
_ASSET_SUFFIXES = (".css", ".js")
_SITE_BOUNDARIES = ("/", "?", "#")


def _is_same_site(lowered: str, site_prefixes: tuple[str, ...]) -> bool:
    """True when `lowered` starts with a site prefix that ends at a host or path boundary."""
    for prefix in site_prefixes:
        if lowered.startswith(prefix):
            rest = lowered[len(prefix):]
            if not rest or rest.startswith(_SITE_BOUNDARIES):
                return True
    return False


class Extraction(NamedTuple):
    record: CrawlRecord
    children: list[str]
    """Links to schedule at depth + 1; empty past the depth limit or for excluded pages"""

    excluded: bool
    """True when the page URL matches a content exclusion pattern and must not be emitted"""


class ContentExtractor:
    """Builds the record of a fetched page and finds the links to follow.

    Only HTML responses (by Content-Type) are parsed; any other content is
    passed through as bytes with no links.
    """

    def __init__(self, soup_factory: Optional[Callable[[str], BeautifulSoup]] = None):
        self._soup_factory = soup_factory or (lambda html: BeautifulSoup(html, "html.parser"))

    def extract(self, result: FetchResult, context: CrawlContext, depth: int) -> Extraction:
        content = result.content
        child_pages: list[str] = []
        external_pages: list[str] = []

        content_type = result.header("Content-Type") or ""
        if "html" in content_type.lower():
            if context.config.wait_javascript:
                body = context.transport.rendered_source(result.url)
                content = body.encode("utf-8")
            else:
                body = content.decode("utf-8", errors="replace")
            child_pages, external_pages = self.extract_links(body, result.root_url, context)

        record = CrawlRecord(
            url=result.url,
            root_url=result.root_url,
            content=content,
            headers=dict(result.headers),
            child_pages=tuple(child_pages),
            external_pages=tuple(external_pages),
        )

        # Children of an excluded page are not followed either.
        excluded = context.is_data_excluded(result.url)
        if excluded or not context.budget.allows_children_of(depth):
            return Extraction(record, [], excluded)
        return Extraction(record, child_pages, excluded)

    def extract_links(self, html: str, root_url: str, context: CrawlContext) -> tuple[list[str], list[str]]:
        """Split the hrefs of `html` into same-site children and external pages.

        Both lists are deduplicated and sorted.
        """
        try:
            soup = self._soup_factory(html)
            hrefs = [element.get("href") for element in soup.find_all(href=True)]
        except Exception:
            logger.exception("Error extracting links from HTML of %s", root_url)
            return [], []

        simple = simplified_host(root_url).lower()
        site_prefixes = tuple(scheme + simple for scheme in _WEB_SCHEMES)

        children = set()
        externals = set()
        for href in hrefs:
            if not isinstance(href, str):
                continue
            lowered = href.lower()
            absolute = lowered.startswith(_WEB_SCHEMES)
            same_site = _is_same_site(lowered, site_prefixes)

            if absolute and not same_site:
                externals.add(href)

            relative = (
                not absolute
                and not lowered.startswith(_IGNORED_PREFIXES)
                and not lowered.endswith(_ASSET_SUFFIXES)
            )
            if not (relative or same_site):
                continue
            if href == "/" or href.startswith("//"):
                continue
            if context.is_link_excluded(href):
                logger.debug("Skipping (excluded link) %s", href)
                continue
            children.add(href)

        return sorted(children), sorted(externals)
