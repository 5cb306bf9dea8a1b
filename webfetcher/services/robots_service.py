from urllib.parse import urljoin, urlsplit
import logging

from webfetcher.services.fetcher import Transport
from webfetcher.services.robots_policy import RobotsPolicy

logger = logging.getLogger(__name__)

ROBOTS_PATH = "/robots.txt"


class RobotsService:
    """
    Loads the robots.txt policy of a crawl's seed site.

    The robots.txt is fetched once per run, before traversal starts. Every
    failure (unparseable seed URL, transport failure, unreadable body) yields
    an empty policy: robots enforcement degrades open and never blocks a crawl.
    """

    def robots_url(self, initial_url: str):
        try:
            parsed = urlsplit(initial_url)
        except ValueError:
            return None
        if not parsed.scheme or not parsed.netloc:
            return None
        return urljoin(f"{parsed.scheme}://{parsed.netloc}", ROBOTS_PATH)

    def load_policy(self, initial_url: str, transport: Transport) -> RobotsPolicy:
        robots_url = self.robots_url(initial_url)
        if robots_url is None:
            logger.warning("Failed to find robots.txt url for %s", initial_url)
            return RobotsPolicy.empty()

        try:
            result = transport.fetch(robots_url, initial_url)
        except Exception:
            logger.exception("Network error fetching robots.txt from %s", robots_url)
            return RobotsPolicy.empty()

        if not result.succeeded:
            logger.warning(
                "Failed to read robots.txt url, status %s, %s, %s",
                result.status_code,
                initial_url,
                result.message,
            )
            return RobotsPolicy.empty()

        try:
            policy = RobotsPolicy.parse(result.content.decode("utf-8", errors="replace"))
        except Exception:
            logger.exception("Failed to parse robots.txt from url %s", robots_url)
            return RobotsPolicy.empty()

        logger.info("Loaded robots.txt from %s: %r", robots_url, policy)
        return policy
