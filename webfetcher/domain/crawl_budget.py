import logging
import threading

logger = logging.getLogger(__name__)


class CrawlBudget:
    """Depth and page limits of a run; 0 means unlimited for both.

    The page counter is the only mutable part. It is incremented through
    `try_consume_page`, which compares and increments under one lock so
    concurrent workers can never emit more than `max_pages` records.
    """

    def __init__(self, max_depth: int = 0, max_pages: int = 0):
        self.max_depth = int(max_depth)
        self.max_pages = int(max_pages)
        self._pages = 0
        self._lock = threading.Lock()

    @property
    def pages(self) -> int:
        with self._lock:
            return self._pages

    def pages_exhausted(self) -> bool:
        if self.max_pages == 0:
            return False
        with self._lock:
            return self._pages >= self.max_pages

    def try_consume_page(self) -> bool:
        with self._lock:
            if self.max_pages != 0 and self._pages >= self.max_pages:
                logger.debug("Page budget of %s exhausted", self.max_pages)
                return False
            self._pages += 1
            return True

    def allows_children_of(self, depth: int) -> bool:
        """Whether links found at `depth` may be scheduled at `depth + 1`."""
        return self.max_depth == 0 or depth + 1 <= self.max_depth
