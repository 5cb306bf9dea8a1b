import threading
from typing import Iterable, Optional


class VisitedTracker:
    """
    Tracks which URLs have been scheduled during a crawl run.

    Safe for concurrent use by the worker pool: `mark_if_new` is an atomic
    check-and-insert, so a URL is admitted exactly once no matter how many
    pages link to it. Insertion order is kept because the visited list is
    persisted as the run state.
    """

    def __init__(self, urls: Optional[Iterable[str]] = None):
        self._lock = threading.Lock()
        # dict keys keep insertion order
        self._visited: dict[str, None] = dict.fromkeys(urls or ())

    def mark_if_new(self, url: str) -> bool:
        """Mark `url` as visited; return False if it already was."""
        with self._lock:
            if url in self._visited:
                return False
            self._visited[url] = None
            return True

    def snapshot(self) -> list[str]:
        """Visited URLs in the order they were first seen."""
        with self._lock:
            return list(self._visited)

    def __len__(self) -> int:
        with self._lock:
            return len(self._visited)
