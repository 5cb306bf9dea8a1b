"""Crawl run outcome data model."""
from enum import Enum
from typing import NamedTuple


class CrawlPhase(str, Enum):
    SEEDING_ROBOTS = "seeding_robots"
    CRAWLING = "crawling"
    DRAINING = "draining"
    RECONCILING = "reconciling"
    DONE = "done"


class CrawlRunResult(NamedTuple):
    """Result of a crawl run.

    Provides feedback about what happened during the run so that callers can
    log metrics without inspecting the emitted records.
    """
    pages_emitted: int
    """Number of add records handed to the consumer"""

    urls_visited: int
    """Number of distinct URLs admitted to the visited set"""

    deletions: int
    """Number of delete records emitted by reconciliation"""

    phase: CrawlPhase = CrawlPhase.DONE
