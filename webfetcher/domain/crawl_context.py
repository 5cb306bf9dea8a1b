import re
from typing import TYPE_CHECKING, Optional

from webfetcher.domain.config import FetcherJobConfig
from webfetcher.domain.crawl_budget import CrawlBudget
from webfetcher.domain.crawl_result import CrawlPhase
from webfetcher.domain.frontier import Frontier
from webfetcher.domain.records import run_id_for
from webfetcher.domain.visited_tracker import VisitedTracker

if TYPE_CHECKING:
    from webfetcher.services.fetcher import Transport
    from webfetcher.services.robots_policy import RobotsPolicy


class CrawlContext:
    """State of one crawl run, handed to every worker task.

    Built when the run starts and discarded when it ends. Only the visited
    tracker, the budget's page counter and the frontier are mutated by
    workers; each guards itself. Everything else is read-only.
    """

    def __init__(
        self,
        config: FetcherJobConfig,
        robots_policy: "RobotsPolicy",
        transport: "Transport",
        visited_tracker: Optional[VisitedTracker] = None,
        budget: Optional[CrawlBudget] = None,
        frontier: Optional[Frontier] = None,
    ):
        self.config = config
        self.run_id = run_id_for(config.url)
        self.robots_policy = robots_policy
        self.transport = transport
        self.visited_tracker = visited_tracker if visited_tracker is not None else VisitedTracker()
        self.budget = budget if budget is not None else CrawlBudget(config.max_depth, config.max_pages)
        self.frontier = frontier if frontier is not None else Frontier()
        self.excluded_data = [re.compile(p) for p in config.excluded_data or []]
        self.excluded_link = [re.compile(p) for p in config.excluded_link or []]
        self.phase = CrawlPhase.SEEDING_ROBOTS

    @property
    def thread_id(self) -> str:
        return self.config.job_name

    def is_data_excluded(self, url: str) -> bool:
        return any(p.fullmatch(url) for p in self.excluded_data)

    def is_link_excluded(self, href: str) -> bool:
        return any(p.fullmatch(href) for p in self.excluded_link)

    def is_disallowed(self, url: str) -> bool:
        return self.robots_policy.is_disallowed(url, self.config.crawler_user_agent)
