import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

from webfetcher.domain.config import FetcherJobConfig
from webfetcher.domain.crawl_context import CrawlContext
from webfetcher.domain.crawl_result import CrawlPhase, CrawlRunResult
from webfetcher.domain.frontier import Frontier
from webfetcher.services.content_extractor import ContentExtractor
from webfetcher.services.fetcher import Transport
from webfetcher.services.fetcher_factory import FetcherFactory
from webfetcher.services.robots_policy import RobotsPolicy
from webfetcher.services.robots_service import RobotsService
from webfetcher.services.run_reconciler import RunReconciler
from webfetcher.services.run_state_store import RunStateStore
from webfetcher.services.url_resolver import resolve

logger = logging.getLogger(__name__)

Consumer = Callable[[dict], None]
Schedule = Callable[[str, str, int], None]


def _default_reconciler_factory(data_folder: str) -> RunReconciler:
    return RunReconciler(RunStateStore(data_folder=data_folder))


class CrawlExecutor:
    """Executes crawl runs given configured collaborators.

    This class owns the run control-flow: robots seeding, traversal on a
    bounded worker pool, draining, reconciliation and transport release. It
    does NOT construct its collaborators' dependencies (that stays in the DI
    layer).
    """

    def __init__(
        self,
        *,
        fetcher_factory: FetcherFactory,
        robots_service: Optional[RobotsService] = None,
        content_extractor: Optional[ContentExtractor] = None,
        reconciler_factory: Optional[Callable[[str], RunReconciler]] = None,
        drain_poll_seconds: float = 5.0,
    ):
        self.fetcher_factory = fetcher_factory
        self.robots_service = robots_service or RobotsService()
        self.content_extractor = content_extractor or ContentExtractor()
        self.reconciler_factory = reconciler_factory or _default_reconciler_factory
        self.drain_poll_seconds = float(drain_poll_seconds)

    def _enter(self, context: CrawlContext, phase: CrawlPhase) -> None:
        context.phase = phase
        logger.info("Thread %s: %s", context.thread_id, phase.value)

    def _seed_robots(self, config: FetcherJobConfig, transport: Transport) -> RobotsPolicy:
        if not config.read_robots:
            return RobotsPolicy.empty()
        logger.info("Thread %s: %s", config.job_name, CrawlPhase.SEEDING_ROBOTS.value)
        return self.robots_service.load_policy(config.url, transport)

    def execute(self, config: FetcherJobConfig, consumer: Consumer) -> CrawlRunResult:
        """Crawl from `config.url`, handing every record to `consumer`.

        Blocks until the run is complete. Failures on single URLs, robots.txt
        or run state are logged and never abort the run.
        """
        if config is None:
            raise ValueError("config is required for execute")

        logger.info("Starting fetch for thread : %s, url : %s", config.job_name, config.url)
        transport = self.fetcher_factory.create(config)
        try:
            policy = self._seed_robots(config, transport)
            context = CrawlContext(
                config,
                policy,
                transport,
                frontier=Frontier(poll_seconds=self.drain_poll_seconds),
            )

            self._enter(context, CrawlPhase.CRAWLING)
            with ThreadPoolExecutor(
                max_workers=config.threads,
                thread_name_prefix="webfetcher",
            ) as pool:

                def schedule(url: str, root_url: str, depth: int) -> None:
                    self._submit(pool, context, consumer, schedule, url, root_url, depth)

                schedule(config.url, config.url, 0)
                self._enter(context, CrawlPhase.DRAINING)
                context.frontier.wait_until_drained()

            self._enter(context, CrawlPhase.RECONCILING)
            deletions = self._reconcile(context, consumer)
        finally:
            transport.close()

        self._enter(context, CrawlPhase.DONE)
        logger.info("Finished Thread %s", context.thread_id)
        return CrawlRunResult(
            pages_emitted=context.budget.pages,
            urls_visited=len(context.visited_tracker),
            deletions=deletions,
            phase=context.phase,
        )

    def _submit(
        self,
        pool: ThreadPoolExecutor,
        context: CrawlContext,
        consumer: Consumer,
        schedule: Schedule,
        url: str,
        root_url: str,
        depth: int,
    ) -> None:
        context.frontier.register()

        def task() -> None:
            try:
                self.crawl_from(url, root_url, depth, context, consumer, schedule)
            finally:
                context.frontier.done()

        try:
            pool.submit(task)
        except RuntimeError:
            context.frontier.done()
            logger.warning("Worker pool rejected %s from thread %s", url, context.thread_id)

    def crawl_from(
        self,
        url: str,
        root_url: str,
        depth: int,
        context: CrawlContext,
        consumer: Consumer,
        schedule: Schedule,
    ) -> bool:
        """Fetch one URL, emit its record and schedule its children.

        Returns True when a record was emitted. Any error is logged with the
        URL and swallowed so the rest of the frontier keeps going.
        """
        resolved = None
        try:
            if context.budget.pages_exhausted():
                return False

            resolved = resolve(url, root_url)
            if not context.visited_tracker.mark_if_new(resolved):
                logger.debug("Skipping (visited) %s", resolved)
                return False
            if context.is_disallowed(resolved):
                logger.info("Skipping (robots) %s", resolved)
                return False

            result = context.transport.fetch(resolved, root_url)
            if result is None or not result.succeeded:
                logger.warning(
                    "Fetch failed for %s, status %s, %s",
                    resolved,
                    getattr(result, "status_code", None),
                    getattr(result, "message", None),
                )
                return False

            extraction = self.content_extractor.extract(result, context, depth)
            if extraction.excluded:
                logger.info(
                    "Excluded Thread %s, status %s, pages %s, depth %s, url %s, size %s",
                    context.thread_id,
                    result.status_code,
                    context.budget.pages,
                    depth,
                    result.url,
                    len(result.content),
                )
                return False

            if not context.budget.try_consume_page():
                logger.debug("Skipping (page budget) %s", resolved)
                return False

            consumer(extraction.record.to_event())
            logger.info(
                "Thread %s, status %s, pages %s, depth %s, url %s, rootUrl %s, size %s, visited %s",
                context.thread_id,
                result.status_code,
                context.budget.pages,
                depth,
                result.url,
                result.root_url,
                len(extraction.record.content),
                len(context.visited_tracker),
            )

            for child in extraction.children:
                schedule(child, result.root_url, depth + 1)
            return True

        except Exception:
            logger.exception(
                "Failed to retrieve URL from thread %s, url %s",
                context.thread_id,
                resolved or url,
            )
            return False

    def _reconcile(self, context: CrawlContext, consumer: Consumer) -> int:
        if not context.config.data_folder:
            logger.info("No data folder for thread %s, skipping deletions", context.thread_id)
            return 0
        reconciler = self.reconciler_factory(context.config.data_folder)
        try:
            return reconciler.reconcile(
                context.run_id,
                context.visited_tracker.snapshot(),
                consumer,
                thread_id=context.thread_id,
            )
        except Exception:
            logger.exception("Reconciliation failed for thread %s", context.thread_id)
            return 0
