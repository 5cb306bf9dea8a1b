import logging
from typing import Callable, Iterable, Optional

from webfetcher.domain.records import DeleteRecord
from webfetcher.exceptions import RunStateError
from webfetcher.services.run_state_store import RunStateStore

logger = logging.getLogger(__name__)


def urls_for_deletion(prior: Iterable[str], current: Iterable[str]) -> list[str]:
    """URLs of the prior run that were not visited in the current one, in prior order."""
    current_set = set(current)
    return [url for url in prior if url not in current_set]


class RunReconciler:
    """Emits deletions for pages that disappeared since the previous run.

    The previous run's visited list is read from the store, every URL missing
    from the current list becomes a delete record, and the current list then
    replaces the stored one. Unreadable state means no deletions this run.
    If the consumer fails while deletions are being emitted, the stored state
    is left untouched so the next run emits them again.
    """

    def __init__(self, store: RunStateStore):
        self.store = store

    def _load_prior(self, run_id: str) -> Optional[list[str]]:
        try:
            prior = self.store.load(run_id)
        except RunStateError as e:
            logger.warning("Failed to read previous run state, skipping deletions: %s", e)
            return None
        return prior if prior is not None else []

    def reconcile(
        self,
        run_id: str,
        current: list[str],
        consumer: Callable[[dict], None],
        thread_id: Optional[str] = None,
    ) -> int:
        """Emit delete records and persist `current`. Returns the number of deletions."""
        prior = self._load_prior(run_id)

        deletions = urls_for_deletion(prior, current) if prior is not None else []
        logger.info("Thread deleting %s, deleting %s urls", thread_id, len(deletions))
        for url in deletions:
            record = DeleteRecord.for_url(url)
            logger.info("Thread Sending Deletion %s, reference %s", thread_id, record.reference)
            consumer(record.to_event())

        try:
            self.store.save(run_id, current)
        except RunStateError as e:
            logger.warning("Failed to write run state to disk: %s", e)

        return len(deletions)
