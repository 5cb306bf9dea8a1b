import logging
import threading

logger = logging.getLogger(__name__)


class Frontier:
    """
    Counts crawl tasks that are queued or running on the worker pool.

    Works like a wait group: a task is registered before it is submitted and
    marked done when it finishes, so a parent always registers its children
    before its own completion and the count reaches zero only once every
    discovered URL has been processed.
    """

    def __init__(self, poll_seconds: float = 5.0):
        self._poll_seconds = poll_seconds
        self._in_flight = 0
        self._condition = threading.Condition()

    def register(self) -> None:
        with self._condition:
            self._in_flight += 1

    def done(self) -> None:
        with self._condition:
            if self._in_flight <= 0:
                raise RuntimeError("Frontier.done() called with no task in flight")
            self._in_flight -= 1
            if self._in_flight == 0:
                self._condition.notify_all()

    def wait_until_drained(self) -> None:
        """Block until no task is in flight, logging progress every poll interval."""
        with self._condition:
            while self._in_flight > 0:
                if not self._condition.wait(timeout=self._poll_seconds):
                    logger.debug("Waiting for %s crawl tasks to finish", self._in_flight)
