import threading
import time

import pytest

from webfetcher.domain.frontier import Frontier


def test_wait_returns_immediately_when_nothing_in_flight():
    frontier = Frontier(poll_seconds=0.01)
    frontier.wait_until_drained()


def test_wait_blocks_until_last_task_done():
    frontier = Frontier(poll_seconds=0.01)
    frontier.register()
    frontier.register()
    finished = threading.Event()

    def waiter():
        frontier.wait_until_drained()
        finished.set()

    t = threading.Thread(target=waiter)
    t.start()

    frontier.done()
    time.sleep(0.05)
    assert not finished.is_set()

    frontier.done()
    t.join(timeout=2)
    assert finished.is_set()


def test_done_without_register_raises():
    frontier = Frontier()
    with pytest.raises(RuntimeError):
        frontier.done()
