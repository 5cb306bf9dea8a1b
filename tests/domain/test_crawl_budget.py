import threading

from webfetcher.domain.crawl_budget import CrawlBudget


def test_unlimited_pages_never_exhaust():
    budget = CrawlBudget(max_pages=0)
    for _ in range(50):
        assert budget.try_consume_page()
    assert not budget.pages_exhausted()
    assert budget.pages == 50


def test_page_budget_stops_at_max_pages():
    budget = CrawlBudget(max_pages=2)
    assert budget.try_consume_page()
    assert not budget.pages_exhausted()
    assert budget.try_consume_page()
    assert budget.pages_exhausted()
    assert not budget.try_consume_page()
    assert budget.pages == 2


def test_concurrent_consumers_never_exceed_max_pages():
    budget = CrawlBudget(max_pages=5)
    granted = []
    lock = threading.Lock()

    def worker():
        for _ in range(20):
            if budget.try_consume_page():
                with lock:
                    granted.append(1)

    threads = [threading.Thread(target=worker) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(granted) == 5
    assert budget.pages == 5


def test_depth_gate():
    assert CrawlBudget(max_depth=0).allows_children_of(100)
    budget = CrawlBudget(max_depth=1)
    assert budget.allows_children_of(0)
    assert not budget.allows_children_of(1)
