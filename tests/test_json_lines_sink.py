import io
import json
import threading

from webfetcher.services.json_lines_sink import JsonLinesSink


def test_writes_one_document_per_line():
    stream = io.StringIO()
    sink = JsonLinesSink(stream)

    sink({"url": "http://example.com/é", "command": "ADD"})
    sink({"reference": "abc", "command": "DELETE"})

    lines = stream.getvalue().splitlines()
    assert [json.loads(line) for line in lines] == [
        {"url": "http://example.com/é", "command": "ADD"},
        {"reference": "abc", "command": "DELETE"},
    ]
    assert "é" in lines[0]
    assert sink.count == 2


def test_concurrent_writes_do_not_interleave():
    stream = io.StringIO()
    sink = JsonLinesSink(stream)

    def writer(n):
        for i in range(50):
            sink({"writer": n, "i": i, "padding": "x" * 200})

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    lines = stream.getvalue().splitlines()
    assert len(lines) == 400
    assert all(json.loads(line)["padding"] == "x" * 200 for line in lines)
    assert sink.count == 400
