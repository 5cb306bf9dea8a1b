import json
import threading
from typing import TextIO


class JsonLinesSink:
    """Record consumer writing one JSON document per line.

    Workers call the sink concurrently; writes are serialized so lines never
    interleave.
    """

    def __init__(self, stream: TextIO):
        self._stream = stream
        self._lock = threading.Lock()
        self.count = 0

    def __call__(self, record: dict) -> None:
        line = json.dumps(record, ensure_ascii=False)
        with self._lock:
            self._stream.write(line + "\n")
            self._stream.flush()
            self.count += 1
