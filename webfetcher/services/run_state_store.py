import hashlib
import json
import logging
import os
import tempfile
from typing import Optional

from webfetcher.exceptions import RunStateError

logger = logging.getLogger(__name__)

STATE_DIR = "fetched-data"
STATE_SUFFIX = ".json"
# Longest file name most filesystems accept, in bytes.
MAX_FILE_NAME = 255


class RunStateStore:
    """Filesystem IO for the visited-URL list of the last completed run.

    One JSON array per run id, stored under `<data_folder>/fetched-data/`.
    Writes go to a temporary file in the same directory that then replaces
    the previous state, so a crash leaves either the old or the new list.
    """

    def __init__(self, *, data_folder: str):
        self.data_folder = data_folder

    def file_name_for(self, run_id: str) -> str:
        """State file name of `run_id`; ids too long for a file name are hashed."""
        name = run_id + STATE_SUFFIX
        if len(name.encode("utf-8")) > MAX_FILE_NAME:
            name = hashlib.sha256(run_id.encode("utf-8")).hexdigest() + STATE_SUFFIX
        return name

    def path_for(self, run_id: str) -> str:
        return os.path.join(self.data_folder, STATE_DIR, self.file_name_for(run_id))

    def load(self, run_id: str) -> Optional[list[str]]:
        """Return the URLs persisted for `run_id`, or None when no state exists.

        Raises RunStateError when the file exists but cannot be read or does
        not hold a JSON array of strings.
        """
        path = self.path_for(run_id)
        if not os.path.isfile(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise RunStateError(path, f"unreadable: {e}") from e
        if not isinstance(data, list) or not all(isinstance(url, str) for url in data):
            raise RunStateError(path, "expected a JSON array of URLs")
        return data

    def save(self, run_id: str, urls: list[str]) -> None:
        path = self.path_for(run_id)
        directory = os.path.dirname(path)
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".run-state-", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(list(urls), f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise RunStateError(path, f"write failed: {e}") from e
        logger.debug("Saved %s visited urls to %s", len(urls), path)
