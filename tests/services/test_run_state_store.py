import hashlib
import json
import os

import pytest

from webfetcher.domain.records import run_id_for
from webfetcher.exceptions import RunStateError
from webfetcher.services.run_state_store import STATE_DIR, RunStateStore


def test_load_missing_state_returns_none(tmp_path):
    store = RunStateStore(data_folder=str(tmp_path))
    assert store.load("abc") is None


def test_save_then_load(tmp_path):
    store = RunStateStore(data_folder=str(tmp_path))
    store.save("abc", ["http://x/a", "http://x/b"])

    assert store.load("abc") == ["http://x/a", "http://x/b"]
    assert store.path_for("abc") == os.path.join(str(tmp_path), STATE_DIR, "abc.json")


def test_save_replaces_previous_state_and_leaves_no_temp_files(tmp_path):
    store = RunStateStore(data_folder=str(tmp_path))
    store.save("abc", ["http://x/old"])
    store.save("abc", ["http://x/new"])

    assert store.load("abc") == ["http://x/new"]
    assert os.listdir(tmp_path / STATE_DIR) == ["abc.json"]


@pytest.mark.parametrize("body", ["{not json", '{"a": 1}', "[1, 2]"])
def test_unreadable_state_raises(tmp_path, body):
    store = RunStateStore(data_folder=str(tmp_path))
    os.makedirs(tmp_path / STATE_DIR)
    (tmp_path / STATE_DIR / "abc.json").write_text(body, encoding="utf-8")

    with pytest.raises(RunStateError):
        store.load("abc")


def test_failed_write_keeps_previous_state(tmp_path, monkeypatch):
    store = RunStateStore(data_folder=str(tmp_path))
    store.save("abc", ["http://x/old"])

    def failing_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", failing_replace)
    with pytest.raises(RunStateError):
        store.save("abc", ["http://x/new"])
    monkeypatch.undo()

    assert store.load("abc") == ["http://x/old"]
    assert os.listdir(tmp_path / STATE_DIR) == ["abc.json"]


def test_long_run_id_is_hashed_into_a_short_file_name(tmp_path):
    store = RunStateStore(data_folder=str(tmp_path))
    run_id = run_id_for("http://example.com/" + "segment/" * 40)
    assert len(run_id) > 255

    store.save(run_id, ["http://x/a"])

    assert store.load(run_id) == ["http://x/a"]
    [name] = os.listdir(tmp_path / STATE_DIR)
    assert name == hashlib.sha256(run_id.encode("utf-8")).hexdigest() + ".json"


def test_short_run_id_is_used_as_is(tmp_path):
    store = RunStateStore(data_folder=str(tmp_path))
    run_id = run_id_for("http://example.com")
    assert store.file_name_for(run_id) == run_id + ".json"
