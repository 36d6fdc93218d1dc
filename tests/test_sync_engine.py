"""
Tests for SyncManager and DirectorySync.
"""
import json

import pytest

from opencode_sync.services.sync_engine import DirectorySync, SyncManager, compare_timestamps


@pytest.fixture
def scenario(tmp_path, make_opencode_storage, make_sync_dir):
    """Local [100, 200, 300] vs sync [150, 200, 50]."""
    storage = make_opencode_storage(tmp_path / "storage", {
        "id1": {"created": 10, "updated": 100},
        "id2": {"created": 10, "updated": 200},
        "id3": {"created": 10, "updated": 300, "messages": [{"role": "user", "created": 20}]},
    })
    sync_dir = make_sync_dir(tmp_path / "sync", {"id1": 150, "id2": 200, "id3": 50})
    return SyncManager(storage, sync_dir)


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_compare_timestamps():
    result = compare_timestamps({"a": 5, "b": 1, "z": 0}, {"b": 3, "c": 1, "z": 0})

    assert result.needsPush == ["a"]
    assert result.needsPull == ["b", "c"]
    # Equal zero timestamps are neither pushed, pulled nor up to date
    assert result.upToDate == []


def test_check_scenario(scenario):
    result = scenario.check()

    assert result.needsPull == ["id1"]
    assert result.upToDate == ["id2"]
    assert result.needsPush == ["id3"]


def test_push_writes_newer_local_conversations(scenario, tmp_path):
    pushed = scenario.push()

    assert pushed == ["id3"]
    data = _read(tmp_path / "sync" / "conversations" / "id3.json")
    assert data["metadata"]["updated"] == 300
    assert len(data["messages"]) == 1
    assert scenario.check().upToDate == ["id2", "id3"]


def test_pull_writes_into_storage(scenario, tmp_path):
    pulled = scenario.pull()

    assert pulled == ["id1"]
    data = _read(tmp_path / "storage" / "sync_imported" / "id1.json")
    assert data["metadata"]["updated"] == 150
    assert data["metadata"]["machine"] == "other-host"


def test_pull_skips_invalid_conversation(tmp_path, make_opencode_storage, write_json):
    storage = make_opencode_storage(tmp_path / "storage", {})
    write_json(tmp_path / "sync" / "conversations" / "bad.json", {"metadata": {"updated": 5}})

    manager = SyncManager(storage, tmp_path / "sync")

    assert manager.check().needsPull == ["bad"]
    assert manager.pull() == []
    assert not (storage / "sync_imported" / "bad.json").exists()


def test_pull_skips_conversation_with_unsafe_id(tmp_path, make_opencode_storage, make_sync_dir):
    storage = make_opencode_storage(tmp_path / "storage", {})
    sync_dir = make_sync_dir(tmp_path / "sync", {"id1": 5})
    data = _read(sync_dir / "conversations" / "id1.json")
    data["id"] = "../../escaped"
    (sync_dir / "conversations" / "id1.json").write_text(json.dumps(data), encoding="utf-8")

    assert SyncManager(storage, sync_dir).pull() == []
    assert not (tmp_path / "escaped.json").exists()
    assert not (storage / "sync_imported").exists()


def test_push_into_missing_sync_dir(tmp_path, make_opencode_storage):
    storage = make_opencode_storage(tmp_path / "storage", {"id1": {"created": 1, "updated": 2}})
    manager = SyncManager(storage, tmp_path / "new-sync")

    assert manager.push() == ["id1"]
    assert (tmp_path / "new-sync" / "conversations" / "id1.json").exists()


def test_unreadable_sync_file_ignored(tmp_path, make_opencode_storage):
    storage = make_opencode_storage(tmp_path / "storage", {"id1": {"created": 1, "updated": 2}})
    conversations = tmp_path / "sync" / "conversations"
    conversations.mkdir(parents=True)
    (conversations / "broken.json").write_text("{", encoding="utf-8")

    result = SyncManager(storage, tmp_path / "sync").check()

    assert result.needsPush == ["id1"]
    assert result.needsPull == []


def test_directory_sync_check_and_push(tmp_path, make_sync_dir):
    source = make_sync_dir(tmp_path / "a", {"x": 10, "y": 20})
    target = make_sync_dir(tmp_path / "b", {"y": 30})

    sync = DirectorySync(source, target)
    result = sync.check()

    assert result.needsPush == ["x"]
    assert result.needsPull == ["y"]
    assert sync.push() == ["x"]
    assert _read(target / "conversations" / "x.json")["metadata"]["updated"] == 10


def test_sync_directories(tmp_path, make_sync_dir):
    path1 = make_sync_dir(tmp_path / "one", {"a": 100, "b": 200})
    path2 = make_sync_dir(tmp_path / "two", {"b": 300, "c": 50})

    forward, backward = SyncManager.sync_directories(path1, path2)

    assert forward == ["a"]
    assert backward == ["b", "c"]
    assert _read(path1 / "conversations" / "b.json")["metadata"]["updated"] == 300
    assert _read(path2 / "conversations" / "a.json")["metadata"]["updated"] == 100
    assert SyncManager.sync_directories(path1, path2) == ([], [])
