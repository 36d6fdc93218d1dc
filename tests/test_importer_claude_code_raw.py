"""
Unit tests for ClaudeCodeRawImportStrategy.

Covers archive layout, manifest-based incremental imports, force and
preview modes, and per-workspace failure handling.
"""
import os
from unittest.mock import patch

import pytest

from opencode_sync.core.manifest import convert_session_id, workspace_hash
from opencode_sync.core.models import ImportOptions, WarningType
from opencode_sync.importers.claude_code_raw import ClaudeCodeRawImportStrategy

WORKSPACE = "-Users-me-project"


@pytest.fixture
def archive(tmp_path):
    return tmp_path / "archive"


@pytest.fixture
def strategy(archive):
    return ClaudeCodeRawImportStrategy(archive)


@pytest.fixture
def projects(tmp_path, make_claude_code_projects):
    return make_claude_code_projects(tmp_path / "projects", {
        WORKSPACE: {"sess-b": 2000, "sess-a": 1000},
        "-Users-me-other": {"sess-c": 3000},
    })


def _workspace_archive(archive, workspace=WORKSPACE):
    return archive / "imported" / "claude-code-raw" / workspace_hash(workspace)


def test_can_import(strategy, projects, tmp_path):
    assert strategy.can_import(projects)

    plain = tmp_path / "plain"
    (plain / "no-marker").mkdir(parents=True)
    (plain / "no-marker" / "s.jsonl").write_text("{}\n")
    assert not strategy.can_import(plain)
    assert not strategy.can_import(tmp_path / "missing")


def test_import_copies_logs_into_archive(strategy, projects, archive):
    result = strategy.import_from(projects)

    assert result.imported == []
    assert len(result.archived) == 3
    assert result.warnings == []
    assert result.metadata.totalConversations == 3
    assert result.metadata.archivedCount == 3

    converted = convert_session_id("sess-a")
    target = _workspace_archive(archive) / f"{converted}.jsonl"
    source = projects / WORKSPACE / "sess-a.jsonl"
    assert target.read_bytes() == source.read_bytes()


def test_archived_record_shape(strategy, projects):
    archived = strategy.import_from(projects).archived

    # Oldest log first
    raw = archived[0]
    converted = convert_session_id("sess-a")
    expected_path = f"imported/claude-code-raw/{workspace_hash(WORKSPACE)}/{converted}.jsonl"
    assert raw.id == converted
    assert raw.format == "claude-code-raw"
    assert raw.filePath == expected_path
    assert raw.rawData["importedPath"] == expected_path
    assert raw.rawData["originalPath"] == str(projects / WORKSPACE / "sess-a.jsonl")
    assert raw.rawData["workspace"] == "Users/me/project"
    assert raw.rawData["sessionId"] == "sess-a"
    assert raw.rawData["lastModified"] == 1000 * 1000
    assert raw.rawData["size"] > 0


def test_manifest_written_per_workspace(strategy, projects, archive):
    strategy.import_from(projects)

    manifest = strategy.manifests.load(WORKSPACE)
    assert manifest.workspaceName == "Users/me/project"
    assert sorted(e.originalSessionId for e in manifest.files) == ["sess-a", "sess-b"]
    assert manifest.lastImport > 0
    assert (_workspace_archive(archive, "-Users-me-other") / "manifest.json").exists()


def test_second_run_imports_nothing(strategy, projects):
    """Test that an unchanged tree is skipped on re-import."""
    first = strategy.import_from(projects)
    second = strategy.import_from(projects)

    assert len(first.archived) == 3
    assert second.archived == []
    assert second.warnings == []
    assert second.metadata.totalConversations == 0


def test_modified_file_is_reimported(strategy, projects):
    strategy.import_from(projects)
    log_file = projects / WORKSPACE / "sess-a.jsonl"
    os.utime(log_file, (5000, 5000))

    result = strategy.import_from(projects)

    assert [r.rawData["sessionId"] for r in result.archived] == ["sess-a"]
    entry = strategy.manifests.load(WORKSPACE).find_entry(str(log_file))
    assert entry.lastModified == 5000 * 1000


def test_force_imports_everything_every_time(strategy, projects):
    options = ImportOptions(force=True)

    assert len(strategy.import_from(projects, options).archived) == 3
    assert len(strategy.import_from(projects, options).archived) == 3
    assert len(strategy.manifests.load(WORKSPACE).files) == 2


def test_preview_writes_nothing(strategy, projects, archive):
    result = strategy.import_from(projects, ImportOptions(preview=True))

    assert len(result.archived) == 3
    assert not archive.exists()


def test_no_logs_found(strategy, tmp_path):
    (tmp_path / "projects" / "-empty").mkdir(parents=True)

    result = strategy.import_from(tmp_path / "projects")

    assert result.archived == []
    assert len(result.warnings) == 1
    assert result.warnings[0].type == WarningType.CONVERSION_ERROR
    assert result.warnings[0].message == "No Claude Code conversation files found in the specified directory"


def test_unlistable_directory_warns(strategy, tmp_path):
    result = strategy.import_from(tmp_path / "missing")

    assert result.archived == []
    assert len(result.warnings) == 1
    assert result.warnings[0].type == WarningType.CONVERSION_ERROR


def test_manifest_load_error_skips_workspace(strategy, projects):
    real_load = strategy.manifests.load

    def load(workspace_dir):
        if workspace_dir == WORKSPACE:
            raise PermissionError("denied")
        return real_load(workspace_dir)

    with patch.object(strategy.manifests, "load", side_effect=load):
        result = strategy.import_from(projects)

    assert [r.rawData["sessionId"] for r in result.archived] == ["sess-c"]
    assert len(result.warnings) == 1
    assert result.warnings[0].details["workspace"] == WORKSPACE


def test_manifest_save_error_propagates(strategy, projects):
    with patch.object(strategy.manifests, "save", side_effect=OSError("disk full")):
        with pytest.raises(OSError):
            strategy.import_from(projects)
