"""
Shared fixtures building sample storage, export and log trees in tmp_path.
"""
import json
import os

import pytest


def _write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def write_json():
    """Write a JSON file, creating parent directories."""
    return _write_json


@pytest.fixture
def make_opencode_storage():
    """
    Build an OpenCode storage tree.

    ``sessions`` maps session id -> dict with ``created``, ``updated`` and an
    optional list of ``messages`` (role, created, title).
    """
    def _make(root, sessions, project_id="proj-1"):
        for session_id, info in sessions.items():
            time_info = {"created": info["created"]}
            if info.get("updated") is not None:
                time_info["updated"] = info["updated"]
            _write_json(root / "session" / project_id / f"{session_id}.json", {
                "id": session_id,
                "title": info.get("title", f"Session {session_id}"),
                "projectID": project_id,
                "directory": "/home/me/project",
                "time": time_info,
            })
            for index, message in enumerate(info.get("messages", [])):
                message_id = f"{session_id}-msg-{index}"
                _write_json(root / "message" / session_id / f"{message_id}.json", {
                    "id": message_id,
                    "sessionID": session_id,
                    "role": message["role"],
                    "time": {"created": message["created"]},
                    "summary": {"title": message.get("title", "hello")},
                })
        return root
    return _make


@pytest.fixture
def make_sync_dir():
    """Build a sync directory with conversations/<id>.json files keyed by updated ms."""
    def _make(root, timestamps):
        for conv_id, updated in timestamps.items():
            _write_json(root / "conversations" / f"{conv_id}.json", {
                "id": conv_id,
                "metadata": {
                    "title": f"Conversation {conv_id}",
                    "project": "proj-1",
                    "directory": "/home/me/project",
                    "created": 0,
                    "updated": updated,
                    "machine": "other-host",
                },
                "messages": [],
            })
        return root
    return _make


@pytest.fixture
def claude_conversation():
    """A valid exported Claude conversation."""
    return {
        "uuid": "conv-123",
        "name": "Test Conversation",
        "created_at": "2024-01-15T10:30:00Z",
        "updated_at": "2024-01-15T11:00:00Z",
        "messages": [
            {
                "uuid": "msg-2",
                "role": "assistant",
                "content": "Hello! How can I help you?",
                "created_at": "2024-01-15T10:30:05Z",
                "model": "claude-3-5-sonnet-20241022",
            },
            {
                "uuid": "msg-1",
                "role": "user",
                "content": "Hello, Claude!",
                "created_at": "2024-01-15T10:30:00Z",
            },
        ],
        "project": {"uuid": "proj-9", "name": "My Project!"},
    }


@pytest.fixture
def chatgpt_conversation():
    """A ChatGPT export conversation with a system node and a multi-part assistant node."""
    return {
        "id": "chatgpt-conv-1",
        "title": "ChatGPT Test",
        "create_time": 1700000000.0,
        "update_time": 1700000100.5,
        "mapping": {
            "root": {"id": "root", "parent": None, "children": ["sys"], "message": None},
            "sys": {
                "id": "sys",
                "parent": "root",
                "children": ["node-a"],
                "message": {
                    "id": "sys",
                    "author": {"role": "system"},
                    "create_time": 1700000001.0,
                    "content": {"content_type": "text", "parts": ["You are helpful"]},
                },
            },
            "node-a": {
                "id": "node-a",
                "parent": "sys",
                "children": [],
                "message": {
                    "id": "msg-a",
                    "author": {"role": "assistant"},
                    "create_time": 1700000002.5,
                    "content": {"content_type": "text", "parts": ["a", "b"]},
                },
            },
        },
    }


@pytest.fixture
def make_claude_code_projects():
    """
    Build a Claude Code projects tree.

    ``workspaces`` maps workspace dir name -> {session id: mtime seconds}.
    """
    def _make(root, workspaces):
        for workspace, sessions in workspaces.items():
            workspace_dir = root / workspace
            workspace_dir.mkdir(parents=True, exist_ok=True)
            for session_id, mtime in sessions.items():
                log_file = workspace_dir / f"{session_id}.jsonl"
                log_file.write_text(
                    json.dumps({"type": "user", "sessionId": session_id}) + "\n",
                    encoding="utf-8",
                )
                os.utime(log_file, (mtime, mtime))
        return root
    return _make
