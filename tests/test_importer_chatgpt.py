"""
Unit tests for ChatGPTImportStrategy.

Tests flattening of ChatGPT mapping trees into canonical messages.
"""
import pytest

from opencode_sync.core.models import WarningType
from opencode_sync.core.source_schemas import ChatGPTConversation
from opencode_sync.importers.chatgpt import ChatGPTImportStrategy


@pytest.fixture
def strategy(tmp_path):
    return ChatGPTImportStrategy(tmp_path / "archive")


@pytest.fixture
def export_dir(tmp_path, write_json, chatgpt_conversation):
    source = tmp_path / "chatgpt-export"
    write_json(source / "conversations.json", [chatgpt_conversation])
    return source


def test_can_import(strategy, export_dir, tmp_path):
    assert strategy.can_import(export_dir)
    assert not strategy.can_import(tmp_path / "missing")


def test_system_node_skipped_and_parts_joined(strategy, chatgpt_conversation):
    """Test that only the assistant node survives, with parts joined by newlines."""
    messages = strategy.extract_messages(ChatGPTConversation.model_validate(chatgpt_conversation))

    assert len(messages) == 1
    message = messages[0]
    assert message.summary.body == "a\nb"
    assert message.summary.title == "a"
    assert message.role.value == "assistant"
    assert message.id == "msg-a"
    assert message.sessionID == "chatgpt-conv-1"
    assert message.time.created == 1700000002500


def test_import_conversation(strategy, export_dir):
    result = strategy.import_from(export_dir)

    assert len(result.imported) == 1
    conversation = result.imported[0]
    assert conversation.id == "chatgpt-conv-1"
    assert conversation.metadata.title == "ChatGPT Test"
    assert conversation.metadata.project == "imported-chatgpt"
    assert conversation.metadata.machine == "imported-chatgpt"
    assert conversation.metadata.created == 1700000000000
    assert conversation.metadata.updated == 1700000100500
    assert result.warnings == []
    assert result.metadata.totalConversations == 1


def test_message_time_and_id_fallbacks(strategy, chatgpt_conversation):
    """Test that missing create_time and id fall back to conversation time and node key."""
    message = chatgpt_conversation["mapping"]["node-a"]["message"]
    del message["create_time"]
    del message["id"]
    del chatgpt_conversation["update_time"]

    conversation = strategy.convert(chatgpt_conversation)

    assert conversation.messages[0].id == "node-a"
    assert conversation.messages[0].time.created == 1700000000000
    assert conversation.metadata.updated == conversation.metadata.created


def test_messages_ordered_by_time(strategy, chatgpt_conversation):
    chatgpt_conversation["mapping"]["node-u"] = {
        "id": "node-u",
        "parent": "sys",
        "children": ["node-a"],
        "message": {
            "id": "msg-u",
            "author": {"role": "user"},
            "create_time": 1700000001.5,
            "content": {"content_type": "text", "parts": ["question"]},
        },
    }

    conversation = strategy.convert(chatgpt_conversation)

    assert [m.id for m in conversation.messages] == ["msg-u", "msg-a"]


def test_non_text_and_blank_parts_skipped(strategy, chatgpt_conversation):
    message = chatgpt_conversation["mapping"]["node-a"]["message"]
    message["content"]["parts"] = [{"asset_pointer": "file-1"}, "   "]

    assert strategy.convert(chatgpt_conversation) is None


def test_conversation_without_messages_dropped(strategy, tmp_path, write_json, chatgpt_conversation):
    del chatgpt_conversation["mapping"]["node-a"]
    write_json(tmp_path / "src" / "conversations.json", chatgpt_conversation)

    result = strategy.import_from(tmp_path / "src")

    assert result.imported == []
    assert result.archived == []
    assert result.warnings == []
    assert result.metadata.totalConversations == 0


def test_malformed_node_skipped(strategy, chatgpt_conversation):
    chatgpt_conversation["mapping"]["weird"] = {"children": "not-a-list"}

    conversation = strategy.convert(chatgpt_conversation)

    assert len(conversation.messages) == 1


def test_unreadable_file_warns(strategy, export_dir):
    (export_dir / "broken.json").write_text("[", encoding="utf-8")

    result = strategy.import_from(export_dir)

    assert len(result.imported) == 1
    assert len(result.warnings) == 1
    assert result.warnings[0].details["file"] == "broken.json"


def test_failed_conversation_does_not_drop_the_rest(strategy, tmp_path, write_json, chatgpt_conversation):
    failing = dict(chatgpt_conversation, id="team/conv-1")
    write_json(tmp_path / "src" / "conversations.json", [failing, chatgpt_conversation])

    result = strategy.import_from(tmp_path / "src")

    assert [c.id for c in result.imported] == ["chatgpt-conv-1"]
    assert len(result.archived) == 1
    assert result.archived[0].id == "team/conv-1"
    assert result.archived[0].format == "chatgpt"
    assert result.archived[0].timestamp == 1700000000000
    assert len(result.warnings) == 1
    assert result.warnings[0].type == WarningType.CONVERSION_ERROR
    assert result.warnings[0].conversationId == "team/conv-1"
    assert result.metadata.totalConversations == 2


def test_deeply_nested_file_warns(strategy, export_dir):
    (export_dir / "a.json").write_text("[" * 100000, encoding="utf-8")

    assert strategy.can_import(export_dir)

    result = strategy.import_from(export_dir)

    assert len(result.imported) == 1
    assert len(result.warnings) == 1
    assert result.warnings[0].details["file"] == "a.json"
