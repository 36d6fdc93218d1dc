"""
Tests for export source schemas used in format detection.
"""
import pytest

from opencode_sync.core.source_schemas import (
    ChatGPTConversation,
    ChatGPTNode,
    is_chatgpt_conversation,
    is_claude_export_conversation,
)


class TestClaudeExportSchema:
    """Tests for Claude export recognition."""

    def test_valid_conversation(self, claude_conversation):
        assert is_claude_export_conversation(claude_conversation)

    def test_empty_messages_rejected(self, claude_conversation):
        claude_conversation["messages"] = []
        assert not is_claude_export_conversation(claude_conversation)

    def test_bad_first_message_rejected(self, claude_conversation):
        claude_conversation["messages"][0]["role"] = "system"
        assert not is_claude_export_conversation(claude_conversation)

    def test_only_first_message_checked(self, claude_conversation):
        claude_conversation["messages"][1]["content"] = ["not", "a", "string"]
        assert is_claude_export_conversation(claude_conversation)

    @pytest.mark.parametrize("field", ["uuid", "name", "created_at", "messages"])
    def test_missing_required_field(self, claude_conversation, field):
        del claude_conversation[field]
        assert not is_claude_export_conversation(claude_conversation)

    def test_non_string_uuid_rejected(self, claude_conversation):
        claude_conversation["uuid"] = 123
        assert not is_claude_export_conversation(claude_conversation)

    def test_non_dict_rejected(self):
        assert not is_claude_export_conversation(["a", "list"])


class TestChatGPTSchema:
    """Tests for ChatGPT export recognition."""

    def test_valid_conversation(self, chatgpt_conversation):
        assert is_chatgpt_conversation(chatgpt_conversation)

    def test_integer_create_time_accepted(self, chatgpt_conversation):
        chatgpt_conversation["create_time"] = 1700000000
        conversation = ChatGPTConversation.model_validate(chatgpt_conversation)
        assert conversation.create_time == 1700000000

    def test_string_create_time_rejected(self, chatgpt_conversation):
        chatgpt_conversation["create_time"] = "1700000000"
        assert not is_chatgpt_conversation(chatgpt_conversation)

    def test_missing_mapping_rejected(self, chatgpt_conversation):
        del chatgpt_conversation["mapping"]
        assert not is_chatgpt_conversation(chatgpt_conversation)

    def test_claude_document_is_not_chatgpt(self, claude_conversation):
        assert not is_chatgpt_conversation(claude_conversation)

    def test_node_with_null_message(self):
        node = ChatGPTNode.model_validate({"id": "root", "parent": None, "children": [], "message": None})
        assert node.message is None
