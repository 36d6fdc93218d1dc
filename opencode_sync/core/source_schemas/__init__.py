"""
Source schema models for import.

These Pydantic models represent the raw data structures from export
formats (Claude, ChatGPT) before normalization into the canonical model.
"""

from .chatgpt import (
    ChatGPTAuthor,
    ChatGPTContent,
    ChatGPTConversation,
    ChatGPTMessage,
    ChatGPTNode,
    is_chatgpt_conversation,
)
from .claude import (
    ClaudeExportConversation,
    ClaudeExportMessage,
    ExportRole,
    is_claude_export_conversation,
)

__all__ = [
    # Claude models
    "ClaudeExportConversation",
    "ClaudeExportMessage",
    "ExportRole",
    "is_claude_export_conversation",
    # ChatGPT models
    "ChatGPTAuthor",
    "ChatGPTContent",
    "ChatGPTConversation",
    "ChatGPTMessage",
    "ChatGPTNode",
    "is_chatgpt_conversation",
]
