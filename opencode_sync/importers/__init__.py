"""Import strategies for converting external conversation archives."""

from opencode_sync.importers.base import BaseImportStrategy
from opencode_sync.importers.chatgpt import ChatGPTImportStrategy
from opencode_sync.importers.claude import ClaudeImportStrategy
from opencode_sync.importers.claude_code_raw import ClaudeCodeRawImportStrategy
from opencode_sync.importers.manager import ImportManager
from opencode_sync.importers.opencode import OpenCodeImportStrategy
from opencode_sync.importers.registry import ImportFormatRegistry

__all__ = [
    "BaseImportStrategy",
    "ChatGPTImportStrategy",
    "ClaudeCodeRawImportStrategy",
    "ClaudeImportStrategy",
    "ImportFormatRegistry",
    "ImportManager",
    "OpenCodeImportStrategy",
]
