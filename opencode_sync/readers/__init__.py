"""
Readers for OpenCode storage and Claude Code session logs.
"""

from .claude_code_reader import ClaudeCodeReader
from .opencode_reader import OpenCodeReader

__all__ = [
    "ClaudeCodeReader",
    "OpenCodeReader",
]
