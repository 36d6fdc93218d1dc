"""
Pydantic models for Claude conversation export files.

These models represent the structure of one exported Claude conversation
(one JSON document per conversation) before normalization into the
canonical model. Validation is strict for the fields used to recognize the
format and lenient for everything else.
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError


class ExportRole(str, Enum):
    """Message role in Claude exports."""

    USER = "user"
    ASSISTANT = "assistant"


class ClaudeExportMessage(BaseModel):
    """Message in an exported Claude conversation."""

    model_config = ConfigDict(extra="allow")

    uuid: StrictStr = Field(..., description="Unique message identifier")
    role: ExportRole = Field(..., description="Message role: 'user' or 'assistant'")
    content: StrictStr = Field(..., description="Plain text message content")
    created_at: StrictStr = Field(..., description="ISO timestamp when message was created")
    model: Optional[str] = Field(None, description="Model that produced the message")


class ClaudeExportConversation(BaseModel):
    """
    Root conversation object from a Claude export file.

    Only the first message is validated strictly; the rest are checked
    during conversion, where a bad message fails that conversation alone.
    """

    model_config = ConfigDict(extra="allow")

    uuid: StrictStr = Field(..., description="Unique conversation identifier")
    name: StrictStr = Field(..., description="Conversation title")
    created_at: StrictStr = Field(..., description="ISO timestamp when conversation was created")
    updated_at: Optional[Any] = Field(None, description="ISO timestamp when conversation was updated")
    messages: List[Any] = Field(..., min_length=1, description="Messages in order")
    project: Optional[Any] = Field(None, description="Optional {uuid, name} project reference")


def is_claude_export_conversation(obj: Any) -> bool:
    """
    Check whether a parsed JSON document is an exported Claude conversation.

    Parameters
    ----------
    obj : Any
        Parsed JSON value

    Returns
    -------
    bool
        True if the conversation and its first message match the schema
    """
    if not isinstance(obj, dict):
        return False
    try:
        conversation = ClaudeExportConversation.model_validate(obj)
        ClaudeExportMessage.model_validate(conversation.messages[0])
    except ValidationError:
        return False
    return True
