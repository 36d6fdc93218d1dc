"""
Pydantic models for ChatGPT export data.

These models represent the structure of data from ChatGPT export files,
before normalization into the canonical model. The conversation root is
validated strictly (it decides format detection); mapping nodes are
validated leniently so that one odd node never rejects a conversation.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
)

Number = Union[StrictInt, StrictFloat]


class ChatGPTAuthor(BaseModel):
    """Author information for a ChatGPT message."""

    model_config = ConfigDict(extra="allow")

    role: Optional[str] = Field(None, description="Author role: 'user', 'assistant', 'system', 'tool'")
    name: Optional[str] = Field(None, description="Author name (usually null)")


class ChatGPTContent(BaseModel):
    """Content object for a ChatGPT message."""

    model_config = ConfigDict(extra="allow")

    content_type: Optional[str] = Field(None, description="Content type (usually 'text')")
    parts: Optional[List[Any]] = Field(
        None, description="List of content parts (strings for text messages)"
    )


class ChatGPTMessage(BaseModel):
    """Message object within a ChatGPT node."""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = Field(None, description="Message UUID (usually same as node ID)")
    author: Optional[ChatGPTAuthor] = Field(None, description="Author information")
    create_time: Optional[float] = Field(
        None, description="Unix timestamp when message was created"
    )
    content: Optional[ChatGPTContent] = Field(None, description="Content object")
    metadata: Optional[Dict[str, Any]] = Field(
        None, description="Additional metadata (request_id, model_slug, etc.)"
    )


class ChatGPTNode(BaseModel):
    """
    Node in ChatGPT's message tree structure.

    ChatGPT uses a tree to support branching conversations where users
    can branch off from earlier messages.
    """

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = Field(None, description="Node UUID (same as the mapping key)")
    parent: Optional[str] = Field(None, description="Parent node ID (null for root nodes)")
    children: List[str] = Field(default_factory=list, description="List of child node IDs")
    message: Optional[ChatGPTMessage] = Field(
        None, description="Message object (null for container nodes)"
    )


class ChatGPTConversation(BaseModel):
    """
    Root conversation object from ChatGPT export.

    Represents a conversation with metadata and a message tree structure.
    """

    model_config = ConfigDict(extra="allow")

    id: StrictStr = Field(..., description="Conversation identifier")
    title: StrictStr = Field(..., description="Conversation title")
    create_time: Number = Field(
        ..., description="Unix timestamp (seconds since epoch) when conversation was created"
    )
    update_time: Optional[Number] = Field(
        None, description="Unix timestamp when conversation was last updated"
    )
    mapping: Dict[str, Any] = Field(
        ..., description="Message tree structure (key: node ID, value: node object)"
    )


def is_chatgpt_conversation(obj: Any) -> bool:
    """Check whether a parsed JSON document is a ChatGPT conversation."""
    if not isinstance(obj, dict):
        return False
    try:
        ChatGPTConversation.model_validate(obj)
    except ValidationError:
        return False
    return True
