"""
Domain models for conversation sync and import.

These models describe the canonical conversation schema shared by the sync
directory and every importer, plus the bookkeeping records produced while
importing (warnings, archived raw records, results, manifests).

Field names match the on-disk JSON keys, so ``model_validate`` on a parsed
file and ``to_json_dict`` on the model round-trip the same document.

All models use Pydantic for validation, serialization, and type safety.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from opencode_sync.core.utils import is_safe_filename


class MessageRole(str, Enum):
    """Message role types."""

    USER = "user"
    ASSISTANT = "assistant"


class WarningType(str, Enum):
    """Kinds of non-fatal problems recorded during an import."""

    UNSUPPORTED_FEATURE = "unsupported_feature"
    METADATA_LOSS = "metadata_loss"
    CONVERSION_ERROR = "conversion_error"


class JsonModel(BaseModel):
    """Base for models written to disk as JSON."""

    model_config = ConfigDict(extra="allow")

    def to_json_dict(self) -> Dict[str, Any]:
        """
        Serialize to a JSON-ready dict.

        Only fields that were set are emitted, so optional keys absent from
        the source stay absent in the output.
        """
        return self.model_dump(mode="json", exclude_unset=True)


class MessageTime(JsonModel):
    created: int


class MessageSummary(JsonModel):
    """Derived excerpt of a message: first line as title, truncated body."""

    title: Optional[str] = None
    body: Optional[str] = None


class Message(JsonModel):
    """
    Represents a single message in a conversation.

    Domain model for individual messages, independent of source format.
    """

    id: str
    sessionID: str
    role: MessageRole
    time: MessageTime
    summary: MessageSummary = Field(default_factory=MessageSummary)


class ConversationMetadata(JsonModel):
    """Conversation-level metadata. ``created``/``updated`` are epoch ms."""

    title: str = ""
    project: str = ""
    directory: str = ""
    created: int = 0
    updated: int = 0
    machine: str = ""

    @model_validator(mode="after")
    def _updated_not_before_created(self) -> "ConversationMetadata":
        if self.updated < self.created:
            self.updated = self.created
        return self


class Conversation(JsonModel):
    """
    Represents a complete conversation.

    Domain model for conversations, independent of source format
    (OpenCode, Claude, ChatGPT). Messages are kept in ascending
    ``time.created`` order.
    """

    id: str
    metadata: ConversationMetadata
    messages: List[Message] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def _check_id(cls, value: str) -> str:
        # The id names the conversation file in sync and archive directories
        if not is_safe_filename(value):
            raise ValueError(f"Conversation id {value!r} is not a valid file name")
        return value

    @model_validator(mode="after")
    def _sort_messages(self) -> "Conversation":
        self.messages.sort(key=lambda message: message.time.created)
        return self


class RawConversation(JsonModel):
    """
    Archival record for source data that was not converted.

    Attributes
    ----------
    id : str
        Source conversation or converted session identifier
    format : str
        Format name of the strategy that produced the record
    rawData : Any
        Original source payload (opaque)
    filePath : str
        Source file, or archive-relative target path for copied files
    timestamp : int
        Epoch ms associated with the record
    """

    id: str
    format: str
    rawData: Any = None
    filePath: str = ""
    timestamp: int = 0


class ImportWarning(JsonModel):
    type: WarningType
    message: str
    conversationId: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class ImportResultMetadata(JsonModel):
    format: str
    sourcePath: str
    timestamp: int
    totalConversations: int
    successfullyImported: int
    archivedCount: int


class ImportResult(JsonModel):
    """Outcome of one import call: conversions, archives and warnings."""

    imported: List[Conversation] = Field(default_factory=list)
    archived: List[RawConversation] = Field(default_factory=list)
    warnings: List[ImportWarning] = Field(default_factory=list)
    metadata: ImportResultMetadata


class ImportOptions(BaseModel):
    """
    Options for a single import.

    force disables incremental filtering; preview writes nothing to disk.
    """

    force: bool = False
    preview: bool = False


class ManifestFileEntry(JsonModel):
    originalSessionId: str
    convertedSessionId: str
    originalPath: str
    importedPath: str
    size: int
    lastModified: int
    importedAt: int


class ImportManifest(JsonModel):
    """
    Incremental-import bookkeeping for one raw-log workspace.

    Tracks which source files were copied into the archive and the
    modification time they had when copied.
    """

    workspaceHash: str
    workspaceName: str
    lastImport: int = 0
    files: List[ManifestFileEntry] = Field(default_factory=list)

    def find_entry(self, original_path: str) -> Optional[ManifestFileEntry]:
        for entry in self.files:
            if entry.originalPath == original_path:
                return entry
        return None

    def is_new_or_modified(self, original_path: str, last_modified: int) -> bool:
        """
        Check whether a source file needs importing.

        Parameters
        ----------
        original_path : str
            Source file path as recorded in the manifest
        last_modified : int
            Current modification time of the file in epoch ms

        Returns
        -------
        bool
            True if the file was never imported or changed since
        """
        existing = self.find_entry(original_path)
        return existing is None or existing.lastModified < last_modified

    def record(self, entry: ManifestFileEntry) -> None:
        """Replace any entry for the same source path and stamp lastImport."""
        self.files = [f for f in self.files if f.originalPath != entry.originalPath]
        self.files.append(entry)
        self.lastImport = entry.importedAt


class RawLogFile(BaseModel):
    """A raw session log found while scanning a Claude Code projects tree."""

    path: str
    workspace_dir: str
    session_id: str
    size: int
    last_modified: int


class SyncResult(JsonModel):
    needsPush: List[str] = Field(default_factory=list)
    needsPull: List[str] = Field(default_factory=list)
    upToDate: List[str] = Field(default_factory=list)
