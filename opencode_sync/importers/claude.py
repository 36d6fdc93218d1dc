"""
Claude export import strategy.

Converts exported Claude conversations (JSON documents with ``uuid``,
``name``, ``created_at`` and a ``messages`` list) into canonical
Conversation models.

Each exported document is expected to contain:
- uuid: conversation identifier
- name: conversation title
- created_at/updated_at: ISO timestamps
- messages: array of {uuid, role, content, created_at, model?}
- project: optional {uuid, name}
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from opencode_sync.core.models import (
    Conversation,
    ConversationMetadata,
    ImportOptions,
    ImportResult,
    ImportWarning,
    Message,
    MessageSummary,
    MessageTime,
    RawConversation,
    WarningType,
)
from opencode_sync.core.source_schemas.claude import (
    ClaudeExportMessage,
    is_claude_export_conversation,
)
from opencode_sync.core.utils import (
    JSON_READ_ERRORS,
    extract_title,
    parse_iso_timestamp_ms,
    sanitize_project_name,
    truncate_content,
)
from opencode_sync.importers.base import BaseImportStrategy

logger = logging.getLogger(__name__)

PLACEHOLDER_LABEL = "imported-claude"
DEFAULT_TITLE = "Untitled Claude Conversation"


class ClaudeImportStrategy(BaseImportStrategy):
    """
    Strategy for Claude conversation exports.

    Conversations that match the export shape but fail conversion are
    archived as RawConversation records with a conversion_error warning.
    """

    format = "claude"

    def can_import(self, source_path: Union[str, Path]) -> bool:
        return self.file_contains(source_path, is_claude_export_conversation)

    def import_from(
        self,
        source_path: Union[str, Path],
        options: Optional[ImportOptions] = None,
    ) -> ImportResult:
        imported: List[Conversation] = []
        archived: List[RawConversation] = []
        warnings: List[ImportWarning] = []

        try:
            files = self.list_json_files(source_path)
        except OSError as e:
            warnings.append(self.create_warning(
                WarningType.CONVERSION_ERROR,
                f"Failed to scan directory {source_path}: {e}",
                details={"sourcePath": str(source_path), "error": str(e)},
            ))
            return self.create_import_result(imported, archived, warnings, source_path)

        for file_path in files:
            try:
                documents = list(self.iter_json_documents(file_path))
            except JSON_READ_ERRORS as e:
                warnings.append(self.create_warning(
                    WarningType.CONVERSION_ERROR,
                    f"Failed to read Claude file {file_path.name}: {e}",
                    details={"file": file_path.name, "error": str(e)},
                ))
                continue

            for document in documents:
                if not is_claude_export_conversation(document):
                    continue
                self._import_document(document, file_path, imported, archived, warnings)

        logger.info(
            "Claude import complete: %d imported, %d archived, %d warnings",
            len(imported),
            len(archived),
            len(warnings),
        )
        return self.create_import_result(imported, archived, warnings, source_path)

    def _import_document(
        self,
        document: Dict[str, Any],
        file_path: Path,
        imported: List[Conversation],
        archived: List[RawConversation],
        warnings: List[ImportWarning],
    ) -> None:
        conv_id = document["uuid"]
        try:
            conversation, conversion_warnings = self.convert(document)
        except Exception as e:
            archived.append(RawConversation(
                id=conv_id,
                format=self.format,
                rawData=document,
                filePath=str(file_path),
                timestamp=self._archive_timestamp(document),
            ))
            warnings.append(self.create_warning(
                WarningType.CONVERSION_ERROR,
                f"Failed to convert Claude conversation {conv_id}: {e}",
                conv_id,
                {"file": file_path.name, "error": str(e)},
            ))
            return

        imported.append(conversation)
        warnings.extend(conversion_warnings)

    def _archive_timestamp(self, document: Dict[str, Any]) -> int:
        try:
            return parse_iso_timestamp_ms(document.get("created_at"))
        except ValueError:
            return 0

    def convert(self, document: Dict[str, Any]) -> Tuple[Conversation, List[ImportWarning]]:
        """
        Convert one exported Claude conversation.

        Parameters
        ----------
        document : Dict[str, Any]
            Exported conversation

        Returns
        -------
        Tuple[Conversation, List[ImportWarning]]
            The converted conversation and any metadata-loss warnings

        Raises
        ------
        ValueError
            If a message or timestamp cannot be converted, or the id is not
            a valid file name
        """
        conv_id = document["uuid"]
        warnings: List[ImportWarning] = []

        source_messages = [
            ClaudeExportMessage.model_validate(msg) for msg in document.get("messages", [])
        ]
        messages = [self._convert_message(msg) for msg in source_messages]

        project = PLACEHOLDER_LABEL
        directory = ""
        project_info = document.get("project")
        if isinstance(project_info, dict) and project_info.get("name"):
            project = sanitize_project_name(project_info["name"])
            directory = project_info["name"]

        if any(msg.model for msg in source_messages):
            warnings.append(self.create_warning(
                WarningType.METADATA_LOSS,
                "Claude model information preserved in raw data but not in OpenCode format",
                conv_id,
            ))

        created = parse_iso_timestamp_ms(document["created_at"])
        updated_at = document.get("updated_at")
        updated = parse_iso_timestamp_ms(updated_at) if updated_at else created

        conversation = Conversation(
            id=conv_id,
            metadata=ConversationMetadata(
                title=document.get("name") or DEFAULT_TITLE,
                project=project,
                directory=directory,
                created=created,
                updated=updated,
                machine=PLACEHOLDER_LABEL,
            ),
            messages=messages,
        )
        return conversation, warnings

    def _convert_message(self, msg: ClaudeExportMessage) -> Message:
        # The message UUID doubles as the session id so each message stays addressable.
        return Message(
            id=msg.uuid,
            sessionID=msg.uuid,
            role=msg.role.value,
            time=MessageTime(created=parse_iso_timestamp_ms(msg.created_at)),
            summary=MessageSummary(
                title=extract_title(msg.content),
                body=truncate_content(msg.content),
            ),
        )
