"""
ChatGPT export import strategy.

ChatGPT exports store each conversation as a ``mapping`` of message nodes.
Nodes are flattened into a message list ordered by creation time; system
nodes, structural nodes and nodes without text are dropped.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

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
from opencode_sync.core.source_schemas.chatgpt import (
    ChatGPTConversation,
    ChatGPTNode,
    is_chatgpt_conversation,
)
from opencode_sync.core.utils import JSON_READ_ERRORS, extract_title, truncate_content
from opencode_sync.importers.base import BaseImportStrategy

logger = logging.getLogger(__name__)

PLACEHOLDER_LABEL = "imported-chatgpt"
DEFAULT_TITLE = "Untitled ChatGPT Conversation"
IMPORTED_ROLES = ("user", "assistant")


def _seconds_to_ms(seconds: float) -> int:
    return int(round(seconds * 1000))


class ChatGPTImportStrategy(BaseImportStrategy):
    """
    Strategy for ChatGPT conversation exports.

    Conversations without any extractable message are skipped silently.
    Conversations that fail conversion are archived as RawConversation
    records with a conversion_error warning.
    """

    format = "chatgpt"

    def can_import(self, source_path: Union[str, Path]) -> bool:
        return self.file_contains(source_path, is_chatgpt_conversation)

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
                    f"Failed to read ChatGPT file {file_path.name}: {e}",
                    details={"file": file_path.name, "error": str(e)},
                ))
                continue

            for document in documents:
                if not is_chatgpt_conversation(document):
                    continue
                self._import_document(document, file_path, imported, archived, warnings)

        logger.info(
            "ChatGPT import complete: %d imported, %d archived, %d warnings",
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
        conv_id = document["id"]
        try:
            conversation = self.convert(document)
        except Exception as e:
            create_time = document.get("create_time")
            archived.append(RawConversation(
                id=conv_id,
                format=self.format,
                rawData=document,
                filePath=str(file_path),
                timestamp=_seconds_to_ms(create_time) if isinstance(create_time, (int, float)) else 0,
            ))
            warnings.append(self.create_warning(
                WarningType.CONVERSION_ERROR,
                f"Failed to convert ChatGPT conversation {conv_id}: {e}",
                conv_id,
                {"file": file_path.name, "error": str(e)},
            ))
            return

        if conversation:
            imported.append(conversation)
        else:
            logger.debug("Skipping ChatGPT conversation %s with no messages", conv_id)

    def convert(self, document: Dict[str, Any]) -> Optional[Conversation]:
        """
        Convert ChatGPT export conversation to a canonical Conversation.

        Parameters
        ----------
        document : Dict[str, Any]
            Raw conversation from a ChatGPT export

        Returns
        -------
        Conversation or None
            Converted conversation, or None if it has no messages
        """
        conversation = ChatGPTConversation.model_validate(document)
        messages = self.extract_messages(conversation)
        if not messages:
            return None

        created = _seconds_to_ms(conversation.create_time)
        update_time = conversation.update_time
        updated = _seconds_to_ms(update_time) if update_time is not None else created

        return Conversation(
            id=conversation.id,
            metadata=ConversationMetadata(
                title=conversation.title or DEFAULT_TITLE,
                project=PLACEHOLDER_LABEL,
                directory="",
                created=created,
                updated=updated,
                machine=PLACEHOLDER_LABEL,
            ),
            messages=messages,
        )

    def extract_messages(self, conversation: ChatGPTConversation) -> List[Message]:
        """
        Flatten the mapping into messages ordered by creation time.

        Parameters
        ----------
        conversation : ChatGPTConversation
            Validated conversation

        Returns
        -------
        List[Message]
            Messages with a user/assistant author and non-blank text
        """
        messages: List[Message] = []

        for node_id, raw_node in conversation.mapping.items():
            try:
                node = ChatGPTNode.model_validate(raw_node)
            except ValidationError as e:
                logger.debug("Skipping malformed node %s: %s", node_id, e)
                continue

            message = node.message
            if message is None or message.author is None or message.content is None:
                continue
            if message.content.parts is None:
                continue

            role = message.author.role
            if role not in IMPORTED_ROLES:
                continue

            # Multimodal parts (dicts) carry no plain text
            content = "\n".join(p for p in message.content.parts if isinstance(p, str))
            if not content.strip():
                continue

            created_seconds = message.create_time or conversation.create_time
            messages.append(Message(
                id=message.id or node_id,
                sessionID=conversation.id,
                role=role,
                time=MessageTime(created=_seconds_to_ms(created_seconds)),
                summary=MessageSummary(
                    title=extract_title(content),
                    body=truncate_content(content),
                ),
            ))

        messages.sort(key=lambda m: m.time.created)
        return messages
