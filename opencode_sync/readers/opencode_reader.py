"""
Reader for OpenCode local storage.

OpenCode keeps one JSON record per session under
``session/{project-id}/{session-id}.json`` and one JSON record per message
under ``message/{session-id}/{message-id}.json``.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from opencode_sync.core.config import MESSAGE_DIRNAME, SESSION_DIRNAME
from opencode_sync.core.models import Conversation, ConversationMetadata, Message
from opencode_sync.core.utils import JSON_READ_ERRORS, get_machine_name, read_json_file

logger = logging.getLogger(__name__)


class OpenCodeReader:
    """
    Reads conversations from OpenCode storage.

    Attributes
    ----------
    storage_path : Path
        Root of the OpenCode storage directory
    """

    def __init__(self, storage_path: Path):
        self.storage_path = Path(storage_path)

    @property
    def session_root(self) -> Path:
        return self.storage_path / SESSION_DIRNAME

    @property
    def message_root(self) -> Path:
        return self.storage_path / MESSAGE_DIRNAME

    def _iter_session_files(self):
        if not self.session_root.is_dir():
            logger.debug("No session directory in %s", self.storage_path)
            return
        for project_dir in sorted(self.session_root.iterdir()):
            if not project_dir.is_dir():
                continue
            for session_file in sorted(project_dir.iterdir()):
                if session_file.is_file() and session_file.suffix == ".json":
                    yield session_file

    def get_conversations(self) -> Dict[str, int]:
        """
        Map every session id to its last update time.

        Returns
        -------
        Dict[str, int]
            Session id -> updated epoch ms (falls back to created, then 0),
            ordered by project and session file name
        """
        conversations: Dict[str, int] = {}
        try:
            for session_file in self._iter_session_files():
                session_id = session_file.stem
                try:
                    session_data = read_json_file(session_file)
                except JSON_READ_ERRORS as e:
                    logger.warning("Could not read session %s: %s", session_id, e)
                    continue
                conversations[session_id] = self._session_updated(session_data)
        except OSError as e:
            logger.warning("Could not scan OpenCode storage %s: %s", self.storage_path, e)

        return conversations

    def _session_updated(self, session_data: Any) -> int:
        time_info = session_data.get("time") if isinstance(session_data, dict) else None
        if not isinstance(time_info, dict):
            return 0
        return time_info.get("updated") or time_info.get("created") or 0

    def find_session_file(self, session_id: str) -> Optional[Path]:
        """Locate the session record for ``session_id`` in any project."""
        if not self.session_root.is_dir():
            return None
        for project_dir in self.session_root.iterdir():
            candidate = project_dir / f"{session_id}.json"
            if candidate.is_file():
                return candidate
        return None

    def get_conversation_data(self, session_id: str) -> Optional[Conversation]:
        """
        Load one session with its messages as a canonical Conversation.

        Parameters
        ----------
        session_id : str
            OpenCode session identifier

        Returns
        -------
        Conversation or None
            The conversation, or None if no session record exists

        Raises
        ------
        OSError, ValueError
            If the session record exists but cannot be read or parsed
        """
        session_file = self.find_session_file(session_id)
        if session_file is None:
            logger.debug("Session %s not found in %s", session_id, self.session_root)
            return None

        session_data = read_json_file(session_file)
        if not isinstance(session_data, dict):
            raise ValueError(f"Session record {session_file} is not a JSON object")
        time_info = session_data.get("time")
        if not isinstance(time_info, dict):
            time_info = {}
        created = time_info.get("created") or 0

        metadata = ConversationMetadata(
            title=session_data.get("title") or "Untitled",
            project=session_data.get("projectID") or "unknown",
            directory=session_data.get("directory") or "",
            created=created,
            updated=time_info.get("updated") or created,
            machine=get_machine_name(),
        )
        return Conversation(
            id=session_id,
            metadata=metadata,
            messages=self.get_messages(session_id),
        )

    def get_messages(self, session_id: str) -> List[Message]:
        """
        Read all message records of a session.

        Unreadable or invalid records are logged and skipped.

        Returns
        -------
        List[Message]
            Messages sorted by creation time
        """
        messages_dir = self.message_root / session_id
        if not messages_dir.is_dir():
            return []

        messages: List[Message] = []
        for message_file in messages_dir.iterdir():
            if not (message_file.is_file() and message_file.suffix == ".json"):
                continue
            try:
                messages.append(Message.model_validate(read_json_file(message_file)))
            except JSON_READ_ERRORS + (ValidationError,) as e:
                logger.warning("Could not read message %s: %s", message_file.name, e)

        messages.sort(key=lambda message: message.time.created)
        return messages
