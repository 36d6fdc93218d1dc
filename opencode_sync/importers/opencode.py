"""
OpenCode import strategy.

Imports sessions directly from an OpenCode storage directory. The native
format already matches the canonical model, so nothing is archived.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from opencode_sync.core.config import looks_like_opencode_storage
from opencode_sync.core.models import (
    Conversation,
    ImportOptions,
    ImportResult,
    ImportWarning,
    WarningType,
)
from opencode_sync.importers.base import BaseImportStrategy
from opencode_sync.readers.opencode_reader import OpenCodeReader

logger = logging.getLogger(__name__)


class OpenCodeImportStrategy(BaseImportStrategy):
    """Strategy for native OpenCode storage (``session/`` and ``message/``)."""

    format = "opencode"

    def can_import(self, source_path: Union[str, Path]) -> bool:
        path = Path(source_path)
        try:
            if not path.is_dir():
                return False
        except OSError:
            return False
        return looks_like_opencode_storage(path)

    def import_from(
        self,
        source_path: Union[str, Path],
        options: Optional[ImportOptions] = None,
    ) -> ImportResult:
        reader = OpenCodeReader(Path(source_path))
        imported: List[Conversation] = []
        warnings: List[ImportWarning] = []

        sessions = reader.get_conversations()
        logger.info("Importing %d OpenCode sessions from %s", len(sessions), source_path)

        for session_id in sessions:
            try:
                conversation = reader.get_conversation_data(session_id)
                if conversation:
                    imported.append(conversation)
            except Exception as e:
                warnings.append(self.create_warning(
                    WarningType.CONVERSION_ERROR,
                    f"Failed to import conversation {session_id}: {e}",
                    session_id,
                    {"error": str(e)},
                ))

        return self.create_import_result(imported, [], warnings, source_path)
