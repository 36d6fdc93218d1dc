"""
Sync service: resolves paths and runs the sync engine for the CLI.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from opencode_sync.core.models import SyncResult
from opencode_sync.services.path_service import MODE_DUAL_PATH, PathService
from opencode_sync.services.sync_engine import SyncManager

logger = logging.getLogger(__name__)


class SyncReport(BaseModel):
    """What a ``sync`` run transferred."""

    mode: str
    pushed: List[str] = Field(default_factory=list)
    pulled: List[str] = Field(default_factory=list)


class SyncService:
    def __init__(self, path_service: Optional[PathService] = None):
        self.path_service = path_service or PathService()

    def _manager(self, sync_override: Optional[str]) -> SyncManager:
        paths = self.path_service.get_paths(sync_override)
        logger.debug("Storage: %s, sync: %s", paths.storage_path, paths.sync_path)
        return SyncManager(paths.storage_path, paths.sync_path)

    def check_status(self, sync_override: Optional[str] = None) -> SyncResult:
        return self._manager(sync_override).check()

    def push_conversations(self, sync_override: Optional[str] = None) -> List[str]:
        return self._manager(sync_override).push()

    def pull_conversations(self, sync_override: Optional[str] = None) -> List[str]:
        return self._manager(sync_override).pull()

    def sync_conversations(
        self,
        path1: Optional[str] = None,
        path2: Optional[str] = None,
    ) -> SyncReport:
        """
        Bidirectional sync.

        With two paths, both are sync directories. Otherwise local storage is
        synced with ``path1`` (or the sync directory from the environment):
        push first, then pull.
        """
        config = self.path_service.get_sync_paths(path1, path2)

        if config.mode == MODE_DUAL_PATH:
            pushed, pulled = SyncManager.sync_directories(config.path1, config.path2)
            return SyncReport(mode=config.mode, pushed=pushed, pulled=pulled)

        manager = SyncManager(config.storage_path, config.path1)
        pushed = manager.push()
        pulled = manager.pull()
        return SyncReport(mode=config.mode, pushed=pushed, pulled=pulled)
