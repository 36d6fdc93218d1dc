"""
Timestamp-diff sync between OpenCode storage and sync directories.

A sync directory holds one ``conversations/<id>.json`` file per
conversation. Whichever side carries the later ``metadata.updated`` wins;
there is no merge.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Tuple, Union

from pydantic import ValidationError

from opencode_sync.core.config import CONVERSATIONS_DIRNAME, SYNC_IMPORTED_DIRNAME
from opencode_sync.core.models import Conversation, SyncResult
from opencode_sync.core.utils import JSON_READ_ERRORS, ensure_dir, read_json_file, write_json_file
from opencode_sync.readers.opencode_reader import OpenCodeReader

logger = logging.getLogger(__name__)


def compare_timestamps(
    source: Dict[str, int],
    target: Dict[str, int],
) -> SyncResult:
    """
    Classify every conversation id present on either side.

    Parameters
    ----------
    source : Dict[str, int]
        id -> updated ms on the local/source side
    target : Dict[str, int]
        id -> updated ms on the sync/target side

    Returns
    -------
    SyncResult
        Source-only and newer-on-source ids need a push, newer-on-target ids
        need a pull, equal non-zero timestamps are up to date
    """
    result = SyncResult(needsPush=[], needsPull=[], upToDate=[])

    all_ids = list(source)
    all_ids.extend(conv_id for conv_id in target if conv_id not in source)

    for conv_id in all_ids:
        source_updated = source.get(conv_id) or 0
        target_updated = target.get(conv_id) or 0

        if source_updated > target_updated:
            result.needsPush.append(conv_id)
        elif target_updated > source_updated:
            result.needsPull.append(conv_id)
        elif source_updated > 0:
            result.upToDate.append(conv_id)

    return result


def read_directory_timestamps(conversations_path: Path) -> Dict[str, int]:
    """
    Read ``metadata.updated`` of every conversation file in a directory.

    A missing directory yields an empty map; unreadable files are skipped.
    """
    conversations: Dict[str, int] = {}
    try:
        files = sorted(p for p in conversations_path.iterdir() if p.name.endswith(".json"))
    except OSError:
        logger.debug("No conversations directory at %s", conversations_path)
        return conversations

    for file_path in files:
        try:
            data = read_json_file(file_path)
            conversations[file_path.stem] = int(data["metadata"]["updated"])
        except JSON_READ_ERRORS + (KeyError, TypeError) as e:
            logger.warning("Could not read conversation file %s: %s", file_path.name, e)

    return conversations


class SyncManager:
    """
    Sync between an OpenCode storage directory and a sync directory.

    Attributes
    ----------
    storage_path : Path
        OpenCode storage directory (``session/``, ``message/``)
    sync_path : Path
        Sync directory root
    conversations_path : Path
        ``<sync_path>/conversations``

    Example
    -------
    >>> manager = SyncManager(Path("~/.local/share/opencode/storage"), Path("/mnt/sync"))
    >>> result = manager.check()
    >>> pushed = manager.push()
    """

    def __init__(self, storage_path: Union[str, Path], sync_path: Union[str, Path]):
        self.storage_path = Path(storage_path)
        self.sync_path = Path(sync_path)
        self.conversations_path = self.sync_path / CONVERSATIONS_DIRNAME
        self.reader = OpenCodeReader(self.storage_path)

    def get_sync_conversations(self) -> Dict[str, int]:
        return read_directory_timestamps(self.conversations_path)

    def check(self) -> SyncResult:
        return compare_timestamps(self.reader.get_conversations(), self.get_sync_conversations())

    def push(self) -> List[str]:
        """
        Write every locally newer conversation to the sync directory.

        Returns
        -------
        List[str]
            Ids that were pushed
        """
        result = self.check()
        if not result.needsPush:
            logger.info("No conversations need to be pushed")
            return []

        logger.info("Pushing %d conversation(s) to %s", len(result.needsPush), self.sync_path)
        ensure_dir(self.conversations_path)

        pushed: List[str] = []
        for conv_id in result.needsPush:
            try:
                conversation = self.reader.get_conversation_data(conv_id)
            except JSON_READ_ERRORS as e:
                logger.error("Failed to read conversation %s: %s", conv_id, e)
                continue
            if conversation is None:
                continue

            write_json_file(self.conversations_path / f"{conv_id}.json", conversation.to_json_dict())
            logger.info("Pushed: %s (%s)", conv_id, conversation.metadata.title)
            pushed.append(conv_id)

        return pushed

    def pull(self) -> List[str]:
        """
        Copy every conversation that is newer in the sync directory into
        ``<storage>/sync_imported/``.

        Returns
        -------
        List[str]
            Ids that were pulled
        """
        result = self.check()
        if not result.needsPull:
            logger.info("No conversations need to be pulled")
            return []

        logger.info("Pulling %d conversation(s) from %s", len(result.needsPull), self.sync_path)

        pulled: List[str] = []
        for conv_id in result.needsPull:
            sync_file = self.conversations_path / f"{conv_id}.json"
            try:
                conversation = Conversation.model_validate(read_json_file(sync_file))
                self.import_conversation(conversation)
            except JSON_READ_ERRORS + (ValidationError,) as e:
                logger.error("Failed to pull %s: %s", conv_id, e)
                continue
            logger.info("Pulled: %s (%s)", conv_id, conversation.metadata.title)
            pulled.append(conv_id)

        return pulled

    def import_conversation(self, conversation: Conversation) -> Path:
        """Write a pulled conversation next to the local storage."""
        target_dir = ensure_dir(self.storage_path / SYNC_IMPORTED_DIRNAME)
        target = target_dir / f"{conversation.id}.json"
        write_json_file(target, conversation.to_json_dict())
        return target

    @staticmethod
    def sync_directories(
        path1: Union[str, Path],
        path2: Union[str, Path],
    ) -> Tuple[List[str], List[str]]:
        """
        Bidirectional sync between two sync directories.

        Returns
        -------
        Tuple[List[str], List[str]]
            Ids pushed from path1 to path2, and from path2 to path1
        """
        forward = DirectorySync(path1, path2)
        backward = DirectorySync(path2, path1)

        # Both directions are planned before anything is written
        forward_plan = forward.check()
        backward_plan = backward.check()
        if not forward_plan.needsPush and not backward_plan.needsPush:
            logger.info("No conversations need to be synced")
            return [], []

        return forward.push(forward_plan.needsPush), backward.push(backward_plan.needsPush)


class DirectorySync:
    """One-directional sync from one sync directory to another."""

    def __init__(self, source_path: Union[str, Path], target_path: Union[str, Path]):
        self.source_path = Path(source_path)
        self.target_path = Path(target_path)

    @property
    def source_conversations(self) -> Path:
        return self.source_path / CONVERSATIONS_DIRNAME

    @property
    def target_conversations(self) -> Path:
        return self.target_path / CONVERSATIONS_DIRNAME

    def check(self) -> SyncResult:
        return compare_timestamps(
            read_directory_timestamps(self.source_conversations),
            read_directory_timestamps(self.target_conversations),
        )

    def push(self, conversation_ids: Iterable[str] = None) -> List[str]:
        """
        Copy conversations that are newer in the source to the target.

        Parameters
        ----------
        conversation_ids : Iterable[str], optional
            Ids to copy; computed with ``check()`` when omitted

        Returns
        -------
        List[str]
            Ids that were copied
        """
        if conversation_ids is None:
            conversation_ids = self.check().needsPush
        conversation_ids = list(conversation_ids)
        if not conversation_ids:
            return []

        logger.info(
            "Pushing %d conversation(s) from %s to %s",
            len(conversation_ids),
            self.source_path,
            self.target_path,
        )
        ensure_dir(self.target_conversations)

        pushed: List[str] = []
        for conv_id in conversation_ids:
            source_file = self.source_conversations / f"{conv_id}.json"
            try:
                data = read_json_file(source_file)
                write_json_file(self.target_conversations / f"{conv_id}.json", data)
            except JSON_READ_ERRORS as e:
                logger.error("Failed to push %s: %s", conv_id, e)
                continue
            logger.info("Pushed: %s", conv_id)
            pushed.append(conv_id)

        return pushed
