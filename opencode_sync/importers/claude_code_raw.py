"""
Claude Code raw session-log import strategy.

Claude Code writes one JSONL log per session under a directory per project
workspace. Log contents are not parsed: each log is copied verbatim into the
archive under deterministic workspace/session identifiers and reported as an
archived RawConversation. A per-workspace manifest makes repeated imports of
an unchanged tree copy nothing.
"""

import logging
import shutil
from pathlib import Path
from typing import List, Optional, Union

from opencode_sync.core.config import IMPORTED_DIRNAME
from opencode_sync.core.manifest import (
    RAW_LOG_FORMAT,
    ManifestStore,
    convert_session_id,
    workspace_display_name,
    workspace_hash,
)
from opencode_sync.core.models import (
    ImportManifest,
    ImportOptions,
    ImportResult,
    ImportWarning,
    ManifestFileEntry,
    RawConversation,
    RawLogFile,
    WarningType,
)
from opencode_sync.core.utils import ensure_dir, format_bytes, now_ms
from opencode_sync.importers.base import BaseImportStrategy
from opencode_sync.readers.claude_code_reader import ClaudeCodeReader

logger = logging.getLogger(__name__)


class FileMapping:
    """Where a source log lands in the archive."""

    def __init__(self, log_file: RawLogFile):
        self.workspace_hash = workspace_hash(log_file.workspace_dir)
        self.original_session_id = log_file.session_id
        self.converted_session_id = convert_session_id(log_file.session_id)
        self.workspace_name = workspace_display_name(log_file.workspace_dir)
        # Archive-relative, always '/'-separated
        self.target_path = "/".join([
            IMPORTED_DIRNAME,
            RAW_LOG_FORMAT,
            self.workspace_hash,
            f"{self.converted_session_id}.jsonl",
        ])


class ClaudeCodeRawImportStrategy(BaseImportStrategy):
    """
    Strategy for raw Claude Code projects directories.

    Attributes
    ----------
    manifests : ManifestStore
        Per-workspace manifest storage under the archive root
    """

    format = RAW_LOG_FORMAT
    writes_archive = True

    def __init__(self, archive_path: Union[str, Path]):
        super().__init__(archive_path)
        self.manifests = ManifestStore(self.archive_path)

    def can_import(self, source_path: Union[str, Path]) -> bool:
        path = Path(source_path)
        try:
            if not path.is_dir():
                return False
        except OSError:
            return False
        return ClaudeCodeReader(path).has_session_logs()

    def import_from(
        self,
        source_path: Union[str, Path],
        options: Optional[ImportOptions] = None,
    ) -> ImportResult:
        options = options or ImportOptions()
        warnings: List[ImportWarning] = []
        archived: List[RawConversation] = []

        logger.info("Scanning Claude Code directory: %s", source_path)
        if options.force:
            logger.info("Force flag set - re-importing all Claude Code files")

        try:
            log_files = ClaudeCodeReader(Path(source_path)).scan()
        except OSError as e:
            warnings.append(self.create_warning(
                WarningType.CONVERSION_ERROR,
                f"Failed to scan directory {source_path}: {e}",
                details={"sourcePath": str(source_path), "error": str(e)},
            ))
            return self.create_import_result([], archived, warnings, source_path)

        if not log_files:
            warnings.append(self.create_warning(
                WarningType.CONVERSION_ERROR,
                "No Claude Code conversation files found in the specified directory",
            ))
            return self.create_import_result([], archived, warnings, source_path)

        for workspace_dir, files in ClaudeCodeReader.group_by_workspace(log_files).items():
            self._import_workspace(workspace_dir, files, options, archived, warnings)

        return self.create_import_result([], archived, warnings, source_path)

    def _import_workspace(
        self,
        workspace_dir: str,
        files: List[RawLogFile],
        options: ImportOptions,
        archived: List[RawConversation],
        warnings: List[ImportWarning],
    ) -> None:
        try:
            manifest = self.manifests.load(workspace_dir)
        except OSError as e:
            warnings.append(self.create_warning(
                WarningType.CONVERSION_ERROR,
                f"Failed to load manifest for workspace {workspace_dir}: {e}",
                details={"workspace": workspace_dir, "error": str(e)},
            ))
            return

        if options.force:
            to_import = files
        else:
            to_import = [
                f for f in files if manifest.is_new_or_modified(f.path, f.last_modified)
            ]
        logger.info(
            "Workspace %s: %d files found, %d to import",
            workspace_dir,
            len(files),
            len(to_import),
        )

        for log_file in to_import:
            mapping = FileMapping(log_file)
            try:
                if not options.preview:
                    self._copy_log(log_file, mapping, manifest)
            except OSError as e:
                warnings.append(self.create_warning(
                    WarningType.CONVERSION_ERROR,
                    f"Failed to import {log_file.path}: {e}",
                    details={"file": log_file.path, "error": str(e)},
                ))
                continue

            archived.append(RawConversation(
                id=mapping.converted_session_id,
                format=self.format,
                rawData={
                    "originalPath": log_file.path,
                    "importedPath": mapping.target_path,
                    "workspace": mapping.workspace_name,
                    "sessionId": log_file.session_id,
                    "size": log_file.size,
                    "lastModified": log_file.last_modified,
                },
                filePath=mapping.target_path,
                timestamp=now_ms(),
            ))

        if not options.preview:
            self.manifests.save(manifest)

    def _copy_log(self, log_file: RawLogFile, mapping: FileMapping, manifest: ImportManifest) -> None:
        target_dir = ensure_dir(self.manifests.workspace_dir(mapping.workspace_hash))
        target = target_dir / f"{mapping.converted_session_id}.jsonl"
        shutil.copyfile(log_file.path, target)
        logger.info(
            "Imported: %s -> %s (%s)", log_file.path, mapping.target_path, format_bytes(log_file.size)
        )

        manifest.record(ManifestFileEntry(
            originalSessionId=mapping.original_session_id,
            convertedSessionId=mapping.converted_session_id,
            originalPath=log_file.path,
            importedPath=mapping.target_path,
            size=log_file.size,
            lastModified=log_file.last_modified,
            importedAt=now_ms(),
        ))
