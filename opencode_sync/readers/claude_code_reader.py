"""
Reader for Claude Code (CLI) session logs.

Finds session logs under {projects}/{encoded-project-path}/{session-id}.jsonl.
Claude Code stores conversations locally as JSONL files, organized by project;
project directories are the project path with '/' replaced by '-', so they
start with '-'.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from opencode_sync.core.config import get_claude_code_projects_path
from opencode_sync.core.models import RawLogFile

logger = logging.getLogger(__name__)

WORKSPACE_MARKER = "-"
LOG_SUFFIX = ".jsonl"


class ClaudeCodeReader:
    """
    Scans a Claude Code projects directory for session logs.

    The reader never parses log contents; it only reports which files exist,
    their size and modification time.
    """

    def __init__(self, projects_path: Optional[Path] = None):
        """
        Initialize reader.

        Parameters
        ----------
        projects_path : Path, optional
            Path to projects directory. If None, uses default ~/.claude/projects/
        """
        if projects_path is None:
            projects_path = get_claude_code_projects_path()
        self.projects_path = Path(projects_path)

    def find_workspaces(self) -> List[Path]:
        """
        Find workspace directories (names starting with '-').

        Raises
        ------
        OSError
            If the projects directory cannot be listed
        """
        return sorted(
            entry for entry in self.projects_path.iterdir()
            if entry.is_dir() and entry.name.startswith(WORKSPACE_MARKER)
        )

    def find_log_files(self, workspace_dir: Path) -> List[Path]:
        return sorted(
            entry for entry in workspace_dir.iterdir()
            if entry.is_file() and entry.name.endswith(LOG_SUFFIX)
        )

    def has_session_logs(self) -> bool:
        """
        Check whether any workspace holds at least one log file.

        Returns False instead of raising on I/O errors.
        """
        try:
            for workspace_dir in self.find_workspaces():
                if self.find_log_files(workspace_dir):
                    return True
        except OSError as e:
            logger.debug("Cannot inspect %s: %s", self.projects_path, e)
        return False

    def scan(self) -> List[RawLogFile]:
        """
        Collect every session log, oldest modification first.

        Returns
        -------
        List[RawLogFile]
            Log files sorted by modification time ascending

        Raises
        ------
        OSError
            If the projects directory cannot be listed
        """
        files: List[RawLogFile] = []
        for workspace_dir in self.find_workspaces():
            try:
                log_files = self.find_log_files(workspace_dir)
            except OSError as e:
                logger.warning("Error scanning workspace %s: %s", workspace_dir, e)
                continue

            for log_file in log_files:
                try:
                    stat = log_file.stat()
                except OSError as e:
                    logger.warning("Cannot stat %s: %s", log_file, e)
                    continue
                files.append(RawLogFile(
                    path=str(log_file),
                    workspace_dir=workspace_dir.name,
                    session_id=log_file.name[: -len(LOG_SUFFIX)],
                    size=stat.st_size,
                    last_modified=int(stat.st_mtime * 1000),
                ))

        files.sort(key=lambda f: f.last_modified)
        logger.info("Found %d Claude Code session logs in %s", len(files), self.projects_path)
        return files

    @staticmethod
    def group_by_workspace(files: List[RawLogFile]) -> Dict[str, List[RawLogFile]]:
        """Group logs by workspace directory, keeping first-seen order."""
        grouped: Dict[str, List[RawLogFile]] = {}
        for log_file in files:
            grouped.setdefault(log_file.workspace_dir, []).append(log_file)
        return grouped
