"""
Import manifest storage for incremental raw-log imports.

Provides a ManifestStore that keeps one JSON manifest per workspace under
``<archive>/imported/claude-code-raw/<workspaceHash>/manifest.json``. A
manifest records every source log already copied into the archive together
with its modification time, so re-running an import over an unchanged tree
copies nothing.

Design Patterns
---------------
Repository pattern keyed by a deterministic workspace hash.

External Dependencies
---------------------
- hashlib: SHA-1 digests for workspace and session identifiers

Technical Decisions
-------------------
Manifests are loaded, mutated and saved within the processing of a single
workspace. There is no locking: two imports into the same archive root at
the same time can interleave writes.
"""

import hashlib
import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from opencode_sync.core.config import IMPORTED_DIRNAME, MANIFEST_FILENAME
from opencode_sync.core.models import ImportManifest
from opencode_sync.core.utils import ensure_dir, read_json_file, write_json_file

logger = logging.getLogger(__name__)

RAW_LOG_FORMAT = "claude-code-raw"
HASH_LENGTH = 40


def _digest(value: str) -> str:
    return hashlib.sha1(value.encode("utf-8")).hexdigest()[:HASH_LENGTH]


def workspace_hash(workspace_dir: str) -> str:
    """
    Derive the archive identifier of a workspace.

    Parameters
    ----------
    workspace_dir : str
        Raw workspace directory name (e.g. '-Users-me-project')

    Returns
    -------
    str
        40 hex characters, stable across runs and machines
    """
    return _digest(f"claude-workspace-{workspace_dir}")


def convert_session_id(session_id: str) -> str:
    """Derive the archive identifier of a session (40 hex characters)."""
    return _digest(f"claude-session-{session_id}")


def workspace_display_name(workspace_dir: str) -> str:
    """
    Decode a workspace directory name back to a path-like name.

    Claude Code encodes paths by replacing '/' with '-'.
    Example: "-Users-me-git-project" -> "Users/me/git/project"
    """
    name = workspace_dir[1:] if workspace_dir.startswith("-") else workspace_dir
    return name.replace("-", "/")


class ManifestStore:
    """
    Persistent per-workspace import manifests.

    Attributes
    ----------
    archive_path : Path
        Archive root directory

    Methods
    -------
    manifest_path(workspace_hash)
        Location of a workspace's manifest file
    load(workspace_dir)
        Load a manifest, or create an empty one
    save(manifest)
        Persist a manifest

    Example
    -------
    >>> store = ManifestStore(Path("/tmp/archive"))
    >>> manifest = store.load("-Users-me-project")
    >>> manifest.files
    []
    """

    def __init__(self, archive_path: Path):
        self.archive_path = Path(archive_path)

    def workspace_dir(self, ws_hash: str) -> Path:
        """Archive directory holding a workspace's copied logs and manifest."""
        return self.archive_path / IMPORTED_DIRNAME / RAW_LOG_FORMAT / ws_hash

    def manifest_path(self, ws_hash: str) -> Path:
        return self.workspace_dir(ws_hash) / MANIFEST_FILENAME

    def create(self, workspace_dir: str) -> ImportManifest:
        """Create an empty manifest for a workspace."""
        return ImportManifest(
            workspaceHash=workspace_hash(workspace_dir),
            workspaceName=workspace_display_name(workspace_dir),
            lastImport=0,
            files=[],
        )

    def load(self, workspace_dir: str) -> ImportManifest:
        """
        Load the manifest for a workspace.

        A missing or unreadable manifest yields a fresh empty manifest.
        Other OS errors (e.g. permission denied) propagate.

        Parameters
        ----------
        workspace_dir : str
            Raw workspace directory name

        Returns
        -------
        ImportManifest
            Stored manifest, or an empty one
        """
        path = self.manifest_path(workspace_hash(workspace_dir))
        manifest = self._read(path)
        if manifest is None:
            logger.debug("No usable manifest at %s, starting fresh", path)
            return self.create(workspace_dir)
        return manifest

    def _read(self, path: Path) -> Optional[ImportManifest]:
        try:
            data = read_json_file(path)
        except FileNotFoundError:
            return None
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Ignoring corrupt manifest %s: %s", path, e)
            return None

        try:
            return ImportManifest.model_validate(data)
        except ValidationError as e:
            logger.warning("Ignoring invalid manifest %s: %s", path, e)
            return None

    def save(self, manifest: ImportManifest) -> Path:
        """
        Persist a manifest.

        Parameters
        ----------
        manifest : ImportManifest
            Manifest to write

        Returns
        -------
        Path
            File the manifest was written to
        """
        ensure_dir(self.workspace_dir(manifest.workspaceHash))
        path = self.manifest_path(manifest.workspaceHash)
        write_json_file(path, manifest.to_json_dict())
        logger.debug("Saved manifest %s (%d files)", path, len(manifest.files))
        return path
