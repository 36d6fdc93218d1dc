"""
Resolution of OpenCode storage and sync directory paths.

Paths come from explicit arguments first, then environment variables, then
auto-detection among the platform-conventional storage locations.
"""

import logging
import os
from pathlib import Path
from typing import List, Mapping, Optional

from pydantic import BaseModel

from opencode_sync.core.config import (
    STORAGE_DIR_ENV,
    SYNC_DIR_ENV,
    get_opencode_storage_candidates,
    looks_like_opencode_storage,
)
from opencode_sync.core.errors import PathConfigurationError

logger = logging.getLogger(__name__)

MODE_ENV = "env"
MODE_PATH1_ONLY = "path1-only"
MODE_DUAL_PATH = "dual-path"


class PathConfig(BaseModel):
    storage_path: Path
    sync_path: Path


class SyncPathConfig(BaseModel):
    """
    Resolved paths for a ``sync`` run.

    In ``env`` and ``path1-only`` modes ``path1`` is the sync directory and
    ``storage_path`` the local OpenCode storage. In ``dual-path`` mode both
    paths are sync directories and ``storage_path`` is unused.
    """

    mode: str
    path1: Path
    path2: Optional[Path] = None
    storage_path: Optional[Path] = None


class PathService:
    """
    Resolves storage and sync paths.

    Parameters
    ----------
    environ : Mapping[str, str], optional
        Environment to read variables from (defaults to ``os.environ``)
    home : Path, optional
        Home directory used to build detection candidates
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None, home: Optional[Path] = None):
        self.environ = os.environ if environ is None else environ
        self.home = home

    @property
    def candidates(self) -> List[Path]:
        return get_opencode_storage_candidates(self.home)

    def detect_opencode_storage(self) -> Optional[Path]:
        """Return the first candidate that holds OpenCode storage, if any."""
        for candidate in self.candidates:
            if looks_like_opencode_storage(candidate):
                logger.debug("Detected OpenCode storage at %s", candidate)
                return candidate
        return None

    def get_storage_path(self) -> Path:
        """
        Resolve the OpenCode storage directory.

        Raises
        ------
        PathConfigurationError
            If the environment variable is unset and detection fails
        """
        env_path = self.environ.get(STORAGE_DIR_ENV)
        if env_path:
            return Path(env_path)

        detected = self.detect_opencode_storage()
        if detected is None:
            searched = "\n".join(f"  - {c}" for c in self.candidates)
            raise PathConfigurationError(
                f"{STORAGE_DIR_ENV} environment variable is not set and OpenCode storage "
                "could not be auto-detected.\n"
                f"Please set {STORAGE_DIR_ENV} or ensure OpenCode is properly installed.\n"
                f"Searched locations:\n{searched}"
            )
        return detected

    def get_paths(self, sync_override: Optional[str] = None) -> PathConfig:
        """
        Resolve storage and sync paths for check/push/pull.

        Parameters
        ----------
        sync_override : str, optional
            Sync directory given on the command line

        Returns
        -------
        PathConfig
            Storage and sync directories
        """
        storage_path = self.get_storage_path()

        sync_path = sync_override or self.environ.get(SYNC_DIR_ENV)
        if not sync_path:
            raise PathConfigurationError(
                f"{SYNC_DIR_ENV} environment variable is not set (and no path provided)"
            )
        return PathConfig(storage_path=storage_path, sync_path=Path(sync_path))

    def get_sync_paths(
        self,
        path1: Optional[str] = None,
        path2: Optional[str] = None,
    ) -> SyncPathConfig:
        """
        Resolve paths for a bidirectional sync.

        Raises
        ------
        PathConfigurationError
            If a given path does not exist, both paths are the same, or
            required environment is missing
        """
        if path1:
            self.validate_path(path1)
        if path2:
            self.validate_path(path2)

        if path1 and path2:
            if Path(path1).resolve() == Path(path2).resolve():
                raise PathConfigurationError("Cannot sync a path to itself")
            return SyncPathConfig(mode=MODE_DUAL_PATH, path1=Path(path1), path2=Path(path2))

        if path2:
            raise PathConfigurationError("Invalid path configuration")

        storage_path = self.get_storage_path()
        if path1:
            return SyncPathConfig(mode=MODE_PATH1_ONLY, path1=Path(path1), storage_path=storage_path)

        sync_path = self.environ.get(SYNC_DIR_ENV)
        if not sync_path:
            raise PathConfigurationError(f"{SYNC_DIR_ENV} environment variable is not set")
        return SyncPathConfig(mode=MODE_ENV, path1=Path(sync_path), storage_path=storage_path)

    def validate_path(self, path: str) -> None:
        try:
            exists = Path(path).exists()
        except OSError as e:
            raise PathConfigurationError(f"Cannot access path {path}: {e}") from e
        if not exists:
            raise PathConfigurationError(f"Path does not exist: {path}")
