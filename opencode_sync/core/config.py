"""
Configuration constants and default path helpers.

Paths are resolved from environment variables first and from the
platform-conventional OpenCode storage locations second.
"""
from pathlib import Path
from typing import List, Optional

STORAGE_DIR_ENV = "OPENCODE_STORAGE_DIR"
SYNC_DIR_ENV = "OPENCODE_SYNC_DIR"

# Layout inside a sync directory / archive root
CONVERSATIONS_DIRNAME = "conversations"
IMPORTED_DIRNAME = "imported"
SYNC_IMPORTED_DIRNAME = "sync_imported"
MANIFEST_FILENAME = "manifest.json"

# Layout inside OpenCode storage
SESSION_DIRNAME = "session"
MESSAGE_DIRNAME = "message"


def get_opencode_storage_candidates(home: Optional[Path] = None) -> List[Path]:
    """
    Get the ordered list of places OpenCode keeps its storage.

    Parameters
    ----------
    home : Path, optional
        Home directory to resolve against. Defaults to ``Path.home()``.

    Returns
    -------
    List[Path]
        Candidate storage directories, most common first
    """
    home = home or Path.home()
    return [
        home / ".local" / "share" / "opencode" / "storage",
        home / "Library" / "Application Support" / "opencode" / "storage",
        home / ".config" / "opencode" / "storage",
        home / ".opencode" / "storage",
        home / "AppData" / "Local" / "opencode" / "storage",
        home / "AppData" / "Roaming" / "opencode" / "storage",
    ]


def looks_like_opencode_storage(path: Path) -> bool:
    """Return True if ``path`` holds a ``session/`` or ``message/`` directory."""
    try:
        return (path / SESSION_DIRNAME).is_dir() or (path / MESSAGE_DIRNAME).is_dir()
    except OSError:
        return False


def get_claude_code_projects_path() -> Path:
    """
    Get the path to the Claude Code projects directory.

    Returns
    -------
    Path
        Path to ~/.claude/projects/
    """
    return Path.home() / ".claude" / "projects"
