"""
Utility functions for file I/O and conversation summaries.
"""
import hashlib
import json
import re
import socket
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Union

PathLike = Union[str, Path]

TITLE_MAX_LENGTH = 50
BODY_MAX_LENGTH = 200
ELLIPSIS = "..."

SAFE_FILENAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")

# Raised by read_json_file; deeply nested documents exhaust the decoder stack
JSON_READ_ERRORS = (OSError, ValueError, RecursionError)


def ensure_dir(dir_path: PathLike) -> Path:
    """
    Create a directory (and parents) if it does not exist.

    Parameters
    ----
    dir_path : str or Path
        Directory to create

    Returns
    ----
    Path
        The directory path
    """
    path = Path(dir_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def read_json_file(file_path: PathLike) -> Any:
    """Read and parse a UTF-8 JSON file."""
    with open(file_path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json_file(file_path: PathLike, data: Any) -> None:
    """
    Write data as UTF-8 JSON with 2-space indentation.

    Parameters
    ----
    file_path : str or Path
        Destination file (parent directory must exist)
    data : Any
        JSON-serializable data
    """
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def get_machine_name() -> str:
    return socket.gethostname()


def format_bytes(num_bytes: int) -> str:
    """
    Format a byte count for display.

    Parameters
    ----
    num_bytes : int
        Size in bytes

    Returns
    ----
    str
        Human readable size (e.g. '1.5 KB')
    """
    if num_bytes == 0:
        return "0 Bytes"
    sizes = ["Bytes", "KB", "MB", "GB"]
    value = float(num_bytes)
    index = 0
    while value >= 1024 and index < len(sizes) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {sizes[index]}"


def parse_iso_timestamp_ms(timestamp_str: str) -> int:
    """
    Parse an ISO timestamp into epoch milliseconds.

    Handles the 'Z' suffix. Naive timestamps are treated as UTC.

    Raises
    ----
    ValueError
        If the string is not a valid ISO timestamp
    """
    if not isinstance(timestamp_str, str) or not timestamp_str:
        raise ValueError(f"Invalid timestamp: {timestamp_str!r}")
    if timestamp_str.endswith("Z"):
        timestamp_str = timestamp_str[:-1] + "+00:00"
    parsed = datetime.fromisoformat(timestamp_str)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def extract_title(content: str) -> str:
    """
    Use the first line of content as a title.

    Lines longer than 50 characters are cut to 47 characters plus '...'.
    """
    first_line = content.split("\n")[0]
    if len(first_line) > TITLE_MAX_LENGTH:
        return first_line[: TITLE_MAX_LENGTH - len(ELLIPSIS)] + ELLIPSIS
    return first_line


def truncate_content(content: str, max_length: int = BODY_MAX_LENGTH) -> str:
    """Truncate content to max_length characters, including the '...' suffix."""
    if len(content) <= max_length:
        return content
    return content[: max_length - len(ELLIPSIS)] + ELLIPSIS


def sanitize_project_name(name: str) -> str:
    """Convert a project name to lowercase [a-zA-Z0-9-_] characters."""
    return re.sub(r"[^a-zA-Z0-9\-_]", "-", name).lower()


def is_safe_filename(name: str) -> bool:
    """
    Check that ``name`` can be used as a single path component.

    Only ``[A-Za-z0-9._-]`` characters are allowed, and names made of dots
    alone (``.``, ``..``) are rejected.
    """
    if not isinstance(name, str) or not SAFE_FILENAME_PATTERN.match(name):
        return False
    return name.strip(".") != ""


def safe_file_stem(identifier: str) -> str:
    """
    Map an identifier to a file stem that stays inside its directory.

    Parameters
    ----
    identifier : str
        Conversation or record identifier from a source file

    Returns
    ----
    str
        The identifier itself when it is a safe file name, otherwise
        ``id-`` followed by its SHA-1 hex digest
    """
    if is_safe_filename(identifier):
        return identifier
    return "id-" + hashlib.sha1(str(identifier).encode("utf-8")).hexdigest()
