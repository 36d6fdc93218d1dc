"""
Base import strategy interface.

Import strategies detect one source format and convert it into canonical
Conversation models. Per-item failures never raise: they are recorded as
ImportWarning entries on the returned ImportResult.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from opencode_sync.core.models import (
    Conversation,
    ImportOptions,
    ImportResult,
    ImportResultMetadata,
    ImportWarning,
    RawConversation,
    WarningType,
)
from opencode_sync.core.utils import JSON_READ_ERRORS, now_ms, read_json_file

logger = logging.getLogger(__name__)


class BaseImportStrategy(ABC):
    """
    Abstract base class for import strategies.

    Attributes
    ----------
    format : str
        Format identifier, matching the registry key
    archive_path : Path
        Archive root the strategy may write into
    writes_archive : bool
        True if archived records are already written to disk by the strategy

    Methods
    -------
    can_import(source_path)
        Cheap structural sniff of a source path
    import_from(source_path, options)
        Scan and convert a source path
    """

    format: str = ""
    writes_archive: bool = False

    def __init__(self, archive_path: Union[str, Path]):
        """
        Initialize strategy.

        Parameters
        ----------
        archive_path : str or Path
            Archive root directory
        """
        self.archive_path = Path(archive_path)

    def get_format(self) -> str:
        return self.format

    @abstractmethod
    def can_import(self, source_path: Union[str, Path]) -> bool:
        """
        Check whether a path looks like this format.

        Must not raise; any I/O or parse error means False.

        Parameters
        ----------
        source_path : str or Path
            Path to inspect

        Returns
        -------
        bool
            True if the path can be imported with this strategy
        """

    @abstractmethod
    def import_from(
        self,
        source_path: Union[str, Path],
        options: Optional[ImportOptions] = None,
    ) -> ImportResult:
        """
        Import every conversation found under a path.

        Parameters
        ----------
        source_path : str or Path
            Path to import from
        options : ImportOptions, optional
            Import options (force, preview)

        Returns
        -------
        ImportResult
            Converted conversations, archived raw records and warnings
        """

    def create_import_result(
        self,
        imported: List[Conversation],
        archived: List[RawConversation],
        warnings: List[ImportWarning],
        source_path: Union[str, Path],
    ) -> ImportResult:
        """Build an ImportResult whose counts agree with its lists."""
        return ImportResult(
            imported=imported,
            archived=archived,
            warnings=warnings,
            metadata=ImportResultMetadata(
                format=self.format,
                sourcePath=str(source_path),
                timestamp=now_ms(),
                totalConversations=len(imported) + len(archived),
                successfullyImported=len(imported),
                archivedCount=len(archived),
            ),
        )

    def create_warning(
        self,
        warning_type: WarningType,
        message: str,
        conversation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> ImportWarning:
        if warning_type == WarningType.CONVERSION_ERROR:
            logger.warning("%s import: %s", self.format, message)
        else:
            logger.info("%s import: %s", self.format, message)

        fields: Dict[str, Any] = {"type": warning_type, "message": message}
        if conversation_id is not None:
            fields["conversationId"] = conversation_id
        if details is not None:
            fields["details"] = details
        return ImportWarning(**fields)

    def list_json_files(self, source_path: Union[str, Path]) -> List[Path]:
        """
        List the ``.json`` files directly inside a directory.

        Raises
        ------
        OSError
            If the directory cannot be listed
        """
        return sorted(
            entry for entry in Path(source_path).iterdir()
            if entry.name.endswith(".json") and entry.is_file()
        )

    def iter_json_documents(self, file_path: Path) -> Iterator[Any]:
        """
        Yield the documents held by a JSON file.

        Export files hold either one conversation object or a list of them.

        Raises
        ------
        OSError, ValueError, RecursionError
            If the file cannot be read or parsed
        """
        data = read_json_file(file_path)
        if isinstance(data, list):
            yield from data
        else:
            yield data

    def file_contains(self, source_path: Union[str, Path], predicate) -> bool:
        """
        Check whether any JSON file in a directory holds a matching document.

        Unreadable files are skipped; a missing or non-directory path is False.
        """
        try:
            if not Path(source_path).is_dir():
                return False
            for file_path in self.list_json_files(source_path):
                try:
                    if any(predicate(doc) for doc in self.iter_json_documents(file_path)):
                        return True
                except JSON_READ_ERRORS as e:
                    logger.debug("Skipping %s during detection: %s", file_path, e)
        except OSError as e:
            logger.debug("Cannot inspect %s: %s", source_path, e)
        return False
