"""
Import manager: resolves a strategy, validates the source and archives
records that could not be converted.
"""

import logging
from collections import OrderedDict
from pathlib import Path
from typing import List, Optional, Union

from opencode_sync.core.config import IMPORTED_DIRNAME
from opencode_sync.core.errors import ImportValidationError, UnsupportedFormatError
from opencode_sync.core.models import ImportOptions, ImportResult, RawConversation
from opencode_sync.core.utils import ensure_dir, now_ms, safe_file_stem, write_json_file
from opencode_sync.importers.base import BaseImportStrategy

logger = logging.getLogger(__name__)


class ImportManager:
    """
    Holds strategy instances keyed by format name.

    Attributes
    ----------
    archive_path : Path
        Archive root shared by every registered strategy
    """

    def __init__(self, archive_path: Union[str, Path]):
        self.archive_path = Path(archive_path)
        self._strategies: "OrderedDict[str, BaseImportStrategy]" = OrderedDict()

    def get_archive_path(self) -> Path:
        return self.archive_path

    def register_strategy(self, strategy: BaseImportStrategy) -> None:
        self._strategies[strategy.get_format()] = strategy

    def get_strategy(self, format_name: str) -> Optional[BaseImportStrategy]:
        return self._strategies.get(format_name)

    def get_supported_formats(self) -> List[str]:
        return list(self._strategies)

    def import_from(
        self,
        source_path: Union[str, Path],
        format_name: str,
        options: Optional[ImportOptions] = None,
    ) -> ImportResult:
        """
        Import a source path with the strategy registered for a format.

        Parameters
        ----------
        source_path : str or Path
            Directory to import from
        format_name : str
            Registered format name
        options : ImportOptions, optional
            Import options passed through to the strategy

        Returns
        -------
        ImportResult
            The strategy's result

        Raises
        ------
        UnsupportedFormatError
            If no strategy is registered for ``format_name``
        ImportValidationError
            If the strategy does not recognize ``source_path``
        """
        strategy = self.get_strategy(format_name)
        if strategy is None:
            raise UnsupportedFormatError(format_name, self.get_supported_formats())

        if not strategy.can_import(source_path):
            raise ImportValidationError(source_path, format_name)

        logger.info("Importing %s as %s", source_path, format_name)
        return strategy.import_from(source_path, options or ImportOptions())

    def detect_format(self, source_path: Union[str, Path]) -> Optional[str]:
        """
        Find the first registered format that recognizes a path.

        Returns None when nothing matches; never raises.
        """
        for format_name, strategy in self._strategies.items():
            try:
                if strategy.can_import(source_path):
                    logger.debug("Detected format %s for %s", format_name, source_path)
                    return format_name
            except Exception as e:
                logger.debug("Detection with %s failed for %s: %s", format_name, source_path, e)
        return None

    def archive_conversation(self, raw: RawConversation, reason: str) -> Path:
        """
        Persist a raw record under ``imported/<format>/``.

        Ids that are not safe file names are replaced by their hash in the
        file name; the record itself keeps the original id.

        Parameters
        ----------
        raw : RawConversation
            Record to archive
        reason : str
            Why the record was archived instead of imported

        Returns
        -------
        Path
            Written archive file
        """
        archived_at = now_ms()
        archive_dir = ensure_dir(self.archive_path / IMPORTED_DIRNAME / raw.format)
        target = archive_dir / f"{safe_file_stem(raw.id)}-{archived_at}.json"

        data = raw.to_json_dict()
        data["archiveReason"] = reason
        data["archivedAt"] = archived_at
        write_json_file(target, data)

        logger.info("Archived %s conversation %s: %s", raw.format, raw.id, reason)
        return target
